"""Sheet image loading and saving via Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from . import PixelBuffer
from .errors import InvalidImageError
from ..utils import file_tools, validators

logger = logging.getLogger(__name__)


def load_sheet(path: Path) -> PixelBuffer:
    """Decode an image file into an RGBA pixel buffer."""

    validated_path = validators.validate_image_path(path)
    try:
        with Image.open(validated_path) as image:
            sheet = PixelBuffer.from_image(image)
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidImageError(validated_path, reason=f"Could not decode image: {exc}") from exc

    logger.debug("Loaded sheet %s -> %sx%s", validated_path, sheet.width, sheet.height)
    return sheet


def save_sheet(sheet: PixelBuffer, path: Path) -> Path:
    """Persist a pixel buffer; the format follows the file suffix."""

    file_tools.ensure_directory(path.parent)
    sheet.to_image().save(path)
    logger.info("Wrote sheet to %s", path)
    return path
