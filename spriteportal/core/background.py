"""Background color model used to separate sprites from the sheet backdrop."""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from . import BackgroundModel, PixelBuffer

logger = logging.getLogger(__name__)

# Pixels below this alpha are background regardless of color.
ALPHA_CUTOFF = 20
TOLERANCE_SCALE = 2.55


def sample(sheet: PixelBuffer, tolerance: float = 0.0) -> BackgroundModel:
    """Build a model from the sheet's top-left pixel."""

    r, g, b = (int(v) for v in sheet.pixels[0, 0, :3])
    logger.debug("Sampled background color (%s, %s, %s) at tolerance %s", r, g, b, tolerance)
    return BackgroundModel(color=(r, g, b), tolerance=float(tolerance))


def classify(pixel: Sequence[int], model: BackgroundModel) -> bool:
    """Return True when an RGBA pixel counts as background."""

    r, g, b, a = (int(v) for v in pixel[:4])
    if a < ALPHA_CUTOFF:
        return True
    bg_r, bg_g, bg_b = model.color
    distance = math.sqrt((r - bg_r) ** 2 + (g - bg_g) ** 2 + (b - bg_b) ** 2)
    return distance <= model.tolerance * TOLERANCE_SCALE


def background_mask(region: np.ndarray, model: BackgroundModel) -> np.ndarray:
    """Vectorized :func:`classify` over a ``(h, w, 4)`` region."""

    rgb = region[..., :3].astype(np.float64)
    diff = rgb - np.asarray(model.color, dtype=np.float64)
    distance = np.sqrt(np.sum(diff * diff, axis=-1))
    transparent = region[..., 3] < ALPHA_CUTOFF
    return transparent | (distance <= model.tolerance * TOLERANCE_SCALE)
