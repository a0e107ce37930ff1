"""Validation helpers for user inputs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..core.errors import ConfigurationError, InvalidImageError, ValidationError


ALLOWED_IMAGE_EXTENSIONS = {".png", ".gif", ".webp", ".bmp", ".tga", ".jpg", ".jpeg"}
MAX_TOLERANCE = 100
MAX_FPS = 60


def validate_image_path(path: Path) -> Path:
    """Ensure the sheet path exists and appears to be a supported format."""

    if not path:
        raise InvalidImageError(Path("<unset>"), reason="No path provided")
    if not path.exists():
        raise InvalidImageError(path, reason="File not found")
    if path.suffix.lower() not in ALLOWED_IMAGE_EXTENSIONS:
        raise InvalidImageError(path, reason="Unsupported format")
    return path


def validate_grid(columns: int, rows: int) -> None:
    """Ensure grid dimensions are positive."""

    if columns is None or columns <= 0:
        raise ConfigurationError("Columns must be greater than zero")
    if rows is None or rows <= 0:
        raise ConfigurationError("Rows must be greater than zero")


def validate_portal(width: int, height: int) -> None:
    """Ensure the portal covers at least one pixel."""

    if width is None or width <= 0:
        raise ConfigurationError("Portal width must be greater than zero")
    if height is None or height <= 0:
        raise ConfigurationError("Portal height must be greater than zero")


def validate_output_columns(columns: Optional[int]) -> None:
    if columns is not None and columns <= 0:
        raise ConfigurationError("Output columns must be greater than zero")


def validate_tolerance(value: Optional[float], field: str = "Tolerance") -> None:
    """Ensure tolerance is within the 0-100 range."""

    if value is None:
        return
    if value < 0 or value > MAX_TOLERANCE:
        raise ConfigurationError(f"{field} must be between 0 and {MAX_TOLERANCE}")


def validate_fps(value: float) -> None:
    if value <= 0 or value > MAX_FPS:
        raise ConfigurationError(f"FPS must be between 1 and {MAX_FPS}")


def validate_frame_index(index: int, total_frames: int) -> None:
    if index < 0 or index >= total_frames:
        raise ValidationError(f"Frame index must be between 0 and {total_frames - 1}")


def parse_size(value: str | None, field: str = "Size") -> Optional[tuple[int, int]]:
    """Parse a size string like '80x100' or '80,100'."""

    if value is None or value.strip() == "":
        return None
    normalized = value.lower().replace(",", "x")
    parts = [p.strip() for p in normalized.split("x")]
    if len(parts) != 2:
        raise ValidationError(f"{field} must be WIDTHxHEIGHT")
    try:
        width, height = (int(p) for p in parts)
    except ValueError as exc:
        raise ValidationError(f"{field} must be numeric WIDTHxHEIGHT") from exc
    if width <= 0 or height <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return width, height
