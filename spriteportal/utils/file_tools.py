"""Filesystem helpers."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist."""

    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)
    return path


def default_output_path(sheet_path: Path, suffix: str = ".png", tag: str = "clean") -> Path:
    """Return a default output path next to the sheet file."""

    if not suffix.startswith("."):
        suffix = "." + suffix
    return sheet_path.with_name(f"{sheet_path.stem}_{tag}{suffix}")


def format_output_filename(sheet_path: Path, pattern: str | None, **fields: object) -> str:
    """Format an output filename using an optional pattern with {stem}, {ext} and extra fields."""

    stem = sheet_path.stem
    ext = sheet_path.suffix.lstrip(".")
    values = {"stem": stem, "ext": ext, **fields}
    if pattern:
        return pattern.format(**values)
    return f"{stem}.png"
