"""Manifest writing logic."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from . import CleanOutcome
from ..utils import file_tools

logger = logging.getLogger(__name__)


def write_manifest(
    outcome: CleanOutcome,
    sheet_path: Path,
    manifest_path: Path,
    fps: Optional[float] = None,
) -> Path:
    """Create a JSON manifest describing where each cleaned frame landed."""

    manifest_path = manifest_path.with_suffix(".json")
    file_tools.ensure_directory(manifest_path.parent)

    frames_payload = {}
    for info in outcome.frames:
        frames_payload[f"frame_{info.index:04d}"] = {
            "x": info.x,
            "y": info.y,
            "width": info.width,
            "height": info.height,
            "pixel_count": info.pixel_count,
            "empty": info.pixel_count == 0,
        }

    meta = {
        "columns": outcome.grid.cols,
        "rows": outcome.grid.rows,
        "frame_width": outcome.portal.width,
        "frame_height": outcome.portal.height,
        "spritesheet": str(sheet_path),
    }
    if fps:
        meta["fps"] = fps
        meta["duration_ms"] = 1000 / fps

    manifest = {"frames": frames_payload, "meta": meta}
    manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    logger.info("Wrote manifest to %s", manifest_path)
    return manifest_path
