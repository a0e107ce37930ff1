"""Frame extraction and animated GIF export using Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

from . import AnimationFrames, GridConfig, PixelBuffer, PortalSize
from . import grid as grid_math
from .errors import ProcessingError
from ..utils import file_tools, validators

logger = logging.getLogger(__name__)

DEFAULT_GIF_PATTERN = "animation_{width}x{height}.gif"


def frame_duration_ms(fps: float) -> float:
    validators.validate_fps(fps)
    return 1000 / fps


def extract_frame(sheet: PixelBuffer, grid: GridConfig, portal: PortalSize, index: int) -> PixelBuffer:
    """Crop one portal window; parts outside the sheet stay transparent."""

    origin_x, origin_y = grid_math.portal_origin(
        index, grid, sheet.width, sheet.height, portal.width, portal.height
    )
    frame = PixelBuffer.blank(portal.width, portal.height)

    src_x0 = max(0, origin_x)
    src_y0 = max(0, origin_y)
    src_x1 = min(sheet.width, origin_x + portal.width)
    src_y1 = min(sheet.height, origin_y + portal.height)
    if src_x1 <= src_x0 or src_y1 <= src_y0:
        return frame

    dst_x0 = src_x0 - origin_x
    dst_y0 = src_y0 - origin_y
    frame.pixels[dst_y0 : dst_y0 + (src_y1 - src_y0), dst_x0 : dst_x0 + (src_x1 - src_x0)] = sheet.pixels[
        src_y0:src_y1, src_x0:src_x1
    ]
    return frame


def extract_frames(sheet: PixelBuffer, grid: GridConfig, portal: PortalSize) -> list[PixelBuffer]:
    validators.validate_grid(grid.cols, grid.rows)
    validators.validate_portal(portal.width, portal.height)
    return [extract_frame(sheet, grid, portal, index) for index in range(grid.total_frames)]


def build_animation(sheet: PixelBuffer, grid: GridConfig, portal: PortalSize, fps: float) -> AnimationFrames:
    return AnimationFrames(frames=extract_frames(sheet, grid, portal), duration_ms=frame_duration_ms(fps))


def write_gif(animation: AnimationFrames, path: Path) -> Path:
    """Encode frames as a looping GIF that clears the canvas between frames."""

    if not animation.frames:
        raise ProcessingError("No frames provided to encode.")

    file_tools.ensure_directory(path.parent)
    images = [frame.to_image() for frame in animation.frames]
    duration = max(1, round(animation.duration_ms))
    images[0].save(
        path,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=duration,
        loop=0,
        disposal=animation.disposal,
        optimize=False,
    )
    logger.info("Wrote %s-frame animation to %s (%sms per frame)", len(images), path, duration)
    return path


def default_gif_path(sheet_path: Path, portal: PortalSize) -> Path:
    filename = file_tools.format_output_filename(
        sheet_path, DEFAULT_GIF_PATTERN, width=portal.width, height=portal.height
    )
    return sheet_path.parent / filename
