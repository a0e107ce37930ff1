"""Grid geometry: frame indices to portal rectangles and output cells."""

from __future__ import annotations

import math

from . import GridConfig, PortalSize, Rect


def stride(grid: GridConfig, sheet_width: int, sheet_height: int) -> tuple[float, float]:
    """Cell pitch; non-integer when the sheet does not divide evenly."""

    return sheet_width / grid.cols, sheet_height / grid.rows


def cell_center(index: int, grid: GridConfig, sheet_width: int, sheet_height: int) -> tuple[float, float]:
    stride_w, stride_h = stride(grid, sheet_width, sheet_height)
    col, row = grid.cell(index)
    return col * stride_w + stride_w / 2, row * stride_h + stride_h / 2


def portal_origin(
    index: int,
    grid: GridConfig,
    sheet_width: int,
    sheet_height: int,
    portal_width: int,
    portal_height: int,
) -> tuple[int, int]:
    """Floored portal top-left, possibly negative or past the sheet edge."""

    center_x, center_y = cell_center(index, grid, sheet_width, sheet_height)
    return math.floor(center_x - portal_width / 2), math.floor(center_y - portal_height / 2)


def portal_rect(
    index: int,
    grid: GridConfig,
    sheet_width: int,
    sheet_height: int,
    portal_width: int,
    portal_height: int,
) -> Rect:
    """Sampled region for a frame, clamped to the sheet.

    The origin is clamped to be non-negative and the size shrinks so the region
    ends at the sheet edge, never below one pixel.
    """

    origin_x, origin_y = portal_origin(index, grid, sheet_width, sheet_height, portal_width, portal_height)
    x = max(0, origin_x)
    y = max(0, origin_y)
    width = max(1, min(portal_width, sheet_width - x))
    height = max(1, min(portal_height, sheet_height - y))
    return Rect(x, y, width, height)


def output_grid(total_frames: int, output_cols: int) -> GridConfig:
    """Grid holding ``total_frames`` cells at ``output_cols`` per row."""

    cols = max(1, output_cols)
    return GridConfig(cols=cols, rows=max(1, math.ceil(total_frames / cols)))


def output_cell_origin(index: int, output_cols: int, portal_width: int, portal_height: int) -> tuple[int, int]:
    return (index % output_cols) * portal_width, (index // output_cols) * portal_height


def default_portal(grid: GridConfig, sheet_width: int, sheet_height: int) -> PortalSize:
    """Portal matching the floored stride."""

    stride_w, stride_h = stride(grid, sheet_width, sheet_height)
    return PortalSize(max(1, math.floor(stride_w)), max(1, math.floor(stride_h)))
