"""Translucent overlay for previewing a segmentation result."""

from __future__ import annotations

from typing import Iterable

from . import PixelBuffer

MASK_TINT = (255, 0, 0, 100)


def render_mask(
    pixels: Iterable[tuple[int, int]],
    portal_width: int,
    portal_height: int,
    tint: tuple[int, int, int, int] = MASK_TINT,
) -> PixelBuffer:
    """Paint each kept coordinate with ``tint``; everything else stays transparent."""

    mask = PixelBuffer.blank(portal_width, portal_height)
    for x, y in pixels:
        if 0 <= x < portal_width and 0 <= y < portal_height:
            mask.pixels[y, x] = tint
    return mask
