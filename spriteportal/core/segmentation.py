"""Seeded flood-fill segmentation of one sprite per portal.

The portal region is classified once with the background model. A seed is then
searched on concentric rings around the region center, biased toward the middle
where a sprite is expected, and the 4-connected foreground component containing
the seed is collected. Everything outside that component is discarded, including
other foreground islands in the same portal.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from . import BackgroundModel, PixelBuffer, Rect, SegmentationResult
from .background import background_mask

logger = logging.getLogger(__name__)

RADIUS_STEP = 2
ANGLE_STEP = 15
_NEIGHBORS = ((0, 1), (0, -1), (1, 0), (-1, 0))


def segment(
    sheet: PixelBuffer,
    rect: Rect,
    model: BackgroundModel,
    radius_step: int = RADIUS_STEP,
    angle_step: int = ANGLE_STEP,
) -> SegmentationResult:
    """Isolate the foreground blob nearest the center of ``rect``.

    ``rect`` must already be clamped to the sheet (see ``grid.portal_rect``).
    Returns an empty result when no foreground seed is found.
    """

    region = sheet.pixels[rect.y : rect.y + rect.height, rect.x : rect.x + rect.width]
    foreground = ~background_mask(region, model)
    height, width = foreground.shape

    seed = find_seed(foreground, radius_step=radius_step, angle_step=angle_step)
    if seed is None:
        logger.debug("No seed found in portal %s", rect)
        return SegmentationResult(pixels=[], region=rect)

    pixels = flood_fill(foreground, seed)
    logger.debug("Portal %s: seed %s, %s pixels kept of %s", rect, seed, len(pixels), width * height)
    return SegmentationResult(pixels=pixels, region=rect)


def find_seed(
    foreground: np.ndarray,
    radius_step: int = RADIUS_STEP,
    angle_step: int = ANGLE_STEP,
) -> Optional[tuple[int, int]]:
    """Scan rings outward from the center; return the first foreground point."""

    height, width = foreground.shape
    center_x = width // 2
    center_y = height // 2
    limit = min(width, height) / 2

    radius = 0
    while radius < limit:
        for angle in range(0, 360, angle_step):
            rad = angle * (math.pi / 180)
            x = math.floor(center_x + radius * math.cos(rad))
            y = math.floor(center_y + radius * math.sin(rad))
            if 0 <= x < width and 0 <= y < height and foreground[y, x]:
                return x, y
        radius += radius_step
    return None


def flood_fill(foreground: np.ndarray, seed: tuple[int, int]) -> list[tuple[int, int]]:
    """Collect the 4-connected foreground component containing ``seed``."""

    height, width = foreground.shape
    solid = foreground.tolist()
    visited = bytearray(width * height)

    seed_x, seed_y = seed
    visited[seed_y * width + seed_x] = 1
    stack = [seed]
    kept: list[tuple[int, int]] = []

    while stack:
        x, y = stack.pop()
        kept.append((x, y))
        for dx, dy in _NEIGHBORS:
            nx = x + dx
            ny = y + dy
            if 0 <= nx < width and 0 <= ny < height:
                idx = ny * width + nx
                if not visited[idx] and solid[ny][nx]:
                    visited[idx] = 1
                    stack.append((nx, ny))
    return kept
