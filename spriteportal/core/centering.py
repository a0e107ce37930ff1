"""Bounding-box centering of a segmented sprite inside its portal."""

from __future__ import annotations

import math
from typing import Iterable, Iterator, Sequence


def center_offset(
    pixels: Sequence[tuple[int, int]],
    portal_width: int,
    portal_height: int,
    enabled: bool = True,
) -> tuple[int, int]:
    """Integer shift moving the blob's bounding-box center to the portal center."""

    if not enabled or not pixels:
        return 0, 0

    xs = [x for x, _ in pixels]
    ys = [y for _, y in pixels]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    sprite_center_x = min_x + (max_x - min_x) / 2
    sprite_center_y = min_y + (max_y - min_y) / 2
    return (
        math.floor(portal_width / 2 - sprite_center_x),
        math.floor(portal_height / 2 - sprite_center_y),
    )


def apply_offset(
    pixels: Iterable[tuple[int, int]],
    offset: tuple[int, int],
    portal_width: int,
    portal_height: int,
) -> Iterator[tuple[tuple[int, int], tuple[int, int]]]:
    """Yield ``(source, destination)`` pairs; destinations off the cell are dropped."""

    dx, dy = offset
    for x, y in pixels:
        dest_x = x + dx
        dest_y = y + dy
        if 0 <= dest_x < portal_width and 0 <= dest_y < portal_height:
            yield (x, y), (dest_x, dest_y)
