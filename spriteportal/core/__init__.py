"""Core data records for sprite sheet cleaning."""

__all__ = [
    "PixelBuffer",
    "GridConfig",
    "PortalSize",
    "Rect",
    "BackgroundModel",
    "SegmentationResult",
    "CleanSettings",
    "CleanOutcome",
    "FrameInfo",
    "AnimationFrames",
]

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from PIL import Image


@dataclass
class PixelBuffer:
    """Row-major RGBA pixels stored as a ``(height, width, 4)`` uint8 array."""

    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        """Return a fully transparent buffer."""

        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        return cls(np.array(image.convert("RGBA"), dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels, dtype=np.uint8))

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())


@dataclass(frozen=True)
class GridConfig:
    """Partition of a sheet into ``cols * rows`` equal cells."""

    cols: int
    rows: int

    @property
    def total_frames(self) -> int:
        return self.cols * self.rows

    def cell(self, index: int) -> tuple[int, int]:
        return index % self.cols, index // self.cols


@dataclass(frozen=True)
class PortalSize:
    """Sampling window size, independent of the grid stride."""

    width: int
    height: int


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class BackgroundModel:
    """Reference color plus a tolerance on a 0-100 scale."""

    color: tuple[int, int, int]
    tolerance: float = 0.0

    @property
    def radius(self) -> float:
        return self.tolerance * 2.55


@dataclass
class SegmentationResult:
    """One connected foreground blob, in coordinates relative to ``region``."""

    pixels: list[tuple[int, int]]
    region: Rect

    @property
    def is_empty(self) -> bool:
        return not self.pixels

    def as_set(self) -> set[tuple[int, int]]:
        return set(self.pixels)

    def bounding_box(self) -> Optional[tuple[int, int, int, int]]:
        """Return ``(min_x, min_y, max_x, max_y)`` or None when empty."""

        if not self.pixels:
            return None
        xs = [x for x, _ in self.pixels]
        ys = [y for _, y in self.pixels]
        return min(xs), min(ys), max(xs), max(ys)


@dataclass
class CleanSettings:
    """Parameters for one compositor pass."""

    grid: GridConfig
    portal: PortalSize
    tolerance: float = 20.0
    center: bool = True
    output_cols: Optional[int] = None
    workers: int = 1

    @property
    def resolved_output_cols(self) -> int:
        return max(1, self.output_cols or self.grid.cols)


@dataclass
class FrameInfo:
    """Placement of a cleaned frame inside the output sheet."""

    index: int
    x: int
    y: int
    width: int
    height: int
    pixel_count: int = 0


@dataclass
class CleanOutcome:
    """Result of a compositor pass."""

    sheet: PixelBuffer
    grid: GridConfig
    portal: PortalSize
    frames: list[FrameInfo] = field(default_factory=list)
    empty_frames: list[int] = field(default_factory=list)


@dataclass
class AnimationFrames:
    """Ordered frames plus timing, ready for an animated-image encoder."""

    frames: list[PixelBuffer]
    duration_ms: float
    # Restore to background before the next frame; cleaned frames carry transparency.
    disposal: int = 2
