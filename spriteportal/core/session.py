"""Stateful wrapper around the cleaning pipeline for one loaded sheet."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from . import (
    AnimationFrames,
    CleanOutcome,
    CleanSettings,
    GridConfig,
    PixelBuffer,
    PortalSize,
    Rect,
    SegmentationResult,
)
from . import animation, background, compositor, grid as grid_math, segmentation, sheet_loader
from .compositor import CancelCheck, ProgressCallback
from .mask_renderer import render_mask
from ..utils import validators

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = 5
DEFAULT_ROWS = 1
DEFAULT_TOLERANCE = 20.0
DEFAULT_FPS = 8.0


class SheetSession:
    """Holds a sheet plus the grid, portal and cleaning parameters applied to it.

    ``smart_clean`` replaces the sheet with the cleaned result, adopts the output
    grid and drops the tolerance to zero so a later pass does not erode the
    already transparent frames.
    """

    def __init__(
        self,
        sheet: PixelBuffer,
        cols: int = DEFAULT_COLUMNS,
        rows: int = DEFAULT_ROWS,
        portal: Optional[PortalSize] = None,
        tolerance: float = DEFAULT_TOLERANCE,
        center: bool = True,
        output_cols: Optional[int] = None,
        fps: float = DEFAULT_FPS,
        workers: int = 1,
        source_path: Optional[Path] = None,
    ) -> None:
        validators.validate_grid(cols, rows)
        validators.validate_tolerance(tolerance)
        validators.validate_output_columns(output_cols)
        validators.validate_fps(fps)
        self.sheet = sheet
        self.grid = GridConfig(cols, rows)
        self.portal = portal or grid_math.default_portal(self.grid, sheet.width, sheet.height)
        validators.validate_portal(self.portal.width, self.portal.height)
        self.tolerance = float(tolerance)
        self.center = center
        self._output_cols = output_cols
        self.fps = fps
        self.workers = max(1, workers)
        self.source_path = source_path

    @classmethod
    def from_path(cls, path: Path, **kwargs) -> "SheetSession":
        return cls(sheet_loader.load_sheet(path), source_path=path, **kwargs)

    @property
    def output_cols(self) -> int:
        return self._output_cols or self.grid.cols

    @output_cols.setter
    def output_cols(self, value: Optional[int]) -> None:
        validators.validate_output_columns(value)
        self._output_cols = value

    def set_grid(self, cols: int, rows: int) -> None:
        """Change the input grid; output columns follow the new column count."""

        validators.validate_grid(cols, rows)
        self.grid = GridConfig(cols, rows)
        self._output_cols = None

    def frame_rect(self, index: int) -> Rect:
        validators.validate_frame_index(index, self.grid.total_frames)
        return grid_math.portal_rect(
            index, self.grid, self.sheet.width, self.sheet.height, self.portal.width, self.portal.height
        )

    def analyze(self, index: int) -> SegmentationResult:
        """Segment a single frame with the current parameters."""

        model = background.sample(self.sheet, self.tolerance)
        return segmentation.segment(self.sheet, self.frame_rect(index), model)

    def preview_mask(self, index: int) -> Optional[PixelBuffer]:
        result = self.analyze(index)
        if result.is_empty:
            return None
        return render_mask(result.pixels, self.portal.width, self.portal.height)

    def settings(self) -> CleanSettings:
        return CleanSettings(
            grid=self.grid,
            portal=self.portal,
            tolerance=self.tolerance,
            center=self.center,
            output_cols=self.output_cols,
            workers=self.workers,
        )

    def smart_clean(
        self,
        progress: Optional[ProgressCallback] = None,
        should_cancel: Optional[CancelCheck] = None,
    ) -> CleanOutcome:
        outcome = compositor.compose_sheet(self.sheet, self.settings(), progress=progress, should_cancel=should_cancel)
        self.sheet = outcome.sheet
        self.grid = outcome.grid
        self._output_cols = None
        self.tolerance = 0.0
        logger.info(
            "Sheet replaced: %sx%s px, %sx%s grid, tolerance reset",
            self.sheet.width,
            self.sheet.height,
            self.grid.cols,
            self.grid.rows,
        )
        return outcome

    def animation(self) -> AnimationFrames:
        return animation.build_animation(self.sheet, self.grid, self.portal, self.fps)

    def export_gif(self, path: Optional[Path] = None) -> Path:
        if path is None:
            base = self.source_path or Path("sheet.png")
            path = animation.default_gif_path(base, self.portal)
        return animation.write_gif(self.animation(), path)

    def save(self, path: Path) -> Path:
        return sheet_loader.save_sheet(self.sheet, path)
