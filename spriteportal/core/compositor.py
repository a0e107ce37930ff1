"""Sheet compositor: segment every frame and reflow it onto the output grid."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional

import numpy as np

from . import BackgroundModel, CleanOutcome, CleanSettings, FrameInfo, PixelBuffer
from . import background, centering, grid as grid_math, segmentation
from .errors import CompositionCancelled, ProcessingError
from ..utils import validators

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
CancelCheck = Callable[[], bool]


def compose_sheet(
    sheet: PixelBuffer,
    settings: CleanSettings,
    progress: Optional[ProgressCallback] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> CleanOutcome:
    """Clean every frame of ``sheet`` and pack the results into a new buffer.

    Each output cell is exactly the portal size. Frames with no foreground become
    transparent cells; they never abort the pass. Any other failure aborts the
    whole pass with ``ProcessingError``.
    """

    grid = settings.grid
    portal = settings.portal
    validators.validate_grid(grid.cols, grid.rows)
    validators.validate_portal(portal.width, portal.height)
    validators.validate_tolerance(settings.tolerance)
    validators.validate_output_columns(settings.output_cols)
    _check_buffer(sheet)

    total = grid.total_frames
    output_cols = settings.resolved_output_cols
    layout = grid_math.output_grid(total, output_cols)
    output = PixelBuffer.blank(layout.cols * portal.width, layout.rows * portal.height)
    model = background.sample(sheet, settings.tolerance)
    logger.info(
        "Compositing %s frames from %sx%s grid into %sx%s grid (%sx%s px)",
        total,
        grid.cols,
        grid.rows,
        layout.cols,
        layout.rows,
        output.width,
        output.height,
    )

    def run(index: int) -> FrameInfo:
        if should_cancel and should_cancel():
            raise CompositionCancelled(f"Compositing cancelled at frame {index}")
        return _compose_frame(sheet, output, settings, model, output_cols, index)

    infos: list[Optional[FrameInfo]] = [None] * total
    try:
        if settings.workers > 1 and total > 1:
            with ThreadPoolExecutor(max_workers=settings.workers) as pool:
                futures = [pool.submit(run, index) for index in range(total)]
                try:
                    for done, future in enumerate(as_completed(futures), start=1):
                        info = future.result()
                        infos[info.index] = info
                        if progress:
                            progress(done, total)
                except BaseException:
                    pool.shutdown(wait=True, cancel_futures=True)
                    raise
        else:
            for index in range(total):
                infos[index] = run(index)
                if progress:
                    progress(index + 1, total)
    except ProcessingError:
        raise
    except Exception as exc:
        raise ProcessingError(f"Compositing failed: {exc}") from exc

    frames = [info for info in infos if info is not None]
    empty = [info.index for info in frames if info.pixel_count == 0]
    if empty:
        logger.warning("%s of %s frames had no foreground: %s", len(empty), total, empty)
    logger.info("Composited %s frames into %sx%s sheet", total, output.width, output.height)
    return CleanOutcome(sheet=output, grid=layout, portal=portal, frames=frames, empty_frames=empty)


def _compose_frame(
    sheet: PixelBuffer,
    output: PixelBuffer,
    settings: CleanSettings,
    model: BackgroundModel,
    output_cols: int,
    index: int,
) -> FrameInfo:
    """Segment one frame and write it into its own output cell."""

    portal = settings.portal
    rect = grid_math.portal_rect(
        index, settings.grid, sheet.width, sheet.height, portal.width, portal.height
    )
    result = segmentation.segment(sheet, rect, model)
    offset = centering.center_offset(result.pixels, portal.width, portal.height, enabled=settings.center)
    cell_x, cell_y = grid_math.output_cell_origin(index, output_cols, portal.width, portal.height)

    pairs = list(centering.apply_offset(result.pixels, offset, portal.width, portal.height))
    written = 0
    if pairs:
        coords = np.asarray(pairs, dtype=np.int64)
        source = coords[:, 0] + np.array([rect.x, rect.y])
        dest = coords[:, 1]
        inside = (
            (source[:, 0] >= 0)
            & (source[:, 0] < sheet.width)
            & (source[:, 1] >= 0)
            & (source[:, 1] < sheet.height)
        )
        source = source[inside]
        dest = dest[inside]
        output.pixels[cell_y + dest[:, 1], cell_x + dest[:, 0]] = sheet.pixels[source[:, 1], source[:, 0]]
        written = int(inside.sum())

    logger.debug("Frame %s: %s pixels, offset %s, cell (%s, %s)", index, written, offset, cell_x, cell_y)
    return FrameInfo(
        index=index,
        x=cell_x,
        y=cell_y,
        width=portal.width,
        height=portal.height,
        pixel_count=written,
    )


def _check_buffer(sheet: PixelBuffer) -> None:
    pixels = sheet.pixels
    if not isinstance(pixels, np.ndarray) or pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ProcessingError("Sheet buffer must be a (height, width, 4) array")
    if pixels.dtype != np.uint8:
        raise ProcessingError(f"Sheet buffer must be uint8, got {pixels.dtype}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ProcessingError("Sheet buffer is empty")
