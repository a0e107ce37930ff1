"""Command-line entry point for sprite sheet cleaning."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from .config import CleanRequest, load_request
from .core import PixelBuffer
from .core.errors import InvalidImageError, ProcessingError, ValidationError
from .core.manifest_writer import write_manifest
from .core.session import SheetSession
from .core import sheet_loader
from .utils import file_tools

logger = logging.getLogger(__name__)

_REQUEST_FIELDS = ("cols", "rows", "portal", "tolerance", "center", "output_cols", "fps", "workers")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def _add_layout_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--cols", type=int, help="Frame columns in the input sheet (default: 5)")
    parser.add_argument("--rows", type=int, help="Frame rows in the input sheet (default: 1)")
    parser.add_argument(
        "--portal",
        metavar="WxH",
        help="Sampling window per frame, centered on each cell (default: the cell stride)",
    )
    parser.add_argument("--settings", type=Path, help="JSON file with cleaning settings")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spriteportal",
        description="Strip the background from sprite sheet frames and reflow them into a clean sheet.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    clean = subparsers.add_parser("clean", help="Clean every frame and write a new sheet")
    clean.add_argument("input", type=Path, help="Source sprite sheet image")
    clean.add_argument("output", type=Path, nargs="?", help="Destination sheet (default: <stem>_clean.png)")
    _add_layout_arguments(clean)
    clean.add_argument("--tolerance", type=float, help="Background tolerance 0-100 (default: 20)")
    clean.add_argument(
        "--no-center",
        dest="center",
        action="store_false",
        default=None,
        help="Keep sprites where they are instead of centering them in their cell",
    )
    clean.add_argument("--output-cols", type=int, help="Columns in the output sheet (default: same as input)")
    clean.add_argument("--workers", type=int, help="Threads used to process frames (default: 1)")
    clean.add_argument("--gif", type=Path, help="Also export the cleaned frames as an animated GIF")
    clean.add_argument("--fps", type=float, help="Animation frames per second (default: 8)")
    clean.add_argument("--manifest", type=Path, help="Optional JSON manifest of output frame positions")
    clean.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate settings and show them without reading or writing images",
    )

    preview = subparsers.add_parser("preview", help="Write the detected-sprite mask for one frame")
    preview.add_argument("input", type=Path, help="Source sprite sheet image")
    preview.add_argument("output", type=Path, help="Destination mask image (PNG)")
    preview.add_argument("--frame", type=int, default=0, help="Frame index to analyze (default: 0)")
    preview.add_argument("--tolerance", type=float, help="Background tolerance 0-100 (default: 20)")
    _add_layout_arguments(preview)

    animate = subparsers.add_parser("animate", help="Export the sheet's frames as an animated GIF")
    animate.add_argument("input", type=Path, help="Source sprite sheet image")
    animate.add_argument("output", type=Path, nargs="?", help="Destination GIF (default: animation_WxH.gif)")
    animate.add_argument("--fps", type=float, help="Frames per second (default: 8)")
    _add_layout_arguments(animate)
    return parser


def _request_from_args(args: argparse.Namespace) -> CleanRequest:
    overrides: dict[str, Any] = {
        name: getattr(args, name) for name in _REQUEST_FIELDS if getattr(args, name, None) is not None
    }
    if args.settings:
        return load_request(args.settings, overrides)
    return CleanRequest.parse(overrides)


def _open_session(path: Path, request: CleanRequest) -> SheetSession:
    sheet = sheet_loader.load_sheet(path)
    settings = request.to_settings(sheet.width, sheet.height)
    return SheetSession(
        sheet,
        cols=settings.grid.cols,
        rows=settings.grid.rows,
        portal=settings.portal,
        tolerance=settings.tolerance,
        center=settings.center,
        output_cols=settings.output_cols,
        fps=request.fps,
        workers=settings.workers,
        source_path=path,
    )


def _log_progress(done: int, total: int) -> None:
    logger.debug("Processed frame %s/%s", done, total)


def _run_clean(args: argparse.Namespace) -> int:
    request = _request_from_args(args)
    if args.dry_run:
        print(request.model_dump_json(indent=2))
        return 0

    session = _open_session(args.input, request)
    outcome = session.smart_clean(progress=_log_progress)
    output_path = args.output or file_tools.default_output_path(args.input)
    session.save(output_path)
    if args.manifest:
        write_manifest(outcome, output_path, args.manifest, fps=request.fps)
    if args.gif:
        session.export_gif(args.gif)
    logger.info(
        "Cleaned %s frames (%s empty) into %s",
        len(outcome.frames),
        len(outcome.empty_frames),
        output_path,
    )
    return 0


def _run_preview(args: argparse.Namespace) -> int:
    session = _open_session(args.input, _request_from_args(args))
    mask = session.preview_mask(args.frame)
    if mask is None:
        logger.warning("No sprite detected in frame %s", args.frame)
        mask = PixelBuffer.blank(session.portal.width, session.portal.height)
    sheet_loader.save_sheet(mask, args.output)
    return 0


def _run_animate(args: argparse.Namespace) -> int:
    session = _open_session(args.input, _request_from_args(args))
    session.export_gif(args.output)
    return 0


_COMMANDS = {
    "clean": _run_clean,
    "preview": _run_preview,
    "animate": _run_animate,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        return _COMMANDS[args.command](args)
    except (ValidationError, InvalidImageError) as exc:
        logger.error("%s", exc)
        return 2
    except ProcessingError as exc:
        logger.error("Processing failed: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
