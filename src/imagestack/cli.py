"""
Module: cli

Purpose:
    Command-line adapter over the conversion pipeline.
    Collects image paths, maps flags onto the config objects, shows
    progress and reports a single message on success or failure.

Key Functions:
    - main(): Entry point for the ``image-stack-pdf`` command
    - build_parser(): Argument parser
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_OUTPUT_NAME, ConverterConfig
from .controller import convert_files, save_pdf
from .errors import describe_error
from .layout import LayoutConfig
from .layout.config import DEFAULT_MARGIN_PT, DEFAULT_PAGE_WIDTH_PT, DEFAULT_SPACING_PT
from .output.formats import DEFAULT_JPEG_QUALITY, ImageFormatPolicy
from .progress import ProgressReporter

logger = logging.getLogger("imagestack")

SUCCESS_MESSAGE = "PDF has been successfully created: {path}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-stack-pdf",
        description="Stack images vertically into a single-page PDF.",
    )
    parser.add_argument("images", nargs="+", type=Path, help="Image files, top to bottom")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Directory for the PDF")
    parser.add_argument("--name", default=DEFAULT_OUTPUT_NAME, help="PDF file name")
    parser.add_argument("--page-width", type=float, default=DEFAULT_PAGE_WIDTH_PT, help="Page width in points")
    parser.add_argument("--margin", type=float, default=DEFAULT_MARGIN_PT, help="Margin in points")
    parser.add_argument("--spacing", type=float, default=DEFAULT_SPACING_PT, help="Gap between images in points")
    parser.add_argument("--no-upscale", action="store_true", help="Center narrow images instead of enlarging them")
    parser.add_argument(
        "--format",
        dest="image_format",
        choices=[policy.value for policy in ImageFormatPolicy],
        default=ImageFormatPolicy.AUTO.value,
        help="How images are embedded",
    )
    parser.add_argument("--jpeg-quality", type=int, default=DEFAULT_JPEG_QUALITY, help="JPEG quality (1-95)")
    parser.add_argument("--workers", type=int, default=4, help="Concurrent decode threads")
    parser.add_argument("--timeout", type=float, default=30.0, help="Seconds allowed for decoding")
    parser.add_argument("--title", default=None, help="PDF title metadata")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _print_progress(pct: int) -> None:
    if 0 < pct <= 100:
        end = "\n" if pct == 100 else ""
        print(f"\rConverting: {pct}%", end=end, file=sys.stderr, flush=True)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
    )

    try:
        layout_config = LayoutConfig(
            page_width=args.page_width,
            margin=args.margin,
            spacing=args.spacing,
            allow_upscale=not args.no_upscale,
        )
        config = ConverterConfig(
            output_name=args.name,
            max_workers=args.workers,
            decode_timeout=args.timeout,
            image_format=args.image_format,
            jpeg_quality=args.jpeg_quality,
            title=args.title,
        )
    except ValueError as e:
        print(f"Invalid option: {e}", file=sys.stderr)
        return 2

    progress = ProgressReporter()
    progress.subscribe(_print_progress)

    missing = [path for path in args.images if not path.is_file()]
    if missing:
        print(f"File not found: {', '.join(str(p) for p in missing)}", file=sys.stderr)
        return 1

    try:
        result = convert_files(
            args.images,
            layout_config=layout_config,
            config=config,
            progress=progress,
        )
        output_path = save_pdf(result, args.output_dir)
    except Exception as e:
        logger.debug("Conversion failed", exc_info=True)
        print(describe_error(e), file=sys.stderr)
        return 1

    print(SUCCESS_MESSAGE.format(path=output_path))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
