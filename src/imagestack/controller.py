"""
Module: controller

Purpose:
    Orchestrate the complete conversion pipeline.
    Validate → Load → Layout → Assemble → Finalize

Key Functions:
    - convert_images(): Main entry point, returns PDF bytes in memory
    - convert_files(): Convenience wrapper reading image files
    - save_pdf(): Write a conversion result to disk

Key Classes:
    - ConversionResult: Complete conversion result

Dependencies:
    - loading: Validation and concurrent decoding
    - layout: Placement computation
    - output: Format negotiation and PDF assembly
    - progress: Percentage reporting

Used By:
    - imagestack.cli: Command-line adapter
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import ConverterConfig
from .errors import AssemblyError, ConversionError
from .layout import LayoutConfig, LayoutResult, layout
from .loading import ImageInput, SourceImage, load_images, validate_inputs
from .output import DocumentAssembler, ReportLabAssembler, prepare_for_embedding
from .progress import ProgressReporter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """
    Complete conversion result (immutable).

    Attributes:
        pdf_bytes: Generated PDF file contents
        filename: Output file name
        layout: Placements and page size used
        elapsed: Wall-clock seconds for the whole conversion

    Example:
        >>> result = convert_images(inputs)
        >>> print(f"{result.image_count} images on a {result.page_size} page")
    """

    pdf_bytes: bytes = field(repr=False)
    filename: str
    layout: LayoutResult
    elapsed: float = 0.0

    @property
    def page_size(self) -> tuple[float, float]:
        """(width, height) of the PDF page in points."""
        return self.layout.page_size

    @property
    def image_count(self) -> int:
        """Number of images in the PDF."""
        return self.layout.image_count


def convert_images(
    inputs: Sequence[ImageInput],
    *,
    layout_config: Optional[LayoutConfig] = None,
    config: Optional[ConverterConfig] = None,
    assembler: Optional[DocumentAssembler] = None,
    progress: Optional[ProgressReporter] = None,
) -> ConversionResult:
    """
    Convert a batch of images into a single-page PDF.

    Pipeline:
    1. Reject empty batches and non-image entries
    2. Decode all images concurrently (all-or-nothing)
    3. Compute placements
    4. Place each image in input order, reporting progress
    5. Finalize the PDF

    Any failure aborts the run: nothing is returned, the assembler is
    closed and progress goes back to 0.

    Args:
        inputs: Image blobs in stacking order (top to bottom)
        layout_config: Page geometry (defaults to A4 width, 20pt margin,
            10pt spacing)
        config: Output and decoding settings
        assembler: Document assembler (defaults to ReportLabAssembler)
        progress: Progress reporter to notify

    Returns:
        ConversionResult with the PDF bytes

    Raises:
        EmptyInputError: If no images are given
        InvalidFileTypeError: If any entry is not an image
        DecodeError: If any image cannot be decoded
        InvalidImageError: If any image has a non-positive size
        AssemblyError: If PDF generation fails
    """
    layout_config = layout_config or LayoutConfig()
    config = config or ConverterConfig()
    progress = progress or ProgressReporter()
    if assembler is None:
        assembler = ReportLabAssembler(title=config.title)

    start_time = time.perf_counter()
    progress.reset()

    try:
        # 1. Validate before any decode task is launched
        items = validate_inputs(inputs)
        logger.info(f"Converting {len(items)} images to {config.output_name}")

        # 2. Load
        images = load_images(
            items,
            max_workers=config.max_workers,
            timeout=config.decode_timeout,
        )

        # 3. Layout
        result = layout(images, layout_config)

        # 4. Assemble
        progress.start(len(images))
        pdf_bytes = _assemble(images, result, assembler, config, progress)
        progress.complete()
    except ConversionError as e:
        logger.error(f"Conversion failed: {e}")
        raise
    finally:
        assembler.close()
        progress.reset()

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Rendered {result.image_count} images to {config.output_name} "
        f"({len(pdf_bytes)} bytes) in {elapsed:.2f}s"
    )

    return ConversionResult(
        pdf_bytes=pdf_bytes,
        filename=config.output_name,
        layout=result,
        elapsed=elapsed,
    )


def _assemble(
    images: List[SourceImage],
    result: LayoutResult,
    assembler: DocumentAssembler,
    config: ConverterConfig,
    progress: ProgressReporter,
) -> bytes:
    """Drive the assembler through one placement per image, in order."""
    try:
        assembler.begin_document(result.page_width, result.total_page_height)

        for image, placement in zip(images, result.placements):
            data, image_format = prepare_for_embedding(
                image,
                config.image_format,
                config.jpeg_quality,
            )
            assembler.place_image(
                data,
                image_format,
                placement.x,
                placement.y,
                placement.scaled_width,
                placement.scaled_height,
            )
            progress.advance()

        return assembler.finalize()
    except ConversionError:
        raise
    except Exception as e:
        raise AssemblyError(f"PDF generation failed: {e}") from e


def convert_files(
    paths: Iterable[Path],
    **kwargs,
) -> ConversionResult:
    """
    Read image files and convert them.

    MIME types are guessed from file extensions, so a file with a
    non-image extension rejects the whole batch.

    Args:
        paths: Image file paths in stacking order
        **kwargs: Passed through to convert_images()

    Returns:
        ConversionResult with the PDF bytes
    """
    inputs = [ImageInput.from_path(Path(p)) for p in paths]
    return convert_images(inputs, **kwargs)


def save_pdf(result: ConversionResult, output_dir: Path) -> Path:
    """
    Write a conversion result to ``output_dir / result.filename``.

    Args:
        result: Successful conversion result
        output_dir: Directory to write into (created if missing)

    Returns:
        Path of the written PDF
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / result.filename
    output_path.write_bytes(result.pdf_bytes)
    logger.info(f"Saved PDF: {output_path}")
    return output_path
