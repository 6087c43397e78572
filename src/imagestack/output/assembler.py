"""
Module: output.assembler

Purpose:
    Document assembler interface and its ReportLab implementation.
    The pipeline only guarantees the order and geometry of calls; the
    PDF byte encoding is entirely the assembler's business.

Key Classes:
    - DocumentAssembler: Abstract interface consumed by the controller
    - ReportLabAssembler: Single-page PDF writer backed by ReportLab

Call Sequence:
    begin_document(page_width, total_height)
    place_image(...)   # once per placement, in input order
    finalize() -> PDF bytes
    close()            # always, including after failures

Dependencies:
    - reportlab: PDF generation

Used By:
    - controller: Conversion pipeline
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from imagestack.errors import AssemblyError

logger = logging.getLogger(__name__)


class DocumentAssembler(ABC):
    """
    Abstract interface for producing the output document.

    Coordinates passed to place_image use a top-left origin in points,
    matching the layout engine's placements.
    """

    @abstractmethod
    def begin_document(self, page_width: float, total_height: float) -> None:
        """
        Start a document with a single page of the given size.

        Args:
            page_width: Page width in points
            total_height: Page height in points
        """

    @abstractmethod
    def place_image(
        self,
        data: bytes,
        image_format: str,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """
        Draw one image on the page.

        Args:
            data: Encoded image bytes
            image_format: "JPEG" or "PNG"
            x: Left edge in points
            y: Top edge in points (from page top)
            width: Drawn width in points
            height: Drawn height in points
        """

    @abstractmethod
    def finalize(self) -> bytes:
        """
        Finish the document.

        Returns:
            Complete PDF file contents
        """

    def close(self) -> None:
        """Release any buffered resources. Safe to call more than once."""

    def __enter__(self) -> "DocumentAssembler":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class ReportLabAssembler(DocumentAssembler):
    """
    Assembler that draws onto a ReportLab canvas held in memory.

    Attributes:
        title: Optional PDF title metadata
        creator: PDF creator metadata

    Example:
        >>> with ReportLabAssembler(title="Scans") as assembler:
        ...     assembler.begin_document(595.28, 1150.56)
        ...     assembler.place_image(data, "PNG", 20, 20, 555.28, 1110.56)
        ...     pdf_bytes = assembler.finalize()
    """

    def __init__(self, *, title: Optional[str] = None, creator: Optional[str] = None) -> None:
        self.title = title
        self.creator = creator or _default_creator()
        self._buffer: Optional[io.BytesIO] = None
        self._canvas: Optional[canvas.Canvas] = None
        self._page_height = 0.0
        self._image_buffers: List[io.BytesIO] = []
        self._finalized = False

    def begin_document(self, page_width: float, total_height: float) -> None:
        """Create the canvas with a custom page size."""
        if self._canvas is not None:
            raise AssemblyError("Document already started")
        if page_width <= 0 or total_height <= 0:
            raise AssemblyError(f"Invalid page size: {page_width} x {total_height}")

        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=(page_width, total_height))
        self._page_height = total_height
        self._canvas.setCreator(self.creator)
        if self.title:
            self._canvas.setTitle(self.title)

        logger.debug(f"Started document {page_width:.2f} x {total_height:.2f} pt")

    def place_image(
        self,
        data: bytes,
        image_format: str,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw an image, converting the top-left y to PDF's bottom-up origin."""
        if self._canvas is None or self._finalized:
            raise AssemblyError("place_image called outside an open document")

        image_buffer = io.BytesIO(data)
        self._image_buffers.append(image_buffer)
        try:
            reader = ImageReader(image_buffer)
        except OSError as e:
            raise AssemblyError(f"Could not read {image_format} image data: {e}") from e

        # PNG may carry alpha; JPEG never does
        mask = "auto" if image_format.upper() == "PNG" else None

        self._canvas.drawImage(
            reader,
            x,
            _transform_y(self._page_height, y, height),
            width=width,
            height=height,
            mask=mask,
        )

    def finalize(self) -> bytes:
        """Close the page and return the PDF bytes."""
        if self._canvas is None or self._buffer is None:
            raise AssemblyError("finalize called before begin_document")
        if self._finalized:
            raise AssemblyError("Document already finalized")

        self._canvas.showPage()
        self._canvas.save()
        self._finalized = True

        pdf_bytes = self._buffer.getvalue()
        logger.debug(f"Finalized PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    def close(self) -> None:
        """Drop the canvas and free image buffers."""
        for image_buffer in self._image_buffers:
            image_buffer.close()
        self._image_buffers.clear()
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None
        self._canvas = None


def _transform_y(page_height_pt: float, y_top_pt: float, height_pt: float) -> float:
    """
    Convert a top-down Y coordinate to bottom-up PDF Y.

    Args:
        page_height_pt: Page height in points
        y_top_pt: Top edge measured from the page top
        height_pt: Element height

    Returns:
        Bottom edge measured from the page bottom
    """
    return page_height_pt - y_top_pt - height_pt


def _default_creator() -> str:
    """Get creator metadata with the current version number."""
    from imagestack import __version__
    return f"image-stack-pdf v{__version__}"
