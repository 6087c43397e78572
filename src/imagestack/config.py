"""
Module: config

Purpose:
    Configuration dataclass for the conversion pipeline. Immutable
    configuration with validation on construction. Page geometry lives
    in imagestack.layout.LayoutConfig.

Key Classes:
    - ConverterConfig: Output, decoding and embedding settings

Used By:
    - controller: Conversion pipeline
    - cli: Flag mapping
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from imagestack.output.formats import DEFAULT_JPEG_QUALITY, ImageFormatPolicy

DEFAULT_OUTPUT_NAME = "combined-images.pdf"


@dataclass(frozen=True)
class ConverterConfig:
    """
    Configuration for converting images to a PDF (immutable).

    Attributes:
        output_name: File name of the produced PDF
        max_workers: Maximum concurrent decode threads
        decode_timeout: Seconds allowed for decoding the whole batch
            (None = wait indefinitely)
        image_format: How images are encoded for embedding
        jpeg_quality: Quality when re-encoding to JPEG (1-95)
        title: Optional PDF title metadata

    Example:
        >>> config = ConverterConfig(output_name="scans.pdf", max_workers=8)
    """

    output_name: str = DEFAULT_OUTPUT_NAME
    max_workers: int = 4
    decode_timeout: Optional[float] = 30.0
    image_format: ImageFormatPolicy = ImageFormatPolicy.AUTO
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    title: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.output_name or not self.output_name.lower().endswith(".pdf"):
            raise ValueError(f"output_name must end with .pdf: {self.output_name!r}")
        if "/" in self.output_name or "\\" in self.output_name:
            raise ValueError(f"output_name must be a file name, not a path: {self.output_name!r}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {self.max_workers}")
        if self.decode_timeout is not None and self.decode_timeout <= 0:
            raise ValueError(f"decode_timeout must be positive: {self.decode_timeout}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be between 1 and 95: {self.jpeg_quality}")
        # Accept plain strings such as "png"
        object.__setattr__(self, "image_format", ImageFormatPolicy(self.image_format))
