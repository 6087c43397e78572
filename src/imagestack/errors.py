"""
Module: errors

Purpose:
    Exception taxonomy for image-to-PDF conversion. Every failure aborts
    the whole conversion; each class carries the message shown to the
    person who requested the conversion.

Key Classes:
    - ConversionError: Base class for all conversion failures
    - EmptyInputError: No images provided
    - InvalidFileTypeError: Non-image entry in the batch
    - DecodeError: Image bytes could not be decoded or measured
    - InvalidImageError: Zero or negative intrinsic dimension
    - AssemblyError: PDF generation failed

Key Functions:
    - describe_error(): Map any exception to a user-facing message

Used By:
    - imagestack.loading: Validation and decoding
    - imagestack.layout.engine: Dimension checks
    - imagestack.output.assembler: PDF generation
    - imagestack.controller: Pipeline orchestration
    - imagestack.cli: Failure reporting
"""

from __future__ import annotations

GENERIC_FAILURE_MESSAGE = "Error converting images to PDF. Please try again."


class ConversionError(Exception):
    """Base class for errors that abort a conversion."""

    user_message: str = GENERIC_FAILURE_MESSAGE


class EmptyInputError(ConversionError):
    """No images were provided."""

    user_message = "Please upload at least one image."


class InvalidFileTypeError(ConversionError):
    """Batch contains an entry whose MIME type is not image/*."""

    user_message = "Please upload only image files."


class DecodeError(ConversionError):
    """Image bytes are not a supported raster image, or decoding timed out."""


class InvalidImageError(ConversionError):
    """Image has a zero or negative intrinsic dimension."""


class AssemblyError(ConversionError):
    """The PDF document could not be assembled."""


def describe_error(exc: BaseException) -> str:
    """
    Get the human-readable message for a failed conversion.

    Args:
        exc: Exception raised by the conversion pipeline

    Returns:
        One message per failure class; unknown errors get the generic one.

    Example:
        >>> describe_error(EmptyInputError("no images"))
        'Please upload at least one image.'
    """
    if isinstance(exc, ConversionError):
        return exc.user_message
    return GENERIC_FAILURE_MESSAGE
