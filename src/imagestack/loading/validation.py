"""
Module: loading.validation

Purpose:
    Eager batch checks run before any image is decoded.

Key Functions:
    - validate_inputs(): Reject empty batches and non-image entries

Used By:
    - controller: First step of the conversion pipeline
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from imagestack.errors import EmptyInputError, InvalidFileTypeError

from .models import ImageInput

logger = logging.getLogger(__name__)


def validate_inputs(inputs: Sequence[ImageInput]) -> List[ImageInput]:
    """
    Check a batch before loading.

    The whole batch is rejected if a single entry is not an image.

    Args:
        inputs: Ordered image blobs

    Returns:
        The inputs as a list, order preserved

    Raises:
        EmptyInputError: If the batch is empty
        InvalidFileTypeError: If any entry's MIME type is not image/*
    """
    items = list(inputs)
    if not items:
        raise EmptyInputError("No images provided")

    rejected = [item.identifier for item in items if not item.is_image]
    if rejected:
        logger.warning(f"Rejected batch with non-image entries: {', '.join(rejected)}")
        raise InvalidFileTypeError(
            f"Not an image file: {', '.join(rejected)}"
        )

    return items
