"""
Module: imagestack.loading

Purpose:
    Input validation and concurrent image decoding.

Key Functions:
    - validate_inputs(): Eager batch checks
    - load_images(): Decode a batch behind an all-or-nothing barrier
    - measure_image(): Decode one image

Key Classes:
    - ImageInput: Raw blob with declared MIME type
    - SourceImage: Measured image

Dependencies:
    - PIL: Image decoding
"""

from .models import ImageInput, SourceImage
from .validation import validate_inputs
from .loader import load_images, measure_image

__all__ = [
    "ImageInput",
    "SourceImage",
    "validate_inputs",
    "load_images",
    "measure_image",
]
