"""
Module: output.formats

Purpose:
    Decide how each source image is embedded in the PDF.
    JPEG data can be embedded as-is; other formats are re-encoded so
    that transparency and lossless content survive.

Key Classes:
    - ImageFormatPolicy: Embedding policy (auto / jpeg / png)

Key Functions:
    - prepare_for_embedding(): Get (bytes, format) for the assembler

Dependencies:
    - PIL: Re-encoding
"""

from __future__ import annotations

import io
import logging
from enum import Enum
from typing import Tuple

from PIL import Image

from imagestack.errors import DecodeError
from imagestack.loading.models import SourceImage

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 90


class ImageFormatPolicy(str, Enum):
    """How images are encoded for embedding."""

    AUTO = "auto"  # JPEG passes through, everything else becomes PNG
    JPEG = "jpeg"  # Always JPEG; transparency is flattened onto white
    PNG = "png"  # Always lossless PNG


def prepare_for_embedding(
    image: SourceImage,
    policy: ImageFormatPolicy = ImageFormatPolicy.AUTO,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> Tuple[bytes, str]:
    """
    Encode a source image for the document assembler.

    Args:
        image: Measured source image
        policy: Embedding policy
        jpeg_quality: Quality used when re-encoding to JPEG (1-95)

    Returns:
        Tuple of (encoded bytes, "JPEG" or "PNG")

    Raises:
        DecodeError: If the image cannot be re-opened for re-encoding

    Example:
        >>> data, fmt = prepare_for_embedding(png_image)
        >>> fmt
        'PNG'
    """
    policy = ImageFormatPolicy(policy)

    if image.format == "JPEG" and policy in (ImageFormatPolicy.AUTO, ImageFormatPolicy.JPEG):
        return image.data, "JPEG"

    if image.format == "PNG" and policy in (ImageFormatPolicy.AUTO, ImageFormatPolicy.PNG):
        return image.data, "PNG"

    try:
        with Image.open(io.BytesIO(image.data)) as img:
            if policy is ImageFormatPolicy.JPEG:
                data = _encode_jpeg(img, jpeg_quality)
                target = "JPEG"
            else:
                data = _encode_png(img)
                target = "PNG"
    except OSError as e:
        raise DecodeError(f"Could not re-encode {image.identifier}: {e}") from e

    logger.debug(f"Re-encoded {image.identifier} from {image.format} to {target}")
    return data, target


def _has_transparency(img: Image.Image) -> bool:
    """Check whether an image carries an alpha channel or transparent color."""
    if img.mode in ("RGBA", "LA", "PA"):
        return True
    return "transparency" in img.info


def _encode_png(img: Image.Image) -> bytes:
    """Losslessly encode the first frame as PNG, keeping alpha."""
    if _has_transparency(img):
        if img.mode != "RGBA":
            img = img.convert("RGBA")
    elif img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def _encode_jpeg(img: Image.Image, quality: int) -> bytes:
    """Encode the first frame as JPEG, flattening transparency onto white."""
    if _has_transparency(img):
        rgba = img.convert("RGBA")
        flattened = Image.new("RGB", rgba.size, "white")
        flattened.paste(rgba, mask=rgba.getchannel("A"))
        img = flattened
    elif img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()
