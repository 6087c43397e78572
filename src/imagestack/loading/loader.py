"""
Module: loading.loader

Purpose:
    Decode and measure a batch of images concurrently.
    Every image is decoded on a worker thread; the batch is joined with an
    all-or-nothing barrier so layout never sees a partial batch.

Key Functions:
    - load_images(): Decode a batch, return SourceImages in input order
    - measure_image(): Decode and measure a single image

Dependencies:
    - PIL: Image decoding
    - concurrent.futures: Thread pool execution

Used By:
    - controller: Conversion pipeline
"""

from __future__ import annotations

import io
import logging
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from imagestack.errors import ConversionError, DecodeError, EmptyInputError, InvalidImageError

from .models import ImageInput, SourceImage

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


def measure_image(item: ImageInput) -> SourceImage:
    """
    Decode one image and read its intrinsic size.

    The pixel data is fully loaded so truncated files fail here rather than
    during assembly. The decoded buffer is closed before returning.

    Args:
        item: Raw image blob

    Returns:
        SourceImage with width, height, format and mode

    Raises:
        DecodeError: If the bytes are not a supported raster image
        InvalidImageError: If the decoded size is not positive
    """
    try:
        with Image.open(io.BytesIO(item.data)) as img:
            img.load()
            width, height = img.size
            image_format = img.format or "UNKNOWN"
            mode = img.mode
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, EOFError, SyntaxError, ValueError) as e:
        raise DecodeError(f"Could not decode {item.identifier}: {e}") from e

    if width <= 0 or height <= 0:
        raise InvalidImageError(
            f"Image {item.identifier} has invalid dimensions {width}x{height}"
        )

    logger.debug(f"Measured {item.identifier}: {width}x{height} {image_format} {mode}")

    return SourceImage(
        identifier=item.identifier,
        data=item.data,
        mime_type=item.mime_type,
        format=image_format,
        width=width,
        height=height,
        mode=mode,
    )


def load_images(
    inputs: Sequence[ImageInput],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    timeout: Optional[float] = None,
) -> List[SourceImage]:
    """
    Decode every image in the batch concurrently.

    Waits for all decodes to finish or for the first failure. On failure
    or timeout the tasks that have not started are cancelled and the pool
    is released without waiting for running ones.

    Args:
        inputs: Validated image blobs, in display order
        max_workers: Maximum concurrent decode threads
        timeout: Seconds to wait for the whole batch (None = indefinite)

    Returns:
        SourceImages in the same order as inputs

    Raises:
        EmptyInputError: If inputs is empty
        DecodeError: If any image fails to decode or the batch times out
        InvalidImageError: If any image has a non-positive size

    Example:
        >>> images = load_images([ImageInput("a.png", data, "image/png")])
        >>> images[0].size
        (200, 100)
    """
    items = list(inputs)
    if not items:
        raise EmptyInputError("No images provided")

    start_time = time.perf_counter()
    executor = ThreadPoolExecutor(
        max_workers=max(1, min(max_workers, len(items))),
        thread_name_prefix="imagestack-decode",
    )
    try:
        futures: List[Future] = [executor.submit(measure_image, item) for item in items]
        done, not_done = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)

        # Report the earliest failing image in input order
        for item, future in zip(items, futures):
            if future in done and future.exception() is not None:
                error = future.exception()
                logger.warning(f"Aborting batch: {error}")
                if isinstance(error, ConversionError):
                    raise error
                raise DecodeError(f"Could not decode {item.identifier}: {error}") from error

        if not_done:
            pending = [item.identifier for item, future in zip(items, futures) if future in not_done]
            raise DecodeError(
                f"Timed out after {timeout}s decoding: {', '.join(pending)}"
            )

        images = [future.result() for future in futures]
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Loaded {len(images)} images in {elapsed:.2f}s")
    return images
