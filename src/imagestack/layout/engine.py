"""
Module: layout.engine

Purpose:
    Stack images vertically on a single page of fixed width.
    Pure and deterministic: the same sizes and config always give the
    same placements.

Key Functions:
    - layout(): Compute placements and total page height

Algorithm:
    For each image, in input order:
    1. Scale uniformly so its width fills the usable width
    2. Center horizontally within the usable width
    3. Place below the previous image, separated by spacing
    Page height = top margin + image heights + gaps + bottom margin.

Dependencies:
    - layout.config: LayoutConfig
    - layout.models: Placement, LayoutResult

Used By:
    - controller: Conversion pipeline
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple

from imagestack.errors import EmptyInputError, InvalidImageError

from .config import LayoutConfig
from .models import Placement, LayoutResult

logger = logging.getLogger(__name__)


def layout(
    sizes: Iterable[Any],
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    """
    Compute the placement of every image on one tall page.

    Args:
        sizes: (width, height) pairs in pixels, or objects exposing
            ``width`` and ``height`` (e.g. SourceImage)
        config: Layout configuration (defaults to A4 width, 20pt margin,
            10pt spacing)

    Returns:
        LayoutResult with one Placement per image, in input order

    Raises:
        EmptyInputError: If sizes is empty
        InvalidImageError: If any width or height is not positive

    Example:
        >>> result = layout([(100, 200)])
        >>> result.placements[0].scaled_width
        555.28
        >>> round(result.total_page_height, 2)
        1150.56
    """
    if config is None:
        config = LayoutConfig()

    sizes = list(sizes)
    if not sizes:
        raise EmptyInputError("No images to lay out")

    usable_width = config.usable_width
    placements: List[Placement] = []
    current_y = config.margin

    for index, item in enumerate(sizes):
        width, height, image_id = _unpack_size(item)
        if width <= 0 or height <= 0:
            label = image_id or f"#{index}"
            raise InvalidImageError(
                f"Image {label} has invalid dimensions {width}x{height}"
            )

        scale_factor, scaled_width = _fit_width(width, usable_width, config.allow_upscale)
        scaled_height = height * scale_factor

        # Collapses to the margin whenever the image fills the usable width
        x = config.margin + (usable_width - scaled_width) / 2

        if index > 0:
            current_y += config.spacing

        placements.append(Placement(
            index=index,
            x=x,
            y=current_y,
            scaled_width=scaled_width,
            scaled_height=scaled_height,
            scale_factor=scale_factor,
            image_id=image_id,
        ))
        current_y += scaled_height

        logger.debug(
            f"Placed image {index} ({width}x{height}px) at y={placements[-1].y:.2f} "
            f"scale={scale_factor:.4f}"
        )

    count = len(placements)
    # Same running sum as the y positions, so the last bottom + margin is exact
    total_page_height = current_y + config.margin

    logger.info(
        f"Laid out {count} images on a {config.page_width:.2f} x "
        f"{total_page_height:.2f} pt page"
    )

    return LayoutResult(
        placements=tuple(placements),
        page_width=config.page_width,
        total_page_height=total_page_height,
    )


def _fit_width(
    width: int,
    usable_width: float,
    allow_upscale: bool,
) -> Tuple[float, float]:
    """
    Get (scale_factor, scaled_width) for an image of the given width.

    The scaled width is returned as the usable width itself when the image
    fills it, so every full-width placement has an exactly equal width.
    """
    if not allow_upscale and width <= usable_width:
        return 1.0, float(width)
    return usable_width / width, usable_width


def _unpack_size(item: Any) -> Tuple[Any, Any, Optional[str]]:
    """Get (width, height, identifier) from a pair or a sized object."""
    if isinstance(item, (tuple, list)):
        width, height = item
        return width, height, None
    return item.width, item.height, getattr(item, "identifier", None)
