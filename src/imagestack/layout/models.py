"""
Module: layout.models

Purpose:
    Data models for the stacking layout.
    Immutable dataclasses for image placements and the final page.

Key Classes:
    - Placement: One image positioned on the page
    - LayoutResult: Ordered placements plus page geometry

Dependencies:
    - dataclasses (std)

Used By:
    - layout.engine: Creates placements
    - controller: Drives the assembler from placements
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Placement:
    """
    Resolved position and scaled size of one image.

    Coordinates use a top-left origin in PDF points.

    Attributes:
        index: Position of the image in the input batch
        x: Left edge
        y: Top edge
        scaled_width: Width after scaling
        scaled_height: Height after scaling
        scale_factor: Factor applied to both intrinsic dimensions
        image_id: Identifier of the source image, if known

    Example:
        >>> placement = Placement(index=0, x=20, y=20, scaled_width=555.28,
        ...                       scaled_height=100, scale_factor=5.5528)
        >>> placement.bottom
        120
    """

    index: int
    x: float
    y: float
    scaled_width: float
    scaled_height: float
    scale_factor: float
    image_id: Optional[str] = None

    @property
    def bottom(self) -> float:
        """Bottom Y coordinate (y + scaled_height)."""
        return self.y + self.scaled_height

    @property
    def right(self) -> float:
        """Right X coordinate (x + scaled_width)."""
        return self.x + self.scaled_width


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output.

    Attributes:
        placements: One Placement per input image, in input order
        page_width: Page width in points
        total_page_height: Page height that fits every placement plus margins
    """

    placements: tuple[Placement, ...]
    page_width: float
    total_page_height: float

    @property
    def page_size(self) -> tuple[float, float]:
        """(width, height) of the single output page."""
        return (self.page_width, self.total_page_height)

    @property
    def image_count(self) -> int:
        """Number of placed images."""
        return len(self.placements)
