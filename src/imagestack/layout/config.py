"""
Module: layout.config

Purpose:
    Configuration for the stacking layout engine.
    Defines page width, margin and inter-image spacing in PDF points.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - layout.engine: Placement computation
    - controller: Conversion pipeline
"""

from __future__ import annotations

from dataclasses import dataclass


# A4 width in points (8.27 x 11.69 inches)
DEFAULT_PAGE_WIDTH_PT = 595.28
DEFAULT_MARGIN_PT = 20.0
DEFAULT_SPACING_PT = 10.0


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    The page height is not configured: it grows to fit every image.

    Attributes:
        page_width: Page width in points
        margin: Margin on all four sides in points
        spacing: Vertical gap between consecutive images in points
        allow_upscale: Whether images narrower than the usable width are
            enlarged to fill it. When False they keep their size and are
            centered.

    Example:
        >>> config = LayoutConfig()
        >>> config.usable_width
        555.28
    """

    page_width: float = DEFAULT_PAGE_WIDTH_PT
    margin: float = DEFAULT_MARGIN_PT
    spacing: float = DEFAULT_SPACING_PT
    allow_upscale: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.margin < 0:
            raise ValueError(f"margin must be non-negative: {self.margin}")
        if self.spacing < 0:
            raise ValueError(f"spacing must be non-negative: {self.spacing}")
        if self.usable_width <= 0:
            raise ValueError("Margins exceed page width")

    @property
    def usable_width(self) -> float:
        """Width available for image content (excluding margins)."""
        return self.page_width - 2 * self.margin
