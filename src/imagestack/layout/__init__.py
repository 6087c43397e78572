"""
Module: imagestack.layout

Purpose:
    Page layout for image stacking.
    Converts measured image sizes into positioned placements on one page.

Key Functions:
    - layout(): Main entry point for layout

Key Classes:
    - LayoutConfig: Configuration for page geometry
    - Placement: Positioned, scaled image
    - LayoutResult: Placements plus page size

Used By:
    - imagestack.controller: Conversion pipeline
"""

from .config import LayoutConfig
from .models import Placement, LayoutResult
from .engine import layout

__all__ = [
    # Config
    "LayoutConfig",
    # Models
    "Placement",
    "LayoutResult",
    # Functions
    "layout",
]
