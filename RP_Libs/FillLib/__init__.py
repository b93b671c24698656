"""
FillLib - Seed fill and transparent-region fill

This module provides the stack-based flood fill engine and image-level
fill helpers for solid colors and tiling textures.
"""

from RP_Libs.FillLib.flood_fill import (
    fill_region,
    fill_transparent,
    flood_fill,
    flood_fill_image,
    make_boundary_function,
    make_fill_function,
)

__all__ = [
    "fill_region",
    "fill_transparent",
    "flood_fill",
    "flood_fill_image",
    "make_boundary_function",
    "make_fill_function",
]
