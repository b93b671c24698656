"""
WarpLib - Quadrilateral geometry and projective/bilinear image warps

This module provides the quadrilateral model and the homography and
rubber-sheet warps that project an image onto one.
"""

from RP_Libs.WarpLib.quadrilateral import CORNER_NAMES, Quadrilateral
from RP_Libs.WarpLib.warp_transforms import (
    homography,
    rubber_sheet,
    solve_homography,
    solve_rubber_sheet,
)

__all__ = [
    "CORNER_NAMES",
    "Quadrilateral",
    "homography",
    "rubber_sheet",
    "solve_homography",
    "solve_rubber_sheet",
]
