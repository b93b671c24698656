"""
RasterLib - Raster buffer models and buffer-level operations

This module provides the value types shared across the engine, alpha
compositing, per-pixel color transforms and affine image transforms.
"""

from RP_Libs.RasterLib.raster_models import (
    Bounds,
    CompositeOp,
    NormalizedRgba,
    Paint,
    Point,
    RgbaColor,
)
from RP_Libs.RasterLib.compositing import composite, paste_top_left
from RP_Libs.RasterLib.pixel_transforms import (
    InvertPixelTransform,
    BrightnessPixelTransform,
    TransparencyPixelTransform,
    RemoveAlphaPixelTransform,
    apply_pixel_transform,
    get_pixel_transform,
)
from RP_Libs.RasterLib.affine_transforms import (
    scale,
    flip_horizontal,
    flip_vertical,
    rotate_left,
    rotate_right,
    slant,
    rotate,
    affine_transform,
)

__all__ = [
    "Bounds",
    "CompositeOp",
    "NormalizedRgba",
    "Paint",
    "Point",
    "RgbaColor",
    "composite",
    "paste_top_left",
    "InvertPixelTransform",
    "BrightnessPixelTransform",
    "TransparencyPixelTransform",
    "RemoveAlphaPixelTransform",
    "apply_pixel_transform",
    "get_pixel_transform",
    "scale",
    "flip_horizontal",
    "flip_vertical",
    "rotate_left",
    "rotate_right",
    "slant",
    "rotate",
    "affine_transform",
]
