"""
DitherLib - Palette quantization and error-diffusion dithering

This module provides quantizers, kernel-based error-diffusion ditherers and
the color and greyscale reduction transforms built from them.
"""

from RP_Libs.DitherLib.quantizers import (
    ColorReductionQuantizer,
    GrayscaleQuantizer,
    MonochromaticQuantizer,
)
from RP_Libs.DitherLib.ditherers import (
    ErrorDiffusionDitherer,
    FLOYD_STEINBERG,
    get_ditherer,
    list_ditherers,
)
from RP_Libs.DitherLib.color_reduction import (
    count_colors,
    reduce_colors,
    reduce_greyscale,
)

__all__ = [
    "ColorReductionQuantizer",
    "GrayscaleQuantizer",
    "MonochromaticQuantizer",
    "ErrorDiffusionDitherer",
    "FLOYD_STEINBERG",
    "get_ditherer",
    "list_ditherers",
    "count_colors",
    "reduce_colors",
    "reduce_greyscale",
]
