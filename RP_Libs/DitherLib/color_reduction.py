"""
Palette reduction transforms built on the quantizers and ditherers.

Reducing colors only changes how an image looks; the result is still an
ordinary 8-bit RGBA image.

Functions:
    reduce_colors: Reduce an image to at most `color_depth` colors
    reduce_greyscale: Reduce an image to at most `gray_depth` shades of gray
    count_colors: Number of unique RGBA values in an image
"""

from typing import Any, Union

import numpy as np

from RP_Libs.constants import DEFAULT_COLOR_DEPTH, DEFAULT_DITHERER, DEFAULT_GRAY_DEPTH
from RP_Libs.pillow_compat import as_rgba
from RP_Libs.DitherLib.ditherers import ErrorDiffusionDitherer, get_ditherer
from RP_Libs.DitherLib.quantizers import (
    ColorReductionQuantizer,
    GrayscaleQuantizer,
    MonochromaticQuantizer,
)

DithererLike = Union[str, ErrorDiffusionDitherer]


def _resolve_ditherer(ditherer: DithererLike) -> ErrorDiffusionDitherer:
    if isinstance(ditherer, ErrorDiffusionDitherer):
        return ditherer
    return get_ditherer(ditherer)


def integer_cube_root(value: int) -> int:
    """Largest integer n with n ** 3 <= value."""
    value = int(value)
    if value < 0:
        raise ValueError(f"value must be non-negative, got {value}")

    root = int(round(value ** (1.0 / 3.0)))
    while root ** 3 > value:
        root -= 1
    while (root + 1) ** 3 <= value:
        root += 1
    return root


def reduce_colors(
    image: Any,
    color_depth: int = DEFAULT_COLOR_DEPTH,
    ditherer: DithererLike = DEFAULT_DITHERER,
) -> Any:
    """
    Reduce an image's palette to at most `color_depth` colors.

    Args:
        image: PIL Image; not modified
        color_depth: Maximum number of colors. Should be a cube; otherwise the
                     floor of its cube root is used as the per-channel level
                     count. Zero produces a black and white image.
        ditherer: Ditherer instance or name (see get_ditherer)

    Returns:
        New RGBA PIL Image

    Raises:
        ValueError: If color_depth is negative or between 1 and 7
        KeyError: If the ditherer name is unknown
    """
    color_depth = int(color_depth)
    if color_depth < 0:
        raise ValueError(f"color_depth must be non-negative, got {color_depth}")

    if color_depth == 0:
        quantizer = MonochromaticQuantizer()
    else:
        quantizer = ColorReductionQuantizer(integer_cube_root(color_depth))

    return _resolve_ditherer(ditherer).dither(image, quantizer)


def reduce_greyscale(
    image: Any,
    gray_depth: int = DEFAULT_GRAY_DEPTH,
    ditherer: DithererLike = DEFAULT_DITHERER,
) -> Any:
    """
    Reduce an image to gray shades.

    Args:
        image: PIL Image; not modified
        gray_depth: Number of gray levels; zero produces a black and white image
        ditherer: Ditherer instance or name (see get_ditherer)

    Returns:
        New RGBA PIL Image
    """
    gray_depth = int(gray_depth)
    if gray_depth < 0:
        raise ValueError(f"gray_depth must be non-negative, got {gray_depth}")

    quantizer = MonochromaticQuantizer() if gray_depth == 0 else GrayscaleQuantizer(gray_depth)
    return _resolve_ditherer(ditherer).dither(image, quantizer)


def count_colors(image: Any) -> int:
    """Count the unique RGBA values in an image."""
    pixels = np.asarray(as_rgba(image), dtype=np.uint8).reshape(-1, 4)
    if pixels.size == 0:
        return 0
    return int(np.unique(pixels, axis=0).shape[0])
