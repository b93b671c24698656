"""
Quantization functions for palette reduction.

A quantizer maps one normalized pixel to its nearest color in a reduced
palette. Pixels are sequences of four floats: red, green and blue in the
range 0.0-1.0 and alpha in its native 0-255 range. Alpha is passed through
unchanged by every quantizer here.

Classes:
    ColorReductionQuantizer: Rounds each color channel to N evenly spaced levels
    GrayscaleQuantizer: Rounds HSB brightness to N levels of pure gray
    MonochromaticQuantizer: Thresholds mean intensity to black or white
"""

import math
from typing import List

from RP_Libs.RasterLib.raster_models import NormalizedRgba


class ColorReductionQuantizer:
    """
    Reduce each of R, G and B independently to `channel_count` evenly spaced
    levels between 0.0 and 1.0 inclusive (a palette of channel_count ** 3 colors).

    Args:
        channel_count: Levels per channel; must be at least 2

    Raises:
        ValueError: If channel_count is less than 2
    """

    def __init__(self, channel_count: int):
        channel_count = int(channel_count)
        if channel_count < 2:
            raise ValueError(f"channel_count must be at least 2, got {channel_count}")
        self.channel_count = channel_count

    def _level(self, value: float) -> float:
        steps = self.channel_count - 1
        return math.floor(value * steps + 0.5) / steps

    def quantize(self, rgba: NormalizedRgba) -> List[float]:
        return [self._level(rgba[0]), self._level(rgba[1]), self._level(rgba[2]), rgba[3]]

    def __repr__(self) -> str:
        return f"ColorReductionQuantizer(channel_count={self.channel_count})"


class GrayscaleQuantizer:
    """
    Reduce a color to one of a limited number of pure grays.

    The color's HSB brightness (its largest 8-bit channel) is rounded to the
    nearest multiple of 1/gray_count, clamped to [0, 1] and converted back to
    RGB with hue and saturation zeroed.

    Args:
        gray_count: Number of gray shades; must be at least 1

    Raises:
        ValueError: If gray_count is less than 1
    """

    def __init__(self, gray_count: int):
        gray_count = int(gray_count)
        if gray_count < 1:
            raise ValueError(f"gray_count must be at least 1, got {gray_count}")
        self.gray_count = gray_count

    def quantize(self, rgba: NormalizedRgba) -> List[float]:
        brightness = max(int(rgba[0] * 255.0), int(rgba[1] * 255.0), int(rgba[2] * 255.0)) / 255.0
        brightness = math.floor(brightness * self.gray_count + 0.5) / self.gray_count
        brightness = min(max(brightness, 0.0), 1.0)

        gray = int(brightness * 255.0 + 0.5) / 255.0
        return [gray, gray, gray, rgba[3]]

    def __repr__(self) -> str:
        return f"GrayscaleQuantizer(gray_count={self.gray_count})"


class MonochromaticQuantizer:
    """Pure black when the mean of R, G and B is at most 0.5, pure white otherwise."""

    def quantize(self, rgba: NormalizedRgba) -> List[float]:
        luminosity = (rgba[0] + rgba[1] + rgba[2]) / 3.0
        level = 1.0 if luminosity > 0.5 else 0.0
        return [level, level, level, rgba[3]]

    def __repr__(self) -> str:
        return "MonochromaticQuantizer()"
