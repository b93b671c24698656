"""
Error-diffusion dithering.

A ditherer applies a quantizer to every pixel of an image in row-major
order (top to bottom, left to right) and spreads each pixel's quantization
error onto neighbours that have not been processed yet. How the error is
spread is described by a diffusion kernel: a list of (dx, dy, fraction)
entries relative to the current pixel. Only red, green and blue error is
diffused; alpha never is. Error aimed outside the image is dropped.

Classes:
    ErrorDiffusionDitherer: Dithers an image with a given diffusion kernel

Functions:
    get_ditherer: Look up one of the built-in ditherers by name
    list_ditherers: Names of the built-in ditherers

Example:
    >>> from PIL import Image
    >>> from RP_Libs.DitherLib.quantizers import MonochromaticQuantizer
    >>> img = Image.new("RGBA", (8, 8), (128, 128, 128, 255))
    >>> out = FLOYD_STEINBERG.dither(img, MonochromaticQuantizer())
"""

from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from RP_Libs.pillow_compat import Image, as_rgba

# (dx, dy, fraction of the error)
DiffusionKernel = Sequence[Tuple[int, int, float]]


def _kernel(divisor: int, *weights: Tuple[int, int, int]) -> List[Tuple[int, int, float]]:
    return [(dx, dy, weight / divisor) for dx, dy, weight in weights]


FLOYD_STEINBERG_KERNEL = _kernel(16, (1, 0, 7), (-1, 1, 3), (0, 1, 5), (1, 1, 1))

ATKINSON_KERNEL = _kernel(8, (1, 0, 1), (2, 0, 1), (-1, 1, 1), (0, 1, 1), (1, 1, 1), (0, 2, 1))

BURKES_KERNEL = _kernel(
    32,
    (1, 0, 8), (2, 0, 4),
    (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
)

JARVIS_JUDICE_NINKE_KERNEL = _kernel(
    48,
    (1, 0, 7), (2, 0, 5),
    (-2, 1, 3), (-1, 1, 5), (0, 1, 7), (1, 1, 5), (2, 1, 3),
    (-2, 2, 1), (-1, 2, 3), (0, 2, 5), (1, 2, 3), (2, 2, 1),
)

SIERRA_KERNEL = _kernel(
    32,
    (1, 0, 5), (2, 0, 3),
    (-2, 1, 2), (-1, 1, 4), (0, 1, 5), (1, 1, 4), (2, 1, 2),
    (-1, 2, 2), (0, 2, 3), (1, 2, 2),
)

SIERRA_TWO_KERNEL = _kernel(
    16,
    (1, 0, 4), (2, 0, 3),
    (-2, 1, 1), (-1, 1, 2), (0, 1, 3), (1, 1, 2), (2, 1, 1),
)

SIERRA_LITE_KERNEL = _kernel(4, (1, 0, 2), (-1, 1, 1), (0, 1, 1))

STUCKI_KERNEL = _kernel(
    42,
    (1, 0, 8), (2, 0, 4),
    (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
    (-2, 2, 1), (-1, 2, 2), (0, 2, 4), (1, 2, 2), (2, 2, 1),
)


class ErrorDiffusionDitherer:
    """
    Dither an image by quantizing pixels and diffusing the error through a kernel.

    Args:
        name: Identifier used for lookup and logging
        kernel: Sequence of (dx, dy, fraction); an empty kernel quantizes
                without diffusing any error
    """

    def __init__(self, name: str, kernel: DiffusionKernel):
        self.name = str(name)
        self.kernel = tuple((int(dx), int(dy), float(fraction)) for dx, dy, fraction in kernel)

        for dx, dy, _fraction in self.kernel:
            if dy < 0 or (dy == 0 and dx <= 0):
                raise ValueError(
                    f"Kernel offset ({dx}, {dy}) of ditherer '{self.name}' "
                    f"points at an already processed pixel"
                )

    def dither(self, image: Any, quantizer: Any) -> Any:
        """
        Reduce the palette of an image with error diffusion.

        Args:
            image: PIL Image (converted to RGBA); not modified
            quantizer: Object with a quantize(rgba) method

        Returns:
            New RGBA PIL Image with the same dimensions

        Raises:
            TypeError: If image not PIL Image
            ValueError: If image has zero width or height
        """
        rgba = as_rgba(image)
        width, height = rgba.size
        if width <= 0 or height <= 0:
            raise ValueError(f"Cannot dither an empty image of size {rgba.size}")

        matrix = to_color_cube_matrix(rgba)
        rows = matrix.tolist()

        for y in range(height):
            row = rows[y]
            for x in range(width):
                old_pixel = row[x]
                new_pixel = list(quantizer.quantize(old_pixel))
                row[x] = new_pixel

                qer = old_pixel[0] - new_pixel[0]
                qeg = old_pixel[1] - new_pixel[1]
                qeb = old_pixel[2] - new_pixel[2]

                for dx, dy, fraction in self.kernel:
                    tx = x + dx
                    ty = y + dy
                    if 0 <= tx < width and ty < height:
                        target = rows[ty][tx]
                        target[0] += qer * fraction
                        target[1] += qeg * fraction
                        target[2] += qeb * fraction

        return from_color_cube_matrix(np.array(rows, dtype=np.float64))

    def __repr__(self) -> str:
        return f"ErrorDiffusionDitherer(name={self.name!r})"


def to_color_cube_matrix(image: Any) -> np.ndarray:
    """
    Convert an image to a height x width x 4 float matrix with R, G and B
    normalized to 0.0-1.0 and alpha kept in 0-255.
    """
    matrix = np.asarray(as_rgba(image), dtype=np.float64).copy()
    matrix[..., :3] /= 255.0
    return matrix


def from_color_cube_matrix(matrix: np.ndarray) -> Any:
    """Convert a normalized color cube matrix back to an 8-bit RGBA image, clamping and truncating."""
    pixels = np.array(matrix, dtype=np.float64)
    pixels[..., :3] *= 255.0
    pixels = np.clip(pixels, 0.0, 255.0)
    return Image.fromarray(pixels.astype(np.uint8))


FLOYD_STEINBERG = ErrorDiffusionDitherer("floyd_steinberg", FLOYD_STEINBERG_KERNEL)
ATKINSON = ErrorDiffusionDitherer("atkinson", ATKINSON_KERNEL)
BURKES = ErrorDiffusionDitherer("burkes", BURKES_KERNEL)
JARVIS_JUDICE_NINKE = ErrorDiffusionDitherer("jarvis_judice_ninke", JARVIS_JUDICE_NINKE_KERNEL)
SIERRA = ErrorDiffusionDitherer("sierra", SIERRA_KERNEL)
SIERRA_TWO = ErrorDiffusionDitherer("sierra_two", SIERRA_TWO_KERNEL)
SIERRA_LITE = ErrorDiffusionDitherer("sierra_lite", SIERRA_LITE_KERNEL)
STUCKI = ErrorDiffusionDitherer("stucki", STUCKI_KERNEL)
NO_DITHER = ErrorDiffusionDitherer("none", ())

_DITHERERS: Dict[str, ErrorDiffusionDitherer] = {
    ditherer.name: ditherer
    for ditherer in (
        FLOYD_STEINBERG,
        ATKINSON,
        BURKES,
        JARVIS_JUDICE_NINKE,
        SIERRA,
        SIERRA_TWO,
        SIERRA_LITE,
        STUCKI,
        NO_DITHER,
    )
}


def list_ditherers() -> List[str]:
    return sorted(_DITHERERS)


def get_ditherer(name: str) -> ErrorDiffusionDitherer:
    """
    Look up a built-in ditherer.

    Args:
        name: e.g. 'floyd_steinberg', 'atkinson', 'none'

    Raises:
        KeyError: If no ditherer has that name
    """
    key = str(name).strip().lower()
    if key not in _DITHERERS:
        raise KeyError(f"Unknown ditherer '{name}'. Available ditherers: {', '.join(list_ditherers())}")
    return _DITHERERS[key]
