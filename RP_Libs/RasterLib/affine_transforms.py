"""
Affine image transforms: scale, flips, rotations, slant and arbitrary affines.

Every function returns a new RGBA image; the input is never modified.

Example:
    >>> from PIL import Image
    >>> img = Image.new("RGBA", (40, 20), "red")
    >>> rotate_left(img).size
    (20, 40)
"""

import math
from typing import Any, Sequence, Tuple

from RP_Libs.pillow_compat import Image, NEAREST, as_rgba, require_image


def scale(image: Any, size: Tuple[int, int]) -> Any:
    """
    Scale an image to exactly `size` using nearest-neighbour sampling.

    Args:
        image: PIL Image
        size: Target (width, height); both must be positive

    Returns:
        New RGBA PIL Image of the requested size

    Raises:
        ValueError: If either dimension is not positive
        TypeError: If image not PIL Image
    """
    require_image(image)
    width, height = int(size[0]), int(size[1])
    if width <= 0 or height <= 0:
        raise ValueError(f"size must be positive, got {size}")

    rgba = as_rgba(image)
    if rgba.size == (width, height):
        return rgba
    return rgba.resize((width, height), NEAREST)


def flip_horizontal(image: Any) -> Any:
    """Mirror the image about its vertical center-line."""
    return as_rgba(image).transpose(Image.FLIP_LEFT_RIGHT)


def flip_vertical(image: Any) -> Any:
    """Mirror the image about its horizontal center-line."""
    return as_rgba(image).transpose(Image.FLIP_TOP_BOTTOM)


def rotate_left(image: Any) -> Any:
    """Rotate 90 degrees counter-clockwise."""
    return as_rgba(image).transpose(Image.ROTATE_90)


def rotate_right(image: Any) -> Any:
    """Rotate 90 degrees clockwise."""
    return as_rgba(image).transpose(Image.ROTATE_270)


def slant(image: Any, theta: float, x_translation: int = 0) -> Any:
    """
    Shear an image horizontally by angle `theta` (radians).

    The translation is applied on both sides of the shear, so passing half
    the horizontal displacement of the bottom edge keeps the vertical
    center-line in place.

    Args:
        image: PIL Image
        theta: Shear angle in radians; must be strictly between -pi/2 and pi/2
        x_translation: Pixels to translate horizontally

    Returns:
        New RGBA PIL Image the same size as the input

    Raises:
        ValueError: If theta is not a usable shear angle
    """
    require_image(image)
    if not (-math.pi / 2 < theta < math.pi / 2):
        raise ValueError(f"theta must be between -pi/2 and pi/2, got {theta}")

    shear = math.tan(theta)
    # Forward map: x' = x + shear * y + 2 * tx; PIL wants the inverse
    data = (1.0, -shear, -2.0 * x_translation, 0.0, 1.0, 0.0)

    rgba = as_rgba(image)
    return rgba.transform(rgba.size, Image.AFFINE, data, resample=Image.BICUBIC)


def _inverse_affine(matrix: Sequence[float]) -> Tuple[float, ...]:
    """Invert a forward (a, b, c, d, e, f) affine into the output-to-input form PIL expects."""
    a, b, c, d, e, f = (float(v) for v in matrix)
    determinant = a * e - b * d
    if abs(determinant) < 1e-12:
        raise ValueError(f"Affine matrix {tuple(matrix)} is not invertible")

    return (
        e / determinant,
        -b / determinant,
        (b * f - c * e) / determinant,
        -d / determinant,
        a / determinant,
        (c * d - a * f) / determinant,
    )


def affine_transform(image: Any, matrix: Sequence[float], resample=NEAREST) -> Any:
    """
    Apply an arbitrary affine transform.

    `matrix` is the forward mapping (a, b, c, d, e, f) taking source pixel
    (x, y) to (a*x + b*y + c, d*x + e*y + f). The result keeps the input's
    size; pixels that map from outside the source are transparent.

    Raises:
        ValueError: If matrix does not have six entries or is not invertible
        TypeError: If image not PIL Image
    """
    require_image(image)
    if len(matrix) != 6:
        raise ValueError(f"matrix must have 6 entries, got {len(matrix)}")

    rgba = as_rgba(image)
    return rgba.transform(rgba.size, Image.AFFINE, _inverse_affine(matrix), resample=resample)


def rotate(image: Any, theta: float, anchor: Tuple[float, float]) -> Any:
    """
    Rotate an image by `theta` radians about `anchor` with bilinear sampling.

    Positive angles turn clockwise on screen (y grows downward). The output
    keeps the input's size; corners rotated in from outside are transparent.

    Args:
        image: PIL Image
        theta: Rotation angle in radians
        anchor: (x, y) point that stays fixed

    Returns:
        New RGBA PIL Image the same size as the input
    """
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    ax, ay = float(anchor[0]), float(anchor[1])

    matrix = (
        cos_t, -sin_t, ax - cos_t * ax + sin_t * ay,
        sin_t, cos_t, ay - sin_t * ax - cos_t * ay,
    )
    return affine_transform(image, matrix, resample=Image.BILINEAR)
