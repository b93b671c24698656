"""
Projective (homography) and bilinear (rubber-sheet) image warps.

Both warps project a source image onto an arbitrary quadrilateral. The
source is first scaled to the quadrilateral's bounding box; a linear system
built from the four corner correspondences is then solved for eight
coefficients that map every destination pixel (i, j) back to a source
pixel (x, y):

    homography:   x = (a*i + b*j + c) / (g*i + h*j + 1)
                  y = (d*i + e*j + f) / (g*i + h*j + 1)

    rubber sheet: x = a*i*j + b*i + c*j + d
                  y = e*i*j + f*i + g*j + h

Sampling is nearest-neighbour by truncation. A destination pixel is copied
only when 0 < x < W, 0 < y < H, 0 < i and 0 < j; all others stay
transparent, so row 0 and column 0 of the output are always transparent.

Example:
    >>> from PIL import Image
    >>> img = Image.new("RGBA", (100, 80), "red")
    >>> quad = Quadrilateral((10, 0), (90, 5), (99, 79), (0, 70))
    >>> warped = homography(img, quad)
    >>> warped.size
    (100, 80)
"""

from typing import Any, List, Tuple

import numpy as np

from RP_Libs.constants import WARP_SNAP_EPSILON
from RP_Libs.pillow_compat import Image, require_image
from RP_Libs.RasterLib.affine_transforms import scale
from RP_Libs.WarpLib.quadrilateral import Quadrilateral


def _correspondences(quadrilateral: Quadrilateral, width: int, height: int):
    """Destination corners (absolute) paired with the source rectangle corners."""
    destination = [(abs(float(p.x)), abs(float(p.y))) for p in quadrilateral.corners]
    source = [
        (0.0, 0.0),
        (width - 1.0, 0.0),
        (width - 1.0, height - 1.0),
        (0.0, height - 1.0),
    ]
    return destination, source


def _solve(matrix: List[List[float]], vector: List[float], quadrilateral: Quadrilateral) -> np.ndarray:
    try:
        solution = np.linalg.solve(np.array(matrix, dtype=np.float64), np.array(vector, dtype=np.float64))
    except np.linalg.LinAlgError as exc:
        raise ValueError(f"Cannot solve warp for quadrilateral {quadrilateral.corners}: {exc}") from exc

    if not np.all(np.isfinite(solution)):
        raise ValueError(f"Warp for quadrilateral {quadrilateral.corners} has no finite solution")

    return solution


def solve_homography(quadrilateral: Quadrilateral, width: int, height: int) -> np.ndarray:
    """
    Solve the planar homography mapping `quadrilateral` onto a width x height rectangle.

    Returns:
        numpy array of the eight coefficients (a, b, c, d, e, f, g, h)

    Raises:
        ValueError: If the system is singular
    """
    destination, source = _correspondences(quadrilateral, width, height)

    matrix = []
    vector = []
    for (dx, dy), (sx, _sy) in zip(destination, source):
        matrix.append([dx, dy, 1.0, 0.0, 0.0, 0.0, -dx * sx, -dy * sx])
        vector.append(sx)
    for (dx, dy), (_sx, sy) in zip(destination, source):
        matrix.append([0.0, 0.0, 0.0, dx, dy, 1.0, -dx * sy, -dy * sy])
        vector.append(sy)

    return _solve(matrix, vector, quadrilateral)


def solve_rubber_sheet(quadrilateral: Quadrilateral, width: int, height: int) -> np.ndarray:
    """
    Solve the bilinear mapping of `quadrilateral` onto a width x height rectangle.

    Returns:
        numpy array of the eight coefficients (a, b, c, d, e, f, g, h)

    Raises:
        ValueError: If the system is singular
    """
    destination, source = _correspondences(quadrilateral, width, height)

    matrix = []
    vector = []
    for (dx, dy), (sx, _sy) in zip(destination, source):
        matrix.append([dx * dy, dx, dy, 1.0, 0.0, 0.0, 0.0, 0.0])
        vector.append(sx)
    for (dx, dy), (_sx, sy) in zip(destination, source):
        matrix.append([0.0, 0.0, 0.0, 0.0, dx * dy, dx, dy, 1.0])
        vector.append(sy)

    return _solve(matrix, vector, quadrilateral)


def _map_homography(coefficients: np.ndarray, i: np.ndarray, j: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    a, b, c, d, e, f, g, h = coefficients
    denominator = g * i + h * j + 1.0
    with np.errstate(divide="ignore", invalid="ignore"):
        x = (a * i + b * j + c) / denominator
        y = (d * i + e * j + f) / denominator
    return x, y


def _map_rubber_sheet(coefficients: np.ndarray, i: np.ndarray, j: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    a, b, c, d, e, f, g, h = coefficients
    x = a * i * j + b * i + c * j + d
    y = e * i * j + f * i + g * j + h
    return x, y


def _sample(source: Any, x: np.ndarray, y: np.ndarray) -> Any:
    """Copy source pixels at the truncated (x, y) positions into a new buffer."""
    src = np.asarray(source, dtype=np.uint8)
    height, width = src.shape[:2]

    finite = np.isfinite(x) & np.isfinite(y)
    x_index = np.floor(np.where(finite, x, -1.0) + WARP_SNAP_EPSILON)
    y_index = np.floor(np.where(finite, y, -1.0) + WARP_SNAP_EPSILON)

    j, i = np.indices((height, width))
    inside = (
        finite
        & (x_index > 0) & (x_index < width)
        & (y_index > 0) & (y_index < height)
        & (i > 0) & (j > 0)
    )

    output = np.zeros_like(src)
    output[inside] = src[y_index[inside].astype(np.intp), x_index[inside].astype(np.intp)]
    return Image.fromarray(output)


def _warp(image: Any, quadrilateral: Quadrilateral, solver, mapper) -> Any:
    require_image(image)
    if not isinstance(quadrilateral, Quadrilateral):
        raise TypeError(f"Expected Quadrilateral, got {type(quadrilateral)}")
    if image.width <= 0 or image.height <= 0:
        raise ValueError(f"Cannot warp an empty image of size {image.size}")

    quadrilateral.validate()

    source = scale(image, (quadrilateral.width, quadrilateral.height))
    coefficients = solver(quadrilateral, source.width, source.height)

    j, i = np.indices((source.height, source.width), dtype=np.float64)
    x, y = mapper(coefficients, i, j)
    return _sample(source, x, y)


def homography(image: Any, quadrilateral: Quadrilateral) -> Any:
    """
    Project an image onto a quadrilateral with a perspective (homography) warp.

    Args:
        image: PIL Image of any size; scaled to the quadrilateral's bounds first
        quadrilateral: Destination geometry

    Returns:
        New RGBA PIL Image of size (quadrilateral.width, quadrilateral.height)

    Raises:
        ValueError: If the quadrilateral is degenerate or the image is empty
        TypeError: If image not PIL Image
    """
    return _warp(image, quadrilateral, solve_homography, _map_homography)


def rubber_sheet(image: Any, quadrilateral: Quadrilateral) -> Any:
    """
    Project an image onto a quadrilateral with a bilinear (rubber-sheet) warp.

    Args:
        image: PIL Image of any size; scaled to the quadrilateral's bounds first
        quadrilateral: Destination geometry

    Returns:
        New RGBA PIL Image of size (quadrilateral.width, quadrilateral.height)

    Raises:
        ValueError: If the quadrilateral is degenerate or the image is empty
        TypeError: If image not PIL Image
    """
    return _warp(image, quadrilateral, solve_rubber_sheet, _map_rubber_sheet)
