"""
Quadrilateral model used as the destination geometry of image warps.

Corners are integer pixel coordinates, so the bounding box is inclusive:
a quadrilateral whose corners are (0, 0), (W-1, 0), (W-1, H-1), (0, H-1)
covers exactly W x H pixels.
"""

from dataclasses import dataclass, replace
from itertools import combinations
from typing import Tuple

from RP_Libs.RasterLib.raster_models import Bounds, Point

CORNER_NAMES = ("top_left", "top_right", "bottom_right", "bottom_left")


def _cross(o: Point, a: Point, b: Point) -> int:
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def _segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    d1 = _cross(q1, q2, p1)
    d2 = _cross(q1, q2, p2)
    d3 = _cross(p1, p2, q1)
    d4 = _cross(p1, p2, q2)
    return ((d1 > 0) != (d2 > 0)) and ((d3 > 0) != (d4 > 0)) and 0 not in (d1, d2, d3, d4)


@dataclass(frozen=True)
class Quadrilateral:
    """Four ordered corners: top-left, top-right, bottom-right, bottom-left."""
    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point

    def __post_init__(self):
        for name in CORNER_NAMES:
            value = getattr(self, name)
            if not isinstance(value, Point):
                object.__setattr__(self, name, Point(int(value[0]), int(value[1])))

    @classmethod
    def from_bounds(cls, bounds: Bounds) -> "Quadrilateral":
        """Rectangle covering every pixel of `bounds`."""
        right = bounds.x + bounds.width - 1
        bottom = bounds.y + bounds.height - 1
        return cls(
            Point(bounds.x, bounds.y),
            Point(right, bounds.y),
            Point(right, bottom),
            Point(bounds.x, bottom),
        )

    @property
    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return self.top_left, self.top_right, self.bottom_right, self.bottom_left

    @property
    def left(self) -> int:
        return min(self.top_left.x, self.bottom_left.x)

    @property
    def top(self) -> int:
        return min(self.top_left.y, self.top_right.y)

    @property
    def right(self) -> int:
        return max(self.top_right.x, self.bottom_right.x)

    @property
    def bottom(self) -> int:
        return max(self.bottom_left.y, self.bottom_right.y)

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.left, self.top, self.width, self.height)

    def translate(self, dx: int, dy: int) -> "Quadrilateral":
        return Quadrilateral(*(corner.translate(dx, dy) for corner in self.corners))

    def relative_to(self, origin: Tuple[int, int]) -> "Quadrilateral":
        """The same shape expressed in coordinates whose (0, 0) is `origin`."""
        return self.translate(-int(origin[0]), -int(origin[1]))

    def validation_errors(self) -> list:
        """Return a list of reasons this quadrilateral cannot be warped onto (empty if valid)."""
        errors = []

        for a, b, c in combinations(self.corners, 3):
            if _cross(a, b, c) == 0:
                errors.append(f"corners {a}, {b} and {c} are collinear")

        tl, tr, br, bl = self.corners
        if _segments_intersect(tl, tr, br, bl) or _segments_intersect(tr, br, bl, tl):
            errors.append("edges cross each other")

        if tl.x >= tr.x or tl.x >= br.x:
            errors.append("top-left corner must stay left of the top-right and bottom-right corners")

        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def validate(self) -> None:
        """
        Raise ValueError if the quadrilateral is degenerate.

        Raises:
            ValueError: If three corners are collinear, edges cross, or the
                        top-left corner is not left of the right-hand corners
        """
        errors = self.validation_errors()
        if errors:
            raise ValueError(f"Degenerate quadrilateral {self.corners}: {'; '.join(errors)}")

    def move_corner(self, corner: str, point: Tuple[int, int]) -> "Quadrilateral":
        """
        Return a copy with one corner moved, or this quadrilateral unchanged
        if the move would make it degenerate.
        """
        if corner not in CORNER_NAMES:
            raise ValueError(f"Unknown corner: {corner}. Valid corners: {', '.join(CORNER_NAMES)}")

        moved = replace(self, **{corner: Point(int(point[0]), int(point[1]))})
        return moved if moved.is_valid() else self
