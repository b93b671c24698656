"""
Raster data models for Raster Paint.

This module defines the core value types shared by every transform and by
the canvas history.

Classes:
    Point: Integer pixel coordinate in image space
    Bounds: Axis-aligned rectangle used for containment tests
    CompositeOp: How a layer's pixels combine with the pixels beneath them

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
    NormalizedRgba: A sequence of 4 floats; R, G, B in 0.0-1.0, alpha in 0-255
    Paint: Either an RgbaColor or a PIL Image used as a tiling texture
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Sequence, Tuple, Union

RgbaColor = Tuple[int, int, int, int]
NormalizedRgba = Sequence[float]
Paint = Union[RgbaColor, Any]


class Point(NamedTuple):
    x: int
    y: int

    def translate(self, dx: int, dy: int) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Bounds:
    """Rectangle of `width` x `height` pixels whose top-left pixel is (x, y)."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def of_size(cls, size: Tuple[int, int]) -> "Bounds":
        """Bounds covering an image of the given (width, height)."""
        return cls(0, 0, int(size[0]), int(size[1]))

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, point: Tuple[int, int]) -> bool:
        px, py = point
        return self.x <= px < self.right and self.y <= py < self.bottom

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


class CompositeOp(Enum):
    """Composite rule applied when a layer is drawn onto the pixels beneath it.

    SRC_OVER draws the layer over the destination (standard alpha compositing).
    DST_OUT erases: destination alpha is reduced by the layer's alpha and the
    destination color is otherwise left untouched.
    """
    SRC_OVER = "src_over"
    DST_OUT = "dst_out"

    @classmethod
    def from_value(cls, value: Union[str, "CompositeOp"]) -> "CompositeOp":
        if isinstance(value, CompositeOp):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if normalized in (member.value, member.name.lower()):
                return member
        raise ValueError(
            f"Unknown composite operation: {value}. "
            f"Valid operations: {', '.join(m.value for m in cls)}"
        )
