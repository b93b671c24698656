"""
Change layers and change sets: the units of undoable canvas history.

Classes:
    ChangeLayer: One image drawn onto the canvas with a composite operation
    ChangeSet: Ordered, non-empty group of change layers applied as one unit
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

from RP_Libs.pillow_compat import as_rgba, require_image
from RP_Libs.RasterLib.compositing import composite
from RP_Libs.RasterLib.raster_models import CompositeOp


@dataclass(frozen=True)
class ChangeLayer:
    """
    A single visual edit.

    Attributes:
        image: RGBA PIL Image holding the layer's pixels (a private copy)
        operation: How the layer combines with the pixels beneath it
        location: Canvas position of the layer's top-left pixel
    """
    image: Any
    operation: CompositeOp = CompositeOp.SRC_OVER
    location: Tuple[int, int] = (0, 0)

    def __post_init__(self):
        require_image(self.image)
        object.__setattr__(self, "image", as_rgba(self.image))
        object.__setattr__(self, "operation", CompositeOp.from_value(self.operation))
        object.__setattr__(self, "location", (int(self.location[0]), int(self.location[1])))

    @property
    def extent(self) -> Tuple[int, int]:
        """Width and height of the canvas area, from (0, 0), this layer reaches into."""
        x, y = self.location
        return max(0, x + self.image.width), max(0, y + self.image.height)

    def apply(self, destination: Any) -> Any:
        """Return `destination` with this layer composited onto it."""
        return composite(destination, self.image, self.operation, self.location)


class ChangeSet:
    """
    An ordered group of change layers committed together as one undoable step.

    Layers draw in the order they were added, later layers atop earlier ones.
    A change set is frozen when it is committed to a canvas; adding layers to
    a frozen change set raises RuntimeError.

    Example:
        >>> change_set = ChangeSet()
        >>> change_set.add_layer(erase_mask, CompositeOp.DST_OUT)
        >>> change_set.add_layer(moved_selection, location=(10, 10))
        >>> history.commit(change_set)
    """

    def __init__(self, layers: Optional[List[ChangeLayer]] = None):
        self._layers: List[ChangeLayer] = []
        self._frozen = False
        for layer in layers or []:
            self.add(layer)

    def add(self, layer: ChangeLayer) -> None:
        if self._frozen:
            raise RuntimeError("Cannot modify a change set that has been committed")
        if not isinstance(layer, ChangeLayer):
            raise TypeError(f"Expected ChangeLayer, got {type(layer)}")
        self._layers.append(layer)

    def add_layer(
        self,
        image: Any,
        operation: CompositeOp = CompositeOp.SRC_OVER,
        location: Tuple[int, int] = (0, 0),
    ) -> ChangeLayer:
        """Wrap `image` in a ChangeLayer, append it and return it."""
        layer = ChangeLayer(image, operation, location)
        self.add(layer)
        return layer

    def freeze(self) -> None:
        """
        Make the change set immutable.

        Raises:
            ValueError: If the change set has no layers
        """
        if not self._layers:
            raise ValueError("A change set must contain at least one layer")
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def layers(self) -> Tuple[ChangeLayer, ...]:
        return tuple(self._layers)

    @property
    def size(self) -> Tuple[int, int]:
        """Width and height, from the canvas origin, needed to hold every layer."""
        width = max((layer.extent[0] for layer in self._layers), default=0)
        height = max((layer.extent[1] for layer in self._layers), default=0)
        return width, height

    def apply(self, destination: Any) -> Any:
        """Return `destination` with every layer composited onto it in order."""
        result = destination
        for layer in self._layers:
            result = layer.apply(result)
        return result

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[ChangeLayer]:
        return iter(self._layers)

    def __repr__(self) -> str:
        return f"ChangeSet(layers={len(self._layers)}, frozen={self._frozen})"
