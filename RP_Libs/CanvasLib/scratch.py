"""
Scratch buffers a tool draws into before committing to the canvas history.

A scratch holds two canvas-sized RGBA buffers. The add buffer collects new
paint; the remove buffer collects erasures, where any non-transparent pixel
marks canvas pixels to erase (by its alpha). Converting the scratch to a
change set yields the erase layer first and the paint layer second, each
cropped to the region that was actually drawn.
"""

from typing import Any, Optional, Tuple

from RP_Libs.pillow_compat import new_rgba, require_image
from RP_Libs.RasterLib.compositing import composite, paste_top_left
from RP_Libs.RasterLib.raster_models import CompositeOp
from RP_Libs.CanvasLib.change_set import ChangeLayer, ChangeSet


def _validate_size(width: int, height: int) -> Tuple[int, int]:
    width, height = int(width), int(height)
    if width <= 0 or height <= 0:
        raise ValueError(f"Scratch size must be positive, got ({width}, {height})")
    return width, height


def _dirty_layer(buffer: Any, operation: CompositeOp) -> Optional[ChangeLayer]:
    """Layer of the drawn (non-transparent) region of `buffer`, or None if nothing was drawn."""
    bbox = buffer.getchannel("A").getbbox()
    if bbox is None:
        return None
    return ChangeLayer(buffer.crop(bbox), operation, (bbox[0], bbox[1]))


class Scratch:
    """
    Paired add/remove working buffers.

    Args:
        width: Buffer width in pixels
        height: Buffer height in pixels

    Raises:
        ValueError: If either dimension is not positive
    """

    def __init__(self, width: int, height: int):
        self._width, self._height = _validate_size(width, height)
        self.clear()

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def add_scratch(self) -> Any:
        """RGBA buffer for new paint; tools draw into it in place."""
        return self._add_scratch

    @property
    def remove_scratch(self) -> Any:
        """RGBA buffer for erasures; tools draw into it in place."""
        return self._remove_scratch

    def set_add_scratch(self, image: Any) -> None:
        require_image(image)
        self._add_scratch = paste_top_left(image, self.size)

    def set_remove_scratch(self, image: Any) -> None:
        require_image(image)
        self._remove_scratch = paste_top_left(image, self.size)

    def clear_add_scratch(self) -> None:
        self._add_scratch = new_rgba(self.size)

    def clear_remove_scratch(self) -> None:
        self._remove_scratch = new_rgba(self.size)

    def clear(self) -> None:
        self.clear_add_scratch()
        self.clear_remove_scratch()

    def set_size(self, width: int, height: int) -> None:
        """Resize both buffers, keeping their content anchored at the top-left."""
        self._width, self._height = _validate_size(width, height)
        self._add_scratch = paste_top_left(self._add_scratch, self.size)
        self._remove_scratch = paste_top_left(self._remove_scratch, self.size)

    def has_changes(self) -> bool:
        return (
            self._add_scratch.getchannel("A").getbbox() is not None
            or self._remove_scratch.getchannel("A").getbbox() is not None
        )

    def get_change_set(self) -> Optional[ChangeSet]:
        """
        Build a change set from the drawn regions of both buffers.

        Returns:
            ChangeSet with the erase layer (DST_OUT) before the paint layer
            (SRC_OVER), or None if neither buffer has been drawn on
        """
        change_set = ChangeSet()

        remove_layer = _dirty_layer(self._remove_scratch, CompositeOp.DST_OUT)
        if remove_layer is not None:
            change_set.add(remove_layer)

        add_layer = _dirty_layer(self._add_scratch, CompositeOp.SRC_OVER)
        if add_layer is not None:
            change_set.add(add_layer)

        return change_set if len(change_set) else None

    def apply(self, image: Any) -> Any:
        """Preview: return `image` with the erasures and then the paint applied."""
        erased = composite(image, self._remove_scratch, CompositeOp.DST_OUT)
        return composite(erased, self._add_scratch, CompositeOp.SRC_OVER)

    def __repr__(self) -> str:
        return f"Scratch(width={self._width}, height={self._height})"
