"""
Alpha compositing of raster buffers.

Every function here returns a new RGBA image; neither argument is modified.
Layers may be positioned anywhere relative to the destination: pixels that
fall outside the destination are clipped, uncovered destination pixels are
left as they are.
"""

from typing import Any, Tuple

import numpy as np

from RP_Libs.constants import RGBA_MODE
from RP_Libs.pillow_compat import Image, new_rgba, require_image
from RP_Libs.RasterLib.raster_models import CompositeOp


def _positioned_overlay(source: Any, size: Tuple[int, int], location: Tuple[int, int]) -> Any:
    """Place `source` on a transparent buffer of `size` at `location`, clipping as needed."""
    if source.mode != RGBA_MODE:
        source = source.convert(RGBA_MODE)

    if source.size == tuple(size) and tuple(location) == (0, 0):
        return source

    overlay = new_rgba(size)
    overlay.paste(source, (int(location[0]), int(location[1])))
    return overlay


def composite(
    destination: Any,
    source: Any,
    operation: CompositeOp = CompositeOp.SRC_OVER,
    location: Tuple[int, int] = (0, 0),
) -> Any:
    """
    Draw `source` onto `destination` using a composite operation.

    Args:
        destination: PIL Image (converted to RGBA) receiving the layer
        source: PIL Image layer to draw
        operation: CompositeOp.SRC_OVER to draw over, CompositeOp.DST_OUT to erase
        location: Position of the layer's top-left pixel on the destination

    Returns:
        New RGBA PIL Image the size of `destination`

    Raises:
        TypeError: If either argument is not a PIL Image
    """
    require_image(destination, "destination")
    require_image(source, "source")

    base = destination if destination.mode == RGBA_MODE else destination.convert(RGBA_MODE)
    overlay = _positioned_overlay(source, base.size, location)

    if operation is CompositeOp.SRC_OVER:
        return Image.alpha_composite(base, overlay)

    if operation is CompositeOp.DST_OUT:
        return _destination_out(base, overlay)

    raise ValueError(f"Unsupported composite operation: {operation}")


def _destination_out(base: Any, overlay: Any) -> Any:
    dst = np.array(base, dtype=np.uint32)
    src_alpha = np.asarray(overlay, dtype=np.uint32)[..., 3]

    dst[..., 3] = (dst[..., 3] * (255 - src_alpha) + 127) // 255
    # Fully erased pixels carry no color
    dst[dst[..., 3] == 0] = 0

    return Image.fromarray(dst.astype(np.uint8))


def paste_top_left(image: Any, size: Tuple[int, int]) -> Any:
    """
    Copy `image` into a new transparent RGBA buffer of `size` at (0, 0).

    Content beyond `size` is cropped; area beyond the image stays transparent.
    Pixels are copied, not composited.
    """
    require_image(image)
    resized = new_rgba(size)
    resized.paste(image.convert(RGBA_MODE) if image.mode != RGBA_MODE else image, (0, 0))
    return resized
