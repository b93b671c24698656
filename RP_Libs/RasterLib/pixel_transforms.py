"""
Per-pixel color transforms.

A pixel transform maps one RGBA color to another independently of the
pixel's position. `apply_pixel_transform` runs one over an image (or over
the pixels selected by a mask) and returns a new image.

Classes:
    InvertPixelTransform: Inverts color channels, preserving alpha
    BrightnessPixelTransform: Adds a delta to every color channel
    TransparencyPixelTransform: Adds a delta to the alpha channel
    RemoveAlphaPixelTransform: Saturates translucent alpha to 0 or 255

Functions:
    apply_pixel_transform: Apply a pixel transform to an image
    get_pixel_transform: Build a pixel transform from its name
"""

from typing import Any, Optional

from RP_Libs.pillow_compat import as_rgba, require_image
from RP_Libs.RasterLib.raster_models import RgbaColor


def _clamp(value: int) -> int:
    return 0 if value < 0 else 255 if value > 255 else value


class InvertPixelTransform:
    def __call__(self, rgba: RgbaColor) -> RgbaColor:
        r, g, b, a = rgba
        return 255 - r, 255 - g, 255 - b, a


class BrightnessPixelTransform:
    """
    Adjust brightness by adding `delta` to each color channel.

    A delta of -255 makes every pixel black, +255 makes every pixel white;
    alpha is preserved.
    """

    def __init__(self, delta: int):
        self.delta = int(delta)

    def __call__(self, rgba: RgbaColor) -> RgbaColor:
        r, g, b, a = rgba
        return _clamp(r + self.delta), _clamp(g + self.delta), _clamp(b + self.delta), a


class TransparencyPixelTransform:
    """Adjust opacity by adding `delta` to the alpha channel (saturating)."""

    def __init__(self, delta: int):
        self.delta = int(delta)

    def __call__(self, rgba: RgbaColor) -> RgbaColor:
        r, g, b, a = rgba
        return r, g, b, _clamp(a + self.delta)


class RemoveAlphaPixelTransform:
    """
    Saturate the alpha of translucent pixels.

    Fully opaque and fully transparent pixels are untouched; any other pixel
    becomes transparent when `make_transparent` is True, opaque otherwise.
    """

    def __init__(self, make_transparent: bool = False):
        self.make_transparent = bool(make_transparent)

    def __call__(self, rgba: RgbaColor) -> RgbaColor:
        r, g, b, a = rgba
        if a not in (0, 255):
            a = 0 if self.make_transparent else 255
        return r, g, b, a


def apply_pixel_transform(image: Any, transform: Any, mask: Optional[Any] = None) -> Any:
    """
    Apply a pixel transform to every pixel of an image.

    Args:
        image: PIL Image to process (converted to RGBA)
        transform: Callable mapping an RGBA tuple to an RGBA tuple
        mask: Optional PIL Image ("L" or "1") the size of `image`; only pixels
              where the mask is nonzero are transformed

    Returns:
        A new RGBA PIL Image

    Raises:
        TypeError: If image or mask is not a PIL Image, or transform not callable
        ValueError: If mask size differs from image size
    """
    if not callable(transform):
        raise TypeError(f"transform must be callable, got {type(transform)}")

    transformed = as_rgba(image)
    pixels = transformed.load()

    mask_pixels = None
    if mask is not None:
        require_image(mask, "mask")
        if mask.size != transformed.size:
            raise ValueError(f"mask size {mask.size} does not match image size {transformed.size}")
        mask_pixels = mask.convert("L").load()

    for y in range(transformed.height):
        for x in range(transformed.width):
            if mask_pixels is None or mask_pixels[x, y]:
                pixels[x, y] = tuple(transform(pixels[x, y]))

    return transformed


_PIXEL_TRANSFORMS = ("invert", "brightness", "transparency", "remove_alpha")


def get_pixel_transform(name: str, delta: int = 0, make_transparent: bool = False) -> Any:
    """
    Build a pixel transform by name.

    Args:
        name: One of 'invert', 'brightness', 'transparency', 'remove_alpha'
        delta: Channel delta for 'brightness' and 'transparency'
        make_transparent: Saturation direction for 'remove_alpha'

    Raises:
        ValueError: If name is unknown
    """
    name = str(name).strip().lower()

    if name == "invert":
        return InvertPixelTransform()
    elif name == "brightness":
        return BrightnessPixelTransform(delta)
    elif name == "transparency":
        return TransparencyPixelTransform(delta)
    elif name == "remove_alpha":
        return RemoveAlphaPixelTransform(make_transparent)
    else:
        raise ValueError(
            f"Unknown pixel transform: {name}. "
            f"Valid transforms: {', '.join(_PIXEL_TRANSFORMS)}"
        )
