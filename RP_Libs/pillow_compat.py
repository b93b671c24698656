"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace)
and expose the module the engine uses under a stable name.

This module loads the Pillow-provided module via importlib and re-exports
`Image`, plus a couple of small helpers for building and checking RGBA
raster buffers.
"""
from importlib import import_module
from types import ModuleType
from typing import Any, Optional, Tuple

from RP_Libs.constants import RGBA_MODE, TRANSPARENT


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil_image = _import("PIL.Image")

if _pil_image is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image

# Nearest-neighbour resampling; `Image.Resampling` only exists on Pillow >= 9.1
NEAREST = getattr(Image, "Resampling", Image).NEAREST


def new_rgba(size: Tuple[int, int], color=TRANSPARENT) -> Any:
    """Create a new RGBA buffer of the given (width, height), transparent by default."""
    return Image.new(RGBA_MODE, size, color)


def require_image(image: Any, name: str = "image") -> None:
    """Raise TypeError unless `image` looks like a PIL Image."""
    if not hasattr(image, "mode") or not hasattr(image, "size"):
        raise TypeError(f"Expected PIL Image for {name}, got {type(image)}")


def as_rgba(image: Any) -> Any:
    """Return `image` converted to RGBA (a copy if it already is)."""
    require_image(image)
    if image.mode != RGBA_MODE:
        return image.convert(RGBA_MODE)
    return image.copy()
