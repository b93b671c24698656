"""
Constants and configuration values for Raster Paint.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the engine.
"""

# Raster buffer constants
RGBA_MODE = "RGBA"
TRANSPARENT = (0, 0, 0, 0)

# Canvas history constants
DEFAULT_UNDO_DEPTH = 12
MIN_UNDO_DEPTH = 1

# Fill constants
DEFAULT_FILL_COLOR = (0, 0, 0, 255)

# Warp constants
# Mapped sample coordinates this close to an integer snap to it before truncation
WARP_SNAP_EPSILON = 1e-9

# Dither constants
DEFAULT_DITHERER = "floyd_steinberg"
DEFAULT_COLOR_DEPTH = 27
DEFAULT_GRAY_DEPTH = 4
