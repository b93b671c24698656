"""
Pytest configuration and shared fixtures for Raster Paint tests.

This module provides shared test images used across multiple test modules.
"""

import random

import pytest
from PIL import Image


@pytest.fixture
def gradient_image():
    """16x12 RGBA image with a horizontal red and vertical green gradient."""
    image = Image.new("RGBA", (16, 12))
    pixels = image.load()
    for y in range(12):
        for x in range(16):
            pixels[x, y] = (x * 16, y * 20, 128, 255)
    return image


@pytest.fixture
def noise_image():
    """Deterministic 20x15 image of random opaque and translucent pixels."""
    rng = random.Random(1234)
    image = Image.new("RGBA", (20, 15))
    pixels = image.load()
    for y in range(15):
        for x in range(20):
            pixels[x, y] = (
                rng.randrange(256),
                rng.randrange(256),
                rng.randrange(256),
                rng.choice((255, 255, 128, 0)),
            )
    return image
