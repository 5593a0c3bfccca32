"""Shared fixtures for the rasterforge tests."""

import numpy as np
import pytest

from rasterforge import PixelBuffer


def solid(width, height, rgba):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = rgba
    return PixelBuffer.from_array(pixels)


@pytest.fixture
def solid_red():
    """A 4x4 opaque pure-red image."""
    return solid(4, 4, (255, 0, 0, 255))


@pytest.fixture
def gradient():
    """A 16x8 opaque horizontal gradient from black to white."""
    pixels = np.zeros((8, 16, 4), dtype=np.uint8)
    for x in range(16):
        pixels[:, x, :3] = x * 255 // 15
    pixels[:, :, 3] = 255
    return PixelBuffer.from_array(pixels)


@pytest.fixture
def noisy():
    """A 12x9 random RGBA image with a fixed seed."""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(9, 12, 4), dtype=np.uint8)
    return PixelBuffer.from_array(pixels)


@pytest.fixture
def make_solid():
    """Factory for uniform images: make_solid(width, height, rgba)."""
    return solid
