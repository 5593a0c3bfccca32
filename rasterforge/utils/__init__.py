"""Utility functions for rasterforge.

Modules:
- loader: Pillow / raw-bytes <-> PixelBuffer conversion.
- resize: Half-size downsampling with a mirrored pre-blur.
"""
from .loader import load_image, save_image, buffer_from_bytes, buffer_to_bytes
from .resize import half_size

__all__ = [
    "load_image",
    "save_image",
    "buffer_from_bytes",
    "buffer_to_bytes",
    "half_size",
]
