"""rasterforge: pixel transformations on in-memory RGBA rasters.

Quantization, dithering, convolution filters, Porter–Duff compositing and
half-size downsampling, all operating on a :class:`PixelBuffer`.
"""
from __future__ import annotations

import logging

from .buffer import PixelBuffer
from .composite import (
    composite,
    comp_atop,
    comp_in,
    comp_out,
    comp_over,
    comp_xor,
    difference,
)
from .config import DEFAULT_SETTINGS, Settings
from .dithers import (
    apply_dither,
    dither_bright,
    dither_cluster,
    dither_color,
    dither_floyd,
    dither_random,
    dither_threshold,
)
from .errors import DimensionMismatch, EmptyBuffer, InvalidKernelSize, OutOfBounds, RasterError
from .filters import (
    apply_filter,
    filter_bartlett,
    filter_box,
    filter_edge,
    filter_enhance,
    filter_gaussian,
    filter_gaussian_n,
)
from .quantize import PaletteColor, quantize_popularity, quantize_uniform, to_grayscale
from .utils.loader import buffer_from_bytes, buffer_to_bytes, load_image, save_image
from .utils.resize import half_size

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "PixelBuffer",
    "PaletteColor",
    "Settings",
    "DEFAULT_SETTINGS",
    "RasterError",
    "DimensionMismatch",
    "EmptyBuffer",
    "InvalidKernelSize",
    "OutOfBounds",
    "to_grayscale",
    "quantize_uniform",
    "quantize_popularity",
    "apply_dither",
    "dither_threshold",
    "dither_random",
    "dither_bright",
    "dither_cluster",
    "dither_floyd",
    "dither_color",
    "apply_filter",
    "filter_box",
    "filter_bartlett",
    "filter_gaussian",
    "filter_gaussian_n",
    "filter_edge",
    "filter_enhance",
    "composite",
    "comp_over",
    "comp_in",
    "comp_out",
    "comp_atop",
    "comp_xor",
    "difference",
    "half_size",
    "load_image",
    "save_image",
    "buffer_from_bytes",
    "buffer_to_bytes",
]
