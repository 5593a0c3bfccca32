"""Dithering algorithms and a unified entry-point for application.

Exported API
------------
- apply_dither(buf, method="floyd", **options)

Supported methods
-----------------
- "threshold": fixed cut-off at half brightness
- "random"   : threshold after seeded uniform noise
- "bright"   : threshold chosen to preserve average brightness
- "cluster"  : clustered-dot ordered dithering with a 4x4 matrix
- "floyd"    : Floyd–Steinberg error diffusion to black and white
- "color"    : Floyd–Steinberg over the uniform 8x8x4 color grid

Implementation notes
--------------------
All dithers work in place on a :class:`rasterforge.buffer.PixelBuffer`,
keep alpha unchanged and only ever store RGB values in [0, 255]. The two
error-diffusion dithers are compiled with Numba.
"""
from __future__ import annotations

import logging
from typing import Literal

from ..buffer import PixelBuffer, require_buffer
from .cluster import dither_cluster
from .floyd import dither_color, dither_floyd
from .threshold import dither_bright, dither_random, dither_threshold

logger = logging.getLogger(__name__)

DitherMethod = Literal["threshold", "random", "bright", "cluster", "floyd", "color"]

_METHODS = {
    "threshold": dither_threshold,
    "random": dither_random,
    "bright": dither_bright,
    "cluster": dither_cluster,
    "floyd": dither_floyd,
    "color": dither_color,
}

DITHER_METHODS = tuple(_METHODS)


def apply_dither(buf: PixelBuffer, method: DitherMethod = "floyd", **options) -> None:
    """Apply the selected dithering method to ``buf`` in place.

    Parameters
    ----------
    buf : PixelBuffer
        Raster to dither.
    method : str
        Dithering method to apply (case-insensitive).
    **options
        Passed to the method, e.g. ``seed`` for "random" or ``serpentine``
        for "floyd" and "color".
    """
    require_buffer(buf)
    m = method.lower()
    func = _METHODS.get(m)
    if func is None:
        raise ValueError(f"Unknown dithering method: {method}")
    logger.debug("dither %s on %dx%d", m, buf.width, buf.height)
    func(buf, **options)


__all__ = [
    "DITHER_METHODS",
    "apply_dither",
    "dither_threshold",
    "dither_random",
    "dither_bright",
    "dither_cluster",
    "dither_floyd",
    "dither_color",
]
