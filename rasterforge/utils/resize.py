"""Half-size downsampling for PixelBuffers.

The RGB channels are first blurred with a 3x3 binomial kernel
(1 2 1 / 2 4 2 / 1 2 1, divided by 16) whose out-of-range taps are mirrored
back into the raster. Then one pixel of every 2x2 block is kept: the
bottom-right one, which carries its own alpha along. A trailing odd row or
column has no partner and is dropped.
"""
from __future__ import annotations

import logging

import numpy as np

from ..buffer import PixelBuffer, require_buffer
from ..errors import EmptyBuffer

logger = logging.getLogger(__name__)

Array = np.ndarray

HALF_SIZE_KERNEL = np.array([[1, 2, 1], [2, 4, 2], [1, 2, 1]], dtype=np.int64)
HALF_SIZE_KERNEL.setflags(write=False)
HALF_SIZE_TOTAL = 16


def blur_mirrored(rgb: Array) -> Array:
    """Blur an (H, W, 3) array with the 3x3 kernel, reflecting at the borders.

    Index -1 maps to 1 and index ``n`` to ``n - 2``. Needs H and W >= 2.
    """
    H, W, _ = rgb.shape
    padded = np.pad(rgb.astype(np.int64), ((1, 1), (1, 1), (0, 0)), mode="reflect")
    acc = np.zeros((H, W, 3), dtype=np.int64)
    for i in range(3):
        for j in range(3):
            acc += HALF_SIZE_KERNEL[i, j] * padded[i:i + H, j:j + W]
    return (acc // HALF_SIZE_TOTAL).astype(np.uint8)


def half_size(buf: PixelBuffer) -> None:
    """Halve the dimensions of ``buf`` to ``floor(w/2) x floor(h/2)``.

    Storage and dimensions are replaced together.

    Raises
    ------
    EmptyBuffer
        If either dimension is below 2, since the result would be empty.
    """
    require_buffer(buf)
    H, W = buf.height, buf.width
    if H < 2 or W < 2:
        raise EmptyBuffer(f"cannot halve a {W}x{H} raster")

    src = buf.pixels
    blurred = np.empty_like(src)
    blurred[:, :, :3] = blur_mirrored(src[:, :, :3])
    blurred[:, :, 3] = src[:, :, 3]

    out = blurred[1::2, 1::2][: H // 2, : W // 2].copy()
    buf.replace(out)
    logger.debug("half size: %dx%d -> %dx%d", W, H, buf.width, buf.height)


__all__ = ["HALF_SIZE_KERNEL", "HALF_SIZE_TOTAL", "blur_mirrored", "half_size"]
