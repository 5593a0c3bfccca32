"""Floyd–Steinberg error diffusion, gray (black/white) and color variants.

The diffusion loops are compiled with Numba. Both variants scan rows top to
bottom in serpentine order: even rows left to right, odd rows right to left.
Error is pushed to four neighbours with weights 1/16, 3/16, 5/16 and 7/16:

    left-to-right row          right-to-left row
          *   7                      7   *
      3   5   1                  1   5   3

Every neighbour update is clamped to [0, 255] and stored back as a byte, so
the fractional part of the diffused error is truncated at each step.
Neighbours outside the raster are skipped and their share is lost.
"""
from __future__ import annotations

import numpy as np
from numba import njit

from ..buffer import PixelBuffer, require_buffer
from ..quantize import UNIFORM_MASKS, to_grayscale

Array = np.ndarray

# (dx, dy) per direction; the weight of direction d is (2 * d + 1) / 16.
FS_FORWARD = np.array([[1, 1], [-1, 1], [0, 1], [1, 0]], dtype=np.int64)
FS_BACKWARD = np.array([[-1, 1], [1, 1], [0, 1], [-1, 0]], dtype=np.int64)
FS_WEIGHTS = np.array([1.0, 3.0, 5.0, 7.0], dtype=np.float64) / 16.0


@njit(cache=True)
def _store_clamped(value: float) -> int:
    if value > 255.0:
        return 255
    if value < 0.0:
        return 0
    return int(value)


@njit(cache=True)
def _floyd_gray_impl(work: np.ndarray, forward: np.ndarray, backward: np.ndarray,
                     weights: np.ndarray, serpentine: bool) -> None:
    H, W = work.shape
    for y in range(H):
        if serpentine and (y % 2 == 1):
            start, stop, step_dir = W - 1, -1, -1
            dirs = backward
        else:
            start, stop, step_dir = 0, W, 1
            dirs = forward
        x = start
        while x != stop:
            old = work[y, x]
            new = 255 if old >= 128 else 0
            work[y, x] = new
            err = old - new
            for d in range(4):
                nx = x + dirs[d, 0]
                ny = y + dirs[d, 1]
                if 0 <= nx < W and 0 <= ny < H:
                    work[ny, nx] = _store_clamped(work[ny, nx] + err * weights[d])
            x += step_dir


@njit(cache=True)
def _floyd_color_impl(work: np.ndarray, masks: np.ndarray, forward: np.ndarray,
                      backward: np.ndarray, weights: np.ndarray, serpentine: bool) -> None:
    H, W, C = work.shape
    for y in range(H):
        if serpentine and (y % 2 == 1):
            start, stop, step_dir = W - 1, -1, -1
            dirs = backward
        else:
            start, stop, step_dir = 0, W, 1
            dirs = forward
        x = start
        while x != stop:
            for c in range(C):
                old = work[y, x, c]
                new = old & masks[c]
                work[y, x, c] = new
                err = old - new
                if err == 0:
                    continue
                for d in range(4):
                    nx = x + dirs[d, 0]
                    ny = y + dirs[d, 1]
                    if 0 <= nx < W and 0 <= ny < H:
                        work[ny, nx, c] = _store_clamped(work[ny, nx, c] + err * weights[d])
            x += step_dir


def dither_floyd(buf: PixelBuffer, serpentine: bool = True) -> None:
    """Dither ``buf`` to pure black and white with Floyd–Steinberg, in place.

    The image is converted to grayscale first; the red channel carries the
    gray level through the diffusion and the result is written to R, G and B.
    Alpha is left unchanged.

    Parameters
    ----------
    buf : PixelBuffer
        Raster to dither.
    serpentine : bool
        If True, alternate scan direction by row to reduce artifacts.
    """
    require_buffer(buf)
    to_grayscale(buf)
    px = buf.pixels
    work = px[:, :, 0].astype(np.int64)
    _floyd_gray_impl(work, FS_FORWARD, FS_BACKWARD, FS_WEIGHTS, serpentine)
    out = work.astype(np.uint8)
    px[:, :, 0] = out
    px[:, :, 1] = out
    px[:, :, 2] = out


def dither_color(buf: PixelBuffer, serpentine: bool = True) -> None:
    """Floyd–Steinberg over the uniform 8x8x4 color grid, in place.

    Each pixel is truncated with the same masks as
    :func:`rasterforge.quantize.quantize_uniform`; the per-channel
    truncation error is diffused independently. Alpha is left unchanged.
    """
    require_buffer(buf)
    px = buf.pixels
    work = px[:, :, :3].astype(np.int64)
    masks = np.array(UNIFORM_MASKS, dtype=np.int64)
    _floyd_color_impl(work, masks, FS_FORWARD, FS_BACKWARD, FS_WEIGHTS, serpentine)
    px[:, :, :3] = work.astype(np.uint8)


__all__ = ["dither_floyd", "dither_color", "FS_FORWARD", "FS_BACKWARD", "FS_WEIGHTS"]
