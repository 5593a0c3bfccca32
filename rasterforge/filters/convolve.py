"""Kernel convolution over the RGB channels of a PixelBuffer.

Neighbours that fall outside the raster are left out of the weighted sum,
yet the sum is still divided by the kernel's full divisor. Border pixels
therefore come out darker than the interior; pass
``renormalize_edges=True`` to divide by the in-raster weight sum instead.

Results are computed from a snapshot of the raster into a separate array
and only then written back, so no output pixel ever reads an already
filtered neighbour. Alpha is left unchanged.
"""
from __future__ import annotations

import numpy as np

from ..buffer import PixelBuffer, require_buffer
from .kernels import Kernel

Array = np.ndarray

# Largest weighted sum that still fits comfortably in int64.
_INT_LIMIT = 1 << 62


def _accumulate(src: Array, weights: Array, dtype) -> Array:
    """Sum of shifted copies of ``src`` weighted by ``weights``, zero outside."""
    H, W = src.shape[:2]
    n = weights.shape[0]
    r = n // 2
    pad = ((r, r), (r, r)) + ((0, 0),) * (src.ndim - 2)
    padded = np.pad(src.astype(dtype), pad, mode="constant")
    acc = np.zeros(src.shape, dtype=dtype)
    # Offsets further out than the raster extent only ever see padding.
    for i in range(max(0, r - H + 1), min(n, r + H)):
        for j in range(max(0, r - W + 1), min(n, r + W)):
            w = weights[i, j]
            if w == 0:
                continue
            acc += w * padded[i:i + H, j:j + W]
    return acc


def _scaled_weights(kernel: Kernel) -> Array:
    total = kernel.total
    scaled = np.array([[int(w) / total for w in row] for row in kernel.weights.tolist()])
    return scaled.astype(np.float64)


def convolve(buf: PixelBuffer, kernel: Kernel, renormalize_edges: bool = False) -> None:
    """Filter the RGB channels of ``buf`` with ``kernel``, in place.

    Parameters
    ----------
    buf : PixelBuffer
        Raster to filter.
    kernel : Kernel
        Weights and divisor. Each output channel is
        ``floor(weighted_sum / divisor)`` clamped to [0, 255].
    renormalize_edges : bool
        Divide border pixels by the weight of their in-raster neighbours
        rather than the full divisor. Only meaningful for kernels with
        non-negative weights.
    """
    require_buffer(buf)
    if renormalize_edges and (kernel.weights < 0).any():
        raise ValueError("renormalize_edges needs a kernel with non-negative weights")
    px = buf.pixels
    src = px[:, :, :3].copy()
    ones = np.ones(src.shape[:2], dtype=np.int64)

    if int(np.abs(kernel.weights).sum()) * 255 < _INT_LIMIT:
        acc = _accumulate(src, kernel.weights, np.int64)
        if renormalize_edges:
            out = acc // _accumulate(ones, kernel.weights, np.int64)[:, :, None]
        else:
            out = acc // kernel.total
    else:
        # Very large binomial kernels: scale weights down before summing.
        # Dividing the exact ints first keeps totals beyond float range usable.
        scaled = _scaled_weights(kernel)
        acc = _accumulate(src, scaled, np.float64)
        if renormalize_edges:
            acc = acc / _accumulate(ones, scaled, np.float64)[:, :, None]
        out = np.floor(acc + 1e-9)

    px[:, :, :3] = np.clip(out, 0, 255).astype(np.uint8)


__all__ = ["convolve"]
