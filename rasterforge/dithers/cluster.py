"""Clustered-dot ordered dithering with a fixed 4x4 threshold matrix."""
from __future__ import annotations

import numpy as np

from ..buffer import PixelBuffer, require_buffer
from .threshold import apply_mask, normalized_luma

Array = np.ndarray

CLUSTER_MATRIX = np.array(
    [
        [0.7059, 0.3529, 0.5882, 0.2353],
        [0.0588, 0.9412, 0.8235, 0.4118],
        [0.4706, 0.7647, 0.8824, 0.1176],
        [0.1765, 0.5294, 0.2941, 0.6471],
    ],
    dtype=np.float64,
)
CLUSTER_MATRIX.setflags(write=False)


def threshold_map(matrix: Array, height: int, width: int) -> Array:
    """Tile ``matrix`` so that cell (y, x) holds ``matrix[y % n, x % m]``."""
    th, tw = matrix.shape
    ty = (height + th - 1) // th
    tx = (width + tw - 1) // tw
    return np.tile(matrix, (ty, tx))[:height, :width]


def dither_cluster(buf: PixelBuffer) -> None:
    """Write white where normalized luma reaches the tiled matrix value, else black."""
    require_buffer(buf)
    thresh = threshold_map(CLUSTER_MATRIX, buf.height, buf.width)
    apply_mask(buf, normalized_luma(buf) >= thresh)


__all__ = ["CLUSTER_MATRIX", "threshold_map", "dither_cluster"]
