"""Convolution kernels.

Kernels are square integer weight grids paired with the divisor applied to
the weighted sum. Builders are pure functions of their arguments and are
cached, so repeated filter calls share one read-only kernel instance.

Low-pass kernels divide by their own weight sum. High-pass kernels are
derived from a low-pass ``base`` as ``center * base.total * I - base``, where
``I`` is the impulse kernel, and divide by ``base.total``:

- center 1 gives an edge detector (weights sum to 0)
- center 2 gives an unsharp-mask enhancer (weights sum to ``base.total``)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from math import comb

import numpy as np

from ..errors import InvalidKernelSize

logger = logging.getLogger(__name__)

Array = np.ndarray

_INT64_SAFE = 1 << 62


@dataclass(frozen=True, eq=False)
class Kernel:
    weights: Array
    total: int

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def radius(self) -> int:
        return self.weights.shape[0] // 2


def _make(weights: Array, total: int) -> Kernel:
    weights = np.ascontiguousarray(weights)
    weights.setflags(write=False)
    return Kernel(weights, int(total))


def _separable(row: list[int]) -> Kernel:
    total = sum(row) ** 2
    # Past n = 31 the weights no longer fit in int64; keep exact Python ints.
    dtype = np.int64 if total < _INT64_SAFE else object
    r = np.array(row, dtype=dtype)
    return _make(np.outer(r, r), total)


def check_kernel_size(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0 or n % 2 == 0:
        raise InvalidKernelSize(f"kernel size must be a positive odd integer, got {n!r}")


def binomial_row(n: int) -> list[int]:
    """Row ``n - 1`` of Pascal's triangle, e.g. [1, 4, 6, 4, 1] for n=5."""
    return [comb(n - 1, i) for i in range(n)]


@lru_cache(maxsize=None)
def box_kernel() -> Kernel:
    return _make(np.ones((5, 5), dtype=np.int64), 25)


@lru_cache(maxsize=None)
def bartlett_kernel() -> Kernel:
    return _separable([1, 2, 3, 2, 1])


@lru_cache(maxsize=16)
def gaussian_kernel(n: int = 5) -> Kernel:
    """Binomial approximation of a Gaussian: ``C(n-1, i) * C(n-1, j)``."""
    check_kernel_size(n)
    kernel = _separable(binomial_row(int(n)))
    logger.debug("gaussian kernel %dx%d, sum %d", n, n, kernel.total)
    return kernel


def _impulse(n: int, center: int) -> Array:
    k = np.zeros((n, n), dtype=np.int64)
    k[n // 2, n // 2] = center
    return k


@lru_cache(maxsize=8)
def high_pass_kernel(center: int = 1) -> Kernel:
    """``center * 81 * I - bartlett``, divided by the Bartlett sum (81)."""
    base = bartlett_kernel()
    weights = base.total * _impulse(base.size, center) - base.weights
    logger.debug("high pass kernel (center %d):\n%s", center, weights)
    return _make(weights, base.total)


def edge_kernel() -> Kernel:
    return high_pass_kernel(1)


def enhance_kernel() -> Kernel:
    return high_pass_kernel(2)


__all__ = [
    "Kernel",
    "check_kernel_size",
    "binomial_row",
    "box_kernel",
    "bartlett_kernel",
    "gaussian_kernel",
    "high_pass_kernel",
    "edge_kernel",
    "enhance_kernel",
]
