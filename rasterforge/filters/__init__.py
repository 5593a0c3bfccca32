"""Convolution filters and a unified entry-point for application.

Exported API
------------
- apply_filter(buf, name, **options)

Supported filters
-----------------
- "box"       : 5x5 box blur, / 25
- "bartlett"  : 5x5 Bartlett (pyramid) blur, / 81
- "gaussian"  : 5x5 binomial blur, / 256
- "gaussian_n": NxN binomial blur for odd N, / kernel sum (option ``n``)
- "edge"      : high-pass derived from Bartlett, applied ``passes`` times
- "enhance"   : unsharp mask derived from Bartlett, single pass
"""
from __future__ import annotations

import logging
from typing import Optional

from ..buffer import PixelBuffer, require_buffer
from ..config import DEFAULT_SETTINGS
from .convolve import convolve
from .kernels import (
    Kernel,
    bartlett_kernel,
    box_kernel,
    check_kernel_size,
    edge_kernel,
    enhance_kernel,
    gaussian_kernel,
)

logger = logging.getLogger(__name__)


def filter_box(buf: PixelBuffer, renormalize_edges: bool = False) -> None:
    convolve(buf, box_kernel(), renormalize_edges)


def filter_bartlett(buf: PixelBuffer, renormalize_edges: bool = False) -> None:
    convolve(buf, bartlett_kernel(), renormalize_edges)


def filter_gaussian(buf: PixelBuffer, renormalize_edges: bool = False) -> None:
    convolve(buf, gaussian_kernel(5), renormalize_edges)


def filter_gaussian_n(buf: PixelBuffer, n: int, renormalize_edges: bool = False) -> None:
    """Blur with an ``n x n`` binomial kernel.

    Raises
    ------
    InvalidKernelSize
        If ``n`` is not a positive odd integer. The buffer is left unchanged.
    """
    require_buffer(buf)
    check_kernel_size(n)
    convolve(buf, gaussian_kernel(n), renormalize_edges)


def filter_edge(buf: PixelBuffer, passes: Optional[int] = None) -> None:
    """High-pass (edge detect) filter.

    The legacy behaviour runs the kernel three times over the image; pass
    ``passes=1`` for a single application.

    The kernel is ``81 * I - bartlett`` over the pyramidal 1-2-3-2-1
    Bartlett weights (sum 81), not the 1-4-6-4-1 binomial weights (sum
    256) of :func:`filter_gaussian`.
    """
    require_buffer(buf)
    passes = DEFAULT_SETTINGS.edge_passes if passes is None else passes
    if passes < 1:
        raise ValueError("passes must be >= 1")
    kernel = edge_kernel()
    for _ in range(passes):
        convolve(buf, kernel)


def filter_enhance(buf: PixelBuffer) -> None:
    """Unsharp-mask enhancement: twice the image minus its Bartlett blur."""
    convolve(buf, enhance_kernel())


_FILTERS = {
    "box": filter_box,
    "bartlett": filter_bartlett,
    "gaussian": filter_gaussian,
    "gaussian_n": filter_gaussian_n,
    "edge": filter_edge,
    "enhance": filter_enhance,
}

FILTER_NAMES = tuple(_FILTERS)


def apply_filter(buf: PixelBuffer, name: str, **options) -> None:
    """Apply the named filter to ``buf`` in place.

    Parameters
    ----------
    buf : PixelBuffer
        Raster to filter.
    name : str
        One of :data:`FILTER_NAMES` (case-insensitive).
    **options
        Passed to the filter, e.g. ``n`` for "gaussian_n".
    """
    require_buffer(buf)
    func = _FILTERS.get(name.lower())
    if func is None:
        raise ValueError(f"Unknown filter: {name}")
    logger.debug("filter %s on %dx%d", name, buf.width, buf.height)
    func(buf, **options)


__all__ = [
    "FILTER_NAMES",
    "Kernel",
    "apply_filter",
    "convolve",
    "filter_box",
    "filter_bartlett",
    "filter_gaussian",
    "filter_gaussian_n",
    "filter_edge",
    "filter_enhance",
]
