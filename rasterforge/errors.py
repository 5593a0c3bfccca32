"""Exception types raised by rasterforge operations."""
from __future__ import annotations


class RasterError(Exception):
    """Base class for all rasterforge errors."""


class DimensionMismatch(RasterError, ValueError):
    """Two operand buffers do not share the same width and height."""

    def __init__(self, op: str, size_a: tuple[int, int], size_b: tuple[int, int]):
        self.op = op
        self.size_a = size_a
        self.size_b = size_b
        super().__init__(
            f"{op}: images not the same size ({size_a[0]}x{size_a[1]} vs {size_b[0]}x{size_b[1]})"
        )


class InvalidKernelSize(RasterError, ValueError):
    """Kernel size is not a positive odd integer."""


class OutOfBounds(RasterError, IndexError):
    """Pixel coordinates fall outside the raster."""


class EmptyBuffer(RasterError, ValueError):
    """A missing or zero-area buffer was given to an operation."""
