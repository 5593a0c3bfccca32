"""In-memory RGBA raster shared by every rasterforge operation.

Pixels are stored in a single contiguous NumPy array of shape (H, W, 4),
dtype=uint8, row-major with row 0 at the top. Width and height are read off
the array shape, so swapping the array is the only way to change dimensions
and the two can never disagree.
"""
from __future__ import annotations

from typing import Optional, Union

import numpy as np

from .errors import EmptyBuffer, OutOfBounds

Array = np.ndarray

BACKGROUND = (0, 0, 0)


def _checked_bytes(arr: Array) -> Array:
    """Return ``arr`` as uint8, refusing anything a cast would wrap or truncate."""
    if arr.dtype == np.uint8:
        return arr
    if not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"pixel data must be an integer array, got dtype {arr.dtype}")
    if arr.size and (arr.min() < 0 or arr.max() > 255):
        raise ValueError("pixel values must lie within [0, 255]")
    return arr.astype(np.uint8)


class PixelBuffer:
    """A width x height RGBA8 raster.

    Parameters
    ----------
    width, height : int
        Raster dimensions (>=1).
    data : bytes-like | np.ndarray | None
        Optional row-major RGBA bytes of length ``width * height * 4``. The
        bytes are copied. When omitted the raster starts out black and fully
        transparent.
    """

    __slots__ = ("_pixels",)

    def __init__(
        self,
        width: int,
        height: int,
        data: Optional[Union[bytes, bytearray, memoryview, Array]] = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise EmptyBuffer(f"raster must have positive dimensions, got {width}x{height}")
        size = width * height * 4
        if data is None:
            pixels = np.zeros((height, width, 4), dtype=np.uint8)
        else:
            if isinstance(data, np.ndarray):
                flat = data.reshape(-1)
            else:
                flat = np.frombuffer(bytes(data), dtype=np.uint8)
            if flat.size != size:
                raise ValueError(f"expected {size} bytes for {width}x{height} RGBA, got {flat.size}")
            pixels = _checked_bytes(flat).reshape(height, width, 4).copy()
        self._pixels = pixels

    @classmethod
    def from_array(cls, pixels: Array) -> "PixelBuffer":
        """Build a buffer from an (H, W, 4) array. The array is copied."""
        if not isinstance(pixels, np.ndarray) or pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError("pixels must be an RGBA array with shape (H, W, 4)")
        h, w, _ = pixels.shape
        return cls(w, h, pixels)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def pixels(self) -> Array:
        """The (H, W, 4) storage array. Writes go straight to the raster."""
        return self._pixels

    @property
    def data(self) -> Array:
        """Flat view of the raster, ``width * height * 4`` bytes long."""
        return self._pixels.reshape(-1)

    def replace(self, pixels: Array) -> None:
        """Swap in new storage, changing dimensions in the same step."""
        if not isinstance(pixels, np.ndarray) or pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError("pixels must be an RGBA array with shape (H, W, 4)")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise EmptyBuffer("replacement raster has zero area")
        self._pixels = np.ascontiguousarray(_checked_bytes(pixels))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Array:
        """Return the 4-channel view of pixel (x, y).

        Raises
        ------
        OutOfBounds
            If x is not in [0, width) or y is not in [0, height).
        """
        if not self.in_bounds(x, y):
            raise OutOfBounds(f"pixel ({x}, {y}) outside {self.width}x{self.height} raster")
        return self._pixels[y, x]

    def to_rgb(self) -> Array:
        """Un-premultiply the raster against a black background.

        Fully transparent pixels become the background color; all others get
        ``floor(channel * 255 / alpha)`` clamped to [0, 255].

        Returns
        -------
        np.ndarray
            Array of shape (H, W, 3), dtype=uint8.
        """
        rgb = self._pixels[:, :, :3].astype(np.int64)
        alpha = self._pixels[:, :, 3:4].astype(np.int64)
        out = np.empty(rgb.shape, dtype=np.int64)
        opaque = alpha[:, :, 0] != 0
        out[opaque] = (rgb[opaque] * 255) // alpha[opaque]
        out[~opaque] = BACKGROUND
        return np.clip(out, 0, 255).astype(np.uint8)

    def clear_to_black(self) -> None:
        self._pixels.fill(0)

    def reverse_rows(self) -> "PixelBuffer":
        """Return a new buffer with the row order flipped top to bottom."""
        return PixelBuffer.from_array(self._pixels[::-1])

    def copy(self) -> "PixelBuffer":
        return PixelBuffer.from_array(self._pixels)

    def tobytes(self) -> bytes:
        return self._pixels.tobytes()

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def require_buffer(buf: Optional[PixelBuffer]) -> PixelBuffer:
    """Validate the buffer argument of a public operation."""
    if buf is None:
        raise EmptyBuffer("no buffer given")
    if not isinstance(buf, PixelBuffer):
        raise TypeError(f"expected PixelBuffer, got {type(buf).__name__}")
    if buf.width == 0 or buf.height == 0:
        raise EmptyBuffer("buffer has zero area")
    return buf


__all__ = ["PixelBuffer", "BACKGROUND", "require_buffer"]
