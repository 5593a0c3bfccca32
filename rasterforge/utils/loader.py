"""Image loading and saving utilities using Pillow, with PixelBuffers.

All processing in this project occurs on PixelBuffers. These helpers only
convert between image files (or raw RGBA byte blocks) and buffers.

Pillow hands out rows top to bottom whatever the file stores, so
:func:`load_image` and :func:`save_image` never flip. Raw blocks taken
straight from a bottom-to-top container (uncompressed Targa, BMP) go through
:func:`buffer_from_bytes` / :func:`buffer_to_bytes` with ``bottom_up=True``,
which reverse the rows exactly once in each direction.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from ..buffer import PixelBuffer, require_buffer

logger = logging.getLogger(__name__)

Array = np.ndarray


def load_image(path: Union[str, Path]) -> PixelBuffer:
    """Load an image file into an RGBA PixelBuffer.

    Parameters
    ----------
    path : str | Path
        Path to an image supported by Pillow.

    Returns
    -------
    PixelBuffer
        Raster with rows top to bottom.
    """
    p = Path(path)
    with Image.open(p) as im:
        im = im.convert("RGBA")
        arr = np.array(im, dtype=np.uint8)
    logger.debug("loaded %s (%dx%d)", p, arr.shape[1], arr.shape[0])
    return PixelBuffer.from_array(arr)


def save_image(buf: PixelBuffer, path: Union[str, Path]) -> None:
    """Save a PixelBuffer to an image file via Pillow.

    Parameters
    ----------
    buf : PixelBuffer
        Raster to write.
    path : str | Path
        Output file path. The format is inferred from the extension.
    """
    require_buffer(buf)
    p = Path(path)
    im = Image.fromarray(np.ascontiguousarray(buf.pixels))
    im.save(p)
    logger.debug("saved %s (%dx%d)", p, buf.width, buf.height)


def buffer_from_bytes(width: int, height: int, raw: bytes, bottom_up: bool = False) -> PixelBuffer:
    """Wrap raw RGBA8 bytes as a PixelBuffer.

    Parameters
    ----------
    width, height : int
        Raster dimensions.
    raw : bytes
        ``width * height * 4`` bytes, rows in storage order.
    bottom_up : bool
        True when the first stored row is the bottom of the image.
    """
    buf = PixelBuffer(width, height, raw)
    return buf.reverse_rows() if bottom_up else buf


def buffer_to_bytes(buf: PixelBuffer, bottom_up: bool = False) -> bytes:
    """Serialize a PixelBuffer to raw RGBA8 bytes in the requested row order."""
    require_buffer(buf)
    return (buf.reverse_rows() if bottom_up else buf).tobytes()


__all__ = ["load_image", "save_image", "buffer_from_bytes", "buffer_to_bytes"]
