"""Color reduction: grayscale conversion, uniform and popularity quantization.

Implementation notes
--------------------
Uniform quantization keeps the top 3 bits of red and green and the top 2
bits of blue, giving an 8x8x4 grid of 256 colors.

Popularity quantization first drops the low bits of every channel, counts
how often each remaining bucket occurs, keeps the most frequent buckets as
the palette and maps every pixel onto its nearest palette entry. The
histogram is a sparse ``Counter`` keyed by bucket index so that the bit
depth is a parameter rather than a fixed 32x32x32 table.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .buffer import PixelBuffer, require_buffer
from .config import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

Array = np.ndarray

LUMA_WEIGHTS = (0.30, 0.59, 0.11)

# Masks used by uniform quantization (and by color error diffusion).
UNIFORM_MASKS = (0xE0, 0xE0, 0xC0)

# Pixels compared against the palette per block in the nearest-color search.
_NEAREST_BLOCK = 1 << 12


def luma(rgb: Array) -> Array:
    """Return the 0.30/0.59/0.11 weighted luma of an (..., 3) array as float64."""
    rgb = rgb.astype(np.float64)
    return LUMA_WEIGHTS[0] * rgb[..., 0] + LUMA_WEIGHTS[1] * rgb[..., 1] + LUMA_WEIGHTS[2] * rgb[..., 2]


def to_grayscale(buf: PixelBuffer) -> None:
    """Replace R, G and B with the rounded luma of each pixel. Alpha is kept."""
    require_buffer(buf)
    px = buf.pixels
    gray = np.clip(np.floor(luma(px[:, :, :3]) + 0.5), 0, 255).astype(np.uint8)
    px[:, :, 0] = gray
    px[:, :, 1] = gray
    px[:, :, 2] = gray


def quantize_uniform(buf: PixelBuffer) -> None:
    """Truncate R and G to 8 levels and B to 4 levels, in place."""
    require_buffer(buf)
    px = buf.pixels
    for c, mask in enumerate(UNIFORM_MASKS):
        px[:, :, c] &= mask


@dataclass
class PaletteColor:
    """One histogram bucket considered for the popularity palette."""

    r: int
    g: int
    b: int
    count: int = 0
    selected: bool = False

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b


def _truncate_bits(px: Array, bits: int) -> None:
    mask = (0xFF << (8 - bits)) & 0xFF
    px[:, :, :3] &= mask


def build_popularity_palette(
    buf: PixelBuffer,
    palette_size: Optional[int] = None,
    bits: Optional[int] = None,
) -> List[PaletteColor]:
    """Pick the most frequent color buckets of ``buf``.

    The buffer is not modified. Pixels are bucketed by the top ``bits`` bits
    of each channel. Buckets are chosen by descending count with ties going
    to the lowest (r, g, b) bucket index. If fewer than ``palette_size``
    buckets occur in the image, the palette is filled up with empty buckets
    taken in ascending index order; those entries have ``count == 0``.

    Parameters
    ----------
    buf : PixelBuffer
        Source raster.
    palette_size : int | None
        Number of palette entries (default 256).
    bits : int | None
        Bits kept per channel (default 5, i.e. 32 levels).

    Returns
    -------
    list[PaletteColor]
        Palette in selection order.
    """
    require_buffer(buf)
    palette_size = DEFAULT_SETTINGS.popularity_palette_size if palette_size is None else palette_size
    bits = DEFAULT_SETTINGS.popularity_bits if bits is None else bits
    if palette_size < 1:
        raise ValueError("palette_size must be >= 1")
    if not 1 <= bits <= 8:
        raise ValueError("bits must be within [1, 8]")

    shift = 8 - bits
    levels = 1 << bits
    idx = buf.pixels[:, :, :3].reshape(-1, 3).astype(np.int64) >> shift
    keys = (idx[:, 0] * levels + idx[:, 1]) * levels + idx[:, 2]
    uniq, counts = np.unique(keys, return_counts=True)
    histogram = Counter(dict(zip(uniq.tolist(), counts.tolist())))

    # Buckets keyed in (i, j, k) scan order, so sorting by (-count, key)
    # reproduces "first maximum wins" selection.
    ranked = sorted(histogram.items(), key=lambda kv: (-kv[1], kv[0]))[:palette_size]
    chosen = [key for key, _ in ranked]
    if len(chosen) < palette_size:
        taken = set(chosen)
        total = levels ** 3
        key = 0
        while len(chosen) < palette_size and key < total:
            if key not in taken:
                chosen.append(key)
            key += 1

    palette = []
    for key in chosen:
        i, rest = divmod(key, levels * levels)
        j, k = divmod(rest, levels)
        palette.append(
            PaletteColor(i << shift, j << shift, k << shift, count=histogram.get(key, 0), selected=True)
        )
    logger.debug(
        "popularity palette: %d entries from %d populated buckets", len(palette), len(histogram)
    )
    return palette


def nearest_palette_indices(rgb: Array, palette: Array) -> Array:
    """Index of the closest palette color (Euclidean RGB) for every row of ``rgb``.

    Ties resolve to the earliest palette entry.
    """
    rgb = rgb.astype(np.int64)
    palette = palette.astype(np.int64)
    out = np.empty(rgb.shape[0], dtype=np.int64)
    for start in range(0, rgb.shape[0], _NEAREST_BLOCK):
        block = rgb[start:start + _NEAREST_BLOCK]
        diff = block[:, None, :] - palette[None, :, :]
        dist = np.einsum("npc,npc->np", diff, diff)
        out[start:start + _NEAREST_BLOCK] = np.argmin(dist, axis=1)
    return out


def quantize_popularity(
    buf: PixelBuffer,
    palette_size: Optional[int] = None,
    bits: Optional[int] = None,
) -> List[PaletteColor]:
    """Reduce ``buf`` to its most popular colors, in place.

    The low bits of every channel are dropped first, then each pixel is
    replaced by its nearest entry of :func:`build_popularity_palette`.
    Alpha is left unchanged.

    Returns
    -------
    list[PaletteColor]
        The palette that was applied.
    """
    require_buffer(buf)
    palette_size = DEFAULT_SETTINGS.popularity_palette_size if palette_size is None else palette_size
    bits = DEFAULT_SETTINGS.popularity_bits if bits is None else bits
    if palette_size < 1:
        raise ValueError("palette_size must be >= 1")
    if not 1 <= bits <= 8:
        raise ValueError("bits must be within [1, 8]")
    _truncate_bits(buf.pixels, bits)
    palette = build_popularity_palette(buf, palette_size=palette_size, bits=bits)

    colors = np.array([p.rgb for p in palette], dtype=np.int64)
    px = buf.pixels
    flat = px[:, :, :3].reshape(-1, 3)
    nearest = nearest_palette_indices(flat, colors)
    px[:, :, :3] = colors[nearest].astype(np.uint8).reshape(px.shape[0], px.shape[1], 3)
    return palette


__all__ = [
    "LUMA_WEIGHTS",
    "UNIFORM_MASKS",
    "PaletteColor",
    "luma",
    "to_grayscale",
    "quantize_uniform",
    "build_popularity_palette",
    "nearest_palette_indices",
    "quantize_popularity",
]
