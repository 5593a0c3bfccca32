"""Global-threshold dithers: fixed, random-noise and brightness-preserving.

All three compare a pixel's normalized luma, ``(0.30R + 0.59G + 0.11B) / 255``,
against a cut-off and write pure white or pure black to R, G and B. Alpha is
never touched.
"""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..buffer import PixelBuffer, require_buffer
from ..config import DEFAULT_SETTINGS
from ..quantize import luma

logger = logging.getLogger(__name__)

Array = np.ndarray


def normalized_luma(buf: PixelBuffer) -> Array:
    """Return an (H, W) float64 array of luma scaled to [0, 1]."""
    return luma(buf.pixels[:, :, :3]) / 255.0


def apply_mask(buf: PixelBuffer, white: Array) -> None:
    """Write white where ``white`` is True and black elsewhere (RGB only)."""
    value = np.where(white, 255, 0).astype(np.uint8)
    px = buf.pixels
    px[:, :, 0] = value
    px[:, :, 1] = value
    px[:, :, 2] = value


def dither_threshold(buf: PixelBuffer, threshold: Optional[float] = None) -> None:
    """Threshold ``buf`` at ``threshold`` normalized luma (default 0.5)."""
    require_buffer(buf)
    threshold = DEFAULT_SETTINGS.threshold if threshold is None else threshold
    apply_mask(buf, normalized_luma(buf) >= threshold)


def dither_random(
    buf: PixelBuffer,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    noise: Optional[float] = None,
) -> None:
    """Threshold at 0.5 after adding uniform noise in [-noise, noise] per pixel.

    Parameters
    ----------
    buf : PixelBuffer
        Raster to dither in place.
    seed : int | None
        Seed for a fresh generator. Ignored when ``rng`` is given. Defaults
        to the configured seed, so two calls with default arguments produce
        identical output.
    rng : numpy.random.Generator | None
        Generator to draw the noise from. Lets a caller continue one random
        stream over several images.
    noise : float | None
        Noise amplitude (default 0.2).
    """
    require_buffer(buf)
    noise = DEFAULT_SETTINGS.random_noise if noise is None else noise
    if noise < 0:
        raise ValueError("noise must be >= 0")
    if rng is None:
        rng = np.random.default_rng(DEFAULT_SETTINGS.random_seed if seed is None else seed)
    values = normalized_luma(buf)
    values = values + rng.uniform(-noise, noise, size=values.shape)
    apply_mask(buf, values >= 0.5)


def bright_threshold(values: Array) -> float:
    """Pick the cut-off that keeps the share of white pixels equal to the mean luma.

    ``values`` holds normalized luma. The cut-off is the sorted value at rank
    ``floor((1 - mean) * count)``. A rank past the end (an all-black image)
    yields ``inf`` so that no pixel turns white.
    """
    flat = np.sort(values.reshape(-1))
    avg = float(flat.mean())
    rank = int((1.0 - avg) * flat.size)
    if rank >= flat.size:
        return float("inf")
    return float(flat[max(rank, 0)])


def dither_bright(buf: PixelBuffer) -> None:
    """Threshold dithering that preserves the average brightness of ``buf``."""
    require_buffer(buf)
    values = normalized_luma(buf)
    threshold = bright_threshold(values)
    logger.debug("brightness-preserving threshold: %.4f", threshold)
    apply_mask(buf, values >= threshold)


__all__ = [
    "normalized_luma",
    "apply_mask",
    "dither_threshold",
    "dither_random",
    "bright_threshold",
    "dither_bright",
]
