"""Porter–Duff compositing and image difference.

Buffers hold premultiplied RGBA. For the binary operators the receiving
buffer ``a`` is the top layer and ``b`` the bottom layer; the result is
written into ``a``. With colors and alpha scaled to [0, 1]:

    over : C = Ca + Cb(1 - aa)           a = aa + ab(1 - aa)
    in   : C = Ca ab                      a = aa ab
    out  : C = Ca (1 - ab)                a = aa (1 - ab)
    atop : C = Ca ab + Cb (1 - aa)        a = ab
    xor  : C = Ca (1 - ab) + Cb (1 - aa)  a = aa (1 - ab) + ab (1 - aa)

Results are scaled back to bytes with round-to-nearest and clamped.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Literal, Tuple

import numpy as np

from .buffer import PixelBuffer, require_buffer
from .errors import DimensionMismatch

logger = logging.getLogger(__name__)

Array = np.ndarray

CompositeOp = Literal["over", "in", "out", "atop", "xor"]

# (fa, fb) as functions of (aa, ab): result = fa * A + fb * B, for every channel.
_FACTORS: Dict[str, Callable[[Array, Array], Tuple[Array, Array]]] = {
    "over": lambda aa, ab: (np.ones_like(aa), 1.0 - aa),
    "in": lambda aa, ab: (ab, np.zeros_like(aa)),
    "out": lambda aa, ab: (1.0 - ab, np.zeros_like(aa)),
    "atop": lambda aa, ab: (ab, 1.0 - aa),
    "xor": lambda aa, ab: (1.0 - ab, 1.0 - aa),
}

COMPOSITE_OPS = tuple(_FACTORS)


def check_same_size(op: str, a: PixelBuffer, b: PixelBuffer) -> None:
    require_buffer(a)
    require_buffer(b)
    if a.size != b.size:
        raise DimensionMismatch(op, a.size, b.size)


def composite(a: PixelBuffer, b: PixelBuffer, op: CompositeOp = "over") -> None:
    """Composite ``a`` with ``b`` using the Porter–Duff operator ``op``, into ``a``.

    Raises
    ------
    DimensionMismatch
        If the buffers differ in size; neither buffer is modified.
    """
    factors = _FACTORS.get(op.lower())
    if factors is None:
        raise ValueError(f"Unknown composite operator: {op}")
    check_same_size(op.lower(), a, b)

    pa = a.pixels.astype(np.float64) / 255.0
    pb = b.pixels.astype(np.float64) / 255.0
    fa, fb = factors(pa[:, :, 3:4], pb[:, :, 3:4])
    # Alpha follows the same equation as the premultiplied colors.
    out = pa * fa + pb * fb
    a.pixels[...] = np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)
    logger.debug("composite %s on %dx%d", op.lower(), a.width, a.height)


def comp_over(a: PixelBuffer, b: PixelBuffer) -> None:
    composite(a, b, "over")


def comp_in(a: PixelBuffer, b: PixelBuffer) -> None:
    composite(a, b, "in")


def comp_out(a: PixelBuffer, b: PixelBuffer) -> None:
    composite(a, b, "out")


def comp_atop(a: PixelBuffer, b: PixelBuffer) -> None:
    composite(a, b, "atop")


def comp_xor(a: PixelBuffer, b: PixelBuffer) -> None:
    composite(a, b, "xor")


def difference(a: PixelBuffer, b: PixelBuffer) -> None:
    """Replace ``a`` with ``|rgb(a) - rgb(b)|`` of the un-premultiplied colors.

    Alpha of the result is 255 everywhere.
    """
    check_same_size("difference", a, b)
    rgb_a = a.to_rgb().astype(np.int16)
    rgb_b = b.to_rgb().astype(np.int16)
    px = a.pixels
    px[:, :, :3] = np.abs(rgb_a - rgb_b).astype(np.uint8)
    px[:, :, 3] = 255


__all__ = [
    "COMPOSITE_OPS",
    "check_same_size",
    "composite",
    "comp_over",
    "comp_in",
    "comp_out",
    "comp_atop",
    "comp_xor",
    "difference",
]
