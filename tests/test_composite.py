import logging

import numpy as np
import pytest

from rasterforge import (
    DimensionMismatch,
    PixelBuffer,
    comp_atop,
    comp_in,
    comp_out,
    comp_over,
    comp_xor,
    composite,
    difference,
)
from rasterforge.composite import COMPOSITE_OPS


@pytest.fixture
def half_red(make_solid):
    """Red at 50% coverage, premultiplied."""
    return make_solid(2, 2, (128, 0, 0, 128))


@pytest.fixture
def opaque_blue(make_solid):
    return make_solid(2, 2, (0, 0, 255, 255))


def test_over_opaque_top_is_identity(noisy):
    top = noisy.copy()
    top.pixels[..., 3] = 255
    expected = top.pixels.copy()
    rng = np.random.default_rng(99)
    bottom = PixelBuffer.from_array(rng.integers(0, 256, size=(9, 12, 4), dtype=np.uint8))
    comp_over(top, bottom)
    assert np.array_equal(top.pixels, expected)


def test_over_transparent_top_shows_bottom(make_solid, noisy):
    top = make_solid(12, 9, (0, 0, 0, 0))
    comp_over(top, noisy)
    assert np.array_equal(top.pixels, noisy.pixels)


@pytest.mark.parametrize(
    "func,expected",
    [
        (comp_over, [128, 0, 127, 255]),
        (comp_in, [128, 0, 0, 128]),
        (comp_out, [0, 0, 0, 0]),
        (comp_atop, [128, 0, 127, 255]),
        (comp_xor, [0, 0, 127, 127]),
    ],
)
def test_operators(func, expected, half_red, opaque_blue):
    func(half_red, opaque_blue)
    assert (half_red.pixels == expected).all()
    # the bottom operand is never written
    assert (opaque_blue.pixels == [0, 0, 255, 255]).all()


def test_in_and_out_with_transparent_bottom(half_red, make_solid):
    clear = make_solid(2, 2, (0, 0, 0, 0))
    inside = half_red.copy()
    comp_in(inside, clear)
    assert (inside.pixels == 0).all()
    comp_out(half_red, clear)
    assert (half_red.pixels == [128, 0, 0, 128]).all()


def test_composite_dispatch(half_red, opaque_blue):
    composite(half_red, opaque_blue, "XOR")
    assert (half_red.pixels == [0, 0, 127, 127]).all()


def test_composite_rejects_unknown_operator(half_red, opaque_blue):
    with pytest.raises(ValueError):
        composite(half_red, opaque_blue, "plus")


@pytest.mark.parametrize("op", COMPOSITE_OPS)
def test_size_mismatch_leaves_both_untouched(op, half_red, make_solid):
    other = make_solid(3, 2, (1, 2, 3, 4))
    before_a = half_red.pixels.copy()
    before_b = other.pixels.copy()
    with pytest.raises(DimensionMismatch) as info:
        composite(half_red, other, op)
    assert info.value.size_a == (2, 2)
    assert info.value.size_b == (3, 2)
    assert np.array_equal(half_red.pixels, before_a)
    assert np.array_equal(other.pixels, before_b)


def test_size_mismatch_is_raised_not_logged(half_red, make_solid, caplog):
    other = make_solid(3, 2, (1, 2, 3, 4))
    with caplog.at_level(logging.DEBUG, logger="rasterforge"):
        with pytest.raises(DimensionMismatch):
            comp_over(half_red, other)
    assert caplog.records == []


def test_difference_with_itself_is_black(noisy):
    difference(noisy, noisy.copy())
    assert (noisy.pixels[..., :3] == 0).all()
    assert (noisy.pixels[..., 3] == 255).all()


def test_difference_values(make_solid):
    a = make_solid(1, 1, (10, 200, 30, 255))
    b = make_solid(1, 1, (50, 100, 30, 255))
    difference(a, b)
    assert a.pixels[0, 0].tolist() == [40, 100, 0, 255]


def test_difference_unpremultiplies(make_solid):
    a = make_solid(1, 1, (64, 0, 0, 128))
    b = make_solid(1, 1, (0, 0, 0, 255))
    difference(a, b)
    assert a.pixels[0, 0].tolist() == [127, 0, 0, 255]


def test_difference_size_mismatch(make_solid):
    a = make_solid(2, 2, (1, 1, 1, 255))
    b = make_solid(2, 3, (1, 1, 1, 255))
    with pytest.raises(DimensionMismatch):
        difference(a, b)
    assert (a.pixels == [1, 1, 1, 255]).all()
