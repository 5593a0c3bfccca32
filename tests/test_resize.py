import numpy as np
import pytest

from rasterforge import EmptyBuffer, PixelBuffer, half_size


def _reference_half_size(pixels):
    """Direct loop version: mirrored 3x3 blur, then keep odd (x, y) samples."""
    H, W, _ = pixels.shape
    mask = [[1, 2, 1], [2, 4, 2], [1, 2, 1]]
    src = pixels.astype(np.int64)
    blurred = pixels.copy()
    for y in range(H):
        for x in range(W):
            acc = np.zeros(3, dtype=np.int64)
            for i in (-1, 0, 1):
                for j in (-1, 0, 1):
                    yy = y + i if 0 <= y + i < H else y - i
                    xx = x + j if 0 <= x + j < W else x - j
                    acc += mask[1 + i][1 + j] * src[yy, xx, :3]
            blurred[y, x, :3] = acc // 16
    return blurred[1::2, 1::2][: H // 2, : W // 2]


@pytest.mark.parametrize("w,h", [(4, 4), (5, 7), (2, 3), (9, 2)])
def test_output_dimensions(w, h):
    buf = PixelBuffer(w, h)
    half_size(buf)
    assert buf.size == (w // 2, h // 2)
    assert len(buf.data) == (w // 2) * (h // 2) * 4


def test_uniform_color_survives(make_solid):
    buf = make_solid(6, 4, (12, 34, 56, 200))
    half_size(buf)
    assert buf.size == (3, 2)
    assert (buf.pixels == [12, 34, 56, 200]).all()


def test_two_by_two_mirrors_borders():
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[..., 0] = [[0, 16], [32, 48]]
    pixels[..., 3] = [[1, 2], [3, 4]]
    buf = PixelBuffer.from_array(pixels)
    half_size(buf)
    assert buf.size == (1, 1)
    # every tap of the mirrored window lands on one of the four pixels, each weighted 4
    assert buf.pixels[0, 0].tolist() == [24, 0, 0, 4]


def test_matches_reference(noisy):
    expected = _reference_half_size(noisy.pixels)
    half_size(noisy)
    assert np.array_equal(noisy.pixels, expected)


def test_odd_trailing_row_and_column_are_dropped():
    pixels = np.zeros((5, 5, 4), dtype=np.uint8)
    pixels[4, :, :] = 255
    pixels[:, 4, :] = 255
    buf = PixelBuffer.from_array(pixels)
    expected = _reference_half_size(pixels)
    half_size(buf)
    assert buf.size == (2, 2)
    assert np.array_equal(buf.pixels, expected)


@pytest.mark.parametrize("w,h", [(1, 4), (4, 1), (1, 1)])
def test_too_small_to_halve(w, h):
    buf = PixelBuffer(w, h)
    with pytest.raises(EmptyBuffer):
        half_size(buf)
    assert buf.size == (w, h)
