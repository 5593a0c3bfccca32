import numpy as np
import pytest

from rasterforge import PixelBuffer, quantize_popularity, quantize_uniform, to_grayscale
from rasterforge.quantize import build_popularity_palette, nearest_palette_indices


def _row(*colors):
    pixels = np.array([[list(c) + [255] for c in colors]], dtype=np.uint8)
    return PixelBuffer.from_array(pixels)


def test_grayscale_formula(noisy):
    before = noisy.pixels.astype(np.float64)
    to_grayscale(noisy)
    px = noisy.pixels
    expected = np.floor(0.30 * before[..., 0] + 0.59 * before[..., 1] + 0.11 * before[..., 2] + 0.5)
    assert np.array_equal(px[..., 0], expected.astype(np.uint8))
    assert np.array_equal(px[..., 0], px[..., 1])
    assert np.array_equal(px[..., 0], px[..., 2])
    assert np.array_equal(px[..., 3], before[..., 3].astype(np.uint8))


def test_grayscale_known_values():
    buf = _row((10, 20, 30), (0, 0, 255), (255, 255, 255))
    to_grayscale(buf)
    assert buf.pixels[0, :, 0].tolist() == [18, 28, 255]


def test_uniform_truncates_low_bits():
    buf = _row((255, 255, 255), (31, 32, 63), (100, 200, 150))
    quantize_uniform(buf)
    assert buf.pixels[0, :, :3].tolist() == [
        [224, 224, 192],
        [0, 32, 0],
        [96, 192, 128],
    ]
    assert (buf.pixels[0, :, 3] == 255).all()


def test_uniform_is_idempotent(noisy):
    quantize_uniform(noisy)
    once = noisy.pixels.copy()
    quantize_uniform(noisy)
    assert np.array_equal(noisy.pixels, once)


def test_uniform_keeps_alpha(noisy):
    alpha = noisy.pixels[..., 3].copy()
    quantize_uniform(noisy)
    assert np.array_equal(noisy.pixels[..., 3], alpha)


def test_popularity_scenario():
    pixels = np.array(
        [[[8, 8, 8, 255], [8, 8, 8, 255]], [[16, 16, 16, 255], [240, 1, 1, 255]]],
        dtype=np.uint8,
    )
    buf = PixelBuffer.from_array(pixels)
    palette = quantize_popularity(buf)

    assert len(palette) == 256
    assert palette[0].rgb == (8, 8, 8)
    assert palette[0].count == 2
    # Equal counts go to the lower bucket index first.
    assert palette[1].rgb == (16, 16, 16)
    assert palette[2].rgb == (240, 0, 0)
    # The rest are empty buckets in scan order.
    assert palette[3].rgb == (0, 0, 0)
    assert palette[3].count == 0
    assert palette[4].rgb == (0, 0, 8)
    assert all(p.selected for p in palette)

    assert buf.pixels[..., :3].tolist() == [
        [[8, 8, 8], [8, 8, 8]],
        [[16, 16, 16], [240, 0, 0]],
    ]


def test_popularity_is_lossless_for_few_bucket_colors():
    rng = np.random.default_rng(7)
    colors = rng.integers(0, 32, size=(40, 3)) * 8
    idx = rng.integers(0, len(colors), size=(10, 10))
    pixels = np.empty((10, 10, 4), dtype=np.uint8)
    pixels[..., :3] = colors[idx]
    pixels[..., 3] = 255
    buf = PixelBuffer.from_array(pixels)
    quantize_popularity(buf)
    assert np.array_equal(buf.pixels, pixels)


def test_popularity_maps_rare_colors_to_nearest():
    buf = _row((0, 0, 0), (0, 0, 0), (200, 200, 200), (248, 248, 248))
    palette = quantize_popularity(buf, palette_size=2)
    assert [p.rgb for p in palette] == [(0, 0, 0), (200, 200, 200)]
    assert buf.pixels[0, :, 0].tolist() == [0, 0, 200, 200]


def test_palette_does_not_modify_buffer(noisy):
    before = noisy.pixels.copy()
    build_popularity_palette(noisy, palette_size=16)
    assert np.array_equal(noisy.pixels, before)


def test_palette_with_custom_bit_depth():
    buf = _row((0, 0, 0), (130, 0, 0), (250, 0, 0))
    palette = build_popularity_palette(buf, palette_size=2, bits=1)
    assert [p.rgb for p in palette] == [(128, 0, 0), (0, 0, 0)]
    assert [p.count for p in palette] == [2, 1]


@pytest.mark.parametrize("kwargs", [{"palette_size": 0}, {"bits": 0}, {"bits": 9}])
def test_palette_rejects_bad_arguments(kwargs):
    with pytest.raises(ValueError):
        build_popularity_palette(PixelBuffer(1, 1), **kwargs)


@pytest.mark.parametrize("kwargs", [{"palette_size": 0}, {"palette_size": -4}, {"bits": 9}])
def test_popularity_bad_arguments_leave_buffer(kwargs, make_solid):
    buf = make_solid(2, 2, (13, 13, 13, 13))
    with pytest.raises(ValueError):
        quantize_popularity(buf, **kwargs)
    assert (buf.pixels == 13).all()


def test_nearest_ties_go_to_first_entry():
    palette = np.array([[10, 0, 0], [0, 0, 0], [20, 0, 0]])
    rgb = np.array([[10, 0, 0], [5, 0, 0], [15, 0, 0]])
    assert nearest_palette_indices(rgb, palette).tolist() == [0, 0, 0]
