import numpy as np

from colour_trap.core_types import ColourEntry, Raster
from colour_trap.separate import extract, generate_underbase


def _source():
    arr = np.zeros((4, 4, 4), dtype=np.uint8)
    arr[0, :] = (255, 0, 0, 255)
    arr[1, :2] = (255, 0, 0, 128)  # semi-opaque match
    arr[1, 2:] = (254, 0, 0, 255)  # near miss
    arr[2, :] = (255, 0, 0, 0)  # invisible match
    arr[3, :] = (0, 0, 0, 255)
    return Raster(arr)


def test_extract_keeps_only_exact_matches():
    out = extract(_source(), ColourEntry(255, 0, 0)).pixels
    opaque = out[..., 3] > 0

    expected = np.zeros((4, 4), dtype=bool)
    expected[0, :] = True
    expected[1, :2] = True
    assert np.array_equal(opaque, expected)
    assert np.all(out[opaque] == (255, 0, 0, 255))
    assert np.all(out[~opaque] == 0)


def test_extract_accepts_rgb_tuple_and_keeps_size():
    src = _source()
    out = extract(src, (0, 0, 0))
    assert out.size == src.size
    assert out.opaque_count() == 4
    assert np.all(out.pixels[3] == (0, 0, 0, 255))


def test_extract_does_not_touch_source():
    src = _source()
    before = src.pixels.copy()
    extract(src, (255, 0, 0))
    assert np.array_equal(src.pixels, before)


def test_underbase_skips_garment_colour():
    arr = np.zeros((6, 6, 4), dtype=np.uint8)
    arr[:, :3] = (250, 250, 250, 255)  # within tolerance of white
    arr[:, 3:] = (200, 0, 0, 255)
    arr[0, :] = (200, 0, 0, 0)  # transparent
    out = generate_underbase(Raster(arr)).pixels

    expected = np.zeros((6, 6), dtype=bool)
    expected[1:, 3:] = True
    assert np.array_equal(out[..., 3] > 0, expected)
    assert np.all(out[expected] == 255)


def test_underbase_custom_garment():
    arr = np.zeros((4, 4, 4), dtype=np.uint8)
    arr[:, :] = (0, 0, 0, 255)
    out = generate_underbase(Raster(arr), garment=(5, 5, 5))
    assert out.opaque_count() == 0


def test_underbase_choke_erodes():
    arr = np.zeros((7, 7, 4), dtype=np.uint8)
    arr[1:6, 1:6] = (0, 0, 200, 255)
    out = generate_underbase(Raster(arr), choke_pixels=1)
    opaque = np.argwhere(out.pixels[..., 3] > 0)
    assert opaque.min() == 2 and opaque.max() == 4
    assert out.opaque_count() == 9
