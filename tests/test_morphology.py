import numpy as np
import pytest

from colour_trap.core_types import Raster
from colour_trap.errors import DimensionMismatch
from colour_trap.morphology import dilate, erode

A = (255, 0, 0, 255)
B = (0, 0, 255, 255)
C = (0, 200, 0, 255)


def _reference_dilate(pixels, radius, allowed=None):
    """Plain nested-loop version: snapshot per pass, up/right/down/left."""
    h, w = pixels.shape[:2]
    current = pixels.copy()
    for _ in range(radius):
        nxt = current.copy()
        for y in range(h):
            for x in range(w):
                if current[y, x, 3] > 0:
                    continue
                if allowed is not None and not allowed[y, x]:
                    continue
                for dy, dx in ((-1, 0), (0, 1), (1, 0), (0, -1)):
                    ny, nx = y + dy, x + dx
                    if 0 <= ny < h and 0 <= nx < w and current[ny, nx, 3] > 0:
                        nxt[y, x] = current[ny, nx]
                        break
        current = nxt
    return current


def _mask_raster(allowed):
    arr = np.zeros(allowed.shape + (4,), dtype=np.uint8)
    arr[allowed] = 255
    return Raster(arr)


def test_dilate_radius_zero_is_identity():
    raster = Raster.blank(4, 4)
    mask = Raster.blank(4, 4)
    assert dilate(raster, 0, mask) is raster
    assert dilate(raster, -2) is raster


def test_dilate_grows_one_ring_per_pass():
    arr = np.zeros((7, 7, 4), dtype=np.uint8)
    arr[3, 3] = A
    out = dilate(Raster(arr), 2).pixels
    ys, xs = np.nonzero(out[..., 3])
    dist = np.abs(ys - 3) + np.abs(xs - 3)
    assert dist.max() == 2
    assert len(ys) == 13  # diamond of radius 2
    assert np.all(out[out[..., 3] > 0] == A)


def test_dilate_does_not_modify_input():
    arr = np.zeros((5, 5, 4), dtype=np.uint8)
    arr[2, 2] = A
    raster = Raster(arr)
    before = raster.pixels.copy()
    out = dilate(raster, 3)
    assert np.array_equal(raster.pixels, before)
    assert out.pixels is not raster.pixels


def test_dilate_neighbour_priority_up_right_down_left():
    arr = np.zeros((3, 3, 4), dtype=np.uint8)
    arr[0, 1] = A  # up of centre
    arr[1, 2] = B  # right of centre
    arr[2, 1] = C  # down of centre
    out = dilate(Raster(arr), 1).pixels
    assert tuple(out[1, 1]) == A

    arr = np.zeros((3, 3, 4), dtype=np.uint8)
    arr[2, 1] = C  # down
    arr[1, 0] = B  # left
    out = dilate(Raster(arr), 1).pixels
    assert tuple(out[1, 1]) == C


def test_dilate_copies_full_rgba():
    arr = np.zeros((1, 3, 4), dtype=np.uint8)
    arr[0, 0] = (12, 34, 56, 77)
    out = dilate(Raster(arr), 1).pixels
    assert tuple(out[0, 1]) == (12, 34, 56, 77)
    assert out[0, 2, 3] == 0


def test_dilate_respects_mask():
    arr = np.zeros((5, 5, 4), dtype=np.uint8)
    arr[2, 0] = A
    allowed = np.zeros((5, 5), dtype=bool)
    allowed[2, 1:3] = True
    allowed[0, :] = True  # unreachable without passing through forbidden cells
    out = dilate(Raster(arr), 4, _mask_raster(allowed)).pixels
    grown = (out[..., 3] > 0) & (arr[..., 3] == 0)
    assert np.array_equal(np.argwhere(grown), np.array([[2, 1], [2, 2]]))


def test_dilate_empty_mask_blocks_everything():
    arr = np.zeros((4, 4, 4), dtype=np.uint8)
    arr[1, 1] = A
    out = dilate(Raster(arr), 3, Raster.blank(4, 4)).pixels
    assert np.array_equal(out, arr)


def test_dilate_mask_size_mismatch():
    with pytest.raises(DimensionMismatch):
        dilate(Raster.blank(4, 4), 1, Raster.blank(5, 4))


def test_dilate_matches_reference_on_random_rasters():
    rng = np.random.default_rng(7)
    palette = np.array([A, B, C], dtype=np.uint8)
    for _ in range(5):
        h, w = 12, 15
        arr = np.zeros((h, w, 4), dtype=np.uint8)
        seeds = rng.random((h, w)) < 0.08
        arr[seeds] = palette[rng.integers(0, 3, size=int(seeds.sum()))]
        allowed = rng.random((h, w)) < 0.6
        radius = int(rng.integers(1, 5))

        out = dilate(Raster(arr), radius, _mask_raster(allowed)).pixels
        assert np.array_equal(out, _reference_dilate(arr, radius, allowed))

        # Never outside the mask, never further than radius steps.
        grown = (out[..., 3] > 0) & (arr[..., 3] == 0)
        assert not np.any(grown & ~allowed)
        seed_pts = np.argwhere(arr[..., 3] > 0)
        for y, x in np.argwhere(grown):
            manhattan = np.abs(seed_pts[:, 0] - y) + np.abs(seed_pts[:, 1] - x)
            assert manhattan.min() <= radius


def test_erode_3x3_block_leaves_centre():
    arr = np.zeros((5, 5, 4), dtype=np.uint8)
    arr[1:4, 1:4] = A
    out = erode(Raster(arr), 1).pixels
    opaque = np.argwhere(out[..., 3] > 0)
    assert opaque.tolist() == [[2, 2]]
    assert tuple(out[2, 2]) == A


def test_erode_treats_image_edge_as_transparent():
    arr = np.zeros((3, 3, 4), dtype=np.uint8)
    arr[:, :] = A
    out = erode(Raster(arr), 1).pixels
    assert np.argwhere(out[..., 3] > 0).tolist() == [[1, 1]]
    assert not erode(Raster(arr), 2).pixels[..., 3].any()


def test_erode_radius_zero_is_identity():
    raster = Raster.blank(3, 3)
    assert erode(raster, 0) is raster
