# colour_trap/morphology.py
from __future__ import annotations

"""
4-connected morphological growth and shrink on RGBA rasters.

Each pass reads a frozen snapshot of the previous pass and writes a fresh
buffer. Passes are vectorised with array shifts; the neighbour order
up, right, down, left decides which colour a newly filled cell copies.
"""

from typing import Optional, Tuple

import numpy as np

from .core_types import Raster, assert_same_size

# (dy, dx) in tie-break order: up, right, down, left
NEIGHBOUR_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


def _neighbour_view(arr: np.ndarray, dy: int, dx: int) -> np.ndarray:
    """
    out[y, x] = arr[y + dy, x + dx], zero/False where that falls off the grid.
    Works on (H, W) and (H, W, C) arrays.
    """
    out = np.zeros_like(arr)
    h, w = arr.shape[0], arr.shape[1]
    dst_y = slice(max(0, -dy), h - max(0, dy))
    src_y = slice(max(0, dy), h - max(0, -dy))
    dst_x = slice(max(0, -dx), w - max(0, dx))
    src_x = slice(max(0, dx), w - max(0, -dx))
    out[dst_y, dst_x] = arr[src_y, src_x]
    return out


def dilate_pass(pixels: np.ndarray, allowed: Optional[np.ndarray] = None) -> np.ndarray:
    """One ring of growth. Returns a new (H, W, 4) buffer."""
    opaque = pixels[..., 3] > 0
    pending = ~opaque if allowed is None else (~opaque & allowed)
    out = pixels.copy()
    if not pending.any():
        return out
    for dy, dx in NEIGHBOUR_OFFSETS:
        nb = _neighbour_view(pixels, dy, dx)
        take = pending & (nb[..., 3] > 0)
        out[take] = nb[take]
        pending &= ~take
    return out


def dilate(raster: Raster, radius: int, mask: Optional[Raster] = None) -> Raster:
    """
    Grow opaque regions by `radius` 4-connected rings.

    A transparent cell is filled only where `mask` is opaque (or when no mask
    is given), copying the full RGBA of its first opaque neighbour in the
    order up, right, down, left. radius <= 0 returns `raster` itself.
    """
    if radius <= 0:
        return raster
    allowed = None
    if mask is not None:
        assert_same_size(raster, mask, "mask")
        allowed = mask.alpha_mask()

    current = raster.pixels.copy()
    for _ in range(int(radius)):
        nxt = dilate_pass(current, allowed)
        # No change means every later pass is a no-op too.
        if np.array_equal(nxt[..., 3], current[..., 3]):
            break
        current = nxt
    return Raster(current)


def erode_pass(pixels: np.ndarray) -> np.ndarray:
    """One ring of shrink. Returns a new (H, W, 4) buffer."""
    opaque = pixels[..., 3] > 0
    keep = opaque.copy()
    for dy, dx in NEIGHBOUR_OFFSETS:
        keep &= _neighbour_view(opaque, dy, dx)
    out = np.zeros_like(pixels)
    out[keep] = pixels[keep]
    return out


def erode(raster: Raster, radius: int) -> Raster:
    """
    Shrink opaque regions by `radius` rings.

    A pixel survives a pass only if all four neighbours are inside the image
    and opaque; image-edge pixels are always removed on the first pass.
    """
    if radius <= 0:
        return raster
    current = raster.pixels.copy()
    for _ in range(int(radius)):
        if not current[..., 3].any():
            break
        current = erode_pass(current)
    return Raster(current)


__all__ = [
    "NEIGHBOUR_OFFSETS",
    "dilate_pass",
    "dilate",
    "erode_pass",
    "erode",
]
