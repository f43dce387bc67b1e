# colour_trap/separate.py
from __future__ import annotations

"""
Per-colour separation and the screen-printing underbase.
"""

from typing import Sequence, Union

import numpy as np

from .constants import DEFAULT_GARMENT_RGB, GARMENT_TOLERANCE
from .core_types import ColourEntry, Raster, RGBTuple
from .morphology import erode


def _rgb_of(colour: Union[ColourEntry, Sequence[int]]) -> RGBTuple:
    if isinstance(colour, ColourEntry):
        return colour.rgb
    r, g, b = (int(v) for v in colour[:3])
    return (r, g, b)


def extract(source: Raster, colour: Union[ColourEntry, Sequence[int]]) -> Raster:
    """
    Keep only pixels whose RGB exactly equals `colour` (alpha > 0).

    Matches become fully opaque; everything else is (0, 0, 0, 0).
    """
    r, g, b = _rgb_of(colour)
    px = source.pixels
    match = (
        (px[..., 3] > 0) & (px[..., 0] == r) & (px[..., 1] == g) & (px[..., 2] == b)
    )
    out = np.zeros_like(px)
    out[match] = (r, g, b, 255)
    return Raster(out)


def generate_underbase(
    source: Raster,
    garment: Sequence[int] = DEFAULT_GARMENT_RGB,
    tolerance: int = GARMENT_TOLERANCE,
    choke_pixels: int = 0,
) -> Raster:
    """
    White underbase under every printed pixel that is not the garment colour.

    A pixel counts as garment when each channel differs by less than
    `tolerance`. choke_pixels > 0 erodes the result so the underbase stays
    inside the top colours.
    """
    px = source.pixels
    garment_rgb = np.asarray(list(garment)[:3], dtype=np.int16)
    diff = np.abs(px[..., :3].astype(np.int16) - garment_rgb)
    is_garment = np.all(diff < int(tolerance), axis=-1)
    needs_base = (px[..., 3] > 0) & ~is_garment

    out = np.zeros_like(px)
    out[needs_base] = (255, 255, 255, 255)
    underbase = Raster(out)
    if choke_pixels > 0:
        return erode(underbase, choke_pixels)
    return underbase


__all__ = ["extract", "generate_underbase"]
