# colour_trap/analysis.py
from __future__ import annotations

"""
Palette extraction for flattened rasters.

analyze() counts every distinct visible RGB triple, filter_significant() drops
anti-aliasing strays, order_by_lightness() sorts lightest first.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .constants import MAX_COLOURS, MIN_SIGNIFICANT_PIXELS, SIGNIFICANT_FRACTION
from .core_types import ColourEntry, Raster
from .errors import NoSignificantColours, TooManyColours
from .utils import round_half_away


@dataclass(frozen=True)
class PaletteScan:
    """Distinct visible colours in discovery order plus the raster area."""

    colours: List[ColourEntry]
    total_pixels: int

    @property
    def unique_colours(self) -> int:
        return len(self.colours)


def _pack_rgb(rgb: np.ndarray) -> np.ndarray:
    """(N,3) uint8 -> (N,) uint32 keys r<<16 | g<<8 | b."""
    rgb32 = rgb.astype(np.uint32, copy=False)
    return (rgb32[:, 0] << 16) | (rgb32[:, 1] << 8) | rgb32[:, 2]


def analyze(raster: Raster) -> PaletteScan:
    """
    Count pixels per exact RGB among alpha > 0 pixels.

    Colours come back in row-major order of first occurrence.
    total_pixels is width*height, transparent pixels included.
    """
    flat = raster.pixels.reshape(-1, 4)
    visible = flat[flat[:, 3] > 0]
    total = raster.width * raster.height
    if visible.shape[0] == 0:
        return PaletteScan(colours=[], total_pixels=total)

    keys = _pack_rgb(visible[:, :3])
    uniq, first_idx, counts = np.unique(keys, return_index=True, return_counts=True)
    order = np.argsort(first_idx, kind="stable")

    colours: List[ColourEntry] = []
    for i in order.tolist():
        key = int(uniq[i])
        colours.append(
            ColourEntry(
                r=(key >> 16) & 0xFF,
                g=(key >> 8) & 0xFF,
                b=key & 0xFF,
                pixel_count=int(counts[i]),
            )
        )
    return PaletteScan(colours=colours, total_pixels=total)


def significance_threshold(total_pixels: int) -> int:
    """Minimum pixel count for a colour to count as a real separation."""
    return max(
        MIN_SIGNIFICANT_PIXELS, round_half_away(total_pixels * SIGNIFICANT_FRACTION)
    )


def filter_significant(
    colours: Sequence[ColourEntry], total_pixels: int
) -> List[ColourEntry]:
    """Keep colours with pixel_count >= significance_threshold(total_pixels)."""
    threshold = significance_threshold(total_pixels)
    return [c for c in colours if c.pixel_count >= threshold]


def order_by_lightness(colours: Sequence[ColourEntry]) -> List[ColourEntry]:
    """Lightest first. Ties keep their incoming order."""
    return sorted(colours, key=lambda c: -c.lightness)


def check_palette_size(colours: Sequence[ColourEntry], limit: int = MAX_COLOURS) -> None:
    """Raise when there are no colours or more than `limit`."""
    if len(colours) > limit:
        raise TooManyColours(len(colours), limit)
    if not colours:
        raise NoSignificantColours()


def select_colours(raster: Raster, max_colours: int = MAX_COLOURS) -> List[ColourEntry]:
    """analyze -> filter_significant -> size check -> order_by_lightness."""
    scan = analyze(raster)
    significant = filter_significant(scan.colours, scan.total_pixels)
    check_palette_size(significant, max_colours)
    return order_by_lightness(significant)


__all__ = [
    "PaletteScan",
    "analyze",
    "significance_threshold",
    "filter_significant",
    "order_by_lightness",
    "check_palette_size",
    "select_colours",
]
