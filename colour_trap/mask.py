# colour_trap/mask.py
"""
Permission masks for masked dilation.

An opaque mask cell means "a darker separation prints here", so the current
layer may grow into it. Transparent cells are off limits.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from .constants import MASK_SENTINEL
from .core_types import LayerPlan, Raster
from .errors import DimensionMismatch


def _mask_from_bool(covered: np.ndarray) -> Raster:
    out = np.zeros(covered.shape + (4,), dtype=np.uint8)
    out[covered] = MASK_SENTINEL
    return Raster(out)


def darker_layers_mask(
    plans: Sequence[LayerPlan],
    current_index: int,
    size: Optional[Tuple[int, int]] = None,
) -> Raster:
    """
    Union of the untrapped footprints of every layer darker than `current_index`.

    Reads LayerPlan.separated, never the dilated raster, so the result does not
    depend on which layers were already trapped. `size` is (width, height);
    it defaults to the size of the first plan.
    """
    if size is None:
        if not plans:
            raise ValueError("size is required when there are no layer plans")
        size = plans[0].separated.size
    width, height = size

    covered = np.zeros((height, width), dtype=bool)
    for plan in plans:
        if plan.index <= current_index:
            continue
        if plan.separated.size != (width, height):
            raise DimensionMismatch(
                f"layer {plan.index} is {plan.separated.width}x{plan.separated.height}, "
                f"expected {width}x{height}"
            )
        covered |= plan.separated.alpha_mask()
    return _mask_from_bool(covered)


__all__ = ["darker_layers_mask"]
