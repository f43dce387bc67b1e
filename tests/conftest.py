from __future__ import annotations

from typing import Callable, Tuple

import numpy as np
import pytest

from colour_trap.core_types import Raster

RED = (255, 0, 0)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
YELLOW = (255, 255, 0)
BLUE = (0, 0, 255)


def blank(width: int, height: int) -> np.ndarray:
    return np.zeros((height, width, 4), dtype=np.uint8)


def paint(
    arr: np.ndarray,
    rows: Tuple[int, int],
    cols: Tuple[int, int],
    rgb: Tuple[int, int, int],
    alpha: int = 255,
) -> np.ndarray:
    arr[rows[0] : rows[1], cols[0] : cols[1]] = (*rgb, alpha)
    return arr


@pytest.fixture
def red_black() -> Raster:
    """40x40: left half red, right half black."""
    arr = blank(40, 40)
    paint(arr, (0, 40), (0, 20), RED)
    paint(arr, (0, 40), (20, 40), BLACK)
    return Raster(arr)


@pytest.fixture
def three_bands() -> Raster:
    """30 rows x 60 cols: yellow | red | blue vertical bands."""
    arr = blank(60, 30)
    paint(arr, (0, 30), (0, 20), YELLOW)
    paint(arr, (0, 30), (20, 40), RED)
    paint(arr, (0, 30), (40, 60), BLUE)
    return Raster(arr)


@pytest.fixture
def make_raster() -> Callable[..., Raster]:
    def _make(width: int, height: int, *blocks) -> Raster:
        arr = blank(width, height)
        for rows, cols, rgb in blocks:
            paint(arr, rows, cols, rgb)
        return Raster(arr)

    return _make
