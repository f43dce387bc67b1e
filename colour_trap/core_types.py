# colour_trap/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import LIGHTNESS_WEIGHTS
from .errors import DimensionMismatch

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Rgba = NDArray[np.uint8]  # (H, W, 4)
BoolMask = NDArray[np.bool_]  # (H, W)

BufferLike = Union[bytes, bytearray, memoryview, Sequence[int], NDArray[np.uint8]]

# (percent 0..100, short message)
ProgressCallback = Callable[[float, str], None]


# Raster


@dataclass(frozen=True, eq=False)
class Raster:
    """
    RGBA pixel grid, 8 bits per channel, row-major.

    `pixels` has shape (height, width, 4); flattened it is the interleaved
    R,G,B,A buffer of length width*height*4. Alpha 0 means no content.
    """

    pixels: U8Rgba

    def __post_init__(self) -> None:
        arr = self.pixels
        if not isinstance(arr, np.ndarray):
            raise TypeError("Raster pixels must be a numpy array")
        if arr.dtype != np.uint8:
            raise TypeError(f"expected uint8 pixels, got {arr.dtype}")
        if arr.ndim != 3 or arr.shape[-1] != 4:
            raise DimensionMismatch(
                f"expected (height, width, 4) pixels, got shape {arr.shape}"
            )
        if arr.shape[0] <= 0 or arr.shape[1] <= 0:
            raise DimensionMismatch(f"raster must be non-empty, got {arr.shape}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)."""
        return self.width, self.height

    @property
    def alpha(self) -> NDArray[np.uint8]:
        return self.pixels[..., 3]

    def alpha_mask(self) -> BoolMask:
        """True where the pixel carries content (alpha > 0)."""
        return self.pixels[..., 3] > 0

    def opaque_count(self) -> int:
        return int(np.count_nonzero(self.pixels[..., 3]))

    def copy(self) -> "Raster":
        return Raster(self.pixels.copy())

    def to_buffer(self) -> bytes:
        """Flat interleaved RGBA bytes."""
        return np.ascontiguousarray(self.pixels).tobytes()

    @classmethod
    def blank(cls, width: int, height: int) -> "Raster":
        """Fully transparent raster."""
        if width <= 0 or height <= 0:
            raise DimensionMismatch(f"raster must be non-empty, got {width}x{height}")
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Raster":
        return cls(np.ascontiguousarray(arr, dtype=np.uint8))

    @classmethod
    def from_buffer(cls, width: int, height: int, buffer: BufferLike) -> "Raster":
        """
        Build a raster from a flat R,G,B,A buffer.

        Raises DimensionMismatch when len(buffer) != width*height*4.
        """
        if width <= 0 or height <= 0:
            raise DimensionMismatch(f"raster must be non-empty, got {width}x{height}")
        if isinstance(buffer, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(buffer, dtype=np.uint8)
        else:
            flat = np.asarray(buffer).reshape(-1)
            if flat.size and (flat.min() < 0 or flat.max() > 255):
                raise ValueError("buffer values must be within 0..255")
            flat = flat.astype(np.uint8, copy=False)
        expected = width * height * 4
        if flat.size != expected:
            raise DimensionMismatch(
                f"buffer length {flat.size} does not match {width}x{height}x4={expected}"
            )
        return cls(flat.reshape(height, width, 4).copy())


def assert_same_size(a: Raster, b: Raster, what: str = "raster") -> None:
    """Raise DimensionMismatch unless both rasters share width and height."""
    if a.size != b.size:
        raise DimensionMismatch(
            f"{what} size {b.width}x{b.height} does not match {a.width}x{a.height}"
        )


# Value objects


def lightness_of(r: int, g: int, b: int) -> float:
    """Weighted grey value 0.299R + 0.587G + 0.114B in [0, 255]."""
    wr, wg, wb = LIGHTNESS_WEIGHTS
    return wr * r + wg * g + wb * b


@dataclass(frozen=True)
class ColourEntry:
    """Distinct source colour with its visible pixel count."""

    r: int
    g: int
    b: int
    pixel_count: int = 0
    lightness: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"channel out of range: {channel}")
        if self.pixel_count < 0:
            raise ValueError("pixel_count must be >= 0")
        object.__setattr__(self, "lightness", lightness_of(self.r, self.g, self.b))

    @property
    def rgb(self) -> RGBTuple:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.rgb)

    @property
    def label(self) -> str:
        return f"RGB({self.r},{self.g},{self.b})"


@dataclass(frozen=True)
class TrapRange:
    """Validated trap sizes in inches (0 <= min <= max)."""

    min_inches: float
    max_inches: float


@dataclass(eq=False)
class LayerPlan:
    """
    One separation: a colour, its fixed order index (0 = lightest),
    its trap radius and its raster.

    `separated` is the untrapped extraction and never changes; `raster`
    starts as the same object and is replaced by the dilation result.
    """

    colour: ColourEntry
    index: int
    separated: Raster
    trap_pixels: int = 0
    raster: Optional[Raster] = None

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError("layer index must be >= 0")
        if self.trap_pixels < 0:
            raise ValueError("trap_pixels must be >= 0")
        if self.raster is None:
            self.raster = self.separated

    @property
    def trapped(self) -> bool:
        return self.raster is not self.separated

    @property
    def name(self) -> str:
        """Host layer name, e.g. 'Colour - RGB(255,0,0) - Trap 4px'."""
        return f"Colour - {self.colour.label} - Trap {self.trap_pixels}px"


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        s = f"#{s}"
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Rgba",
    "BoolMask",
    "BufferLike",
    "ProgressCallback",
    # value objects
    "Raster",
    "ColourEntry",
    "TrapRange",
    "LayerPlan",
    # helpers
    "assert_same_size",
    "lightness_of",
    "rgb_to_hex",
    "hex_to_rgb",
]
