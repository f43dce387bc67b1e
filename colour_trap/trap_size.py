# colour_trap/trap_size.py
from __future__ import annotations

"""
Trap size parsing, unit conversion and per-layer interpolation.

Exports:
- parse_length(spec) -> inches. Accepts "4pt", "1/32" or "0.03125".
- validate_range(min_spec, max_spec) -> TrapRange
- to_pixels(inches, dpi) -> int
- layer_trap(index, total, min_inches, max_inches) -> inches
- format_length(inches, style) -> display string
- trapping_strategy(mode) / recommended_sizes(mode) for "offset" and "screen"
"""

import math
import re
from dataclasses import dataclass
from typing import Literal

from .constants import (
    COMMON_FRACTIONS,
    FRACTION_MATCH_TOL,
    LARGE_TRAP_INCHES,
    MODE_DEFAULTS,
    POINTS_PER_INCH,
)
from .core_types import TrapRange
from .errors import DivisionByZero, InvalidFormat, NegativeValue, RangeOrder
from .utils import round_half_away, warn

PrintMode = Literal["offset", "screen"]
LengthStyle = Literal["fraction", "decimal", "points"]

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_number(text: str, spec: str, hint: str) -> float:
    s = text.strip()
    if not _NUMBER_RE.fullmatch(s):
        raise InvalidFormat(f"Invalid {hint} format: {spec!r}")
    value = float(s)
    if not math.isfinite(value):
        raise InvalidFormat(f"Invalid {hint} format: {spec!r}")
    return value


def _parse_points(spec: str) -> float:
    points = _parse_number(spec[:-2], spec, "point")
    if points < 0:
        raise NegativeValue(f"Points must be non-negative: {spec!r}")
    return points / POINTS_PER_INCH


def _parse_fraction(spec: str) -> float:
    parts = spec.split("/")
    if len(parts) != 2:
        raise InvalidFormat(f"Invalid fraction format: {spec!r}. Use format like 1/32")
    numerator = _parse_number(parts[0], spec, "fraction")
    denominator = _parse_number(parts[1], spec, "fraction")
    if denominator == 0:
        raise DivisionByZero(f"Division by zero in fraction: {spec!r}")
    return numerator / denominator


def parse_length(spec: str) -> float:
    """
    Parse a trap size into inches.

    Tried in order: trailing "pt" (case-insensitive) -> points / 72,
    a "/" -> numerator / denominator, otherwise a plain decimal.
    """
    if not isinstance(spec, str):
        raise InvalidFormat(f"trap size must be a string, got {type(spec).__name__}")
    s = spec.strip()
    if not s:
        raise InvalidFormat("Invalid trap size: empty")
    if s.lower().endswith("pt"):
        return _parse_points(s)
    if "/" in s:
        return _parse_fraction(s)
    return _parse_number(s, s, "decimal")


def validate_range(min_spec: str, max_spec: str) -> TrapRange:
    """Parse both ends and check 0 <= min <= max. Warns on traps above 1/4 inch."""
    lo = parse_length(min_spec)
    hi = parse_length(max_spec)
    if lo < 0 or hi < 0:
        raise NegativeValue("Trap sizes must be non-negative")
    if lo > hi:
        raise RangeOrder(
            "Minimum trap size must be less than or equal to maximum trap size"
        )
    if hi > LARGE_TRAP_INCHES:
        warn(f'Maximum trap size {max_spec} ({hi:g}") is unusually large')
    return TrapRange(min_inches=lo, max_inches=hi)


def to_pixels(inches: float, dpi: float) -> int:
    """Inches to whole pixels at dpi, halves rounded away from zero."""
    return round_half_away(inches * dpi)


def layer_trap(
    index: int, total_layers: int, min_inches: float, max_inches: float
) -> float:
    """
    Trap size for layer `index` (0 = lightest) of `total_layers`.

    Lightest gets max_inches, darkest gets min_inches, linear in between.
    A single layer gets min_inches.
    """
    if total_layers < 1:
        raise ValueError("total_layers must be >= 1")
    if not 0 <= index < total_layers:
        raise ValueError(f"layer index {index} out of range for {total_layers} layers")
    if total_layers == 1:
        return min_inches
    t = index / (total_layers - 1)
    return max_inches - t * (max_inches - min_inches)


def format_length(inches: float, style: LengthStyle = "fraction") -> str:
    """Display form: '4.0pt', '1/32"' (when a common fraction matches) or '0.03125"'."""
    if style == "points":
        return f"{inches * POINTS_PER_INCH:.1f}pt"
    if style == "fraction":
        for value, text in COMMON_FRACTIONS:
            if abs(inches - value) < FRACTION_MATCH_TOL:
                return text
    return f'{inches:.5f}"'


@dataclass(frozen=True)
class TrappingStrategy:
    """Print process description and its default trap range."""

    mode: str
    name: str
    direction: str
    description: str
    default_min: str
    default_max: str
    note: str

    @property
    def default_min_inches(self) -> float:
        return parse_length(self.default_min)

    @property
    def default_max_inches(self) -> float:
        return parse_length(self.default_max)


def trapping_strategy(mode: str) -> TrappingStrategy:
    """Strategy for "offset" or "screen"."""
    try:
        d = MODE_DEFAULTS[mode]
    except KeyError:
        raise ValueError(f"Unknown mode: {mode}") from None
    return TrappingStrategy(
        mode=mode,
        name=d["name"],
        direction=d["direction"],
        description=d["description"],
        default_min=d["min"],
        default_max=d["max"],
        note=d["note"],
    )


def recommended_sizes(mode: str) -> TrapRange:
    """Recommended (min, max) trap range in inches for a print mode."""
    strategy = trapping_strategy(mode)
    return TrapRange(strategy.default_min_inches, strategy.default_max_inches)


__all__ = [
    "PrintMode",
    "LengthStyle",
    "parse_length",
    "validate_range",
    "to_pixels",
    "layer_trap",
    "format_length",
    "TrappingStrategy",
    "trapping_strategy",
    "recommended_sizes",
]
