# colour_trap/errors.py
"""
Error kinds raised by the trapping core.

All of them derive from TrapError, which is a ValueError: every failure is a
deterministic function of the inputs, so callers decide whether to retry with
different ones.
"""

from __future__ import annotations


class TrapError(ValueError):
    """Base class for trapping failures."""


# Trap size parsing / validation


class InvalidFormat(TrapError):
    """Trap size text is not a number, fraction or point value."""


class DivisionByZero(TrapError):
    """Fractional trap size has a zero denominator."""


class NegativeValue(TrapError):
    """Trap size is negative."""


class RangeOrder(TrapError):
    """Minimum trap size is larger than the maximum."""


# Palette constraints


class TooManyColours(TrapError):
    """More significant colours than separations allowed."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(
            f"Document has {count} distinct colours (after filtering anti-aliasing), "
            f"exceeds maximum of {limit}"
        )
        self.count = count
        self.limit = limit


class NoSignificantColours(TrapError):
    """Nothing left to separate after the significance filter."""

    def __init__(self) -> None:
        super().__init__("No significant colours found in document")


# Buffers


class DimensionMismatch(TrapError):
    """Raster buffer or mask does not match the declared dimensions."""


# Run handle


class RunAlreadyStarted(TrapError):
    """A TrappingRun handle was executed twice."""


class TrappingCancelled(TrapError):
    """Run aborted between two layers by cancel()."""


__all__ = [
    "TrapError",
    "InvalidFormat",
    "DivisionByZero",
    "NegativeValue",
    "RangeOrder",
    "TooManyColours",
    "NoSignificantColours",
    "DimensionMismatch",
    "RunAlreadyStarted",
    "TrappingCancelled",
]
