# colour_trap/constants.py
"""
Tunables used across the project.

- Palette limits (MAX_COLOURS, significance filter)
- Unit conversion and trap-size sanity limits
- Print mode defaults (offset / screen)
"""
from __future__ import annotations

from typing import Dict, List, Tuple

# =========================
# Palette / separation
# =========================
MAX_COLOURS: int = 10

# Colours covering fewer pixels than max(MIN_SIGNIFICANT_PIXELS,
# total * SIGNIFICANT_FRACTION) are treated as anti-aliasing noise.
MIN_SIGNIFICANT_PIXELS: int = 100
SIGNIFICANT_FRACTION: float = 0.0001

# Rec. 601 luma weights, applied to raw 8-bit values (no gamma).
LIGHTNESS_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

# Colour channels written into opaque mask cells. Only alpha is read back.
MASK_SENTINEL: int = 255

# =========================
# Units / sizes
# =========================
POINTS_PER_INCH: float = 72.0
DEFAULT_DPI: int = 300

# Traps above this (inches) get a warning, not an error.
LARGE_TRAP_INCHES: float = 0.25

# Documents larger than this in either dimension are accepted with a warning.
LARGE_DOCUMENT_PX: int = 10_000

COMMON_FRACTIONS: List[Tuple[float, str]] = [
    (1 / 64, '1/64"'),
    (1 / 32, '1/32"'),
    (3 / 64, '3/64"'),
    (1 / 16, '1/16"'),
    (5 / 64, '5/64"'),
    (3 / 32, '3/32"'),
    (1 / 8, '1/8"'),
]
FRACTION_MATCH_TOL: float = 1e-4

# =========================
# Print modes
# =========================
DEFAULT_MODE: str = "offset"

MODE_DEFAULTS: Dict[str, Dict[str, str]] = {
    "offset": {
        "name": "Offset Lithography",
        "direction": "Light spreads under dark",
        "description": "High-precision commercial printing",
        "min": "0",
        "max": "1/32",
        "note": 'Offset lithography typically uses 0 to 1/32" trapping',
    },
    "screen": {
        "name": "Screen Printing",
        "direction": "Light spreads under dark",
        "description": "Optimized for screen printing on garments",
        "min": "0",
        "max": "4pt",
        "note": "Screen printing typically uses 0 to 4-6 points trapping",
    },
}

# Underbase (screen printing)
GARMENT_TOLERANCE: int = 10
DEFAULT_GARMENT_RGB: Tuple[int, int, int] = (255, 255, 255)
