# colour_trap/__init__.py
"""
colour_trap package.

Purpose:
  Separate a flattened few-colour RGBA image into one layer per colour,
  lightest first, and trap each layer under the darker ones. See
  trap_image.py for the CLI.

Public API:
  trap_raster   : one-call separation + trapping.
  TrappingRun   : single-use run handle with progress and cancel().
  TrapSettings  : trap range, DPI, print mode, workers.
  Raster        : RGBA pixel grid (numpy backed).
  trap_size     : parse_length, validate_range, to_pixels, layer_trap.
  analysis      : analyze, filter_significant, order_by_lightness.
  separate      : extract, generate_underbase.
  mask          : darker_layers_mask.
  morphology    : dilate, erode.
  image_io      : PNG pixel source / sink (Pillow).
  errors        : TrapError and its kinds.

Quick start:
  from colour_trap import Raster, trap_raster
  result = trap_raster(raster, "0", "1/32", dpi=300)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import analysis
from . import core_types
from . import errors
from . import image_io
from . import mask
from . import morphology
from . import separate
from . import trap_size
from . import utils

from .core_types import ColourEntry, LayerPlan, Raster, TrapRange
from .errors import (
    DimensionMismatch,
    DivisionByZero,
    InvalidFormat,
    NegativeValue,
    NoSignificantColours,
    RangeOrder,
    RunAlreadyStarted,
    TooManyColours,
    TrapError,
    TrappingCancelled,
)
from .pipeline import RunState, TrapResult, TrappingRun, TrapSettings, trap_raster

__all__ = [
    "__version__",
    "analysis",
    "core_types",
    "errors",
    "image_io",
    "mask",
    "morphology",
    "separate",
    "trap_size",
    "utils",
    "ColourEntry",
    "LayerPlan",
    "Raster",
    "TrapRange",
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
    "RunState",
    "TrapResult",
    "TrappingRun",
    "TrapSettings",
    "trap_raster",
]
