# colour_trap/pipeline.py
from __future__ import annotations

"""
Trapping run orchestration.

Idle -> Analyzing -> Separating -> Trapping -> Complete, or Failed from any
step. Every colour is separated before any trapping starts, and masks are
built from the untrapped separations only, so the per-layer dilations are
independent and may run on a thread pool.
"""

import enum
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .analysis import (
    analyze,
    check_palette_size,
    filter_significant,
    order_by_lightness,
    significance_threshold,
)
from .constants import DEFAULT_DPI, DEFAULT_MODE, LARGE_DOCUMENT_PX, MAX_COLOURS
from .core_types import ColourEntry, LayerPlan, ProgressCallback, Raster, TrapRange
from .errors import RunAlreadyStarted, TrappingCancelled
from .mask import darker_layers_mask
from .morphology import dilate
from .separate import extract
from .trap_size import layer_trap, to_pixels, trapping_strategy, validate_range
from .utils import debug_log, format_number_compact, key_value_pairs_to_string, warn


class RunState(enum.Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    SEPARATING = "separating"
    TRAPPING = "trapping"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class TrapSettings:
    """
    Trap configuration for one run.

    min_trap / max_trap use the trap size notations ("0", "1/32", "4pt").
    workers > 1 dilates layers on a thread pool.
    """

    min_trap: str = "0"
    max_trap: str = "1/32"
    dpi: float = DEFAULT_DPI
    mode: str = DEFAULT_MODE
    max_colours: int = MAX_COLOURS
    workers: int = 1
    debug: bool = False

    @classmethod
    def for_mode(cls, mode: str, **overrides) -> "TrapSettings":
        """Settings pre-filled with the recommended range of a print mode."""
        strategy = trapping_strategy(mode)
        values = {
            "min_trap": strategy.default_min,
            "max_trap": strategy.default_max,
            "mode": mode,
        }
        values.update(overrides)
        return cls(**values)

    def resolve(self) -> TrapRange:
        """Validate everything and return the trap range in inches."""
        if not self.dpi or self.dpi <= 0:
            raise ValueError(f"dpi must be > 0, got {self.dpi}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.max_colours < 1:
            raise ValueError(f"max_colours must be >= 1, got {self.max_colours}")
        trapping_strategy(self.mode)
        return validate_range(self.min_trap, self.max_trap)


@dataclass
class TrapResult:
    """Ordered separations, lightest first."""

    layers: List[LayerPlan]
    trap_range: TrapRange
    dpi: float

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[LayerPlan]:
        return iter(self.layers)

    def outputs(self) -> List[Tuple[ColourEntry, int, Raster]]:
        """(colour, trap radius in pixels, trapped raster) per layer."""
        return [(p.colour, p.trap_pixels, p.raster) for p in self.layers]


def trap_layer(plans: List[LayerPlan], plan: LayerPlan) -> Raster:
    """Dilate one separation into the footprint of the darker separations."""
    if plan.trap_pixels <= 0:
        return plan.separated
    mask = darker_layers_mask(plans, plan.index, plan.separated.size)
    return dilate(plan.separated, plan.trap_pixels, mask)


class TrappingRun:
    """
    Single-use handle for one trapping run.

    execute() may be called once; the handle then keeps the final state, the
    result or the error. cancel() is honoured between layers only.
    """

    def __init__(
        self,
        source: Raster,
        settings: Optional[TrapSettings] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.source = source
        self.settings = settings or TrapSettings()
        self.progress = progress
        self.state = RunState.IDLE
        self.result: Optional[TrapResult] = None
        self.error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self._cancelled = threading.Event()

    # public

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def execute(self) -> TrapResult:
        with self._lock:
            if self.state is not RunState.IDLE:
                raise RunAlreadyStarted(f"run already {self.state.value}")
            self.state = RunState.ANALYZING
        try:
            result = self._run()
            self._report(100, "Complete! Colour separated and trapped layers created.")
        except BaseException as exc:
            self.state = RunState.FAILED
            self.error = exc
            raise
        self.result = result
        self.state = RunState.COMPLETE
        return result

    # steps

    def _report(self, percent: float, message: str) -> None:
        if self.progress is not None:
            self.progress(float(percent), message)

    def _check_cancel(self) -> None:
        if self._cancelled.is_set():
            raise TrappingCancelled("trapping cancelled")

    def _run(self) -> TrapResult:
        settings = self.settings
        source = self.source
        if not isinstance(source, Raster):
            raise TypeError(f"expected Raster, got {type(source).__name__}")
        if source.width > LARGE_DOCUMENT_PX or source.height > LARGE_DOCUMENT_PX:
            warn(
                f"Large document ({source.width}x{source.height}) may take time to process"
            )

        self._report(5, "Analyzing document...")
        trap_range = settings.resolve()

        self._report(10, "Analyzing colours...")
        colours = self._analyze(source, settings)

        self.state = RunState.SEPARATING
        plans = self._separate(source, colours, trap_range, settings.dpi)

        self.state = RunState.TRAPPING
        self._report(65, "Applying trapping to separated layers...")
        self._trap(plans, settings.workers)

        return TrapResult(layers=plans, trap_range=trap_range, dpi=settings.dpi)

    def _analyze(self, source: Raster, settings: TrapSettings) -> List[ColourEntry]:
        scan = analyze(source)
        significant = filter_significant(scan.colours, scan.total_pixels)
        if settings.debug:
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Size", f"{source.width}x{source.height}"),
                        ("Unique colours", scan.unique_colours),
                        ("Threshold", significance_threshold(scan.total_pixels)),
                        ("Significant", len(significant)),
                    ]
                )
            )
            for c in scan.colours:
                debug_log(
                    f"  {c.hex}  pixels={format_number_compact(c.pixel_count)}  "
                    f"lightness={c.lightness:.1f}"
                )
        check_palette_size(significant, settings.max_colours)
        return order_by_lightness(significant)

    def _separate(
        self,
        source: Raster,
        colours: List[ColourEntry],
        trap_range: TrapRange,
        dpi: float,
    ) -> List[LayerPlan]:
        n = len(colours)
        plans: List[LayerPlan] = []
        for i, colour in enumerate(colours):
            self._check_cancel()
            inches = layer_trap(i, n, trap_range.min_inches, trap_range.max_inches)
            plans.append(
                LayerPlan(
                    colour=colour,
                    index=i,
                    separated=extract(source, colour),
                    trap_pixels=to_pixels(inches, dpi),
                )
            )
            self._report(
                25 + ((i + 1) / n) * 30,
                f"Separating colour {i + 1}/{n}: {colour.label}",
            )
        return plans

    def _trap(self, plans: List[LayerPlan], workers: int) -> None:
        n = len(plans)

        def work(plan: LayerPlan) -> Raster:
            self._check_cancel()
            return trap_layer(plans, plan)

        if workers <= 1 or n <= 1:
            trapped = []
            for i, plan in enumerate(plans):
                trapped.append(work(plan))
                self._report(
                    65 + ((i + 1) / n) * 30,
                    f"Trapping layer {i + 1}/{n}: {plan.colour.label} ({plan.trap_pixels}px)",
                )
        else:
            with ThreadPoolExecutor(max_workers=min(workers, n)) as pool:
                futures = [pool.submit(work, plan) for plan in plans]
                trapped = []
                for i, (plan, fut) in enumerate(zip(plans, futures)):
                    trapped.append(fut.result())
                    self._report(
                        65 + ((i + 1) / n) * 30,
                        f"Trapping layer {i + 1}/{n}: {plan.colour.label} ({plan.trap_pixels}px)",
                    )

        # Only publish once every layer succeeded.
        for plan, raster in zip(plans, trapped):
            plan.raster = raster


def trap_raster(
    source: Raster,
    min_trap: str = "0",
    max_trap: str = "1/32",
    dpi: float = DEFAULT_DPI,
    *,
    mode: str = DEFAULT_MODE,
    workers: int = 1,
    progress: Optional[ProgressCallback] = None,
    debug: bool = False,
) -> TrapResult:
    """Separate and trap `source` in one call."""
    settings = TrapSettings(
        min_trap=min_trap,
        max_trap=max_trap,
        dpi=dpi,
        mode=mode,
        workers=workers,
        debug=debug,
    )
    return TrappingRun(source, settings, progress).execute()


__all__ = [
    "RunState",
    "TrapSettings",
    "TrapResult",
    "TrappingRun",
    "trap_layer",
    "trap_raster",
]
