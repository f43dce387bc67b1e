#!/usr/bin/env python3
"""
trap_image.py
Separate a flattened few-colour image into trapped per-colour layers.

Usage:
  python trap_image.py INPUT [--outdir DIR] --min 0 --max 1/32 --dpi 300 --mode [offset|screen] --debug

Trap sizes:
  "4pt" (points), "1/32" (fraction of an inch) or "0.03125" (decimal inches).
  The lightest colour traps by --max, the darkest by --min, linear in between.

Input:
  Any Pillow-readable image with at most 10 flat colours. Transparent pixels
  are ignored. DPI defaults to the file's own resolution, then 300.

Output:
  One PNG per colour in OUTDIR (default <stem>-trapped/ next to INPUT),
  named 00_<hex>_trap<N>px.png lightest first, plus an optional underbase.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from colour_trap.constants import DEFAULT_DPI, MAX_COLOURS, MODE_DEFAULTS
from colour_trap.core_types import Raster, hex_to_rgb
from colour_trap.image_io import (
    composite_layers,
    is_image_file,
    load_raster,
    read_dpi,
    save_raster,
    trapped_output_name,
    write_layers,
)
from colour_trap.pipeline import TrapResult, TrappingRun, TrapSettings
from colour_trap.separate import generate_underbase
from colour_trap.trap_size import format_length, trapping_strategy
from colour_trap.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_total_duration_compact,
    log,
    print_banner,
    print_config_line,
    print_progress_line,
)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for colour trapping.

    Returns:
      argparse.Namespace with:
        src: input image Path
        outdir: optional output directory
        min_trap / max_trap: trap size strings (None -> mode defaults)
        dpi: optional resolution override
        mode: "offset" | "screen"
        workers: threads used for per-layer dilation
        underbase / choke / garment: screen-printing underbase options
        preview: also write a flattened preview
        debug: verbose palette details
    """
    parser = argparse.ArgumentParser(
        prog="trap_image",
        description="Separate a flat-colour image into trapped per-colour layers.",
    )
    parser.add_argument("src", type=Path, help="Input image")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--mode",
        choices=sorted(MODE_DEFAULTS),
        default="offset",
        help="Print process; picks the default trap range.",
    )
    parser.add_argument(
        "--min", dest="min_trap", default=None, help='Darkest layer trap ("0", "1/64", "1pt")'
    )
    parser.add_argument(
        "--max", dest="max_trap", default=None, help='Lightest layer trap ("1/32", "4pt")'
    )
    parser.add_argument(
        "--dpi", type=float, default=None, help="Resolution override (default: file, then 300)"
    )
    parser.add_argument(
        "--max-colours", type=int, default=MAX_COLOURS, help="Maximum separations"
    )
    parser.add_argument("--workers", type=int, default=1, help="Dilation threads")
    parser.add_argument(
        "--underbase", action="store_true", help="Also write a white underbase layer"
    )
    parser.add_argument(
        "--choke", type=int, default=0, help="Underbase choke in pixels"
    )
    parser.add_argument(
        "--garment", default="#ffffff", help="Garment colour excluded from the underbase"
    )
    parser.add_argument(
        "--preview", action="store_true", help="Also write a flattened preview PNG"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose palette details")
    return parser.parse_args(argv)


def _report_progress(percent: float, message: str) -> None:
    print_progress_line(f"{percent:5.1f}%  {message}", final=percent >= 100)


def _print_result(result: TrapResult) -> None:
    log(f"Layers: {len(result)} (lightest first)")
    for plan in result.layers:
        log(
            f"  {plan.index:2d}  {plan.colour.hex}  {plan.colour.label}: "
            f"pixels={plan.colour.pixel_count:,}  trap={plan.trap_pixels}px"
        )


def run(args: argparse.Namespace) -> int:
    t_start = time.perf_counter()
    src: Path = args.src
    if not src.is_file():
        error(f"not found: {src}")
        return 2
    if not is_image_file(src):
        error(f"not a readable image: {src}")
        return 2

    strategy = trapping_strategy(args.mode)
    dpi = args.dpi if args.dpi else read_dpi(src, float(DEFAULT_DPI))
    settings = TrapSettings(
        min_trap=args.min_trap if args.min_trap is not None else strategy.default_min,
        max_trap=args.max_trap if args.max_trap is not None else strategy.default_max,
        dpi=dpi,
        mode=args.mode,
        max_colours=args.max_colours,
        workers=max(1, args.workers),
        debug=args.debug,
    )
    outdir = args.outdir or src.with_name(trapped_output_name(src.stem))

    print_banner(src.name)
    print_config_line(
        "trap",
        [
            ("Mode", strategy.name),
            ("Min", settings.min_trap),
            ("Max", settings.max_trap),
            ("DPI", dpi),
            ("Workers", settings.workers),
        ],
        debug=False,
    )

    raster: Raster = load_raster(src)
    try:
        garment = hex_to_rgb(args.garment)
        result = TrappingRun(raster, settings, progress=_report_progress).execute()
    except ValueError as exc:
        print_progress_line("", final=True)
        error(str(exc))
        return 1

    if args.debug:
        debug_log(
            f"trap range {format_length(result.trap_range.min_inches)} .. "
            f"{format_length(result.trap_range.max_inches)}"
        )
    _print_result(result)

    for path, _trap_px in write_layers(outdir, result):
        log(f"Wrote {path}")

    if args.underbase:
        underbase = generate_underbase(raster, garment=garment, choke_pixels=args.choke)
        log(f"Wrote {save_raster(outdir / 'underbase.png', underbase, dpi)}")

    if args.preview:
        log(f"Wrote {save_raster(outdir / 'preview.png', composite_layers(result), dpi)}")

    log(f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point."""
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)
    try:
        status = run(args)
    except (ValueError, OSError) as exc:
        error(str(exc))
        status = 2
    sys.exit(status)


if __name__ == "__main__":
    main()
