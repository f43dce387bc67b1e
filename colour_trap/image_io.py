# colour_trap/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import Raster
from .pipeline import TrapResult

"""
Image I/O helpers: file-backed pixel source and pixel sink for the trapping core.

Rasters are read as sRGB RGBA. Alpha is kept as-is; the core only asks
whether it is zero.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]


def _convert_to_srgb_rgba(im: Image.Image, convert_icc: bool) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if convert_icc and icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert("RGBA"),
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            pass

    return im.convert("RGBA")


def load_raster(path: Path, convert_icc: bool = False) -> Raster:
    """
    Read any Pillow-readable image as an RGBA Raster.

    ICC conversion is off by default: it can move flat colours off their
    exact RGB values, which would split one ink into several.
    """
    with Image.open(path) as im0:
        im = _convert_to_srgb_rgba(im0, convert_icc)
    arr = np.array(im, dtype=np.uint8)
    return Raster(np.ascontiguousarray(arr))


def read_dpi(path: Path, default: Optional[float] = None) -> Optional[float]:
    """Horizontal resolution stored in the file, or `default`."""
    with Image.open(path) as im:
        dpi = im.info.get("dpi")
    if not dpi:
        return default
    try:
        value = float(dpi[0])
    except (TypeError, ValueError, IndexError):
        return default
    return value if value > 0 else default


def save_raster(path: Path, raster: Raster, dpi: Optional[float] = None) -> Path:
    """Write a raster as RGBA PNG. Returns the path actually written."""
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    path.parent.mkdir(parents=True, exist_ok=True)
    im = Image.fromarray(np.ascontiguousarray(raster.pixels))
    if dpi:
        im.save(path, dpi=(dpi, dpi))
    else:
        im.save(path)
    return path


def trapped_output_name(name: str) -> str:
    """'art.png' -> 'art-trapped.png', 'art' -> 'art-trapped'."""
    dot = name.rfind(".")
    if dot <= 0:
        return f"{name}-trapped"
    return f"{name[:dot]}-trapped{name[dot:]}"


def layer_file_name(index: int, hex_code: str, trap_pixels: int) -> str:
    """Sortable per-layer file name, lightest first: '00_ff0000_trap4px.png'."""
    return f"{index:02d}_{hex_code.lstrip('#')}_trap{trap_pixels}px.png"


def write_layers(outdir: Path, result: TrapResult) -> List[Tuple[Path, int]]:
    """
    Write every layer as its own PNG, lightest first.

    Returns [(path, trap_pixels), ...] in layer order.
    """
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    written: List[Tuple[Path, int]] = []
    for plan in result.layers:
        dst = outdir / layer_file_name(plan.index, plan.colour.hex, plan.trap_pixels)
        written.append((save_raster(dst, plan.raster, result.dpi), plan.trap_pixels))
    return written


def composite_layers(result: TrapResult) -> Raster:
    """
    Flatten the layers back into one raster, darkest on top.

    Used as a preview of the printed result.
    """
    first = result.layers[0].raster
    out = np.zeros_like(first.pixels)
    for plan in result.layers:
        opaque = plan.raster.alpha_mask()
        out[opaque] = plan.raster.pixels[opaque]
    return Raster(out)


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "load_raster",
    "read_dpi",
    "save_raster",
    "trapped_output_name",
    "layer_file_name",
    "write_layers",
    "composite_layers",
    "is_image_file",
]
