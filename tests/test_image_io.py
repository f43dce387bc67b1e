import numpy as np
from PIL import Image

from colour_trap.core_types import Raster
from colour_trap.image_io import (
    composite_layers,
    is_image_file,
    layer_file_name,
    load_raster,
    read_dpi,
    save_raster,
    trapped_output_name,
    write_layers,
)
from colour_trap.pipeline import trap_raster


def test_save_and_load_raster(tmp_path, red_black):
    path = save_raster(tmp_path / "art.tif", red_black, dpi=150)
    assert path.suffix == ".png"
    loaded = load_raster(path)
    assert np.array_equal(loaded.pixels, red_black.pixels)
    assert round(read_dpi(path)) == 150
    assert is_image_file(path)


def test_load_converts_rgb_to_rgba(tmp_path):
    path = tmp_path / "rgb.png"
    Image.new("RGB", (5, 4), (10, 20, 30)).save(path)
    raster = load_raster(path)
    assert raster.size == (5, 4)
    assert np.all(raster.pixels == (10, 20, 30, 255))
    assert read_dpi(path, 300.0) == 300.0


def test_is_image_file_rejects_text(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not an image")
    assert not is_image_file(path)


def test_trapped_output_name():
    assert trapped_output_name("art.png") == "art-trapped.png"
    assert trapped_output_name("art.v2.psd") == "art.v2-trapped.psd"
    assert trapped_output_name("art") == "art-trapped"
    assert trapped_output_name(".hidden") == ".hidden-trapped"


def test_write_layers_lightest_first(tmp_path, red_black):
    result = trap_raster(red_black, "0", "4pt", dpi=72)
    written = write_layers(tmp_path / "out", result)
    names = [p.name for p, _ in written]
    assert names == [layer_file_name(0, "#ff0000", 4), layer_file_name(1, "#000000", 0)]
    assert names == ["00_ff0000_trap4px.png", "01_000000_trap0px.png"]
    red = load_raster(written[0][0])
    assert np.array_equal(red.pixels, result.layers[0].raster.pixels)


def test_composite_puts_darkest_on_top(red_black):
    result = trap_raster(red_black, "0", "4pt", dpi=72)
    flat = composite_layers(result)
    # Trapped red sits under black, so the printed image is unchanged.
    assert np.array_equal(flat.pixels, red_black.pixels)
    assert isinstance(flat, Raster)
