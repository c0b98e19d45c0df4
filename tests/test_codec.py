import numpy as np
import pytest
from PIL import Image

from conftest import raster_from_footprint, snapshot
from voxform.codec.image import image_from_grid, set_states_from_image
from voxform.codec.raster import as_image, hsv_and_luminance, resample_nearest
from voxform.exceptions import OutOfCapacity, RasterDecodeError
from voxform.grid.voxel_grid import VoxelGrid
from voxform.models import DecodeParams
from voxform.utils.classes import BLACK, RED, WHITE, YELLOW, CellState


def column(grid, x, z):
    return [grid.cell_at((x, y, z)).state for y in range(grid.size[1])]


def test_encode_colours_and_orientation():
    g = VoxelGrid((4, 3, 5))
    g.cell_at((0, 0, 0)).set_state(CellState.SOLID)
    g.cell_at((3, 0, 4)).set_state(CellState.FLAGGED)
    g.cell_at((1, 0, 2)).set_state(CellState.HIGHLIGHTED)

    image = image_from_grid(g)
    assert image.size == (4, 5)
    assert image.mode == "RGB"
    # z = 0 is the bottom row
    assert image.getpixel((0, 4)) == BLACK
    assert image.getpixel((3, 0)) == RED
    assert image.getpixel((1, 2)) == YELLOW
    assert image.getpixel((2, 2)) == WHITE


def test_encode_transparent():
    g = VoxelGrid((3, 2, 3))
    g.cell_at((1, 0, 1)).set_state(CellState.SOLID)
    image = image_from_grid(g, transparent=True)
    assert image.mode == "RGBA"
    assert image.getpixel((1, 1)) == (0, 0, 0, 255)
    assert image.getpixel((0, 0)) == (255, 255, 255, 0)


def test_encode_selected_layer():
    g = VoxelGrid((3, 4, 3))
    g.cell_at((2, 2, 0)).set_state(CellState.FLAGGED)
    assert image_from_grid(g, layer=0).getpixel((2, 2)) == WHITE
    assert image_from_grid(g, layer=2).getpixel((2, 2)) == RED


def test_decode_all_white_marks_nothing():
    g = VoxelGrid((8, 5, 8))
    before = snapshot(g)
    raster = np.full((8, 8, 3), 255, dtype=np.uint8)
    written = set_states_from_image(g, raster, include_solid_pixels=True)
    assert written == {CellState.FLAGGED: 0, CellState.SOLID: 0}
    assert snapshot(g) == before


def test_decode_pure_red_reaches_top():
    g = VoxelGrid((4, 5, 4))
    raster = raster_from_footprint(4, 4, {(1, 2): RED})
    written = set_states_from_image(g, raster)
    assert written[CellState.FLAGGED] == 1
    assert column(g, 1, 2) == [CellState.GROUND, CellState.EMPTY, CellState.EMPTY, CellState.EMPTY, CellState.FLAGGED]


def test_decode_height_follows_saturation():
    g = VoxelGrid((4, 5, 4))
    # saturation 0.5, luminance ~0.33
    raster = raster_from_footprint(4, 4, {(0, 0): (128, 64, 64)})
    set_states_from_image(g, raster)
    assert g.cell_at((0, 2, 0)).state is CellState.FLAGGED
    assert column(g, 0, 0).count(CellState.FLAGGED) == 1


def test_decode_bottom_and_top_fractions():
    g = VoxelGrid((2, 9, 2))
    raster = raster_from_footprint(2, 2, {(0, 0): RED})
    set_states_from_image(g, raster, bottom=0.25, top=0.75)
    # span 0.5 * 8 = 4, base 0.25 * 8 = 2
    assert g.cell_at((0, 6, 0)).state is CellState.FLAGGED


def test_decode_thickness_stacks_downward_and_stops_above_floor():
    g = VoxelGrid((2, 5, 2))
    raster = raster_from_footprint(2, 2, {(0, 0): RED, (1, 1): RED})
    written = set_states_from_image(g, raster, thickness=3)
    assert written[CellState.FLAGGED] == 6
    assert column(g, 0, 0)[2:] == [CellState.FLAGGED] * 3
    assert column(g, 0, 0)[1] is CellState.EMPTY

    g = VoxelGrid((2, 5, 2))
    set_states_from_image(g, raster_from_footprint(2, 2, {(0, 0): RED}), thickness=10)
    assert column(g, 0, 0) == [CellState.GROUND] + [CellState.FLAGGED] * 4


def test_decode_sensitivity_rejects_bright_red():
    g = VoxelGrid((2, 5, 2))
    bright = raster_from_footprint(2, 2, {(0, 0): (255, 128, 128)})
    assert set_states_from_image(g, bright)[CellState.FLAGGED] == 0
    assert set_states_from_image(g, bright, sensitivity=0.9)[CellState.FLAGGED] == 1


def test_decode_zero_height_is_skipped():
    g = VoxelGrid((2, 5, 2))
    # saturation 0.1 rounds to height 0
    raster = raster_from_footprint(2, 2, {(0, 0): (100, 90, 90)})
    assert set_states_from_image(g, raster)[CellState.FLAGGED] == 0
    assert g.cell_at((0, 0, 0)).state is CellState.GROUND


def test_decode_black_columns_only_when_enabled():
    raster = raster_from_footprint(3, 3, {(2, 1): BLACK})

    g = VoxelGrid((3, 4, 3))
    assert set_states_from_image(g, raster)[CellState.SOLID] == 0
    assert column(g, 2, 1) == [CellState.GROUND] + [CellState.EMPTY] * 3

    written = set_states_from_image(g, raster, include_solid_pixels=True)
    assert written[CellState.SOLID] == 3
    assert column(g, 2, 1) == [CellState.GROUND] + [CellState.SOLID] * 3


def test_decode_does_not_clear_existing_marks():
    g = VoxelGrid((3, 4, 3))
    g.cell_at((0, 2, 0)).set_state(CellState.FLAGGED)
    set_states_from_image(g, np.full((3, 3, 3), 255, dtype=np.uint8))
    assert g.cell_at((0, 2, 0)).state is CellState.FLAGGED


def test_decode_resamples_with_nearest():
    g = VoxelGrid((10, 5, 10))
    raster = raster_from_footprint(5, 5, {(1, 1): RED})
    written = set_states_from_image(g, raster)
    assert written[CellState.FLAGGED] == 4
    flagged = {c.coordinate for c in g if c.state is CellState.FLAGGED}
    assert flagged == {(x, 4, z) for x in (2, 3) for z in (2, 3)}


def test_encode_decode_pure_colours():
    source = VoxelGrid((6, 5, 6))
    source.cell_at((1, 0, 1)).set_state(CellState.SOLID)
    source.cell_at((4, 0, 3)).set_state(CellState.FLAGGED)

    target = VoxelGrid((6, 5, 6))
    set_states_from_image(target, image_from_grid(source), include_solid_pixels=True)
    assert column(target, 1, 1) == [CellState.GROUND] + [CellState.SOLID] * 4
    assert target.cell_at((4, 4, 3)).state is CellState.FLAGGED
    assert target.count_states([CellState.FLAGGED])[CellState.FLAGGED] == 1


def test_decode_accepts_float_arrays_and_rgba():
    g = VoxelGrid((2, 5, 2))
    raster = raster_from_footprint(2, 2, {(1, 0): RED}).astype(np.float32) / 255.0
    assert set_states_from_image(g, raster)[CellState.FLAGGED] == 1

    rgba = Image.new("RGBA", (2, 2), (255, 0, 0, 0))
    g = VoxelGrid((2, 5, 2))
    assert set_states_from_image(g, rgba)[CellState.FLAGGED] == 4


def test_decode_height_rounding_past_top_raises_without_writing():
    g = VoxelGrid((2, 8, 2))
    g.cell_at((0, 3, 0)).set_state(CellState.FLAGGED)
    g.cell_at((1, 2, 1)).set_state(CellState.SOLID)
    before = snapshot(g)
    raster = raster_from_footprint(2, 2, {(x, z): RED for x in range(2) for z in range(2)})
    # round(3.5) + round(3.5) == 8, one past the top layer
    with pytest.raises(OutOfCapacity) as excinfo:
        set_states_from_image(g, raster, bottom=0.5, top=1.0, sensitivity=1.0, include_solid_pixels=True)
    assert excinfo.value.coordinate[1] == 8
    assert snapshot(g) == before


@pytest.mark.parametrize(
    "raster",
    [
        np.full((2, 2, 3), 256, dtype=np.int32),
        np.full((2, 2, 3), -1, dtype=np.int16),
        np.full((2, 2), 1000, dtype=np.uint16),
    ],
)
def test_out_of_range_integer_raster_rejected(raster):
    g = VoxelGrid((2, 3, 2))
    before = snapshot(g)
    with pytest.raises(RasterDecodeError):
        set_states_from_image(g, raster, include_solid_pixels=True)
    assert snapshot(g) == before


def test_bool_raster_reads_as_black_and_white():
    assert np.asarray(as_image(np.ones((2, 2, 3), dtype=bool))).max() == 255

    mask = np.ones((2, 2, 3), dtype=bool)
    mask[0, 0] = False
    g = VoxelGrid((2, 3, 2))
    written = set_states_from_image(g, mask, include_solid_pixels=True)
    # raster row 0 col 0 is footprint (0, 1)
    assert written == {CellState.FLAGGED: 0, CellState.SOLID: 2}
    assert column(g, 0, 1) == [CellState.GROUND, CellState.SOLID, CellState.SOLID]


@pytest.mark.parametrize(
    "raster",
    [
        np.zeros((0, 4, 3), dtype=np.uint8),
        np.zeros((4, 4, 2), dtype=np.uint8),
        np.zeros((4,), dtype=np.uint8),
        np.array([[np.nan]]),
        "not an image",
    ],
)
def test_malformed_raster_rejected(raster):
    g = VoxelGrid((2, 2, 2))
    with pytest.raises(RasterDecodeError):
        set_states_from_image(g, raster)


@pytest.mark.parametrize(
    "overrides",
    [{"bottom": 0.8, "top": 0.2}, {"top": 1.5}, {"thickness": -1}, {"sensitivity": 2.0}],
)
def test_invalid_decode_params(overrides):
    g = VoxelGrid((2, 2, 2))
    with pytest.raises(ValueError):
        set_states_from_image(g, np.zeros((2, 2, 3), dtype=np.uint8), DecodeParams(), **overrides)


def test_resample_nearest_keeps_hard_edges():
    image = as_image(raster_from_footprint(2, 2, {(0, 0): RED, (1, 1): BLACK}))
    big = np.asarray(resample_nearest(image, (8, 8)))
    assert set(map(tuple, big.reshape(-1, 3).tolist())) == {RED, BLACK, WHITE}


def test_hsv_and_luminance():
    rgb = np.array([[[1.0, 0.0, 0.0], [1.0, 1.0, 1.0]]])
    hsv, luminance = hsv_and_luminance(rgb)
    assert hsv[0, 0, 1] == pytest.approx(1.0)
    assert hsv[0, 1, 1] == pytest.approx(0.0)
    assert luminance[0, 0] == pytest.approx(0.299)
    assert luminance[0, 1] == pytest.approx(1.0)
