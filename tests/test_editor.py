import numpy as np
import pytest
from PIL import Image

from conftest import raster_from_footprint
from voxform.editor import VoxelEditor
from voxform.exceptions import InvalidTransition
from voxform.grid.selection import SelectionStage
from voxform.models import EditorConfig, SampleSetConfig
from voxform.utils.classes import RED, CellState


def black_to_red(image):
    arr = np.asarray(image.convert("RGB")).copy()
    arr[np.all(arr == 0, axis=-1)] = RED
    return Image.fromarray(arr)


@pytest.fixture
def editor(grid):
    return VoxelEditor(grid)


def solid_count(grid):
    return grid.count_states([CellState.SOLID])[CellState.SOLID]


def test_press_and_release_commits_box(editor, grid):
    assert editor.height == 5
    assert editor.press((1, 0, 1))
    assert editor.press((3, 0, 2))
    filled = editor.release()
    assert len(filled) == 6 * 5
    assert solid_count(grid) == 30
    assert editor.selection.stage is SelectionStage.IDLE


def test_press_ignores_unpickable_cells(editor, grid):
    grid.cell_at((2, 0, 2)).set_state(CellState.SOLID)
    assert not editor.press((2, 0, 2))
    assert editor.selection.stage is SelectionStage.IDLE
    editor.press((1, 0, 1))
    assert not editor.press((1, 0, 1))


def test_release_without_box_restores_first_corner(editor, grid):
    assert editor.release() == []
    editor.press((4, 0, 4))
    assert editor.release() == []
    assert grid.cell_at((4, 0, 4)).state is CellState.GROUND
    assert editor.selection.stage is SelectionStage.IDLE


def test_height_is_clamped(editor):
    assert editor.raise_height() == 5
    for _ in range(10):
        editor.lower_height()
    assert editor.height == 1
    assert editor.raise_height() == 2


def test_committed_height_follows_editor_height(editor, grid):
    editor.lower_height()
    editor.lower_height()
    editor.press((0, 0, 0))
    editor.press((1, 0, 0))
    editor.release()
    assert [grid.cell_at((0, y, 0)).state for y in range(5)].count(CellState.SOLID) == 3


def test_update_grid_size_cancels_selection_and_clamps_height(editor, grid):
    editor.press((1, 0, 1))
    editor.press((2, 0, 2))
    editor.update_grid_size((8, 3, 8))
    assert editor.selection.stage is SelectionStage.IDLE
    assert grid.size == (8, 3, 8)
    assert editor.height == 3
    assert not [c for c in grid if c.state is CellState.HIGHLIGHTED]


def test_clear(editor, grid):
    grid.cell_at((1, 1, 1)).set_state(CellState.SOLID)
    editor.press((3, 0, 3))
    editor.clear()
    assert solid_count(grid) == 0
    assert editor.selection.stage is SelectionStage.IDLE


def test_random_boxes_are_seeded(grid):
    from voxform.grid.voxel_grid import VoxelGrid

    a = VoxelEditor(grid, seed=11)
    b = VoxelEditor(VoxelGrid(grid.size, grid.capacity), seed=11)
    assert a.random_boxes(3, 2, 3, 2, 3) == 3
    b.random_boxes(3, 2, 3, 2, 3)
    assert np.array_equal(a.grid.state_array(), b.grid.state_array())


def test_release_runs_translator(grid):
    editor = VoxelEditor(grid, translator=black_to_red, height=2)
    editor.press((1, 0, 1))
    editor.press((2, 0, 3))
    editor.release()

    flagged = {c.coordinate for c in grid if c.state is CellState.FLAGGED}
    assert flagged == {(x, 4, z) for x in (1, 2) for z in (1, 2, 3)}
    assert solid_count(grid) == 6 * 2
    assert editor.source_image.size == (256, 256)


def test_predict_requires_translator(editor):
    with pytest.raises(RuntimeError):
        editor.predict_and_update()


def test_update_reds_replaces_flagged_cells(editor, grid):
    grid.cell_at((5, 3, 5)).set_state(CellState.FLAGGED)
    grid.cell_at((6, 0, 6)).set_state(CellState.SOLID)
    raster = raster_from_footprint(10, 10, {(0, 0): RED, (6, 6): (0, 0, 0)})
    assert editor.update_reds(raster) == 1
    assert grid.cell_at((5, 3, 5)).state is CellState.EMPTY
    assert grid.cell_at((0, 4, 0)).state is CellState.FLAGGED
    assert solid_count(grid) == 1

    # the image is kept as the source for later updates
    assert editor.update_reds() == 1


def test_read_image_rebuilds_grid(grid):
    from voxform.models import DecodeParams

    editor = VoxelEditor(grid, decode_params=DecodeParams(include_solid_pixels=True))
    grid.cell_at((9, 2, 9)).set_state(CellState.SOLID)
    raster = raster_from_footprint(10, 10, {(2, 2): (0, 0, 0), (3, 3): RED})
    written = editor.read_image(raster)
    assert written == {CellState.FLAGGED: 1, CellState.SOLID: 4}
    assert grid.cell_at((9, 2, 9)).state is CellState.EMPTY


def test_read_image_needs_an_image(editor):
    with pytest.raises(ValueError):
        editor.read_image()


def test_generate_sample_set(grid):
    cfg = SampleSetConfig(samples=2, image_size=16, min_x=1, max_x=3, min_z=1, max_z=3)
    editor = VoxelEditor(grid, sample_config=cfg)
    names = []
    assert editor.generate_sample_set(writer=lambda image, name: names.append(name)) == names
    assert names == ["sample_0000.png", "sample_0001.png"]

    editor.press((1, 0, 1))
    with pytest.raises(InvalidTransition):
        editor.generate_sample_set(writer=lambda image, name: None)


def test_save_grid(editor, grid, tmp_path):
    grid.cell_at((0, 1, 0)).set_state(CellState.SOLID)
    path = editor.save_grid("block", directory=str(tmp_path / "Grids"))
    assert path.endswith("block.csv")
    with open(path, encoding="utf-8") as f:
        assert f.read() == "0,1,0,SOLID\n"
    with pytest.raises(ValueError):
        editor.save_grid("")


def test_from_config():
    cfg = EditorConfig(grid_size=(6, 4, 6), max_grid_size=(8, 4, 8), cell_scale=0.5, seed=1)
    editor = VoxelEditor.from_config(cfg)
    assert editor.grid.size == (6, 4, 6)
    assert editor.grid.capacity == (8, 4, 8)
    assert editor.grid.cell_scale == 0.5
    assert editor.height == 4
    assert editor.sample_config is cfg.samples
