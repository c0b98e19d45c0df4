import os
from typing import Iterable, TextIO

from PIL import Image

from ..grid.voxel_grid import VoxelGrid
from ..utils.classes import CellState, parse_states
from ..utils.logging import get_logger


_logger = get_logger(__name__)

DEFAULT_EXPORT_STATES = (CellState.FLAGGED, CellState.SOLID)


def export_cells(grid: VoxelGrid, states: Iterable[CellState], sink: TextIO) -> int:
    """
    Write one ``x,y,z,STATE`` line per active cell whose state is in ``states``.

    Lines follow the grid's active-cell order; there is no header row.
    Returns the number of lines written.
    """
    wanted = parse_states(states)
    written = 0
    for cell in grid.iter_active_cells():
        if cell.state in wanted:
            x, y, z = cell.coordinate
            sink.write(f"{x},{y},{z},{cell.state.name}\n")
            written += 1
    return written


def save_cells(grid: VoxelGrid, path: str, states: Iterable[CellState] = DEFAULT_EXPORT_STATES) -> int:
    """Export cells to a text file, creating parent directories as needed."""
    if not os.path.basename(path):
        raise ValueError("Cannot save a grid without a file name")
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "w", encoding="utf-8", newline="\n") as f:
        written = export_cells(grid, states, f)

    _logger.info("Saved %d cells to %s", written, path)
    return written


def save_image(image: Image.Image, path: str) -> str:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    image.save(path)
    _logger.debug("Saved image to %s", path)
    return path


def load_image(path: str) -> Image.Image:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")
    with Image.open(path) as img:
        img.load()
        return img.copy()
