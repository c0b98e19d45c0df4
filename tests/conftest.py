import itertools

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from voxform.grid.voxel_grid import VoxelGrid
from voxform.utils.orientation import footprint_to_raster


@pytest.fixture
def grid():
    return VoxelGrid((10, 5, 10), (12, 6, 12))


@pytest.fixture
def small_grid():
    return VoxelGrid((4, 5, 4), (6, 6, 6))


def snapshot(grid, bounds=None):
    """State of every cell inside ``bounds`` (defaults to the capacity)."""
    bounds = bounds or grid.capacity
    return {c: grid.cell_at(c).state for c in itertools.product(*(range(b) for b in bounds))}


def raster_from_footprint(width, depth, colors, background=(255, 255, 255)):
    """uint8 raster whose footprint pixel (x, z) is ``colors.get((x, z), background)``."""
    footprint = np.empty((width, depth, 3), dtype=np.uint8)
    footprint[...] = background
    for (x, z), rgb in colors.items():
        footprint[x, z] = rgb
    return footprint_to_raster(footprint)
