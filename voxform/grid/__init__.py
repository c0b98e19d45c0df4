"""voxform grid subpackage.

Orientation contract:
- Coordinates are (x, y, z) integer triples with y as the vertical axis.
- y = 0 is the ground layer; its resting state is GROUND, higher cells rest EMPTY.
"""

from .cell import Cell
from .voxel_grid import VoxelGrid
from .boxes import box_from_corner, diagonal_corner_from_size, shuffled_directions, SIGN_COMBINATIONS
from .selection import SelectionEngine, SelectionStage, bounding_box

__all__ = [
    "Cell",
    "VoxelGrid",
    "box_from_corner",
    "diagonal_corner_from_size",
    "shuffled_directions",
    "SIGN_COMBINATIONS",
    "SelectionEngine",
    "SelectionStage",
    "bounding_box",
]
