"""voxform: voxel massing grids exchanged with image-translation models."""

from .exceptions import (
    VoxformError,
    InvalidDimensions,
    OutOfCapacity,
    InvalidTransition,
    RasterDecodeError,
)
from .models import GridMetadata, DecodeParams, SampleSetConfig, EditorConfig
from .utils.classes import CellState
from .grid import Cell, VoxelGrid, SelectionEngine, SelectionStage, box_from_corner
from .codec import image_from_grid, set_states_from_image, refine_with_model
from .editor import VoxelEditor
from .config import load_config

__version__ = "0.1.0"

__all__ = [
    "VoxformError",
    "InvalidDimensions",
    "OutOfCapacity",
    "InvalidTransition",
    "RasterDecodeError",
    "GridMetadata",
    "DecodeParams",
    "SampleSetConfig",
    "EditorConfig",
    "CellState",
    "Cell",
    "VoxelGrid",
    "SelectionEngine",
    "SelectionStage",
    "box_from_corner",
    "image_from_grid",
    "set_states_from_image",
    "refine_with_model",
    "VoxelEditor",
    "load_config",
]
