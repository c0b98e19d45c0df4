"""Random massing generation for training sample sets.

Each sample is a cleared grid with a random number of random boxes stamped
from ground-level corners, encoded with transparency and padded to the
model's square input size.
"""

import os
import random
from typing import Callable, List, Optional

from PIL import Image

from .io import save_image
from ..codec.image import image_from_grid
from ..codec.raster import pad_to_square
from ..exceptions import OutOfCapacity
from ..grid.boxes import box_from_corner
from ..grid.voxel_grid import VoxelGrid
from ..models import SampleSetConfig
from ..utils.logging import get_logger


_logger = get_logger(__name__)

SampleWriter = Callable[[Image.Image, str], object]


def _random_range(rng: random.Random, low: int, high: int) -> int:
    """Integer in [low, high); ``low`` when the range is empty."""
    if high < low:
        raise ValueError(f"Invalid range [{low}, {high})")
    if high == low:
        return low
    return rng.randrange(low, high)


def create_random_box(
    grid: VoxelGrid,
    min_x: int,
    max_x: int,
    min_z: int,
    max_z: int,
    rng: random.Random,
) -> List[tuple]:
    """
    Stamp one full-height box of random footprint at a random ground cell.

    A box that cannot be placed inside the active size is skipped.
    Returns the filled coordinates (empty when skipped).
    """
    size_x = _random_range(rng, min_x, max_x)
    size_z = _random_range(rng, min_z, max_z)
    size = (size_x, grid.size[1] - 1, size_z)

    origin = (rng.randrange(grid.size[0]), 0, rng.randrange(grid.size[2]))

    try:
        return box_from_corner(grid, origin, size, rng=rng)
    except OutOfCapacity as e:
        _logger.debug("Skipping box at %s: %s", origin, e)
        return []


def populate_random_boxes(
    grid: VoxelGrid,
    quantity: int,
    min_x: int,
    max_x: int,
    min_z: int,
    max_z: int,
    rng: random.Random,
) -> int:
    """Stamp ``quantity`` random boxes; returns how many were placed."""
    placed = 0
    for _ in range(quantity):
        if create_random_box(grid, min_x, max_x, min_z, max_z, rng):
            placed += 1
    return placed


def sample_file_name(index: int) -> str:
    return f"sample_{index:04d}.png"


def generate_sample_set(
    grid: VoxelGrid,
    cfg: Optional[SampleSetConfig] = None,
    writer: Optional[SampleWriter] = None,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """
    Generate ``cfg.samples`` random massing images.

    Args:
        grid: Grid used as scratch space; it is cleared before every sample
        cfg: Sample set parameters
        writer: Called with (image, file name); defaults to writing PNG files
            into ``cfg.output_dir``
        rng: Random generator; pass a seeded one for reproducible sets

    Returns:
        File names handed to the writer, in order
    """
    cfg = cfg or SampleSetConfig()
    if rng is None:
        rng = random.Random()
    if writer is None:
        os.makedirs(cfg.output_dir, exist_ok=True)

        def writer(image, name):
            return save_image(image, os.path.join(cfg.output_dir, name))

    names = []
    for i in range(cfg.samples):
        grid.clear()
        quantity = _random_range(rng, cfg.min_quantity, cfg.max_quantity)
        populate_random_boxes(grid, quantity, cfg.min_x, cfg.max_x, cfg.min_z, cfg.max_z, rng)

        image = image_from_grid(grid, transparent=True)
        padded, _ = pad_to_square(image, size=cfg.image_size)

        name = sample_file_name(i)
        writer(padded, name)
        names.append(name)

    _logger.info("Generated %d samples", len(names))
    return names
