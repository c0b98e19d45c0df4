"""Single-corner box stamping.

A box is described by one corner on the grid and an extent. The opposite
corner is found by trying the four X/Z sign combinations (Y is always
added) and keeping the first one that lands inside the active size.

Fill ranges are asymmetric: X and Z are half-open ``[min, max)`` while Y is
inclusive ``[min, max]``, so a box of extent ``(sx, sy, sz)`` covers
``sx * (sy + 1) * sz`` cells.
"""

from __future__ import annotations

import random
from itertools import product
from typing import List, Optional, Sequence, Tuple

from .cell import Coordinate
from .voxel_grid import VoxelGrid
from ..exceptions import OutOfCapacity
from ..utils.classes import CellState
from ..utils.logging import get_logger


_logger = get_logger(__name__)

Direction = Tuple[int, int]

# (x sign, z sign); order used when neither an explicit order nor an rng is given
SIGN_COMBINATIONS: Tuple[Direction, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))


def shuffled_directions(rng: random.Random) -> List[Direction]:
    """Shuffle the X signs and the Z signs independently and nest them (X outer)."""
    x_signs = [1, -1]
    z_signs = [1, -1]
    rng.shuffle(x_signs)
    rng.shuffle(z_signs)
    return [(sx, sz) for sx in x_signs for sz in z_signs]


def _resolve_order(order: Optional[Sequence[Direction]], rng: Optional[random.Random]) -> List[Direction]:
    if order is None:
        return shuffled_directions(rng) if rng is not None else list(SIGN_COMBINATIONS)
    resolved = [tuple(int(s) for s in d) for d in order]
    if not resolved:
        raise ValueError("Direction order must not be empty")
    for d in resolved:
        if d not in SIGN_COMBINATIONS:
            raise ValueError(f"Invalid direction {d}; expected one of {SIGN_COMBINATIONS}")
    return resolved


def diagonal_corner_from_size(
    grid: VoxelGrid,
    origin: Coordinate,
    size: Coordinate,
    order: Optional[Sequence[Direction]] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Coordinate, bool]:
    """Return the opposite corner and whether it lies inside the active size.

    When no combination fits, the last corner tried is returned with ``False``.
    """
    ox, oy, oz = origin
    sx, sy, sz = size
    corner = tuple(origin)
    for dx, dz in _resolve_order(order, rng):
        corner = (ox + dx * sx, oy + sy, oz + dz * sz)
        if grid.is_inside(corner):
            return corner, True
    return corner, False


def box_from_corner(
    grid: VoxelGrid,
    origin: Coordinate,
    size: Coordinate,
    order: Optional[Sequence[Direction]] = None,
    rng: Optional[random.Random] = None,
    state: CellState = CellState.SOLID,
) -> List[Coordinate]:
    """
    Stamp a box of ``state`` cells growing from ``origin``.

    Args:
        grid: Grid to modify
        origin: Corner cell, must be inside the active size
        size: Non-negative (x, y, z) extent of the box
        order: Explicit sequence of (x sign, z sign) trials
        rng: Random generator used to shuffle the trial order when ``order`` is None

    Returns:
        Coordinates of the filled cells

    Raises:
        OutOfCapacity: origin outside the active size, or no trial fits and the
            fallback box leaves the active size (nothing is modified)
    """
    origin = grid.active_cell_at(origin).coordinate
    size = tuple(int(s) for s in size)
    if len(size) != 3 or any(s < 0 for s in size):
        raise ValueError(f"Box size must be a non-negative (x, y, z) triple, got {size}")

    corner, fits = diagonal_corner_from_size(grid, origin, size, order=order, rng=rng)

    (x0, y0, z0), (x1, y1, z1) = origin, corner
    coordinates = list(product(
        range(min(x0, x1), max(x0, x1)),
        range(min(y0, y1), max(y0, y1) + 1),
        range(min(z0, z1), max(z0, z1)),
    ))

    if not fits:
        outside = [c for c in coordinates if not grid.is_inside(c)]
        if outside:
            raise OutOfCapacity(
                outside[0], grid.size,
                f"Box from {origin} with size {size} does not fit the active size {grid.size}",
            )

    for coordinate in coordinates:
        grid.cell_at(coordinate).set_state(state)

    _logger.debug("Box from %s to %s filled %d cells", origin, corner, len(coordinates))
    return coordinates
