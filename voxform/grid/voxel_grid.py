"""Fixed-capacity 3D grid of cells with a resizable active region.

Indexing follows ``(x, y, z)`` with y as the vertical axis; y = 0 is the
ground layer. The full capacity is allocated once; resizing only moves the
boundary between active cells and UNALLOCATED cells.
"""

from __future__ import annotations

from collections import Counter
from itertools import product
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .cell import Cell
from ..exceptions import InvalidDimensions, OutOfCapacity
from ..models import GridMetadata
from ..utils.classes import CellState, default_state_for
from ..utils.logging import get_logger


_logger = get_logger(__name__)

# +x, -x, +y, -y, +z, -z
_FACE_OFFSETS = (
    (1, 0, 0), (-1, 0, 0),
    (0, 1, 0), (0, -1, 0),
    (0, 0, 1), (0, 0, -1),
)


def _as_triple(value, name: str) -> Tuple[int, int, int]:
    try:
        items = tuple(value)
    except TypeError:
        raise InvalidDimensions(f"{name} must be an (x, y, z) triple, got {value!r}") from None
    if len(items) != 3:
        raise InvalidDimensions(f"{name} must have 3 components, got {value!r}")
    triple = []
    for v in items:
        if isinstance(v, bool) or int(v) != v:
            raise InvalidDimensions(f"{name} components must be integers, got {value!r}")
        triple.append(int(v))
    return tuple(triple)


def _inside(coordinate, bounds) -> bool:
    return all(0 <= c < b for c, b in zip(coordinate, bounds))


class VoxelGrid:
    def __init__(
        self,
        size,
        capacity=None,
        origin: Tuple[float, float, float] = (0.0, 0.0, 0.0),
        cell_scale: float = 1.0,
    ) -> None:
        size = _as_triple(size, "size")
        capacity = _as_triple(capacity if capacity is not None else size, "capacity")
        if any(c <= 0 for c in capacity):
            raise InvalidDimensions(f"capacity must be positive, got {capacity}")
        self._check_size(size, capacity)

        self.capacity: Tuple[int, int, int] = capacity
        self.size: Tuple[int, int, int] = size
        self.meta = GridMetadata(origin=tuple(float(o) for o in origin), cell_scale=float(cell_scale))

        self._cells = np.empty(capacity, dtype=object)
        for coordinate in product(*(range(c) for c in capacity)):
            if _inside(coordinate, size):
                state = default_state_for(coordinate[1])
            else:
                state = CellState.UNALLOCATED
            self._cells[coordinate] = Cell(coordinate, state)

        _logger.debug("Created grid size=%s capacity=%s", size, capacity)

    @staticmethod
    def _check_size(size, capacity) -> None:
        if any(s <= 0 for s in size):
            raise InvalidDimensions(f"size must be positive, got {size}")
        if any(s > c for s, c in zip(size, capacity)):
            raise InvalidDimensions(f"size {size} exceeds capacity {capacity}")

    # -----------------------------
    # Geometry
    # -----------------------------

    @property
    def origin(self) -> Tuple[float, float, float]:
        return self.meta.origin

    @property
    def cell_scale(self) -> float:
        return self.meta.cell_scale

    def cell_center(self, coordinate) -> Tuple[float, float, float]:
        """World-space centre of the cell at ``coordinate``."""
        return tuple(
            (c + o) * self.meta.cell_scale for c, o in zip(coordinate, self.meta.origin)
        )

    def is_inside(self, coordinate) -> bool:
        """True when ``coordinate`` lies in the active region."""
        return len(coordinate) == 3 and _inside(coordinate, self.size)

    # -----------------------------
    # Access
    # -----------------------------

    def cell_at(self, coordinate) -> Cell:
        if len(coordinate) != 3 or not _inside(coordinate, self.capacity):
            raise OutOfCapacity(coordinate, self.capacity)
        return self._cells[tuple(int(c) for c in coordinate)]

    def active_cell_at(self, coordinate) -> Cell:
        """Like :meth:`cell_at` but also rejects coordinates outside the active size."""
        if len(coordinate) != 3 or not _inside(coordinate, self.size):
            raise OutOfCapacity(
                coordinate, self.size,
                f"Coordinate {tuple(coordinate)} is outside the active size {self.size}",
            )
        return self._cells[tuple(int(c) for c in coordinate)]

    def iter_active_cells(self) -> Iterator[Cell]:
        """Yield active cells in x-major, then y, then z order."""
        sx, sy, sz = self.size
        for x in range(sx):
            for y in range(sy):
                for z in range(sz):
                    yield self._cells[x, y, z]

    def __iter__(self) -> Iterator[Cell]:
        return self.iter_active_cells()

    def __len__(self) -> int:
        sx, sy, sz = self.size
        return sx * sy * sz

    def face_neighbors(self, coordinate) -> List[Cell]:
        """Cells sharing a face with ``coordinate`` inside the active size (no wraparound)."""
        x, y, z = self.active_cell_at(coordinate).coordinate
        neighbors = []
        for dx, dy, dz in _FACE_OFFSETS:
            n = (x + dx, y + dy, z + dz)
            if _inside(n, self.size):
                neighbors.append(self._cells[n])
        return neighbors

    def state_array(self) -> np.ndarray:
        """Integer state codes of the active region, shape ``size``."""
        sx, sy, sz = self.size
        active = self._cells[:sx, :sy, :sz]
        return np.vectorize(lambda c: int(c.state), otypes=[np.int8])(active)

    def layer_states(self, layer: int = 0) -> np.ndarray:
        """Footprint ``[x, z]`` of state codes for one horizontal layer."""
        if not 0 <= layer < self.size[1]:
            raise OutOfCapacity(
                (0, layer, 0), self.size,
                f"Layer {layer} is outside the active height {self.size[1]}",
            )
        sx, _, sz = self.size
        cells = self._cells[:sx, layer, :sz]
        return np.vectorize(lambda c: int(c.state), otypes=[np.int8])(cells)

    def count_states(self, states: Optional[Iterable[CellState]] = None) -> Dict[CellState, int]:
        counts = Counter(cell.state for cell in self.iter_active_cells())
        if states is None:
            return dict(counts)
        return {CellState(s): counts.get(CellState(s), 0) for s in states}

    # -----------------------------
    # Mutation
    # -----------------------------

    def resize(self, new_size) -> None:
        """Move the active boundary to ``new_size`` in a single pass.

        Cells leaving the active region become UNALLOCATED, cells entering it
        get their default state, cells in both keep their state.
        """
        new_size = _as_triple(new_size, "new_size")
        self._check_size(new_size, self.capacity)
        old_size = self.size
        if new_size == old_size:
            return

        end = tuple(max(a, b) for a, b in zip(old_size, new_size))
        removed = added = 0
        for coordinate in product(*(range(e) for e in end)):
            in_old = _inside(coordinate, old_size)
            in_new = _inside(coordinate, new_size)
            if in_old and not in_new:
                self._cells[coordinate].set_state(CellState.UNALLOCATED)
                removed += 1
            elif in_new and not in_old:
                self._cells[coordinate].set_state(default_state_for(coordinate[1]))
                added += 1

        self.size = new_size
        _logger.debug("Resized grid %s -> %s (+%d / -%d cells)", old_size, new_size, added, removed)

    def reset_cell(self, cell: Cell) -> None:
        cell.set_state(default_state_for(cell.coordinate[1]))

    def clear(self) -> None:
        """Reset every active cell to its default state."""
        for cell in self.iter_active_cells():
            self.reset_cell(cell)

    def clear_by_state(self, target_state: CellState) -> int:
        """Reset active cells currently in ``target_state``; returns how many were reset."""
        target_state = CellState(target_state)
        reset = 0
        for cell in self.iter_active_cells():
            if cell.state == target_state:
                self.reset_cell(cell)
                reset += 1
        _logger.debug("Cleared %d %s cells", reset, target_state.name)
        return reset

    def __repr__(self) -> str:
        return f"VoxelGrid(size={self.size}, capacity={self.capacity})"
