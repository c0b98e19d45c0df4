"""Two-corner box selection.

The engine walks ``IDLE -> SELECTING -> PENDING`` and back to ``IDLE`` on
commit or cancel. While selecting, the first corner is FLAGGED and every other
cell of the inclusive bounding box is HIGHLIGHTED; the states those cells had
before are remembered and put back when the box changes or is discarded.

Committing stamps SOLID columns measured from the grid floor: the box only
contributes its XZ footprint, its vertical span is ignored.
"""

from __future__ import annotations

from enum import Enum
from itertools import product
from typing import Dict, List, Optional, Tuple

from .boxes import box_from_corner
from .cell import Coordinate
from .voxel_grid import VoxelGrid
from ..exceptions import InvalidTransition
from ..utils.classes import CellState, PICKABLE_STATES
from ..utils.logging import get_logger


_logger = get_logger(__name__)


class SelectionStage(Enum):
    IDLE = 0
    SELECTING = 1
    PENDING = 2


def bounding_box(c0: Coordinate, c1: Coordinate) -> List[Coordinate]:
    """All coordinates between two corners, inclusive on every face."""
    return list(product(*(range(min(a, b), max(a, b) + 1) for a, b in zip(c0, c1))))


class SelectionEngine:
    def __init__(self, grid: VoxelGrid) -> None:
        self.grid = grid
        self.stage = SelectionStage.IDLE
        self.first: Optional[Coordinate] = None
        self.second: Optional[Coordinate] = None
        self._box: List[Coordinate] = []
        self._saved: Dict[Coordinate, CellState] = {}

    @property
    def pending_box(self) -> Tuple[Coordinate, ...]:
        return tuple(self._box)

    @property
    def has_pending_box(self) -> bool:
        return bool(self._box)

    def _require(self, *stages: SelectionStage, action: str) -> None:
        if self.stage not in stages:
            allowed = ", ".join(s.name for s in stages)
            raise InvalidTransition(f"Cannot {action} while {self.stage.name}; allowed in {allowed}")

    def begin_selection(self, corner: Coordinate) -> None:
        self._require(SelectionStage.IDLE, action="begin a selection")
        cell = self.grid.active_cell_at(corner)
        if cell.state not in PICKABLE_STATES:
            raise InvalidTransition(
                f"Cannot start a selection on {cell.coordinate} in state {cell.state.name}"
            )
        self._saved = {cell.coordinate: cell.state}
        cell.set_state(CellState.FLAGGED)
        self.first = cell.coordinate
        self.stage = SelectionStage.SELECTING

    def extend_selection(self, corner: Coordinate) -> Tuple[Coordinate, ...]:
        """Highlight the box between the first corner and ``corner``; returns the pending box."""
        self._require(SelectionStage.SELECTING, action="extend a selection")
        corner = self.grid.active_cell_at(corner).coordinate
        if corner == self.first:
            return self.pending_box

        self._restore(keep_first=True)
        box = bounding_box(self.first, corner)
        for coordinate in box:
            if coordinate == self.first:
                continue
            cell = self.grid.cell_at(coordinate)
            self._saved[coordinate] = cell.state
            cell.set_state(CellState.HIGHLIGHTED)

        self.second = corner
        self._box = box
        return self.pending_box

    def end_selection(self) -> SelectionStage:
        """Finish the gesture: keep a pending box, or drop a bare first corner."""
        self._require(SelectionStage.SELECTING, action="end a selection")
        if self._box:
            self.stage = SelectionStage.PENDING
        else:
            self._restore(keep_first=False)
            self._reset()
        return self.stage

    def commit(self, height: int) -> List[Coordinate]:
        """Stamp SOLID columns of ``height`` cells under the pending footprint."""
        self._require(SelectionStage.SELECTING, SelectionStage.PENDING, action="commit")
        if not self._box:
            raise InvalidTransition("Cannot commit without a pending box")

        height = max(1, min(int(height), self.grid.size[1]))
        footprint = sorted({(x, z) for x, _, z in self._box})
        filled = []
        for x, z in footprint:
            for y in range(height):
                self.grid.cell_at((x, y, z)).set_state(CellState.SOLID)
                filled.append((x, y, z))

        # Selection cells above the stamped height go back to what they were
        stamped = set(filled)
        for coordinate, state in self._saved.items():
            if coordinate not in stamped:
                self.grid.cell_at(coordinate).set_state(state)

        _logger.debug("Committed %d columns at height %d", len(footprint), height)
        self._reset()
        return filled

    def cancel(self) -> None:
        self._require(SelectionStage.SELECTING, SelectionStage.PENDING, action="cancel")
        self._restore(keep_first=False)
        self._reset()

    def _restore(self, keep_first: bool) -> None:
        for coordinate, state in list(self._saved.items()):
            if keep_first and coordinate == self.first:
                continue
            self.grid.cell_at(coordinate).set_state(state)
            del self._saved[coordinate]
        self._box = []
        self.second = None

    def _reset(self) -> None:
        self.stage = SelectionStage.IDLE
        self.first = None
        self.second = None
        self._box = []
        self._saved = {}

    def box_from_corner(self, origin, size, order=None, rng=None) -> List[Coordinate]:
        """Non-interactive stamp; only allowed when no gesture is in progress."""
        self._require(SelectionStage.IDLE, action="stamp a box")
        return box_from_corner(self.grid, origin, size, order=order, rng=rng)
