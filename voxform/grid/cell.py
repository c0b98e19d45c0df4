from __future__ import annotations

from typing import Tuple

from ..utils.classes import CellState

Coordinate = Tuple[int, int, int]


class Cell:
    """A single grid unit.

    Identity is the integer coordinate; the state is the only mutable field.
    Two cells with the same coordinate compare equal whatever their state.
    """

    __slots__ = ("_coordinate", "_state")

    def __init__(self, coordinate, state: CellState = CellState.EMPTY) -> None:
        self._coordinate: Coordinate = tuple(int(c) for c in coordinate)
        if len(self._coordinate) != 3:
            raise ValueError(f"Cell coordinate must have 3 components, got {coordinate!r}")
        self._state = CellState(state)

    @property
    def coordinate(self) -> Coordinate:
        return self._coordinate

    # Alias kept for callers thinking in grid indices
    index = coordinate

    @property
    def state(self) -> CellState:
        return self._state

    def set_state(self, new_state: CellState) -> None:
        self._state = CellState(new_state)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self._coordinate == other._coordinate

    def __hash__(self) -> int:
        return hash(self._coordinate)

    def __repr__(self) -> str:
        return f"Cell({self._coordinate}, {self._state.name})"
