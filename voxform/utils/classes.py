"""
voxform Class Definitions

This module provides the cell state enumeration used by the grid engine and
the colour table used when a grid layer is exchanged as a raster image.

Cell States:
    Every cell of a grid carries exactly one state. Cells inside the active
    region rest in a default state (GROUND on the base layer, EMPTY above it)
    until they are selected, stamped or decoded from an image. Cells that lie
    in the allocated capacity but outside the active region are UNALLOCATED.

Raster Colours:
    The colour table is total: every state maps to exactly one colour.
    SOLID, FLAGGED and HIGHLIGHTED have their own colours; all remaining
    states encode as white.
"""

from enum import IntEnum
from typing import Dict, Optional, Tuple

import numpy as np


# =============================================================================
# Cell States
# =============================================================================

class CellState(IntEnum):
    GROUND = 0
    SOLID = 1
    FLAGGED = 2
    HIGHLIGHTED = 3
    EMPTY = 4
    UNALLOCATED = 5


CELL_STATE_DESCRIPTIONS = """
voxform Cell States:
--------------------------------------------------
   0: GROUND        - Resting state of a base-layer (y = 0) cell
   1: SOLID         - Placed building mass
   2: FLAGGED       - Structure proposed by the translation model
   3: HIGHLIGHTED   - Inside a pending, uncommitted selection box
   4: EMPTY         - Resting state of a cell above the base layer
   5: UNALLOCATED   - Allocated but outside the active grid size
--------------------------------------------------
"""

# States a user may start a selection from
PICKABLE_STATES = frozenset({CellState.GROUND, CellState.EMPTY, CellState.HIGHLIGHTED})


def default_state_for(y: int) -> CellState:
    """Resting state of an active cell at height index ``y``."""
    return CellState.GROUND if y == 0 else CellState.EMPTY


# =============================================================================
# Raster Colours (RGB, 0-255)
# =============================================================================

WHITE: Tuple[int, int, int] = (255, 255, 255)
BLACK: Tuple[int, int, int] = (0, 0, 0)
RED: Tuple[int, int, int] = (255, 0, 0)
YELLOW: Tuple[int, int, int] = (255, 255, 0)

STATE_COLORS: Dict[CellState, Tuple[int, int, int]] = {
    CellState.GROUND: WHITE,
    CellState.SOLID: BLACK,
    CellState.FLAGGED: RED,
    CellState.HIGHLIGHTED: YELLOW,
    CellState.EMPTY: WHITE,
    CellState.UNALLOCATED: WHITE,
}

# States drawn with an opaque colour; the others become transparent white
OPAQUE_STATES = frozenset({CellState.SOLID, CellState.FLAGGED, CellState.HIGHLIGHTED})


def state_color(state: CellState, transparent: bool = False) -> Tuple[int, ...]:
    """
    Get the raster colour of a cell state.

    Args:
        state: Cell state to look up
        transparent: Return an RGBA tuple, with alpha 0 for non-opaque states

    Returns:
        RGB tuple, or RGBA tuple when ``transparent`` is set
    """
    rgb = STATE_COLORS[CellState(state)]
    if not transparent:
        return rgb
    alpha = 255 if state in OPAQUE_STATES else 0
    return rgb + (alpha,)


def color_lookup_table(transparent: bool = False) -> np.ndarray:
    """Array indexed by state code giving the colour of that state."""
    channels = 4 if transparent else 3
    table = np.zeros((len(CellState), channels), dtype=np.uint8)
    for state in CellState:
        table[int(state)] = state_color(state, transparent=transparent)
    return table


# =============================================================================
# Print Helper Functions
# =============================================================================

def print_cell_states() -> None:
    """Print cell state definitions to console."""
    print(CELL_STATE_DESCRIPTIONS)


def get_state_name(code: int) -> str:
    """
    Get the state name for a state code.

    Args:
        code: Integer state code

    Returns:
        State name string, or "Unknown" if the code is invalid
    """
    try:
        return CellState(code).name
    except ValueError:
        return "Unknown"


def summarize_state_array(states: np.ndarray, print_output: bool = True) -> Dict[int, int]:
    """
    Summarize the contents of a state array.

    Args:
        states: numpy array of state codes (any shape)
        print_output: Whether to print the summary

    Returns:
        Dictionary mapping state codes to counts
    """
    unique, counts = np.unique(states, return_counts=True)
    summary = dict(zip(unique.tolist(), counts.tolist()))

    if print_output:
        print("\nCell State Summary:")
        print("-" * 40)
        for code in sorted(summary.keys()):
            name = get_state_name(code)
            count = summary[code]
            percentage = 100.0 * count / states.size
            print(f"  {code:4d}: {name:15s} - {count:,} cells ({percentage:.2f}%)")
        print("-" * 40)

    return summary


def parse_state(value) -> CellState:
    """Accept a ``CellState``, its integer code or its (case-insensitive) name."""
    if isinstance(value, CellState):
        return value
    if isinstance(value, str):
        try:
            return CellState[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown cell state name: {value!r}") from None
    return CellState(int(value))


def parse_states(values) -> Optional[frozenset]:
    if values is None:
        return None
    return frozenset(parse_state(v) for v in values)
