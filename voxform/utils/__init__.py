from .classes import (
    CellState,
    CELL_STATE_DESCRIPTIONS,
    PICKABLE_STATES,
    STATE_COLORS,
    default_state_for,
    state_color,
    color_lookup_table,
    print_cell_states,
    get_state_name,
    summarize_state_array,
    parse_state,
)
from .logging import get_logger
