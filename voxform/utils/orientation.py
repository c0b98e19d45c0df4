"""Footprint / raster orientation helpers.

Contract:
- A footprint array is indexed ``[x, z]``: the first axis runs along the grid
  X axis and the second along Z, with z = 0 at the bottom of the picture.
- A raster array (PIL / numpy image) is indexed ``[row, col]`` with row 0 at the
  top ("top_down"). Columns map to X, rows map to Z counted from the bottom.
- Trailing axes (colour channels) are carried through untouched.

Convert only at the codec boundary; the grid engine never sees raster order.
"""

from __future__ import annotations

from typing import Literal
import numpy as np

ORIENTATION_TOP_DOWN: Literal["top_down"] = "top_down"
ORIENTATION_BOTTOM_UP: Literal["bottom_up"] = "bottom_up"


def ensure_orientation(
    grid: np.ndarray,
    orientation_in: Literal["top_down", "bottom_up"],
    orientation_out: Literal["top_down", "bottom_up"] = ORIENTATION_TOP_DOWN,
) -> np.ndarray:
    """Return ``grid`` converted from ``orientation_in`` to ``orientation_out``.

    If orientations match, the input array is returned unchanged (no copy).
    Otherwise rows are flipped with ``np.flipud``.
    """
    if orientation_in == orientation_out:
        return grid
    return np.flipud(grid)


def footprint_to_raster(footprint: np.ndarray) -> np.ndarray:
    """``[x, z, ...]`` footprint -> ``[row, col, ...]`` top-down raster array."""
    rows_bottom_up = np.swapaxes(footprint, 0, 1)
    return np.ascontiguousarray(
        ensure_orientation(rows_bottom_up, ORIENTATION_BOTTOM_UP, ORIENTATION_TOP_DOWN)
    )


def raster_to_footprint(raster: np.ndarray) -> np.ndarray:
    """``[row, col, ...]`` top-down raster array -> ``[x, z, ...]`` footprint."""
    rows_bottom_up = ensure_orientation(raster, ORIENTATION_TOP_DOWN, ORIENTATION_BOTTOM_UP)
    return np.ascontiguousarray(np.swapaxes(rows_bottom_up, 0, 1))
