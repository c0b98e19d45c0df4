"""Grid <-> image codec.

Encoding samples one horizontal layer of the grid into a raster of
``(size.x, size.z)`` pixels using the fixed state colour table.

Decoding reads a raster back into per-column states:
- red-dominant, dark-enough pixels become FLAGGED cells at a height
  reconstructed from the pixel saturation between the ``bottom`` and ``top``
  fractions of the grid height, optionally thickened downward;
- pure black pixels (when enabled) become SOLID columns from y = 1 up.
The base layer is never written and nothing is cleared beforehand.
"""

from __future__ import annotations

import dataclasses
from typing import Dict, List, Optional

import numpy as np
from PIL import Image

from .raster import as_image, hsv_and_luminance, resample_nearest, rgb_array
from ..exceptions import OutOfCapacity
from ..grid.voxel_grid import VoxelGrid
from ..models import DecodeParams
from ..utils.classes import CellState, color_lookup_table
from ..utils.logging import get_logger
from ..utils.orientation import footprint_to_raster, raster_to_footprint


_logger = get_logger(__name__)


def image_from_grid(grid: VoxelGrid, layer: int = 0, transparent: bool = False) -> Image.Image:
    """
    Create an image of one grid layer.

    Args:
        grid: Source grid
        layer: Height index of the layer to sample (default 0)
        transparent: Produce RGBA, with non-coloured states fully transparent

    Returns:
        PIL image of width ``size.x`` and height ``size.z``; pixel column x,
        row ``size.z - 1 - z`` shows cell (x, layer, z)
    """
    states = grid.layer_states(layer)
    footprint = color_lookup_table(transparent)[states]
    return Image.fromarray(footprint_to_raster(footprint))


def _resolve_params(params: Optional[DecodeParams], overrides) -> DecodeParams:
    params = params if params is not None else DecodeParams()
    if overrides:
        params = dataclasses.replace(params, **overrides)
    return params.validate()


def set_states_from_image(
    grid: VoxelGrid,
    image,
    params: Optional[DecodeParams] = None,
    **overrides,
) -> Dict[CellState, int]:
    """
    Set grid states from an image, flagging structure for red pixels and
    optionally stamping solid columns for black pixels.

    Args:
        grid: Grid to modify
        image: PIL image or numpy array of any resolution
        params: Decode parameters; keyword overrides replace individual fields

    Returns:
        Number of cells written per state

    Raises:
        RasterDecodeError: empty or malformed raster
        OutOfCapacity: a reconstructed height falls outside the active size
            (the grid is left untouched)
    """
    params = _resolve_params(params, overrides)
    sx, sy, sz = grid.size

    resized = resample_nearest(as_image(image), (sx, sz))
    rgb = raster_to_footprint(rgb_array(resized))
    hsv, luminance = hsv_and_luminance(rgb)
    saturation = hsv[..., 1]
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    red_mask = (r > g) & (r > b) & (luminance < params.sensitivity)
    if params.include_solid_pixels:
        black_mask = ~red_mask & np.all(rgb == 0.0, axis=-1)
    else:
        black_mask = np.zeros_like(red_mask)

    top_index = sy - 1
    span = (params.top - params.bottom) * top_index
    base = int(round(params.bottom * top_index))

    flagged: List[tuple] = []
    for x, z in np.argwhere(red_mask):
        x, z = int(x), int(z)
        y = int(round(span * float(saturation[x, z]))) + base
        if y == 0:
            continue
        if not 0 <= y < sy:
            raise OutOfCapacity(
                (x, y, z), grid.size,
                f"Reconstructed height {y} at column ({x}, {z}) is outside the active height {sy}",
            )
        flagged.append((x, y, z))
        for i in range(1, params.thickness):
            new_y = y - i
            if new_y == 0:
                break
            flagged.append((x, new_y, z))

    solid: List[tuple] = []
    for x, z in np.argwhere(black_mask):
        solid.extend((int(x), y, int(z)) for y in range(1, sy))

    for coordinate in flagged:
        grid.cell_at(coordinate).set_state(CellState.FLAGGED)
    for coordinate in solid:
        grid.cell_at(coordinate).set_state(CellState.SOLID)

    _logger.debug(
        "Decoded image: %d red columns, %d black columns, %d flagged / %d solid cells",
        int(red_mask.sum()), int(black_mask.sum()), len(flagged), len(solid),
    )
    return {CellState.FLAGGED: len(flagged), CellState.SOLID: len(solid)}
