from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap, BoundaryNorm

from ..grid.voxel_grid import VoxelGrid
from ..utils.classes import CellState, color_lookup_table


def height_map(grid: VoxelGrid, states=(CellState.SOLID, CellState.FLAGGED)) -> np.ndarray:
    """Footprint ``[x, z]`` of the top filled height + 1 (0 for empty columns)."""
    codes = grid.state_array()
    filled = np.isin(codes, [int(s) for s in states])
    ys = np.arange(grid.size[1])[np.newaxis, :, np.newaxis]
    return np.where(filled, ys + 1, 0).max(axis=1)


def visualize_layer(grid: VoxelGrid, layer: int = 0, ax=None, figsize=(6, 6), show: bool = False):
    states = grid.layer_states(layer)
    colors = color_lookup_table()[: len(CellState)] / 255.0
    cmap = ListedColormap(colors)
    norm = BoundaryNorm(np.arange(len(CellState) + 1) - 0.5, cmap.N)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure
    # Footprint is [x, z]; imshow wants rows = z with origin at the bottom
    ax.imshow(states.T, cmap=cmap, norm=norm, origin="lower", interpolation="nearest")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_title(f"Layer {layer}")
    if show:
        plt.tight_layout(); plt.show()
    return fig, ax


def visualize_height_map(grid: VoxelGrid, ax=None, cmap="viridis", figsize=(6, 6), show: bool = False):
    heights = height_map(grid)
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure
    im = ax.imshow(heights.T, cmap=cmap, vmin=0, vmax=grid.size[1], origin="lower", interpolation="nearest")
    fig.colorbar(im, ax=ax, label="height (cells)")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    if show:
        plt.tight_layout(); plt.show()
    return fig, ax
