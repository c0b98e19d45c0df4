"""Editing session.

:class:`VoxelEditor` is the non-visual half of an interactive massing editor:
a front end forwards picks and key presses to it, and it drives the grid,
the selection engine, the model round trip and the exports.
"""

from __future__ import annotations

import os
import random
from typing import List, Optional

from PIL import Image

from .codec.image import set_states_from_image
from .codec.translation import TranslatorLike, refine_with_model
from .exceptions import InvalidTransition
from .generator.io import DEFAULT_EXPORT_STATES, save_cells
from .generator.samples import SampleWriter, generate_sample_set, populate_random_boxes
from .grid.selection import SelectionEngine, SelectionStage
from .grid.voxel_grid import VoxelGrid
from .models import DecodeParams, EditorConfig, SampleSetConfig
from .utils.classes import CellState, PICKABLE_STATES
from .utils.logging import get_logger


_logger = get_logger(__name__)


class VoxelEditor:
    def __init__(
        self,
        grid: VoxelGrid,
        translator: Optional[TranslatorLike] = None,
        decode_params: Optional[DecodeParams] = None,
        sample_config: Optional[SampleSetConfig] = None,
        seed: Optional[int] = 666,
        height: Optional[int] = None,
    ) -> None:
        self.grid = grid
        self.selection = SelectionEngine(grid)
        self.translator = translator
        self.decode_params = (decode_params or DecodeParams()).validate()
        self.sample_config = sample_config or SampleSetConfig()
        self.rng = random.Random(seed)
        self.height = self._clamp_height(grid.size[1] if height is None else height)
        self.source_image: Optional[Image.Image] = None

    @classmethod
    def from_config(cls, cfg: EditorConfig, translator: Optional[TranslatorLike] = None) -> "VoxelEditor":
        grid = VoxelGrid(cfg.grid_size, cfg.max_grid_size, origin=cfg.origin, cell_scale=cfg.cell_scale)
        return cls(
            grid,
            translator=translator,
            decode_params=cfg.decode,
            sample_config=cfg.samples,
            seed=cfg.seed,
        )

    def _clamp_height(self, height: int) -> int:
        return max(1, min(int(height), self.grid.size[1]))

    def _abort_selection(self) -> None:
        if self.selection.stage is not SelectionStage.IDLE:
            self.selection.cancel()

    # -----------------------------
    # Drawing
    # -----------------------------

    def press(self, coordinate) -> bool:
        """A pick on ``coordinate`` while the pointer is down.

        Starts a selection, or extends the current one. Picks on cells that
        cannot take part in a selection are ignored. Returns whether the pick
        was used.
        """
        cell = self.grid.active_cell_at(coordinate)
        if cell.state not in PICKABLE_STATES:
            return False
        if self.selection.stage is SelectionStage.IDLE:
            self.selection.begin_selection(cell.coordinate)
            return True
        if self.selection.stage is SelectionStage.SELECTING and cell.coordinate != self.selection.first:
            self.selection.extend_selection(cell.coordinate)
            return True
        return False

    def release(self) -> List[tuple]:
        """Pointer released: commit the pending box at the current height.

        When a translator is configured the model refinement runs right after.
        Returns the stamped coordinates.
        """
        if self.selection.stage is not SelectionStage.SELECTING:
            return []
        if self.selection.end_selection() is not SelectionStage.PENDING:
            return []
        filled = self.selection.commit(self.height)
        if self.translator is not None:
            self.predict_and_update()
        return filled

    def raise_height(self) -> int:
        self.height = self._clamp_height(self.height + 1)
        return self.height

    def lower_height(self) -> int:
        self.height = self._clamp_height(self.height - 1)
        return self.height

    # -----------------------------
    # Grid
    # -----------------------------

    def update_grid_size(self, new_size) -> None:
        self._abort_selection()
        self.grid.resize(new_size)
        self.height = self._clamp_height(self.height)

    def clear(self) -> None:
        self._abort_selection()
        self.grid.clear()

    def random_boxes(self, quantity: int = 3, min_x: int = 3, max_x: int = 5, min_z: int = 5, max_z: int = 15) -> int:
        """Clear the grid and stamp ``quantity`` random boxes."""
        self.clear()
        return populate_random_boxes(self.grid, quantity, min_x, max_x, min_z, max_z, self.rng)

    # -----------------------------
    # Images
    # -----------------------------

    def set_source_image(self, image) -> None:
        self.source_image = image

    def predict_and_update(self) -> Image.Image:
        """Run the model on the ground layer and flag its proposed structure."""
        if self.translator is None:
            raise RuntimeError("No translator configured")
        self._abort_selection()
        self.source_image = refine_with_model(self.grid, self.translator, self.decode_params)
        return self.source_image

    def update_reds(self, image=None) -> int:
        """Replace flagged cells with the structure read from ``image`` (or the source image)."""
        image = self._image_or_source(image)
        self.grid.clear_by_state(CellState.FLAGGED)
        written = set_states_from_image(self.grid, image, self.decode_params, include_solid_pixels=False)
        return written[CellState.FLAGGED]

    def read_image(self, image=None) -> dict:
        """Clear the grid and rebuild it from ``image`` (or the source image)."""
        image = self._image_or_source(image)
        self.clear()
        return set_states_from_image(self.grid, image, self.decode_params)

    def _image_or_source(self, image):
        if image is not None:
            self.source_image = image
        if self.source_image is None:
            raise ValueError("No source image available")
        return self.source_image

    # -----------------------------
    # Export
    # -----------------------------

    def generate_sample_set(self, writer: Optional[SampleWriter] = None) -> List[str]:
        if self.selection.stage is not SelectionStage.IDLE:
            raise InvalidTransition("Cannot generate samples while a selection is in progress")
        return generate_sample_set(self.grid, self.sample_config, writer=writer, rng=self.rng)

    def save_grid(self, name: str, directory: str = "Grids", states=DEFAULT_EXPORT_STATES) -> str:
        if not name:
            raise ValueError("Cannot save a grid without a name")
        path = os.path.join(directory, f"{name}.csv")
        save_cells(self.grid, path, states)
        return path
