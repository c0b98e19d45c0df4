from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Optional


@dataclass
class GridMetadata:
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    cell_scale: float = 1.0


@dataclass
class DecodeParams:
    """Parameters for reading flagged structure and solid columns out of a raster."""
    bottom: float = 0.0       # fraction of the grid height where structure starts
    top: float = 1.0          # fraction of the grid height where structure ends
    thickness: int = 1        # number of cells stacked downward per red pixel
    sensitivity: float = 0.5  # pixels darker than this luminance count as red
    include_solid_pixels: bool = False

    def validate(self) -> "DecodeParams":
        if not (0.0 <= self.bottom <= 1.0 and 0.0 <= self.top <= 1.0):
            raise ValueError(f"bottom and top must lie in [0, 1], got {self.bottom}, {self.top}")
        if self.bottom > self.top:
            raise ValueError(f"bottom ({self.bottom}) must not exceed top ({self.top})")
        if int(self.thickness) != self.thickness or self.thickness < 0:
            raise ValueError(f"thickness must be a non-negative integer, got {self.thickness}")
        if not 0.0 <= self.sensitivity <= 1.0:
            raise ValueError(f"sensitivity must lie in [0, 1], got {self.sensitivity}")
        return self


@dataclass
class SampleSetConfig:
    samples: int = 500
    min_quantity: int = 3
    max_quantity: int = 10
    min_x: int = 3
    max_x: int = 10
    min_z: int = 3
    max_z: int = 10
    output_dir: str = "Samples"
    image_size: int = 256


@dataclass
class EditorConfig:
    grid_size: Tuple[int, int, int] = (20, 10, 20)
    max_grid_size: Tuple[int, int, int] = (40, 20, 40)
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    cell_scale: float = 1.0
    # Seed for the editor's random number generator
    seed: Optional[int] = 666
    decode: DecodeParams = field(default_factory=DecodeParams)
    samples: SampleSetConfig = field(default_factory=SampleSetConfig)
