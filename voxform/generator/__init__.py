"""voxform generator subpackage.

Host-side producers built on the grid engine and the codec: random sample
sets for model training and plain-text cell exports.
"""

from .samples import (
    create_random_box,
    populate_random_boxes,
    generate_sample_set,
    sample_file_name,
)
from .io import export_cells, save_cells, save_image, load_image, DEFAULT_EXPORT_STATES

__all__ = [
    "create_random_box",
    "populate_random_boxes",
    "generate_sample_set",
    "sample_file_name",
    "export_cells",
    "save_cells",
    "save_image",
    "load_image",
    "DEFAULT_EXPORT_STATES",
]
