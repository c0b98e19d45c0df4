from .image import image_from_grid, set_states_from_image
from .raster import (
    as_image,
    resample_nearest,
    pad_to_square,
    restore_footprint,
    hsv_and_luminance,
)
from .translation import (
    MODEL_IMAGE_SIZE,
    ImageTranslator,
    NormalisedArrayTranslator,
    translate_grid_image,
    refine_with_model,
)

__all__ = [
    "image_from_grid",
    "set_states_from_image",
    "as_image",
    "resample_nearest",
    "pad_to_square",
    "restore_footprint",
    "hsv_and_luminance",
    "MODEL_IMAGE_SIZE",
    "ImageTranslator",
    "NormalisedArrayTranslator",
    "translate_grid_image",
    "refine_with_model",
]
