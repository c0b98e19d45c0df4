"""Round trip through an external image-translation model.

The model is an opaque synchronous function from a square RGB image to a
square RGB image of the same size (256x256 for the pix2pix models this was
built around). This module pads the encoded footprint up to that size, calls
the model, crops the answer back to the footprint and decodes it.
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Optional, Protocol, Tuple, Union

import numpy as np
from PIL import Image

from .image import image_from_grid, set_states_from_image
from .raster import as_image, pad_to_square, restore_footprint
from ..exceptions import RasterDecodeError
from ..grid.voxel_grid import VoxelGrid
from ..models import DecodeParams
from ..utils.classes import CellState
from ..utils.logging import get_logger


_logger = get_logger(__name__)

MODEL_IMAGE_SIZE = 256


class ImageTranslator(Protocol):
    def translate(self, image: Image.Image) -> Image.Image: ...


TranslatorLike = Union[ImageTranslator, Callable[[Image.Image], Image.Image]]


def _translate_fn(translator: TranslatorLike) -> Callable[[Image.Image], Image.Image]:
    if hasattr(translator, "translate"):
        return translator.translate
    if callable(translator):
        return translator
    raise TypeError(f"Translator must be callable or define translate(), got {type(translator).__name__}")


def normalise(values, a1: float, a2: float, b1: float, b2: float):
    """Linearly map ``values`` from [a1, a2] to [b1, b2]."""
    return b1 + (values - a1) * (b2 - b1) / (a2 - a1)


class NormalisedArrayTranslator:
    """Adapt a model working on normalised float tensors to the image interface.

    ``model`` receives a float32 array of shape (1, H, W, 3) with values in
    [-1, 1] and must return an array of the same shape and range (a leading
    batch axis on the output is optional).
    """

    def __init__(self, model: Callable[[np.ndarray], np.ndarray]) -> None:
        self.model = model

    def translate(self, image: Image.Image) -> Image.Image:
        rgb = np.asarray(image.convert("RGB"), dtype=np.float32) / 255.0
        tensor = normalise(rgb, 0.0, 1.0, -1.0, 1.0)[np.newaxis, ...]
        output = np.asarray(self.model(tensor), dtype=np.float32)
        if output.ndim == 4:
            output = output[0]
        if output.shape != rgb.shape:
            raise RasterDecodeError(f"Model returned shape {output.shape}, expected {rgb.shape}")
        restored = np.clip(normalise(output, -1.0, 1.0, 0.0, 1.0), 0.0, 1.0)
        return Image.fromarray(np.rint(restored * 255.0).astype(np.uint8))


def translate_grid_image(
    grid: VoxelGrid,
    translator: TranslatorLike,
    layer: int = 0,
    size: int = MODEL_IMAGE_SIZE,
) -> Tuple[Image.Image, Image.Image]:
    """
    Encode a layer, run it through the translator and bring the answer back to
    footprint resolution.

    Returns:
        (raw model output, output resampled to ``(size.x, size.z)``)

    Raises:
        RasterDecodeError: the model output is not a ``size`` x ``size`` raster
    """
    encoded = image_from_grid(grid, layer=layer)
    padded, box = pad_to_square(encoded, size=size)

    output = as_image(_translate_fn(translator)(padded))
    if output.size != (size, size):
        raise RasterDecodeError(
            f"Translator returned a {output.width}x{output.height} image, expected {size}x{size}"
        )
    footprint = restore_footprint(output.convert("RGB"), box, (grid.size[0], grid.size[2]))
    return output, footprint


def refine_with_model(
    grid: VoxelGrid,
    translator: TranslatorLike,
    params: Optional[DecodeParams] = None,
    size: int = MODEL_IMAGE_SIZE,
) -> Image.Image:
    """
    Replace the flagged structure of ``grid`` with the model's proposal.

    Previously flagged cells are cleared, the ground layer is encoded and
    translated, and the returned image is decoded with solid pixels ignored.

    Returns:
        The raw model output image
    """
    params = dataclasses.replace(params or DecodeParams(), include_solid_pixels=False).validate()
    cleared = grid.clear_by_state(CellState.FLAGGED)
    output, footprint = translate_grid_image(grid, translator, layer=0, size=size)
    written = set_states_from_image(grid, footprint, params)
    _logger.info(
        "Model refinement: cleared %d flagged cells, flagged %d cells",
        cleared, written[CellState.FLAGGED],
    )
    return output
