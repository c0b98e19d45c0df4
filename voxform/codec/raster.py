"""
Raster helpers shared by the image codec and the translation round trip.

All resampling is nearest-neighbour so that hard colour-class boundaries
survive scaling in both directions.
"""

from typing import Tuple

import numpy as np
from PIL import Image
from matplotlib.colors import rgb_to_hsv

from ..exceptions import RasterDecodeError
from ..utils.classes import WHITE

# ITU-R BT.601 weights, as used for image grayscale
LUMINANCE_WEIGHTS = np.array([0.299, 0.587, 0.114])

Box = Tuple[int, int, int, int]


def as_image(raster) -> Image.Image:
    """
    Coerce a PIL image or a numpy array into a non-empty PIL image.

    Arrays may be integers in [0, 255], float in [0, 1] or bool (read as 0 or
    255), with shape (H, W), (H, W, 3) or (H, W, 4). Integer values outside
    [0, 255] are rejected.
    """
    if isinstance(raster, Image.Image):
        image = raster
    elif isinstance(raster, np.ndarray):
        arr = raster
        if arr.ndim not in (2, 3) or (arr.ndim == 3 and arr.shape[2] not in (3, 4)):
            raise RasterDecodeError(f"Unsupported raster array shape {arr.shape}")
        if arr.dtype.kind == "f":
            if not np.all(np.isfinite(arr)):
                raise RasterDecodeError("Raster array contains non-finite values")
            arr = np.clip(np.rint(arr * 255.0), 0, 255)
        elif arr.dtype == np.bool_:
            arr = np.where(arr, 255, 0)
        elif arr.dtype.kind not in "ui":
            raise RasterDecodeError(f"Unsupported raster array dtype {arr.dtype}")
        if arr.size == 0:
            raise RasterDecodeError(f"Raster is empty (shape {raster.shape})")
        if arr.min() < 0 or arr.max() > 255:
            raise RasterDecodeError(
                f"Raster values must lie in [0, 255], got [{arr.min()}, {arr.max()}]"
            )
        image = Image.fromarray(arr.astype(np.uint8))
    else:
        raise RasterDecodeError(f"Expected a PIL image or numpy array, got {type(raster).__name__}")

    if image.width == 0 or image.height == 0:
        raise RasterDecodeError(f"Raster is empty ({image.width}x{image.height})")
    return image


def resample_nearest(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Resize to ``size`` = (width, height) without interpolation."""
    width, height = int(size[0]), int(size[1])
    if width <= 0 or height <= 0:
        raise ValueError(f"Target size must be positive, got {size}")
    if image.size == (width, height):
        return image.copy()
    return image.resize((width, height), Image.NEAREST)


def rgb_array(image: Image.Image) -> np.ndarray:
    """Float RGB array in [0, 1] of shape (H, W, 3); alpha is dropped."""
    return np.asarray(image.convert("RGB"), dtype=np.float64) / 255.0


def hsv_and_luminance(rgb: np.ndarray):
    """Return (hsv, luminance) for a float RGB array with a trailing channel axis."""
    hsv = rgb_to_hsv(rgb)
    luminance = rgb @ LUMINANCE_WEIGHTS
    return hsv, luminance


def pad_to_square(image: Image.Image, size: int = 256, fill=WHITE) -> Tuple[Image.Image, Box]:
    """
    Scale ``image`` so its long side is ``size`` and paste it on a square canvas.

    The content is anchored bottom-left (footprint origin), the rest is filled
    with ``fill``, opaque for RGBA images as well.

    Returns:
        (padded image, content box as (left, upper, right, lower))
    """
    image = as_image(image)
    width, height = image.size
    scale = size / max(width, height)
    new_w = max(1, min(size, int(round(width * scale))))
    new_h = max(1, min(size, int(round(height * scale))))
    content = resample_nearest(image, (new_w, new_h))

    if content.mode == "RGBA":
        canvas = Image.new("RGBA", (size, size), tuple(fill[:3]) + (255,))
    else:
        content = content.convert("RGB")
        canvas = Image.new("RGB", (size, size), tuple(fill[:3]))

    box = (0, size - new_h, new_w, size)
    canvas.paste(content, box[:2])
    return canvas, box


def restore_footprint(image: Image.Image, box: Box, size: Tuple[int, int]) -> Image.Image:
    """Crop the content ``box`` back out of a padded image and resample it to ``size``."""
    image = as_image(image)
    return resample_nearest(image.crop(box), size)
