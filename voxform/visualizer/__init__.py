from .grids import height_map, visualize_layer, visualize_height_map

__all__ = [
    "height_map",
    "visualize_layer",
    "visualize_height_map",
]
