"""Error types raised by the grid engine and the image codec."""


class VoxformError(Exception):
    """Base class for all voxform errors."""


class InvalidDimensions(VoxformError, ValueError):
    """Grid extents are non-positive, malformed or exceed the capacity."""


class OutOfCapacity(VoxformError, IndexError):
    """A coordinate falls outside the allocated (or required active) region."""

    def __init__(self, coordinate, bounds, message=None):
        self.coordinate = tuple(coordinate)
        self.bounds = tuple(bounds)
        if message is None:
            message = f"Coordinate {self.coordinate} is outside bounds {self.bounds}"
        super().__init__(message)


class InvalidTransition(VoxformError, RuntimeError):
    """A selection operation was called in a stage that does not allow it."""


class RasterDecodeError(VoxformError, ValueError):
    """A raster handed to the codec is empty, malformed or has the wrong size."""
