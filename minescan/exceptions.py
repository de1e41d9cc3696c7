"""Errors raised by the mine finder."""


class MineScanError(Exception):
    """Base class for all mine finder errors."""


class InvalidRasterError(MineScanError, ValueError):
    """Raster shape or pixel type cannot be sampled."""


class DegenerateCellError(MineScanError, ValueError):
    """A cell rectangle has zero area and cannot be scored."""


class ImageDecodeError(MineScanError, ValueError):
    """An uploaded image could not be turned into a grayscale raster."""
