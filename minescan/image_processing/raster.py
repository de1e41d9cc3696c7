"""
Read-only pixel access for grayscale rasters.

Intensities are reported on the 16-bit channel scale (0-65535). An 8-bit
pixel value v reads as v * 257, so pure white is 65535 at either depth.
Pixels outside the raster read as 0 (black).
"""
from typing import NamedTuple

import numpy as np

from ..exceptions import InvalidRasterError

ROW = 'row'
COLUMN = 'column'

# 16-bit scale factor per supported pixel type (0xFF * 257 == 0xFFFF)
INTENSITY_SCALE = {
    np.dtype(np.uint8): 257,
    np.dtype(np.uint16): 1,
}


class Rect(NamedTuple):
    """Half-open pixel rectangle [min_x, max_x) x [min_y, max_y)."""
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @classmethod
    def from_corners(cls, x0: int, y0: int, x1: int, y1: int) -> 'Rect':
        """Build a rectangle from two corners, swapping them if needed."""
        if x0 > x1:
            x0, x1 = x1, x0
        if y0 > y1:
            y0, y1 = y1, y0
        return cls(x0, y0, x1, y1)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    @property
    def area(self) -> int:
        return self.width * self.height


class PixelSampler:
    """
    Wraps a single-channel numpy raster (uint8 or uint16).

    The array is never modified. Row lines are indexed by y, column lines
    by x.
    """

    def __init__(self, image: np.ndarray):
        if not isinstance(image, np.ndarray):
            raise InvalidRasterError(
                f'Expected a numpy array, got {type(image).__name__}'
            )
        if image.ndim != 2:
            raise InvalidRasterError(
                f'Expected a single-channel raster, got shape {image.shape}'
            )
        if image.dtype not in INTENSITY_SCALE:
            raise InvalidRasterError(f'Unsupported pixel type: {image.dtype}')

        self._image = image
        self._scale = INTENSITY_SCALE[image.dtype]
        self.height, self.width = image.shape

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def line_count(self, axis: str) -> int:
        """Number of lines along an axis (rows -> height, columns -> width)."""
        if axis == ROW:
            return self.height
        if axis == COLUMN:
            return self.width
        raise ValueError(f'Unknown axis: {axis!r}')

    def line_length(self, axis: str) -> int:
        """Number of pixels on one line of an axis."""
        return self.line_count(COLUMN if axis == ROW else ROW)

    def intensity(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return 0
        return int(self._image[y, x]) * self._scale

    def line(self, axis: str, index: int, limit: int) -> np.ndarray:
        """16-bit intensities of the first `limit` pixels of one line."""
        length = min(limit, self.line_length(axis))
        if not 0 <= index < self.line_count(axis):
            return np.zeros(length, dtype=np.uint32)
        if axis == ROW:
            values = self._image[index, :length]
        else:
            values = self._image[:length, index]
        return values.astype(np.uint32) * self._scale

    def high_byte_sum(self, rect: Rect) -> int:
        """
        Sum of the 8-bit (high byte) intensity over a rectangle.

        The part of the rectangle outside the raster contributes nothing.
        """
        x0 = min(max(rect.min_x, 0), self.width)
        x1 = min(max(rect.max_x, 0), self.width)
        y0 = min(max(rect.min_y, 0), self.height)
        y1 = min(max(rect.max_y, 0), self.height)
        if x0 >= x1 or y0 >= y1:
            return 0

        region = self._image[y0:y1, x0:x1].astype(np.uint64)
        return int(np.sum((region * self._scale) >> 8))
