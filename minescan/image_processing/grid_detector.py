"""
Grid line detection by scanning for continuous white lines.

A row (or column) is a grid separator when every sampled pixel on it is
white. Runs of adjacent white lines collapse to their first member. The
returned boundaries bound the cells: cell i lies between boundaries[i]
(exclusive) and boundaries[i + 1] (inclusive).

Strategy:
1. Seed with 0 if the first line is white, else with the virtual line -1
2. Record every white line that does not directly follow another one
3. Close the list with the raster extent unless the last line was white
   and some boundary besides the seed was found
"""
import logging
from dataclasses import dataclass
from typing import Callable, List

import numpy as np

from .raster import COLUMN, ROW, PixelSampler

logger = logging.getLogger(__name__)

# Only the first SCAN_LIMIT pixels of a line are checked
SCAN_LIMIT = 1000

# Pure white on the 16-bit scale, and the lowest value one 8-bit step below it
WHITE = 65535
NEAR_WHITE = 65280


def tolerant_white(values: np.ndarray) -> bool:
    """All intensities are within one 8-bit step of white."""
    return bool(np.all(values >= NEAR_WHITE))


def strict_white(values: np.ndarray) -> bool:
    """All intensities are exactly white."""
    return bool(np.all(values == WHITE))


@dataclass(frozen=True)
class AxisScan:
    """
    Settings for one boundary scan.

    axis: ROW scans y indices, COLUMN scans x indices
    is_white: predicate over the sampled intensities of one line
    rescan_seed: when line 0 is not white, start the scan at 0 instead of 1
    closing_axis: axis whose line count is appended as the last boundary
    """
    axis: str
    is_white: Callable[[np.ndarray], bool]
    rescan_seed: bool
    closing_axis: str


# Rows close on the raster width, not its height
HORIZONTAL_SCAN = AxisScan(
    axis=ROW, is_white=tolerant_white, rescan_seed=True, closing_axis=COLUMN,
)
VERTICAL_SCAN = AxisScan(
    axis=COLUMN, is_white=strict_white, rescan_seed=False, closing_axis=COLUMN,
)


def is_white_line(sampler: PixelSampler, scan: AxisScan, index: int) -> bool:
    """Check whether line `index` of the scan axis is a white separator."""
    return scan.is_white(sampler.line(scan.axis, index, SCAN_LIMIT))


def detect_boundaries(sampler: PixelSampler, scan: AxisScan) -> List[int]:
    """
    Detect grid boundaries along one axis.

    Returns an empty list for an empty raster.
    """
    if sampler.is_empty:
        return []

    if is_white_line(sampler, scan, 0):
        boundaries = [0]
        prev_white = 0
    else:
        boundaries = [-1]
        prev_white = -1

    start = prev_white + 1 if scan.rescan_seed else 1
    for index in range(start, sampler.line_count(scan.axis)):
        if not is_white_line(sampler, scan, index):
            continue
        if prev_white + 1 != index:
            boundaries.append(index)
        prev_white = index

    # A list always has an opening and a closing boundary
    closing = sampler.line_count(scan.closing_axis)
    if prev_white + 1 != closing or len(boundaries) == 1:
        boundaries.append(closing)

    logger.debug(f"{scan.axis} boundaries: {boundaries}")
    return boundaries


def find_horizontal_lines(sampler: PixelSampler) -> List[int]:
    """Y coordinates of the horizontal grid lines."""
    return detect_boundaries(sampler, HORIZONTAL_SCAN)


def find_vertical_lines(sampler: PixelSampler) -> List[int]:
    """X coordinates of the vertical grid lines."""
    return detect_boundaries(sampler, VERTICAL_SCAN)
