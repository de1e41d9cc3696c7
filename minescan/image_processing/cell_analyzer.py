"""
Cell analysis module for scoring cell darkness.

Detection logic:
- Cells are the rectangles between consecutive grid lines on both axes
- Each rectangle is inset by one pixel on its top/left edge so the
  separator line itself is not sampled
- Darkness level = 100 - round(100 * average / 255), where average is the
  mean 8-bit intensity of the cell (0 = white, 100 = black)
- Cells at or above the minimum level are reported as mines
"""
import logging
import math
from typing import Iterator, List, Tuple, Union

import cv2
import numpy as np

from ..exceptions import DegenerateCellError
from .grid_detector import find_horizontal_lines, find_vertical_lines
from .raster import PixelSampler, Rect

logger = logging.getLogger(__name__)

MAX_LEVEL = 100

# Drawing colours (BGR)
GRID_COLOR = (200, 120, 0)
MINE_COLOR = (0, 0, 220)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _as_sampler(image: Union[np.ndarray, PixelSampler]) -> PixelSampler:
    if isinstance(image, PixelSampler):
        return image
    return PixelSampler(image)


def score_cell(sampler: PixelSampler, rect: Rect) -> int:
    """
    Darkness level of a cell rectangle, 0 (white) to 100 (black).

    Raises:
        DegenerateCellError: if the rectangle has zero area.
    """
    if rect.area == 0:
        raise DegenerateCellError(f'Cell rectangle {tuple(rect)} has zero area')

    average = sampler.high_byte_sum(rect) / rect.area

    # 255 - absolute white
    # 0 - absolute black (dark)
    return MAX_LEVEL - _round_half_away(100.0 * average / 255.0)


def iter_cells(rows: List[int], cols: List[int]) -> Iterator[Tuple[int, int, Rect]]:
    """
    Yield (row, col, rect) for every grid cell in row-major order.

    The last boundary on each axis only closes the previous cell.
    """
    for row, (min_y, max_y) in enumerate(zip(rows, rows[1:])):
        for col, (min_x, max_x) in enumerate(zip(cols, cols[1:])):
            yield row, col, Rect.from_corners(min_x + 1, min_y + 1, max_x, max_y)


def analyze_grid(image: Union[np.ndarray, PixelSampler], min_level: int) -> dict:
    """Detect grid lines and score every cell.

    Args:
        image: Grayscale raster (uint8 or uint16) or a PixelSampler
        min_level: Lowest darkness level reported as a mine

    Returns:
        Dictionary with grid_lines_h, grid_lines_v, mines.
    """
    sampler = _as_sampler(image)
    h_lines = find_horizontal_lines(sampler)
    v_lines = find_vertical_lines(sampler)

    mines = []
    skipped = 0
    for row, col, rect in iter_cells(h_lines, v_lines):
        if rect.area == 0:
            logger.debug(f"Skipping zero-area cell at ({col}, {row})")
            skipped += 1
            continue

        level = score_cell(sampler, rect)
        if level >= min_level:
            mines.append({'x': col, 'y': row, 'level': level})

    logger.info(
        f"Scanned {sampler.width}x{sampler.height} raster: "
        f"{max(len(h_lines) - 1, 0)}x{max(len(v_lines) - 1, 0)} cells, "
        f"{len(mines)} at level >= {min_level}, {skipped} skipped"
    )

    return {
        'grid_lines_h': h_lines,
        'grid_lines_v': v_lines,
        'mines': mines,
    }


def find_mines(image: Union[np.ndarray, PixelSampler], min_level: int) -> List[dict]:
    """
    Find cells whose darkness level is at least `min_level`.

    Returns:
        List of {'x': column, 'y': row, 'level': darkness} in row-major order.
    """
    return analyze_grid(image, min_level)['mines']


def visualize_findings(image: np.ndarray, analysis: dict) -> np.ndarray:
    """Draw detected grid lines and mines on a copy of the raster.

    Draws:
    - Grid lines in thin blue
    - Mine cells outlined in red with their level
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    height, width = image.shape[:2]
    if width == 0 or height == 0:
        return np.zeros((height, width, 3), dtype=np.uint8)
    result = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)

    h_lines = [min(max(y, 0), height - 1) for y in analysis['grid_lines_h']]
    v_lines = [min(max(x, 0), width - 1) for x in analysis['grid_lines_v']]
    font = cv2.FONT_HERSHEY_SIMPLEX

    for y in h_lines:
        cv2.line(result, (0, y), (width - 1, y), GRID_COLOR, 1)
    for x in v_lines:
        cv2.line(result, (x, 0), (x, height - 1), GRID_COLOR, 1)

    for mine in analysis['mines']:
        row, col = mine['y'], mine['x']
        x1, x2 = v_lines[col], v_lines[col + 1]
        y1, y2 = h_lines[row], h_lines[row + 1]
        cv2.rectangle(result, (x1, y1), (x2, y2), MINE_COLOR, 1)

        text = str(mine['level'])
        scale = 0.35
        (tw, th), _ = cv2.getTextSize(text, font, scale, 1)
        tx = (x1 + x2) // 2 - tw // 2
        ty = (y1 + y2) // 2 + th // 2
        cv2.putText(result, text, (tx, ty), font, scale, (255, 255, 255), 2)
        cv2.putText(result, text, (tx, ty), font, scale, MINE_COLOR, 1)

    return result
