"""Image processing module for grid line detection and mine scoring."""

from .raster import PixelSampler, Rect
from .grid_detector import detect_boundaries, find_horizontal_lines, find_vertical_lines
from .cell_analyzer import analyze_grid, find_mines, score_cell, visualize_findings
from .decoding import decode_data_uri, load_image, to_grayscale

__all__ = [
    'PixelSampler',
    'Rect',
    'detect_boundaries',
    'find_horizontal_lines',
    'find_vertical_lines',
    'analyze_grid',
    'find_mines',
    'score_cell',
    'visualize_findings',
    'decode_data_uri',
    'load_image',
    'to_grayscale',
]
