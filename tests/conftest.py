import base64

import cv2
import numpy as np
import pytest

WHITE = 255
# Brightest value the row scan does not treat as white
OFF_WHITE = 254
BLACK = 0


def grid_image(fills, cell=9, border=True):
    """
    Build an 8-bit board of square cells separated by 1px white lines.

    fills: rows of per-cell fill values, e.g. [[254, 0], [254, 254]]
    border: also draw white lines around the outside of the board
    """
    n_rows, n_cols = len(fills), len(fills[0])
    offset = 1 if border else 0
    height = n_rows * (cell + 1) - 1 + 2 * offset
    width = n_cols * (cell + 1) - 1 + 2 * offset
    image = np.full((height, width), WHITE, dtype=np.uint8)

    for row, row_fills in enumerate(fills):
        for col, fill in enumerate(row_fills):
            y = offset + row * (cell + 1)
            x = offset + col * (cell + 1)
            image[y:y + cell, x:x + cell] = fill
    return image


def png_data_uri(image):
    ok, buf = cv2.imencode('.png', image)
    assert ok
    return 'data:image/png;base64,' + base64.b64encode(buf.tobytes()).decode('ascii')


@pytest.fixture
def board():
    """2x2 board with a black cell at x=1, y=0."""
    return grid_image([[OFF_WHITE, BLACK], [OFF_WHITE, OFF_WHITE]])
