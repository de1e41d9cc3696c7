import base64

import cv2
import numpy as np
import pytest

from minescan.exceptions import ImageDecodeError
from minescan.image_processing.decoding import (
    decode_data_uri,
    decode_png,
    load_image,
    to_grayscale,
)
from tests.conftest import png_data_uri


def test_decode_grayscale_png(board):
    image = decode_data_uri(png_data_uri(board))

    assert image.dtype == np.uint8
    assert np.array_equal(image, board)


def test_decode_color_png_to_grayscale():
    color = np.zeros((4, 6, 3), dtype=np.uint8)
    color[:, :3] = 255

    image = decode_data_uri(png_data_uri(color))

    assert image.shape == (4, 6)
    assert np.all(image[:, :3] == 255)
    assert np.all(image[:, 3:] == 0)


def test_transparent_pixels_become_black():
    rgba = np.full((3, 3, 4), 255, dtype=np.uint8)
    rgba[0, 0, 3] = 0

    image = decode_data_uri(png_data_uri(rgba))

    assert image[0, 0] == 0
    assert image[1, 1] == 255


def test_16bit_png_keeps_high_byte():
    deep = np.array([[0xFFFF, 0x8000], [0x00FF, 0x0100]], dtype=np.uint16)

    image = decode_data_uri(png_data_uri(deep))

    assert image.dtype == np.uint8
    assert image.tolist() == [[255, 128], [0, 1]]


def test_rejects_non_data_uri():
    with pytest.raises(ImageDecodeError, match='Data URI string'):
        decode_data_uri('http://example.com/board.png')


def test_rejects_other_media_types():
    with pytest.raises(ImageDecodeError, match='image/jpeg'):
        decode_data_uri('data:image/jpeg;base64,AAAA')


def test_rejects_bad_base64():
    with pytest.raises(ImageDecodeError, match='base64'):
        decode_data_uri('data:image/png;base64,@@@@')


def test_rejects_payload_that_is_not_png():
    payload = base64.b64encode(b'GIF89a not a png').decode('ascii')

    with pytest.raises(ImageDecodeError, match='not a PNG'):
        decode_data_uri('data:image/png;base64,' + payload)


def test_decode_png_rejects_empty_payload():
    with pytest.raises(ImageDecodeError):
        decode_png(b'')


def test_to_grayscale_passes_8bit_gray_through(board):
    assert to_grayscale(board) is board


def test_to_grayscale_rejects_float_images():
    with pytest.raises(ImageDecodeError):
        to_grayscale(np.zeros((2, 2), dtype=np.float32))


def test_load_image(tmp_path, board):
    path = tmp_path / 'board.png'
    cv2.imwrite(str(path), board)

    assert np.array_equal(load_image(path), board)


def test_load_image_missing_file(tmp_path):
    with pytest.raises(ImageDecodeError, match='Could not load image'):
        load_image(tmp_path / 'missing.png')


def test_decode_line_wrapped_payload(board):
    prefix, encoded = png_data_uri(board).split(',', 1)
    wrapped = '\r\n'.join(encoded[i:i + 76] for i in range(0, len(encoded), 76))

    image = decode_data_uri(f'{prefix},{wrapped}')

    assert np.array_equal(image, board)
