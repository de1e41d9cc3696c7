"""
Decoding of uploaded images into 8-bit grayscale rasters.
"""
import base64
import binascii
import logging

import cv2
import numpy as np

from ..exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

DATA_URI_SCHEME = 'data:'
PNG_DATA_URI_PREFIX = 'data:image/png;base64,'
PNG_MAGIC = b'\x89PNG\r\n\x1a\n'


def decode_data_uri(data_uri: str) -> np.ndarray:
    """
    Decode a `data:image/png;base64,...` URI into a grayscale raster.

    Raises:
        ImageDecodeError: on any other scheme, media type or bad payload.
    """
    if not data_uri.startswith(DATA_URI_SCHEME):
        raise ImageDecodeError('Expected a base64 Data URI string')

    if not data_uri.startswith(PNG_DATA_URI_PREFIX):
        media_type = data_uri[len(DATA_URI_SCHEME):].split(',', 1)[0]
        raise ImageDecodeError(
            f'Expected a Data URI with base64 encoded PNG, received: {media_type}'
        )

    # Line breaks from MIME-wrapped payloads are ignored
    encoded = data_uri[len(PNG_DATA_URI_PREFIX):].replace('\r', '').replace('\n', '')
    try:
        payload = base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise ImageDecodeError(f'Invalid base64 payload: {e}') from e

    return decode_png(payload)


def decode_png(data: bytes) -> np.ndarray:
    """Decode PNG bytes into a grayscale raster."""
    if not data.startswith(PNG_MAGIC):
        raise ImageDecodeError('Payload is not a PNG image')

    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageDecodeError('Could not decode PNG image')

    logger.debug(f"Decoded PNG with shape {image.shape}, dtype {image.dtype}")

    return to_grayscale(image)


def load_image(image_path: str) -> np.ndarray:
    """Read an image file into a grayscale raster."""
    image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageDecodeError(f'Could not load image: {image_path}')
    return to_grayscale(image)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert a decoded image to an 8-bit single-channel raster.

    16-bit channels keep their high byte. Alpha is premultiplied into the
    colour first, so transparent pixels come out black. 8-bit grayscale
    input is returned as is.
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise ImageDecodeError(f'Unsupported pixel type: {image.dtype}')

    if image.ndim == 2:
        return image
    if image.ndim != 3:
        raise ImageDecodeError(f'Unsupported image shape: {image.shape}')

    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        alpha = image[:, :, 3:4].astype(np.float32) / 255.0
        bgr = np.rint(image[:, :, :3].astype(np.float32) * alpha).astype(np.uint8)
        return cv2.cvtColor(bgr, cv2.COLOR_BGR2GRAY)

    raise ImageDecodeError(f'Unsupported channel count: {channels}')
