import logging

import numpy as np
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def rgba_pixels(data, width, height):
    """View raw R8G8B8A8 bytes read back from the device as a (height, width, 4) array."""
    pixels = np.asarray(data).view(np.uint8)
    if pixels.size != width * height * 4:
        raise ValueError(f'expected {width * height * 4} bytes for a {width}x{height} image, got {pixels.size}')
    return pixels.reshape(height, width, 4)


def save_png(data, width, height, path):
    PILImage.fromarray(rgba_pixels(data, width, height)).save(path)
    logger.info('Saved %dx%d image to %s', width, height, path)
