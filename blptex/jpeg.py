# jpeg.py
import io
import logging

import numpy as np
from PIL import Image

from .errors import DecodeFailure

logger = logging.getLogger(__name__)


class PillowJpegDecoder:
    """Decodes a shared JPEG header plus one level's scan data with Pillow."""

    def decode(self, header, payload):
        try:
            with Image.open(io.BytesIO(header + payload), formats=["JPEG"]) as img:
                if img.mode == "CMYK":
                    # Four stored channels, returned unconverted
                    rgba = Image.frombytes("RGBA", img.size, img.tobytes())
                else:
                    rgba = img.convert("RGBA")
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeFailure(f"JPEG decode failed: {e}") from e
        logger.debug("Decoded %dx%d JPEG (%d header + %d payload bytes)",
                     rgba.width, rgba.height, len(header), len(payload))
        return np.array(rgba, dtype=np.uint8)


def swap_red_blue(pixels):
    """Swap the first and third channel of every pixel in place."""
    pixels[..., [0, 2]] = pixels[..., [2, 0]]
    return pixels
