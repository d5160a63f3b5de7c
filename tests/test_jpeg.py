import numpy as np
import pytest

from blptex.errors import DecodeFailure
from blptex.jpeg import PillowJpegDecoder, swap_red_blue

from builders import jpeg_bytes


def test_swap_red_blue_is_its_own_inverse():
    pixels = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
    original = pixels.copy()
    swap_red_blue(pixels)
    assert tuple(pixels[0, 0]) == (2, 1, 0, 3)
    swap_red_blue(pixels)
    assert np.array_equal(pixels, original)


def test_decodes_split_header_and_payload():
    jpeg = jpeg_bytes((30, 60, 90), size=(8, 4))
    pixels = PillowJpegDecoder().decode(jpeg[:100], jpeg[100:])
    assert pixels.shape == (4, 8, 4)
    assert abs(int(pixels[0, 0, 2]) - 90) <= 8
    assert (pixels[..., 3] == 255).all()


def test_rejects_non_jpeg_data():
    with pytest.raises(DecodeFailure):
        PillowJpegDecoder().decode(b"GIF89a", b"\x00" * 16)


def test_oversized_frame_header_is_a_decode_failure():
    jpeg = bytearray(jpeg_bytes((0, 0, 0)))
    sof = jpeg.index(b"\xff\xc0")
    # SOF0: marker, length, precision, then height and width
    jpeg[sof + 5:sof + 9] = (65000).to_bytes(2, "big") * 2
    with pytest.raises(DecodeFailure):
        PillowJpegDecoder().decode(bytes(jpeg[:40]), bytes(jpeg[40:]))
