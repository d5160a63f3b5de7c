import io
import struct

import pytest

import blptex
from blptex.errors import MalformedContainer, TruncatedData, UnsupportedVersion
from blptex.texture_types import CompressionMode, FormatVersion

from builders import bgra_palette, dxt_color_block, interpolated_alpha_block, make_modern_blp

RED, BLUE = 0xF800, 0x001F


def test_header_fields():
    data = make_modern_blp(2, 8, 4, [bytes(16)], alpha_depth=8, alpha_type=7)
    desc = blptex.open(data)
    assert desc.format_version is FormatVersion.MODERN
    assert desc.compression_mode is CompressionMode.BLOCK_COMPRESSED
    assert (desc.alpha_depth, desc.alpha_type, desc.has_mips) == (8, 7, 1)
    assert (desc.width, desc.height) == (8, 4)
    assert desc.data_offset == 148
    assert desc.level_table[0] == (148 + 1024, 16)


def test_inner_version_must_be_one():
    with pytest.raises(UnsupportedVersion):
        blptex.open(make_modern_blp(2, 4, 4, [bytes(8)], version=2))


def test_invalid_alpha_depth():
    with pytest.raises(MalformedContainer):
        blptex.open(make_modern_blp(2, 4, 4, [bytes(8)], alpha_depth=3))


def test_truncated_header():
    data = make_modern_blp(2, 4, 4, [bytes(8)])
    with pytest.raises(TruncatedData):
        blptex.open(data[:60])


def test_palette_depth_zero_is_opaque(ramp_palette):
    data = make_modern_blp(1, 2, 2, [bytes([0, 1, 2, 3])], palette=ramp_palette)
    pixels = blptex.decode_level(blptex.open(data), data).to_array()
    assert (pixels[..., 3] == 255).all()
    assert tuple(pixels[1, 1][:3]) == (252, 1, 3)


def test_palette_one_bit_alpha(ramp_palette):
    level = bytes([5, 5, 5, 5]) + bytes([0b0110])
    data = make_modern_blp(1, 2, 2, [level], alpha_depth=1, palette=ramp_palette)
    pixels = blptex.decode_level(blptex.open(data), data).to_array()
    assert pixels[..., 3].tolist() == [[0, 255], [255, 0]]


def test_palette_eight_bit_alpha(ramp_palette):
    level = bytes([5, 5, 5, 5]) + bytes([1, 2, 3, 4])
    data = make_modern_blp(1, 2, 2, [level], alpha_depth=8, palette=ramp_palette)
    desc = blptex.open(data)
    assert blptex.decode_level(desc, data).to_array()[..., 3].tolist() == [[1, 2], [3, 4]]
    assert (blptex.decode_level(desc, data, want_alpha=False).to_array()[..., 3] == 255).all()


def test_palette_mip_chain(ramp_palette):
    levels = [bytes(range(16)), bytes(4), bytes([200])]
    data = make_modern_blp(1, 4, 4, levels, palette=ramp_palette)
    decoded = blptex.decode_levels(blptex.open(data), data)
    assert [(lv.width, lv.height) for lv in decoded] == [(4, 4), (2, 2), (1, 1)]
    assert tuple(decoded[2].to_array()[0, 0]) == (55, 100, 200, 255)


def test_block_compressed_levels():
    level0 = interpolated_alpha_block(255, 0, [1] * 16) + dxt_color_block(RED, BLUE, [0] * 4)
    level1 = interpolated_alpha_block(0, 255, [7] * 16) + dxt_color_block(BLUE, RED, [0] * 4)
    data = make_modern_blp(2, 4, 4, [level0, level1], alpha_depth=8, alpha_type=7)
    levels = blptex.decode_levels(blptex.open(data), data)
    assert [(lv.width, lv.height) for lv in levels] == [(4, 4), (2, 2)]
    assert tuple(levels[0].to_array()[0, 0]) == (248, 0, 0, 0)
    assert tuple(levels[1].to_array()[1, 1]) == (0, 0, 248, 255)


def test_block_compressed_without_alpha():
    level = dxt_color_block(0x0000, 0xFFFF, [0xFF] * 4)
    data = make_modern_blp(2, 4, 4, [level], alpha_depth=0)
    desc = blptex.open(data)
    assert (blptex.decode_level(desc, data).to_array()[..., 3] == 0).all()
    assert (blptex.decode_level(desc, data, want_alpha=False).to_array()[..., 3] == 255).all()


def test_raw_bgra_level():
    level = bytes((1, 2, 3, 4)) * 4
    data = make_modern_blp(3, 2, 2, [level], alpha_depth=8)
    pixels = blptex.decode_level(blptex.open(data), data).to_array()
    assert tuple(pixels[1, 0]) == (3, 2, 1, 4)


def test_container_inside_larger_stream():
    level = dxt_color_block(RED, BLUE, [0] * 4)
    blp = make_modern_blp(2, 4, 4, [level])
    stream = io.BytesIO(b"\xAA" * 32 + blp)
    stream.seek(32)
    desc = blptex.open(stream)
    assert desc.origin == 32
    level = blptex.decode_level(desc, stream)
    assert tuple(level.to_array()[0, 0]) == (248, 0, 0, 255)


def test_level_data_past_end_of_source():
    data = make_modern_blp(2, 4, 4, [bytes(8)])
    with pytest.raises(TruncatedData):
        blptex.decode_level(blptex.open(data), data[:-4])


def test_to_image_round_trips_pixels():
    level = dxt_color_block(RED, BLUE, [0b11100100] * 4)
    data = make_modern_blp(2, 4, 4, [level])
    mip = blptex.decode_level(blptex.open(data), data)
    image = mip.to_image()
    assert image.mode == "RGBA"
    assert image.size == (4, 4)
    assert image.getpixel((1, 0)) == (0, 0, 248, 255)
    assert struct.unpack('<4B', mip.pixels[8:12]) == (165, 0, 83, 255)


def test_decoder_selection_by_version():
    fake = object()
    legacy = blptex.get_texture_decoder(FormatVersion.LEGACY, fake)
    modern = blptex.get_texture_decoder(FormatVersion.MODERN, fake)
    assert legacy.jpeg_decoder is fake
    assert modern.format_version is FormatVersion.MODERN
    assert not hasattr(modern, "jpeg_decoder")
