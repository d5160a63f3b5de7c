# modern/block_decoder.py
"""4x4 block decoding for BLP2 textures (DXT1/DXT3/DXT5 style).

Each tile is laid out as an optional 8-byte alpha prelude, two 5-6-5
endpoints and four selector bytes (one per row, low bits first). Narrow
channels are widened by shifting only, never by bit replication.
"""
import logging
import struct

import numpy as np

from ..byte_source import BitReader
from ..errors import TruncatedData
from ..texture_types import ALPHA_TYPE_INTERPOLATED, ALPHA_TYPE_PACKED_LINEAR

logger = logging.getLogger(__name__)

TILE_EDGE = 4
COLOR_BLOCK_SIZE = 8
ALPHA_BLOCK_SIZE = 8


def unpack_565(color):
    return (color >> 8) & 0xF8, (color >> 3) & 0xFC, (color << 3) & 0xF8


def interpolated_alpha_table(alpha0, alpha1):
    table = [alpha0, alpha1]
    if alpha0 > alpha1:
        table += [((7 - i) * alpha0 + i * alpha1 + 3) // 7 for i in range(1, 7)]
    else:
        table += [((5 - i) * alpha0 + i * alpha1 + 2) // 5 for i in range(1, 5)]
        table += [0, 255]
    return table


def uses_four_colors(color0, color1, alpha_depth):
    # A real alpha channel never uses the colour-keyed transparent mode
    return color0 > color1 or alpha_depth in (4, 8)


def color_candidates(color0, color1, four_colors):
    c0 = unpack_565(color0)
    c1 = unpack_565(color1)
    if four_colors:
        c2 = tuple((2 * a + b + 1) // 3 for a, b in zip(c0, c1))
        c3 = tuple((a + 2 * b + 1) // 3 for a, b in zip(c0, c1))
    else:
        c2 = tuple((a + b) // 2 for a, b in zip(c0, c1))
        c3 = (0, 0, 0)
    return [c0, c1, c2, c3]


def alpha_prelude_type(alpha_depth, alpha_type):
    if alpha_type == ALPHA_TYPE_INTERPOLATED and alpha_depth == 8:
        return ALPHA_TYPE_INTERPOLATED
    if alpha_type == ALPHA_TYPE_PACKED_LINEAR and alpha_depth in (4, 8):
        return ALPHA_TYPE_PACKED_LINEAR
    return None


class BlockCompressedDecoder:
    def __init__(self, alpha_depth, alpha_type):
        self.alpha_depth = alpha_depth
        self.alpha_type = alpha_type
        self.prelude = alpha_prelude_type(alpha_depth, alpha_type)

    @property
    def block_size(self):
        if self.prelude is None:
            return COLOR_BLOCK_SIZE
        return ALPHA_BLOCK_SIZE + COLOR_BLOCK_SIZE

    def decode(self, data, width, height):
        """Decode a whole level and return a (height, width, 4) RGBA array."""
        blocks_wide = (width + TILE_EDGE - 1) // TILE_EDGE
        blocks_high = (height + TILE_EDGE - 1) // TILE_EDGE
        required = blocks_wide * blocks_high * self.block_size
        if len(data) < required:
            raise TruncatedData(
                f"{width}x{height} level needs {required} bytes of blocks, got {len(data)}"
            )

        # Whole tiles are written into a padded buffer, then cropped
        stride = blocks_wide * TILE_EDGE * 4
        buffer = bytearray(stride * blocks_high * TILE_EDGE)
        pos = 0
        for block_y in range(blocks_high):
            for block_x in range(blocks_wide):
                pos = self.decode_block(data, pos, buffer, block_x * TILE_EDGE, block_y * TILE_EDGE, stride)

        logger.debug("Decoded %d blocks for %dx%d level", blocks_wide * blocks_high, width, height)
        padded = np.frombuffer(buffer, dtype=np.uint8).reshape(blocks_high * TILE_EDGE, blocks_wide * TILE_EDGE, 4)
        return padded[:height, :width].copy()

    def decode_block(self, data, pos, buffer, x, y, stride):
        alphas, pos = self.read_alpha(data, pos)
        color0, color1 = struct.unpack_from('<HH', data, pos)
        pos += 4

        four_colors = uses_four_colors(color0, color1, self.alpha_depth)
        colors = color_candidates(color0, color1, four_colors)

        for row in range(TILE_EDGE):
            selectors = data[pos]
            pos += 1
            offset = (y + row) * stride + x * 4
            for col in range(TILE_EDGE):
                index = selectors & 0x03
                selectors >>= 2
                r, g, b = colors[index]
                if alphas is not None and self.alpha_depth == 8:
                    a = alphas[row * TILE_EDGE + col]
                elif not four_colors and index == 3:
                    a = 0
                else:
                    a = 0xFF
                buffer[offset:offset + 4] = bytes((r, g, b, a))
                offset += 4
        return pos

    def read_alpha(self, data, pos):
        if self.prelude == ALPHA_TYPE_INTERPOLATED:
            table = interpolated_alpha_table(data[pos], data[pos + 1])
            reader = BitReader(data, pos + 2)
            alphas = [table[reader.read(3)] for _ in range(TILE_EDGE * TILE_EDGE)]
            return alphas, pos + ALPHA_BLOCK_SIZE
        if self.prelude == ALPHA_TYPE_PACKED_LINEAR:
            words = struct.unpack_from('<4H', data, pos)
            alphas = [((word >> (4 * x)) & 0x0F) << 4 for word in words for x in range(TILE_EDGE)]
            return alphas, pos + ALPHA_BLOCK_SIZE
        return None, pos
