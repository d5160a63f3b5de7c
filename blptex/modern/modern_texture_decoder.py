# modern/modern_texture_decoder.py
import logging

import numpy as np

from ..errors import MalformedContainer, TruncatedData, UnsupportedVersion
from ..palette import lookup_pixels, overlay_alpha_plane, read_palette
from ..texture_decoder import TextureDecoder
from ..texture_types import (
    ALPHA_DEPTHS,
    MODERN_HEADER_SIZE,
    AlphaPostProcess,
    CompressionMode,
    FormatVersion,
    MipLevel,
    TextureDescriptor,
)
from .block_decoder import BlockCompressedDecoder

logger = logging.getLogger(__name__)

MODERN_INNER_VERSION = 1

MODERN_COMPRESSION = {
    1: CompressionMode.PALETTE_INDEXED,
    2: CompressionMode.BLOCK_COMPRESSED,
    3: CompressionMode.RAW_BGRA,
}


class ModernTextureDecoder(TextureDecoder):
    format_version = FormatVersion.MODERN

    def parse_texture_header(self, source, origin):
        version = source.read_int32()
        if version != MODERN_INNER_VERSION:
            raise UnsupportedVersion(f"BLP2 inner version {version} is not supported")
        compression, alpha_depth, alpha_type, has_mips = source.read_struct('<4B')
        width, height = source.read_struct('<2I')
        level_table = self.read_level_table(source)

        if width == 0 or height == 0:
            raise MalformedContainer(f"Invalid texture dimensions {width}x{height}")
        if alpha_depth not in ALPHA_DEPTHS:
            raise MalformedContainer(f"Invalid alpha depth {alpha_depth}")

        mode = MODERN_COMPRESSION.get(compression, CompressionMode.UNKNOWN)
        if mode is CompressionMode.UNKNOWN:
            logger.warning("Unknown BLP2 compression %d, texture has no levels", compression)
        logger.debug("BLP2 header: %s %dx%d alpha depth %d type %d",
                     mode.value, width, height, alpha_depth, alpha_type)
        return TextureDescriptor(
            format_version=self.format_version,
            compression_mode=mode,
            alpha_depth=alpha_depth,
            alpha_type=alpha_type,
            width=width,
            height=height,
            level_table=level_table,
            compression_code=compression,
            has_mips=has_mips,
            origin=origin,
            data_offset=origin + MODERN_HEADER_SIZE,
        )

    def decode_texture(self, descriptor, source, level_index=0, want_alpha=True):
        plan = self.plan_level(descriptor, level_index)
        mode = descriptor.compression_mode
        if mode is CompressionMode.PALETTE_INDEXED:
            pixels = self.decode_palette_level(descriptor, source, plan, want_alpha)
        elif mode is CompressionMode.BLOCK_COMPRESSED:
            decoder = BlockCompressedDecoder(descriptor.alpha_depth, descriptor.alpha_type)
            pixels = decoder.decode(self.read_level(source, plan), plan.width, plan.height)
        else:
            pixels = self.decode_raw_level(source, plan)

        if not want_alpha:
            pixels[..., 3] = 0xFF
        return MipLevel.from_array(plan.index, pixels)

    def decode_palette_level(self, descriptor, source, plan, want_alpha):
        opaque = descriptor.alpha_depth == 0 or not want_alpha
        source.seek(descriptor.data_offset)
        palette = read_palette(source, AlphaPostProcess.FORCE_OPAQUE if opaque else AlphaPostProcess.NONE)
        data = self.read_level(source, plan)

        pixels = lookup_pixels(palette, data, plan.width, plan.height)
        if want_alpha:
            overlay_alpha_plane(pixels, data[plan.width * plan.height:], descriptor.alpha_depth)
        return pixels

    @staticmethod
    def decode_raw_level(source, plan):
        data = TextureDecoder.read_level(source, plan)
        size = plan.width * plan.height * 4
        if len(data) < size:
            raise TruncatedData(f"Raw level needs {size} bytes, got {len(data)}")
        bgra = np.frombuffer(data, dtype=np.uint8, count=size).reshape(plan.height, plan.width, 4)
        return bgra[..., [2, 1, 0, 3]]
