# legacy/legacy_texture_decoder.py
import logging
import struct

from ..errors import DecodeFailure, MalformedContainer, UnsupportedMipLevel
from ..jpeg import PillowJpegDecoder, swap_red_blue
from ..palette import lookup_pixels, overlay_alpha_plane, read_palette
from ..texture_decoder import TextureDecoder
from ..texture_types import (
    LEGACY_HEADER_SIZE,
    PICTURE_TYPE_INVERTED_ALPHA,
    AlphaPostProcess,
    CompressionMode,
    FormatVersion,
    MipLevel,
    TextureDescriptor,
)

logger = logging.getLogger(__name__)

LEGACY_COMPRESSION = {
    0: CompressionMode.JPEG_ENCODED,
    1: CompressionMode.PALETTE_INDEXED,
}

# Smallest level edge the shared-header JPEG path can decode
MIN_JPEG_EDGE = 4


class LegacyTextureDecoder(TextureDecoder):
    format_version = FormatVersion.LEGACY

    def __init__(self, jpeg_decoder=None):
        self.jpeg_decoder = jpeg_decoder or PillowJpegDecoder()

    def parse_texture_header(self, source, origin):
        compression, alpha_bits, width, height, picture_type, picture_subtype = \
            struct.unpack('<6i', source.read_exact(24))
        level_table = self.read_level_table(source)
        if width <= 0 or height <= 0:
            raise MalformedContainer(f"Invalid texture dimensions {width}x{height}")

        # Picture type 5 keeps alpha as an inverted bit in the palette itself
        if picture_type == PICTURE_TYPE_INVERTED_ALPHA:
            post_process, alpha_depth = AlphaPostProcess.INVERT, 0
        else:
            post_process, alpha_depth = AlphaPostProcess.NONE, 8

        mode = LEGACY_COMPRESSION.get(compression, CompressionMode.UNKNOWN)
        if mode is CompressionMode.UNKNOWN:
            logger.warning("Unknown BLP1 compression %d, texture has no levels", compression)
        logger.debug("BLP1 header: %s %dx%d alpha hint %d, picture type %d/%d",
                     mode.value, width, height, alpha_bits, picture_type, picture_subtype)
        return TextureDescriptor(
            format_version=self.format_version,
            compression_mode=mode,
            alpha_depth=alpha_depth,
            alpha_type=0,
            width=width,
            height=height,
            level_table=level_table,
            alpha_post_process=post_process,
            picture_type=picture_type,
            picture_subtype=picture_subtype,
            compression_code=compression,
            origin=origin,
            data_offset=origin + LEGACY_HEADER_SIZE,
        )

    def decode_texture(self, descriptor, source, level_index=0, want_alpha=True):
        if descriptor.compression_mode is CompressionMode.JPEG_ENCODED:
            return self.decode_jpeg_level(descriptor, source, level_index, want_alpha)
        plan = self.plan_level(descriptor, level_index)
        return self.decode_palette_level(descriptor, source, plan, want_alpha)

    def decode_palette_level(self, descriptor, source, plan, want_alpha):
        post_process = descriptor.alpha_post_process if want_alpha else AlphaPostProcess.FORCE_OPAQUE
        source.seek(descriptor.data_offset)
        palette = read_palette(source, post_process)
        data = self.read_level(source, plan)

        pixels = lookup_pixels(palette, data, plan.width, plan.height)
        if want_alpha:
            overlay_alpha_plane(pixels, data[plan.width * plan.height:], descriptor.alpha_depth)
        return MipLevel.from_array(plan.index, pixels)

    def decode_jpeg_level(self, descriptor, source, level_index, want_alpha):
        if level_index != 0:
            raise UnsupportedMipLevel(f"JPEG textures only decode level 0, not {level_index}")
        plan = self.plan_level(descriptor, level_index)
        if plan.width < MIN_JPEG_EDGE or plan.height < MIN_JPEG_EDGE:
            raise UnsupportedMipLevel(
                f"JPEG level {plan.width}x{plan.height} is below {MIN_JPEG_EDGE} pixels"
            )

        source.seek(descriptor.data_offset)
        header_size = source.read_uint32()
        jpeg_header = source.read_exact(header_size)
        payload = self.read_level(source, plan)

        pixels = self.jpeg_decoder.decode(jpeg_header, payload)
        if pixels.shape != (plan.height, plan.width, 4):
            raise DecodeFailure(
                f"JPEG decoded to {pixels.shape[1]}x{pixels.shape[0]}, expected {plan.width}x{plan.height}"
            )
        swap_red_blue(pixels)
        if not want_alpha:
            pixels[..., 3] = 0xFF
        return MipLevel.from_array(plan.index, pixels)
