# blp_file.py
import logging

from .byte_source import ByteSource
from .errors import BLPError
from .legacy.legacy_texture_decoder import LegacyTextureDecoder
from .mip_plan import level_count
from .modern.modern_texture_decoder import ModernTextureDecoder
from .signature import sniff_signature
from .texture_types import CompressionMode, FormatVersion

logger = logging.getLogger(__name__)

TEXTURE_DECODERS = {
    FormatVersion.LEGACY: LegacyTextureDecoder,
    FormatVersion.MODERN: ModernTextureDecoder,
}


def get_texture_decoder(format_version, jpeg_decoder=None):
    if format_version is FormatVersion.LEGACY:
        return LegacyTextureDecoder(jpeg_decoder)
    return TEXTURE_DECODERS[format_version]()


def open(fp):
    """Read the signature and header of a BLP texture.

    *fp* may be a bytes-like object, a seekable binary stream positioned at
    the start of the container, or a ByteSource. Returns a TextureDescriptor.
    """
    source = ByteSource.wrap(fp)
    try:
        format_version, origin = sniff_signature(source)
        return get_texture_decoder(format_version).parse_texture_header(source, origin)
    except BLPError as e:
        logger.error("Failed to read BLP header: %s", e)
        raise


def decode_level(descriptor, fp, level_index=0, want_alpha=True, jpeg_decoder=None):
    """Decode one mip level of *descriptor* from *fp* and return a MipLevel."""
    source = ByteSource.wrap(fp)
    decoder = get_texture_decoder(descriptor.format_version, jpeg_decoder)
    try:
        level = decoder.decode_texture(descriptor, source, level_index, want_alpha)
    except BLPError as e:
        logger.error("Failed to decode mip level %d: %s", level_index, e)
        raise
    logger.debug("Decoded mip level %d (%dx%d)", level.index, level.width, level.height)
    return level


def decode_levels(descriptor, fp, want_alpha=True, jpeg_decoder=None):
    """Decode every stored mip level in order.

    JPEG textures only yield level 0; unknown compressions yield nothing.
    """
    count = level_count(descriptor)
    if descriptor.compression_mode is CompressionMode.JPEG_ENCODED and count > 1:
        logger.debug("Skipping %d JPEG mip levels after level 0", count - 1)
        count = 1
    source = ByteSource.wrap(fp)
    return [decode_level(descriptor, source, index, want_alpha, jpeg_decoder) for index in range(count)]
