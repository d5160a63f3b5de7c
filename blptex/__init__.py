"""Decoder for Blizzard BLP1/BLP2 textures into per-mip-level RGBA buffers."""
import logging

from .blp_file import decode_level, decode_levels, get_texture_decoder, open
from .byte_source import BitReader, ByteSource
from .errors import (
    BLPError,
    DecodeFailure,
    MalformedContainer,
    TruncatedData,
    UnsupportedMipLevel,
    UnsupportedVersion,
)
from .jpeg import PillowJpegDecoder, swap_red_blue
from .texture_types import (
    AlphaPostProcess,
    CompressionMode,
    FormatVersion,
    MipLevel,
    TextureDescriptor,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "open",
    "decode_level",
    "decode_levels",
    "get_texture_decoder",
    "ByteSource",
    "BitReader",
    "BLPError",
    "MalformedContainer",
    "UnsupportedVersion",
    "UnsupportedMipLevel",
    "TruncatedData",
    "DecodeFailure",
    "PillowJpegDecoder",
    "swap_red_blue",
    "AlphaPostProcess",
    "CompressionMode",
    "FormatVersion",
    "MipLevel",
    "TextureDescriptor",
]
