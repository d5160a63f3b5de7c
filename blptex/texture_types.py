# texture_types.py
from dataclasses import dataclass
from enum import Enum

import numpy as np
from PIL import Image

# Container constants
BLP_TAG = b"BLP"
LEVEL_SLOTS = 16
PALETTE_ENTRIES = 256
PALETTE_SIZE = PALETTE_ENTRIES * 4
LEGACY_HEADER_SIZE = 0x9C
MODERN_HEADER_SIZE = 0x94

# Legacy picture type whose palette alpha holds an inverted 1-bit mask
PICTURE_TYPE_INVERTED_ALPHA = 5

# Modern alpha types
ALPHA_TYPE_PACKED_LINEAR = 1
ALPHA_TYPE_INTERPOLATED = 7

ALPHA_DEPTHS = (0, 1, 4, 8)


class FormatVersion(Enum):
    LEGACY = "1"
    MODERN = "2"


class CompressionMode(Enum):
    JPEG_ENCODED = "jpeg"
    PALETTE_INDEXED = "palette"
    BLOCK_COMPRESSED = "block"
    RAW_BGRA = "raw"
    UNKNOWN = "unknown"


class AlphaPostProcess(Enum):
    NONE = "none"
    FORCE_OPAQUE = "force_opaque"
    INVERT = "invert"


@dataclass(frozen=True)
class TextureDescriptor:
    format_version: FormatVersion
    compression_mode: CompressionMode
    alpha_depth: int
    alpha_type: int
    width: int
    height: int
    level_table: tuple
    alpha_post_process: AlphaPostProcess = AlphaPostProcess.NONE
    picture_type: int = 0
    picture_subtype: int = 0
    compression_code: int = 0
    has_mips: int = 0
    origin: int = 0
    data_offset: int = 0


@dataclass(frozen=True)
class MipLevel:
    index: int
    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(
                f"Mip level {self.index} holds {len(self.pixels)} bytes, expected {expected}"
            )

    @classmethod
    def from_array(cls, index, pixels):
        height, width = pixels.shape[:2]
        return cls(index, width, height, np.ascontiguousarray(pixels, dtype=np.uint8).tobytes())

    def to_array(self):
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, 4)

    def to_image(self):
        return Image.frombytes("RGBA", (self.width, self.height), self.pixels)
