# mip_plan.py
from dataclasses import dataclass

from .errors import UnsupportedMipLevel
from .texture_types import LEVEL_SLOTS, CompressionMode


@dataclass(frozen=True)
class MipLevelPlan:
    index: int
    width: int
    height: int
    offset: int
    length: int


def level_dimensions(width, height, index):
    return max(1, width >> index), max(1, height >> index)


def usable_level_count(level_table):
    """Count leading levels; the first zero offset or length ends the chain."""
    count = 0
    for offset, length in level_table:
        if offset == 0 or length == 0:
            break
        count += 1
    return count


def level_count(descriptor):
    """Number of mip levels that can be requested from *descriptor*."""
    if descriptor.compression_mode is CompressionMode.UNKNOWN:
        return 0
    return usable_level_count(descriptor.level_table)


def plan_level(descriptor, index):
    if not 0 <= index < LEVEL_SLOTS:
        raise UnsupportedMipLevel(f"Mip level {index} is outside 0..{LEVEL_SLOTS - 1}")
    if descriptor.compression_mode is CompressionMode.UNKNOWN:
        raise UnsupportedMipLevel(
            f"Compression code {descriptor.compression_code} stores no decodable levels"
        )
    if index >= usable_level_count(descriptor.level_table):
        raise UnsupportedMipLevel(f"Mip level {index} is not stored")
    width, height = level_dimensions(descriptor.width, descriptor.height, index)
    offset, length = descriptor.level_table[index]
    return MipLevelPlan(index, width, height, descriptor.origin + offset, length)
