# texture_decoder.py
from abc import ABC, abstractmethod

from .mip_plan import plan_level
from .texture_types import LEVEL_SLOTS


class TextureDecoder(ABC):
    format_version = None

    @abstractmethod
    def parse_texture_header(self, source, origin):
        """Parse the header following the signature and return a TextureDescriptor."""
        pass

    @abstractmethod
    def decode_texture(self, descriptor, source, level_index=0, want_alpha=True):
        """Decode one stored mip level and return a MipLevel."""
        pass

    def plan_level(self, descriptor, level_index):
        return plan_level(descriptor, level_index)

    @staticmethod
    def read_level_table(source):
        offsets = source.read_struct(f'<{LEVEL_SLOTS}I')
        lengths = source.read_struct(f'<{LEVEL_SLOTS}I')
        return tuple(zip(offsets, lengths))

    @staticmethod
    def read_level(source, plan):
        source.seek(plan.offset)
        return source.read_exact(plan.length)
