# palette.py
"""Palette tables and the two passes shared by both palette-indexed layouts.

Palette entries are stored as B, G, R, A bytes and are returned as an
(256, 4) RGBA array. Pixel planes are (height, width, 4) uint8 arrays.
"""
import numpy as np

from .errors import TruncatedData
from .texture_types import PALETTE_ENTRIES, PALETTE_SIZE, AlphaPostProcess


def build_palette(data, post_process=AlphaPostProcess.NONE):
    if len(data) != PALETTE_SIZE:
        raise TruncatedData(f"Palette needs {PALETTE_SIZE} bytes, got {len(data)}")
    entries = np.frombuffer(data, dtype=np.uint8).reshape(PALETTE_ENTRIES, 4)
    palette = entries[:, [2, 1, 0, 3]]
    if post_process is AlphaPostProcess.FORCE_OPAQUE:
        palette[:, 3] = 0xFF
    elif post_process is AlphaPostProcess.INVERT:
        palette[:, 3] ^= 0xFF
    return palette


def read_palette(source, post_process=AlphaPostProcess.NONE):
    return build_palette(source.read_exact(PALETTE_SIZE), post_process)


def lookup_pixels(palette, indices, width, height):
    """Pass 1: one index byte per pixel, row-major."""
    count = width * height
    if len(indices) < count:
        raise TruncatedData(f"Level needs {count} index bytes, got {len(indices)}")
    index_plane = np.frombuffer(indices, dtype=np.uint8, count=count)
    return palette[index_plane].reshape(height, width, 4)


def alpha_plane_size(width, height, alpha_depth):
    count = width * height
    if alpha_depth == 1:
        return (count + 7) // 8
    if alpha_depth == 8:
        return count
    return 0


def overlay_alpha_plane(pixels, plane, alpha_depth):
    """Pass 2: replace the alpha channel from a separately stored plane."""
    height, width = pixels.shape[:2]
    size = alpha_plane_size(width, height, alpha_depth)
    if size == 0:
        return pixels
    if len(plane) < size:
        raise TruncatedData(f"Alpha plane needs {size} bytes, got {len(plane)}")
    packed = np.frombuffer(plane, dtype=np.uint8, count=size)
    if alpha_depth == 1:
        bits = np.unpackbits(packed, bitorder="little")[:width * height]
        pixels[..., 3] = (bits * 0xFF).reshape(height, width)
    else:
        pixels[..., 3] = packed.reshape(height, width)
    return pixels
