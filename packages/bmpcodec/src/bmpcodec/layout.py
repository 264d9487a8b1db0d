# packages/bmpcodec/src/bmpcodec/layout.py
from __future__ import annotations

from .errors import InvalidArgumentError, NotSupportedError
from .header import HEADER_SIZE

__all__ = [
    "SUPPORTED_DEPTHS", "PALETTE_ENTRIES", "PALETTE_SIZE",
    "check_depth", "bytes_per_pixel", "row_stride", "row_stride_bits",
    "image_data_size", "data_offset", "file_size",
    "pixel_offset", "palette_offset",
]

SUPPORTED_DEPTHS = (8, 24, 32)
PALETTE_ENTRIES = 256
PALETTE_SIZE = PALETTE_ENTRIES * 4   # B, G, R, pad


def check_depth(bits_per_pixel: int) -> int:
    if bits_per_pixel not in SUPPORTED_DEPTHS:
        raise NotSupportedError(f"unsupported bit depth: {bits_per_pixel} (expected 8, 24 or 32)")
    return int(bits_per_pixel)


def bytes_per_pixel(bits_per_pixel: int) -> int:
    return int(bits_per_pixel) >> 3


def row_stride(width: int, bits_per_pixel: int) -> int:
    """Octets par ligne, arrondis au multiple de 4 supérieur."""
    raw = int(width) * bytes_per_pixel(bits_per_pixel)
    return raw + (4 - raw % 4 if raw % 4 else 0)


def row_stride_bits(width: int, bits_per_pixel: int) -> int:
    """Même stride, dérivé en bits : ((w*bpp + 31) // 32) * 4."""
    return ((int(width) * int(bits_per_pixel) + 31) // 32) * 4


def image_data_size(width: int, height: int, bits_per_pixel: int) -> int:
    return row_stride(width, bits_per_pixel) * int(height)


def data_offset(bits_per_pixel: int) -> int:
    return HEADER_SIZE + (PALETTE_SIZE if bits_per_pixel == 8 else 0)


def file_size(width: int, height: int, bits_per_pixel: int) -> int:
    return data_offset(bits_per_pixel) + image_data_size(width, height, bits_per_pixel)


def pixel_offset(x: int, y: int, width: int, height: int, bits_per_pixel: int) -> int:
    """
    Offset (octets) du pixel (x, y) dans le buffer de pixels.

    y = 0 désigne la ligne **visuelle du haut** ; sur disque les lignes sont
    stockées de bas en haut, d'où le terme `height - y - 1`.
    Lève `InvalidArgumentError` si (x, y) sort de [0, width) x [0, height).
    """
    if not (0 <= x < width and 0 <= y < height):
        raise InvalidArgumentError(f"pixel ({x}, {y}) out of range for {width}x{height}")
    stride = row_stride(width, bits_per_pixel)
    return (height - y - 1) * stride + x * bytes_per_pixel(bits_per_pixel)


def palette_offset(index: int) -> int:
    if not (0 <= index < PALETTE_ENTRIES):
        raise InvalidArgumentError(f"palette index out of range [0,255]: {index}")
    return int(index) * 4
