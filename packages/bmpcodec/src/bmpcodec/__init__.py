# packages/bmpcodec/src/bmpcodec/__init__.py
from __future__ import annotations

"""bmpcodec - codec BMP (public surface).

Variantes supportées : BITMAPINFOHEADER non compressé, 8 bpp (palette),
24 bpp et 32 bpp (4e octet ignoré).
"""

__version__ = "1.0.0"

# API publique (stable)
from .config import BMPConfig
from .errors import (
    BMPStatus, error_string, status_of,
    BMPError, InvalidArgumentError, OutOfMemoryError, BMPIOError,
    BMPFileNotFoundError, FileInvalidError, NotSupportedError, TypeMismatchError,
)
from .header import BitmapHeader, pack_header, unpack_header, HEADER_SIZE
from .layout import row_stride, row_stride_bits, pixel_offset, palette_offset
from .bitmap import Bitmap
from .io import load, save, decode, encode, read_file, write_file

__all__ = [
    "__version__",
    "BMPConfig",
    "BMPStatus", "error_string", "status_of",
    "BMPError", "InvalidArgumentError", "OutOfMemoryError", "BMPIOError",
    "BMPFileNotFoundError", "FileInvalidError", "NotSupportedError", "TypeMismatchError",
    "BitmapHeader", "pack_header", "unpack_header", "HEADER_SIZE",
    "row_stride", "row_stride_bits", "pixel_offset", "palette_offset",
    "Bitmap",
    "load", "save", "decode", "encode", "read_file", "write_file",
]
