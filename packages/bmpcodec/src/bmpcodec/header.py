# packages/bmpcodec/src/bmpcodec/header.py
from __future__ import annotations
from dataclasses import dataclass, astuple, fields
from typing import BinaryIO
import struct

from .errors import BMPIOError

__all__ = [
    "MAGIC", "FILE_HEADER_SIZE", "INFO_HEADER_SIZE", "HEADER_SIZE",
    "BitmapHeader", "pack_header", "unpack_header", "read_header",
]

MAGIC = 0x4D42                # b"BM" lu en u16 little-endian
FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40         # seul BITMAPINFOHEADER est supporté
HEADER_SIZE = FILE_HEADER_SIZE + INFO_HEADER_SIZE

# file header : magic | file_size | reserved1 | reserved2 | data_offset
# info header : header_size | width | height | planes | bpp | compression |
#               image_data_size | h_ppm | v_ppm | colors_used | colors_required
_FMT = "<HIHHI" "IIIHHIIIIII"
_STRUCT = struct.Struct(_FMT)

_U16, _U32 = 0xFFFF, 0xFFFFFFFF


@dataclass(eq=True)
class BitmapHeader:
    """En-tête BMP (14 + 40 octets), champs dans l'ordre du disque."""
    magic: int = MAGIC
    file_size: int = 0
    reserved1: int = 0
    reserved2: int = 0
    data_offset: int = HEADER_SIZE
    header_size: int = INFO_HEADER_SIZE
    width: int = 0
    height: int = 0
    planes: int = 1
    bits_per_pixel: int = 24
    compression: int = 0
    image_data_size: int = 0
    h_pixels_per_meter: int = 0
    v_pixels_per_meter: int = 0
    colors_used: int = 0
    colors_required: int = 0

    @property
    def bytes_per_pixel(self) -> int:
        return self.bits_per_pixel >> 3

    @property
    def is_indexed(self) -> bool:
        return self.bits_per_pixel == 8

    def to_dict(self) -> dict:
        return {f.name: int(getattr(self, f.name)) for f in fields(self)}


# Largeur déclarée de chaque champ, dans l'ordre de _FMT
_MASKS = tuple(_U16 if c == "H" else _U32 for c in _FMT[1:])


def pack_header(h: BitmapHeader) -> bytes:
    """Packe l'en-tête → 54 octets little-endian (champs tronqués à leur largeur)."""
    vals = [int(v) & m for v, m in zip(astuple(h), _MASKS)]
    return _STRUCT.pack(*vals)


def unpack_header(b: bytes) -> BitmapHeader:
    """Parse les 54 premiers octets de `b`. Aucun contrôle sémantique ici."""
    if len(b) < HEADER_SIZE:
        raise BMPIOError(f"header: truncated ({len(b)} < {HEADER_SIZE} bytes)")
    return BitmapHeader(*_STRUCT.unpack_from(b, 0))


def read_header(stream: BinaryIO) -> BitmapHeader:
    """Lit exactement HEADER_SIZE octets depuis un flux binaire."""
    return unpack_header(stream.read(HEADER_SIZE))
