# packages/bmpcodec/src/bmpcodec/io.py
# -----------------------------------------------------------------------------
# Chargement / sauvegarde BMP : flux binaires, octets en mémoire, fichiers.
from __future__ import annotations
from pathlib import Path
from typing import BinaryIO, Optional
import io
import os
import logging

import numpy as np

from .bitmap import Bitmap, alloc_buffer
from .config import BMPConfig
from .errors import (
    BMPIOError,
    BMPFileNotFoundError,
    FileInvalidError,
    NotSupportedError,
)
from .header import MAGIC, HEADER_SIZE, INFO_HEADER_SIZE, BitmapHeader, pack_header, read_header
from .layout import PALETTE_SIZE, SUPPORTED_DEPTHS, image_data_size

__all__ = [
    "validate_header",
    "load", "save",
    "decode", "encode",
    "read_file", "write_file",
]

log = logging.getLogger(__name__)


def validate_header(h: BitmapHeader) -> None:
    """
    Vérifie qu'un en-tête décodé décrit une variante supportée.

    Exceptions
    ----------
    FileInvalidError si le magic n'est pas "BM" ou si l'image est vide.
    NotSupportedError si header_size != 40, compression != 0, planes != 1,
    bpp ∉ {8, 24, 32} ou hauteur négative (lignes de haut en bas).
    """
    if h.magic != MAGIC:
        raise FileInvalidError(f"bad magic: 0x{h.magic:04X} (expected 'BM')")
    if h.header_size != INFO_HEADER_SIZE:
        raise NotSupportedError(f"unsupported info header size: {h.header_size}")
    if h.compression != 0:
        raise NotSupportedError(f"compressed BMP not supported (compression={h.compression})")
    if h.bits_per_pixel not in SUPPORTED_DEPTHS:
        raise NotSupportedError(f"unsupported bit depth: {h.bits_per_pixel}")
    if h.planes != 1:
        raise NotSupportedError(f"unsupported plane count: {h.planes}")
    if h.height & 0x80000000:
        raise NotSupportedError("top-down BMP (negative height) not supported")
    if h.width == 0 or h.height == 0:
        raise FileInvalidError(f"empty image: {h.width}x{h.height}")


def _read_exact(stream: BinaryIO, n: int, what: str) -> bytes:
    try:
        chunk = stream.read(n)
    except OSError as e:
        raise BMPIOError(f"{what}: read failed: {e}") from e
    if chunk is None or len(chunk) != n:
        got = 0 if chunk is None else len(chunk)
        raise FileInvalidError(f"{what}: truncated ({got} < {n} bytes)")
    return chunk


def _write_all(stream: BinaryIO, b: bytes, what: str) -> None:
    try:
        n = stream.write(b)
    except OSError as e:
        raise BMPIOError(f"{what}: write failed: {e}") from e
    if n is not None and n != len(b):
        raise BMPIOError(f"{what}: short write ({n} < {len(b)} bytes)")


def load(stream: BinaryIO, config: Optional[BMPConfig] = None) -> Bitmap:
    """
    Décode un BMP depuis un flux binaire positionné sur le magic.

    Ordre de lecture : en-tête (54 o), palette (1024 o si 8 bpp), pixels
    (`image_data_size` o). Aucun objet partiel n'est renvoyé en cas d'erreur.
    """
    cfg = config or BMPConfig()
    try:
        h = read_header(stream)
    except BMPIOError as e:
        raise FileInvalidError(f"not a BMP: {e}") from e
    log.debug("header: %s", h)
    validate_header(h)

    consumed = HEADER_SIZE
    palette: Optional[np.ndarray] = None
    if h.is_indexed:
        palette = alloc_buffer(PALETTE_SIZE, cfg)
        palette[:] = np.frombuffer(_read_exact(stream, PALETTE_SIZE, "palette"), dtype=np.uint8)
        consumed += PALETTE_SIZE

    if cfg.honor_data_offset and h.data_offset > consumed:
        _read_exact(stream, h.data_offset - consumed, "gap before pixel data")

    needed = image_data_size(h.width, h.height, h.bits_per_pixel)
    if h.image_data_size == 0 and cfg.infer_image_size:
        h.image_data_size = needed
    if h.image_data_size < needed:
        raise FileInvalidError(
            f"image_data_size={h.image_data_size} too small for "
            f"{h.width}x{h.height}@{h.bits_per_pixel} (need {needed})"
        )
    data = alloc_buffer(h.image_data_size, cfg)
    data[:] = np.frombuffer(_read_exact(stream, h.image_data_size, "pixel data"), dtype=np.uint8)
    return Bitmap(header=h, data=data, palette=palette)


def save(bitmap: Bitmap, stream: BinaryIO) -> None:
    """Écrit en-tête, palette (si présente) puis pixels, tels quels."""
    if bitmap.closed:
        raise BMPIOError("cannot save a closed bitmap")
    _write_all(stream, pack_header(bitmap.header), "header")
    if bitmap.palette is not None:
        _write_all(stream, bitmap.palette.tobytes(), "palette")
    _write_all(stream, bitmap.data.tobytes(), "pixel data")
    log.debug("saved %dx%d@%d (%d pixel bytes)",
              bitmap.width, bitmap.height, bitmap.depth, bitmap.data.size)


def decode(buf: bytes, config: Optional[BMPConfig] = None) -> Bitmap:
    if not isinstance(buf, (bytes, bytearray, memoryview)):
        raise TypeError("decode: `buf` must be bytes")
    return load(io.BytesIO(bytes(buf)), config)


def encode(bitmap: Bitmap) -> bytes:
    out = io.BytesIO()
    save(bitmap, out)
    return out.getvalue()


def _open(p: Path, mode: str):
    """Ouvre `p` : introuvable → BMPFileNotFoundError, autre échec → BMPIOError."""
    try:
        return open(p, mode)
    except FileNotFoundError as e:
        raise BMPFileNotFoundError(f"cannot open {p}: {e}") from e
    except OSError as e:
        raise BMPIOError(f"cannot open {p}: {e}") from e


def read_file(path: str | Path, config: Optional[BMPConfig] = None) -> Bitmap:
    """Charge un fichier .bmp. Fichier introuvable → BMPFileNotFoundError."""
    p = Path(path)
    with _open(p, "rb") as f:
        bmp = load(f, config)
    log.debug("read %s: %dx%d@%d", p, bmp.width, bmp.height, bmp.depth)
    return bmp


def write_file(bitmap: Bitmap, path: str | Path) -> None:
    """Écriture atomique (fichier .tmp, fsync, puis replace)."""
    p = Path(path)
    tmp = p.with_suffix(p.suffix + ".tmp")
    f = _open(tmp, "wb")
    try:
        with f:
            save(bitmap, f)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(p)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        if isinstance(e, BMPIOError):
            raise
        raise BMPIOError(f"cannot write {p}: {e}") from e
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    log.debug("wrote %s", p)
