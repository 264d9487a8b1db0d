# packages/bmpcodec/src/bmpcodec/bitmap.py
# -----------------------------------------------------------------------------
# Bitmap en mémoire : en-tête + palette optionnelle + buffer de pixels.
# Palette et pixels sont des buffers numpy uint8 possédés par le Bitmap.
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple
import operator

import numpy as np

from .config import BMPConfig
from .errors import (
    InvalidArgumentError,
    OutOfMemoryError,
    TypeMismatchError,
)
from .header import MAGIC, INFO_HEADER_SIZE, BitmapHeader
from .layout import (
    PALETTE_ENTRIES,
    PALETTE_SIZE,
    check_depth,
    bytes_per_pixel,
    row_stride,
    image_data_size,
    data_offset,
    pixel_offset,
    palette_offset,
)

__all__ = ["Bitmap", "alloc_buffer"]

RGB = Tuple[int, int, int]


def alloc_buffer(size: int, config: Optional[BMPConfig] = None) -> np.ndarray:
    """Alloue un buffer uint8 zéro-rempli, ou lève `OutOfMemoryError`."""
    cfg = config or BMPConfig()
    if size > cfg.max_image_bytes:
        raise OutOfMemoryError(
            f"buffer of {size} bytes exceeds max_image_bytes={cfg.max_image_bytes}"
        )
    try:
        return np.zeros(int(size), dtype=np.uint8)
    except MemoryError as e:
        raise OutOfMemoryError(f"could not allocate {size} bytes") from e


def _as_int(v, name: str) -> int:
    """Entier strict : 2.7 ou "3" sont refusés plutôt que tronqués."""
    try:
        return operator.index(v)
    except TypeError as e:
        raise InvalidArgumentError(f"{name} must be an integer, got {v!r}") from e


def _check_integer_dtype(a: np.ndarray, name: str) -> None:
    if not (np.issubdtype(a.dtype, np.integer) or a.dtype == np.bool_):
        raise InvalidArgumentError(f"{name} must hold integers, got dtype {a.dtype}")


def _u8(v, name: str) -> int:
    v = _as_int(v, name)
    if not (0 <= v <= 255):
        raise InvalidArgumentError(f"{name} out of range [0,255]: {v}")
    return v


@dataclass(eq=False)
class Bitmap:
    """
    Image BMP décodée (8, 24 ou 32 bpp, non compressée).

    Attributs
    ---------
    header : BitmapHeader
        Champs de l'en-tête tels qu'ils seront ré-écrits par `save`.
    palette : np.ndarray | None
        1024 octets (256 x B,G,R,pad) si `bits_per_pixel == 8`, sinon None.
    data : np.ndarray
        `image_data_size` octets, lignes de bas en haut, alignées sur 4 octets.

    Les coordonnées exposées par les accesseurs ont y = 0 en haut de l'image.
    """
    header: BitmapHeader
    data: np.ndarray
    palette: Optional[np.ndarray] = None
    _closed: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.header.is_indexed != (self.palette is not None):
            raise InvalidArgumentError("palette must be present iff bits_per_pixel == 8")
        if self.palette is not None and self.palette.size != PALETTE_SIZE:
            raise InvalidArgumentError(f"palette must hold {PALETTE_SIZE} bytes")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def create(cls, width: int, height: int, depth: int,
               config: Optional[BMPConfig] = None) -> "Bitmap":
        """
        Crée un bitmap vierge (pixels à 0, palette à 0 si 8 bpp).

        Exceptions
        ----------
        NotSupportedError si `depth` ∉ {8, 24, 32}.
        InvalidArgumentError si `width` ou `height` est nul ou négatif.
        OutOfMemoryError si l'allocation échoue ou dépasse `config.max_image_bytes`.
        """
        width, height = _as_int(width, "width"), _as_int(height, "height")
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"invalid dimensions: {width}x{height}")
        depth = check_depth(_as_int(depth, "depth"))
        size = image_data_size(width, height, depth)
        offset = data_offset(depth)
        header = BitmapHeader(
            magic=MAGIC,
            file_size=offset + size,
            data_offset=offset,
            header_size=INFO_HEADER_SIZE,
            width=width,
            height=height,
            planes=1,
            bits_per_pixel=depth,
            compression=0,
            image_data_size=size,
        )
        palette = alloc_buffer(PALETTE_SIZE, config) if depth == 8 else None
        data = alloc_buffer(size, config)
        return cls(header=header, data=data, palette=palette)

    @classmethod
    def from_array(cls, arr, depth: Optional[int] = None, palette=None,
                   config: Optional[BMPConfig] = None) -> "Bitmap":
        """
        Construit un bitmap depuis un tableau numpy (ligne du haut en premier).

        - `(H, W, 3|4)` → 24 bpp par défaut (ou 32) ; un 4e canal est ignoré.
        - `(H, W)` d'indices → 8 bpp ; `palette` optionnelle `(N, 3)` RGB, N <= 256.
        """
        a = np.asarray(arr)
        _check_integer_dtype(a, "array")
        if a.size and (a.min() < 0 or a.max() > 255):
            raise InvalidArgumentError("array values must lie in [0,255]")
        a = a.astype(np.uint8, copy=False)

        if a.ndim == 2:
            depth = 8 if depth is None else depth
            if depth != 8:
                raise InvalidArgumentError("2-D index arrays require depth=8")
        elif a.ndim == 3 and a.shape[2] in (3, 4):
            depth = 24 if depth is None else depth
            check_depth(depth)
            if depth == 8:
                raise InvalidArgumentError("RGB arrays cannot be stored at depth=8 (no quantization)")
        else:
            raise InvalidArgumentError(f"unsupported array shape: {a.shape}")

        h, w = int(a.shape[0]), int(a.shape[1])
        bmp = cls.create(w, h, depth, config)
        bpp = bytes_per_pixel(depth)
        rows = np.zeros((h, row_stride(w, depth)), dtype=np.uint8)
        if depth == 8:
            rows[:, :w] = a
            if palette is not None:
                p = np.asarray(palette)
                if p.ndim != 2 or p.shape[1] != 3 or p.shape[0] > PALETTE_ENTRIES:
                    raise InvalidArgumentError(f"palette must be (N<=256, 3), got {p.shape}")
                _check_integer_dtype(p, "palette")
                if p.size and (p.min() < 0 or p.max() > 255):
                    raise InvalidArgumentError("palette values must lie in [0,255]")
                entries = np.zeros((PALETTE_ENTRIES, 4), dtype=np.uint8)
                entries[:p.shape[0], :3] = p.astype(np.uint8)[:, ::-1]
                bmp.palette[:] = entries.reshape(-1)
        else:
            px = np.zeros((h, w, bpp), dtype=np.uint8)
            px[..., :3] = a[..., 2::-1]        # RGB → BGR
            rows[:, :w * bpp] = px.reshape(h, w * bpp)
        bmp.data[:rows.size] = rows[::-1].reshape(-1)
        return bmp

    # ------------------------------------------------------------------
    # Propriétés
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return int(self.header.width)

    @property
    def height(self) -> int:
        return int(self.header.height)

    @property
    def depth(self) -> int:
        return int(self.header.bits_per_pixel)

    @property
    def is_indexed(self) -> bool:
        return self.header.is_indexed

    @property
    def stride(self) -> int:
        return row_stride(self.width, self.depth)

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Adressage
    # ------------------------------------------------------------------
    def _require_open(self) -> None:
        if self._closed:
            raise InvalidArgumentError("bitmap is closed")

    def _offset(self, x: int, y: int) -> int:
        self._require_open()
        off = pixel_offset(_as_int(x, "x"), _as_int(y, "y"), self.width, self.height, self.depth)
        if off + bytes_per_pixel(self.depth) > self.data.size:
            raise InvalidArgumentError(f"pixel ({x}, {y}) lies outside the pixel buffer")
        return off

    def _palette_entry(self, index: int) -> int:
        self._require_open()
        if self.palette is None:
            raise TypeMismatchError("bitmap has no palette (not an 8 bpp image)")
        return palette_offset(_as_int(index, "index"))

    def _require_indexed(self, what: str) -> None:
        if not self.is_indexed:
            raise TypeMismatchError(f"{what} requires an 8 bpp indexed bitmap (depth={self.depth})")

    # ------------------------------------------------------------------
    # Pixels
    # ------------------------------------------------------------------
    def get_pixel_rgb(self, x: int, y: int) -> RGB:
        off = self._offset(x, y)
        if self.is_indexed:
            return self.get_palette_color(int(self.data[off]))
        b, g, r = self.data[off:off + 3]
        return int(r), int(g), int(b)

    def set_pixel_rgb(self, x: int, y: int, r: int, g: int, b: int) -> None:
        if self.is_indexed:
            raise TypeMismatchError("set_pixel_rgb is not valid on an 8 bpp indexed bitmap")
        off = self._offset(x, y)
        # 4e octet (32 bpp) laissé intact
        self.data[off:off + 3] = (_u8(b, "b"), _u8(g, "g"), _u8(r, "r"))

    def get_pixel_index(self, x: int, y: int) -> int:
        self._require_indexed("get_pixel_index")
        return int(self.data[self._offset(x, y)])

    def set_pixel_index(self, x: int, y: int, index: int) -> None:
        self._require_indexed("set_pixel_index")
        off = self._offset(x, y)
        self.data[off] = _u8(index, "index")

    # ------------------------------------------------------------------
    # Palette
    # ------------------------------------------------------------------
    def get_palette_color(self, index: int) -> RGB:
        off = self._palette_entry(index)
        b, g, r = self.palette[off:off + 3]
        return int(r), int(g), int(b)

    def set_palette_color(self, index: int, r: int, g: int, b: int) -> None:
        off = self._palette_entry(index)
        self.palette[off:off + 3] = (_u8(b, "b"), _u8(g, "g"), _u8(r, "r"))

    # ------------------------------------------------------------------
    # Interop numpy
    # ------------------------------------------------------------------
    def _rows(self) -> np.ndarray:
        """Vue (H, stride) des lignes, ligne du haut en premier."""
        self._require_open()
        n = self.stride * self.height
        return self.data[:n].reshape(self.height, self.stride)[::-1]

    def index_array(self) -> np.ndarray:
        """Indices de palette `(H, W)` (copie)."""
        self._require_indexed("index_array")
        return np.ascontiguousarray(self._rows()[:, :self.width])

    def to_array(self) -> np.ndarray:
        """Pixels RGB `(H, W, 3)` uint8 (copie) ; 8 bpp passe par la palette."""
        self._require_open()
        if self.is_indexed:
            lut = self.palette.reshape(PALETTE_ENTRIES, 4)[:, 2::-1]
            return np.ascontiguousarray(lut[self.index_array()])
        bpp = bytes_per_pixel(self.depth)
        px = self._rows()[:, :self.width * bpp].reshape(self.height, self.width, bpp)
        return np.ascontiguousarray(px[..., 2::-1])

    # ------------------------------------------------------------------
    # Cycle de vie
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Libère palette et pixels. Idempotent."""
        self.palette = None
        self.data = np.zeros(0, dtype=np.uint8)
        self._closed = True

    def __enter__(self) -> "Bitmap":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        if self.header != other.header:
            return False
        if (self.palette is None) != (other.palette is None):
            return False
        if self.palette is not None and not np.array_equal(self.palette, other.palette):
            return False
        return bool(np.array_equal(self.data, other.data))

    __hash__ = None
