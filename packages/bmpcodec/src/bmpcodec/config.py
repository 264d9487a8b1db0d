# packages/bmpcodec/src/bmpcodec/config.py
from __future__ import annotations
from dataclasses import dataclass
import os

__all__ = ["BMPConfig", "DEFAULT_MAX_IMAGE_BYTES"]

DEFAULT_MAX_IMAGE_BYTES = 256 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class BMPConfig:
    """
    Configuration **publique et stable** du codec BMP.

    Consommée par `Bitmap.create(...)` et `bmpcodec.io.load(...)`.

    Champs
    ------
    max_image_bytes : int, default=256 MiB
        Plafond du buffer de pixels. Au-delà, `OutOfMemoryError` est levée
        **avant** toute allocation. Doit être > 0.
    infer_image_size : bool, default=True
        Au chargement, un `image_data_size` nul (autorisé pour BI_RGB par
        d'autres outils) est remplacé par `row_stride * height`.
    honor_data_offset : bool, default=True
        Au chargement, les octets entre la fin de la palette et `data_offset`
        sont sautés.

    Notes
    -----
    - Dataclass **immuable** (`frozen=True`).
    - Les validations lèvent `ValueError` si les bornes sont violées.
    - `from_env()` lit `BMP_MAX_IMAGE_BYTES`, `BMP_INFER_IMAGE_SIZE`,
      `BMP_HONOR_DATA_OFFSET`.
    """

    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    infer_image_size: bool = True
    honor_data_offset: bool = True

    def __post_init__(self) -> None:
        if int(self.max_image_bytes) <= 0:
            raise ValueError("BMPConfig.max_image_bytes must be > 0")

    @staticmethod
    def from_env() -> "BMPConfig":
        return BMPConfig(
            max_image_bytes=int(os.getenv("BMP_MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES)),
            infer_image_size=_env_flag("BMP_INFER_IMAGE_SIZE", True),
            honor_data_offset=_env_flag("BMP_HONOR_DATA_OFFSET", True),
        )


def _env_flag(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip().lower() not in ("0", "false", "no", "off")
