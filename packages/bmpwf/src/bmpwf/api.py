from __future__ import annotations
from pathlib import Path
from typing import Any, Dict

from bmpcodec import Bitmap

def bmp_name(src: Path | str, depth: int) -> str:
    return f"{Path(src).stem}__{int(depth)}bpp.bmp"

def describe(bmp: Bitmap, palette: bool = False) -> Dict[str, Any]:
    """Champs d'en-tête + valeurs dérivées (stride, indexed), prêts pour JSON."""
    d: Dict[str, Any] = bmp.header.to_dict()
    d["stride"] = bmp.stride
    d["indexed"] = bmp.is_indexed
    if palette and bmp.is_indexed:
        d["palette"] = [list(bmp.get_palette_color(i)) for i in range(256)]
    return d
