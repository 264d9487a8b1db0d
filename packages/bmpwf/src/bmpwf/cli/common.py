from __future__ import annotations
import logging, sys
from pathlib import Path
from typing import Optional

MAGIC = b"BM"

def setup_logging(log_file: Optional[Path], verbose: bool = True) -> None:
    log_fmt = "[%(asctime)s] %(levelname)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=log_fmt, datefmt=datefmt, handlers=handlers)

def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def list_images(root: Path, exts=(".png",".jpg",".jpeg",".bmp",".tif",".tiff")) -> list[Path]:
    root = Path(root)
    if root.is_file():
        return [root] if root.suffix.lower() in exts else []
    return sorted(p for p in root.rglob("*") if p.suffix.lower() in exts)

def looks_like_bmp(p: Path) -> bool:
    try:
        with open(p, "rb") as f:
            return f.read(2) == MAGIC
    except OSError:
        return False
