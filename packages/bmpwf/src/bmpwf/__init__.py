# packages/bmpwf/src/bmpwf/__init__.py
from __future__ import annotations

from .api import bmp_name, describe

__all__ = [
    "bmp_name",
    "describe",
    # on n’importe PAS le sous-module cli ici pour éviter d'importer Pillow au top-level
]

__version__ = "1.0.0"
