"""bmpkit — unified API
Install once, import one namespace:

    pip install -e .

Usage:

    import bmpkit as bk
    bmp = bk.Bitmap.create(64, 32, 24)
    bmp.set_pixel_rgb(0, 0, 255, 0, 0)
    bk.write_file(bmp, "out.bmp")
    bmp2 = bk.read_file("out.bmp")

Or detailed modules:

    from bmpkit import codec, wf
"""

__version__ = "1.0.0"

# Bring subpackages into a single namespace
import bmpcodec as codec
import bmpwf as wf

# High-level convenience re-exports (top-level functions)
from bmpcodec import (
    Bitmap, BitmapHeader, BMPConfig, BMPStatus, BMPError,
    load, save, decode, encode, read_file, write_file,
    error_string, row_stride, pixel_offset,
)

__all__ = [
    # sub-namespaces
    "codec", "wf",
    # convenience
    "Bitmap", "BitmapHeader", "BMPConfig", "BMPStatus", "BMPError",
    "load", "save", "decode", "encode", "read_file", "write_file",
    "error_string", "row_stride", "pixel_offset",
    "__version__",
]
