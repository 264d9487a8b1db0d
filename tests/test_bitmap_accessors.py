from __future__ import annotations
import numpy as np
import pytest

from bmpcodec import Bitmap
from bmpcodec.layout import pixel_offset
from bmpcodec.errors import InvalidArgumentError, TypeMismatchError

@pytest.mark.parametrize("depth", [24, 32])
@pytest.mark.parametrize("w,h", [(1, 1), (3, 2), (5, 7)])
def test_set_get_rgb_boundaries(depth, w, h):
    bmp = Bitmap.create(w, h, depth)
    bmp.set_pixel_rgb(0, 0, 1, 2, 3)
    bmp.set_pixel_rgb(w - 1, h - 1, 250, 128, 7)
    assert bmp.get_pixel_rgb(w - 1, h - 1) == (250, 128, 7)
    if (w, h) != (1, 1):
        assert bmp.get_pixel_rgb(0, 0) == (1, 2, 3)

def test_rgb_stored_as_bgr_bottom_up():
    bmp = Bitmap.create(2, 2, 24)
    bmp.set_pixel_rgb(0, 0, 10, 20, 30)
    off = pixel_offset(0, 0, 2, 2, 24)
    assert off == 8
    assert bmp.data[off:off + 3].tolist() == [30, 20, 10]

def test_32bit_pad_byte_untouched():
    bmp = Bitmap.create(2, 2, 32)
    off = pixel_offset(1, 0, 2, 2, 32)
    bmp.data[off + 3] = 77
    bmp.set_pixel_rgb(1, 0, 9, 8, 7)
    assert bmp.data[off + 3] == 77
    assert bmp.get_pixel_rgb(1, 0) == (9, 8, 7)

def test_index_roundtrip_and_palette_lookup():
    bmp = Bitmap.create(3, 2, 8)
    bmp.set_palette_color(5, 10, 20, 30)
    bmp.set_pixel_index(2, 1, 5)
    assert bmp.get_pixel_index(2, 1) == 5
    assert bmp.get_pixel_rgb(2, 1) == (10, 20, 30)
    assert bmp.get_pixel_index(0, 0) == 0

def test_palette_entry_layout_and_pad():
    bmp = Bitmap.create(1, 1, 8)
    bmp.palette[255 * 4 + 3] = 9
    bmp.set_palette_color(255, 1, 2, 3)
    assert bmp.palette[1020:1024].tolist() == [3, 2, 1, 9]
    assert bmp.get_palette_color(255) == (1, 2, 3)

@pytest.mark.parametrize("depth", [24, 32])
def test_index_ops_on_direct_bitmap_mismatch(depth):
    bmp = Bitmap.create(2, 2, depth)
    with pytest.raises(TypeMismatchError):
        bmp.get_pixel_index(0, 0)
    with pytest.raises(TypeMismatchError):
        bmp.set_pixel_index(0, 0, 1)
    with pytest.raises(TypeMismatchError):
        bmp.get_palette_color(0)
    with pytest.raises(TypeMismatchError):
        bmp.set_palette_color(0, 1, 2, 3)

def test_set_rgb_on_indexed_mismatch():
    bmp = Bitmap.create(2, 2, 8)
    with pytest.raises(TypeMismatchError):
        bmp.set_pixel_rgb(0, 0, 1, 2, 3)

@pytest.mark.parametrize("depth", [8, 24, 32])
@pytest.mark.parametrize("x,y", [(4, 0), (0, 3), (4, 3), (-1, 0), (0, -1)])
def test_out_of_range_never_writes(depth, x, y):
    bmp = Bitmap.create(4, 3, depth)
    before = bmp.data.copy()
    with pytest.raises(InvalidArgumentError):
        bmp.get_pixel_rgb(x, y)
    with pytest.raises((InvalidArgumentError, TypeMismatchError)):
        if depth == 8:
            bmp.set_pixel_index(x, y, 1)
        else:
            bmp.set_pixel_rgb(x, y, 1, 2, 3)
    assert np.array_equal(bmp.data, before)

def test_channel_and_index_values_validated():
    bmp = Bitmap.create(2, 2, 24)
    with pytest.raises(InvalidArgumentError):
        bmp.set_pixel_rgb(0, 0, 256, 0, 0)
    with pytest.raises(InvalidArgumentError):
        bmp.set_pixel_rgb(0, 0, 0, -1, 0)
    ind = Bitmap.create(2, 2, 8)
    with pytest.raises(InvalidArgumentError):
        ind.set_pixel_index(0, 0, 300)
    with pytest.raises(InvalidArgumentError):
        ind.set_palette_color(256, 0, 0, 0)
    assert not bmp.data.any() and not ind.data.any()

def test_offset_checked_against_buffer_length():
    bmp = Bitmap.create(4, 4, 24)
    bmp.data = bmp.data[:10]     # buffer plus court que les dimensions déclarées
    with pytest.raises(InvalidArgumentError):
        bmp.get_pixel_rgb(0, 0)

def test_close_and_context_manager():
    with Bitmap.create(2, 2, 8) as bmp:
        bmp.set_pixel_index(0, 0, 3)
    assert bmp.closed
    assert bmp.palette is None and bmp.data.size == 0
    with pytest.raises(InvalidArgumentError):
        bmp.get_pixel_rgb(0, 0)
    with pytest.raises(InvalidArgumentError):
        bmp.get_palette_color(0)
    bmp.close()  # idempotent

def test_equality():
    a, b = Bitmap.create(3, 3, 8), Bitmap.create(3, 3, 8)
    assert a == b
    b.set_palette_color(1, 1, 1, 1)
    assert a != b
    assert Bitmap.create(3, 3, 24) != Bitmap.create(3, 3, 32)

def test_non_integer_values_rejected_not_truncated():
    bmp = Bitmap.create(2, 2, 24)
    with pytest.raises(InvalidArgumentError):
        bmp.set_pixel_rgb(0, 0, 1.5, 0, 0)
    with pytest.raises(InvalidArgumentError):
        bmp.set_pixel_rgb(0.9, 0, 1, 2, 3)
    with pytest.raises(InvalidArgumentError):
        bmp.get_pixel_rgb(0, 1.2)
    ind = Bitmap.create(2, 2, 8)
    with pytest.raises(InvalidArgumentError):
        ind.set_pixel_index(0, 0, 3.7)
    with pytest.raises(InvalidArgumentError):
        ind.set_palette_color(1.0, 0, 0, 0)
    assert not bmp.data.any() and not ind.data.any() and not ind.palette.any()
    bmp.set_pixel_rgb(np.int64(1), 0, np.uint8(7), 8, 9)
    assert bmp.get_pixel_rgb(1, 0) == (7, 8, 9)
