from __future__ import annotations
import json
import numpy as np
from PIL import Image

from bmpcodec import Bitmap, read_file, write_file
from bmpwf import bmp_name, describe

def test_describe_and_name():
    bmp = Bitmap.create(3, 2, 8)
    bmp.set_palette_color(1, 4, 5, 6)
    d = describe(bmp, palette=True)
    assert d["width"] == 3 and d["stride"] == 4 and d["indexed"] is True
    assert d["palette"][1] == [4, 5, 6] and len(d["palette"]) == 256
    assert "palette" not in describe(Bitmap.create(1, 1, 24), palette=True)
    assert bmp_name("/a/b/photo.png", 8) == "photo__8bpp.bmp"

def test_cli_info(tmp_path, capsys):
    from bmpwf.cli.info import main as info_main
    p = tmp_path / "a.bmp"
    write_file(Bitmap.create(2, 2, 24), p)
    out_json = tmp_path / "report" / "info.json"
    rc = info_main([str(p), "--json", str(out_json)])
    assert rc == 0
    assert "image_data_size: 16" in capsys.readouterr().out
    report = json.loads(out_json.read_text(encoding="utf-8"))
    assert report[str(p)]["file_size"] == 70

def test_cli_info_bad_file(tmp_path):
    from bmpwf.cli.info import main as info_main
    bad = tmp_path / "bad.bmp"
    bad.write_bytes(b"XX" + b"\x00" * 60)
    out_json = tmp_path / "info.json"
    rc = info_main([str(bad), str(tmp_path / "missing.bmp"), "--json", str(out_json)])
    assert rc == 1
    report = json.loads(out_json.read_text(encoding="utf-8"))
    assert report[str(bad)]["error"] == "BMP_FILE_INVALID"
    assert report[str(tmp_path / "missing.bmp")]["error"] == "BMP_FILE_NOT_FOUND"

def test_cli_convert_png_to_bmp_and_back(tmp_path):
    from bmpwf.cli.convert import main as convert_main
    arr = np.random.default_rng(3).integers(0, 256, size=(6, 5, 3), dtype=np.uint8)
    src = tmp_path / "imgs"; src.mkdir()
    Image.fromarray(arr).save(src / "a.png")

    out = tmp_path / "out"
    rc = convert_main([str(src), "--out", str(out), "--depth", "32"])
    assert rc == 0
    bmp_path = out / "a__32bpp.bmp"
    bmp = read_file(bmp_path)
    assert bmp.depth == 32
    assert np.array_equal(bmp.to_array(), arr)

    back = tmp_path / "back"
    rc = convert_main([str(bmp_path), "--out", str(back)])
    assert rc == 0
    with Image.open(back / "a__32bpp.png") as im:
        assert np.array_equal(np.array(im.convert("RGB")), arr)

def test_cli_convert_indexed_and_resume(tmp_path):
    from bmpwf.cli.convert import main as convert_main
    src = tmp_path / "a.png"
    Image.new("RGB", (8, 4), color=(128, 64, 32)).save(src)
    out = tmp_path / "out"
    assert convert_main([str(src), "--out", str(out), "--depth", "8"]) == 0
    bmp = read_file(out / "a__8bpp.bmp")
    assert bmp.depth == 8 and (bmp.width, bmp.height) == (8, 4)
    assert bmp.get_pixel_rgb(3, 2) == (128, 64, 32)
    assert convert_main([str(src), "--out", str(out), "--depth", "8", "--resume"]) == 0

def test_cli_convert_no_inputs(tmp_path):
    from bmpwf.cli.convert import main as convert_main
    empty = tmp_path / "empty"; empty.mkdir()
    assert convert_main([str(empty), "--out", str(tmp_path / "o")]) == 2

def test_cli_convert_continues_after_non_oserror(tmp_path, monkeypatch):
    import bmpwf.cli.convert as conv
    src = tmp_path / "imgs"; src.mkdir()
    Image.new("RGB", (2, 2), color=(1, 2, 3)).save(src / "bomb.png")
    Image.new("RGB", (2, 2), color=(4, 5, 6)).save(src / "good.png")

    real_open = conv.Image.open
    def fake_open(path, *a, **kw):
        if "bomb" in str(path):
            raise Image.DecompressionBombError("too many pixels")
        return real_open(path, *a, **kw)
    monkeypatch.setattr(conv.Image, "open", fake_open)

    out = tmp_path / "out"
    assert conv.main([str(src), "--out", str(out)]) == 1
    assert read_file(out / "good__24bpp.bmp").get_pixel_rgb(1, 1) == (4, 5, 6)
    assert not (out / "bomb__24bpp.bmp").exists()
