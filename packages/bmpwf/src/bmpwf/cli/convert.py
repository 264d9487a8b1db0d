from __future__ import annotations
import argparse, logging, sys
from pathlib import Path
from PIL import Image
import numpy as np

from .common import setup_logging, ensure_dir, list_images, looks_like_bmp
from bmpcodec import Bitmap, BMPConfig, read_file, write_file
from bmpwf.api import bmp_name

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="BMP — Conversion image <-> BMP (8/24/32 bpp)")
    p.add_argument("inputs", nargs="+", help="Fichiers ou dossiers d'images")
    p.add_argument("--out", required=True, help="Dossier de sortie")
    p.add_argument("--depth", type=int, choices=(8, 24, 32), default=24)
    p.add_argument("--resume", action="store_true", help="Skip si sortie existe et valide")
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)

def image_to_bitmap(img: Image.Image, depth: int, config: BMPConfig | None = None) -> Bitmap:
    if depth == 8:
        q = img.convert("RGB").quantize(colors=256)
        pal = np.array(q.getpalette()[:768], dtype=np.uint8).reshape(-1, 3)
        return Bitmap.from_array(np.array(q, dtype=np.uint8), depth=8, palette=pal, config=config)
    return Bitmap.from_array(np.array(img.convert("RGB"), dtype=np.uint8), depth=depth, config=config)

def bitmap_to_image(bmp: Bitmap) -> Image.Image:
    return Image.fromarray(bmp.to_array())

def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)
    cfg = BMPConfig.from_env()

    out_dir = Path(args.out); ensure_dir(out_dir)
    imgs = [p for src in args.inputs for p in list_images(Path(src))]
    if not imgs:
        logging.error("Aucune image trouvée dans %s", args.inputs); return 2

    ok = 0
    for i, path in enumerate(imgs, 1):
        try:
            if path.suffix.lower() == ".bmp":
                dst = out_dir / f"{path.stem}.png"
                logging.info("[%d/%d] decode: %s", i, len(imgs), path)
                with read_file(path, cfg) as bmp:
                    bitmap_to_image(bmp).save(dst)
            else:
                dst = out_dir / bmp_name(path, args.depth)
                if args.resume and dst.exists() and looks_like_bmp(dst):
                    logging.info("[%d/%d] skip: %s", i, len(imgs), dst)
                    ok += 1; continue
                logging.info("[%d/%d] encode: %s", i, len(imgs), path)
                with Image.open(path) as img:
                    bmp = image_to_bitmap(img, args.depth, cfg)
                with bmp:
                    write_file(bmp, dst)
            logging.info("→ OK %s", dst)
            ok += 1
        except Exception as e:
            logging.exception("Échec conversion %s: %s", path, e)

    logging.info("Terminé: %d/%d converties", ok, len(imgs))
    return 0 if ok == len(imgs) else 1

if __name__ == "__main__":
    sys.exit(main())
