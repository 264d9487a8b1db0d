from __future__ import annotations
import argparse, json, logging, sys
from pathlib import Path

from .common import setup_logging
from bmpcodec import BMPError, BMPConfig, read_file, error_string
from bmpwf.api import describe

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="BMP — Dump des en-têtes BMP")
    p.add_argument("files", nargs="+", help="Fichiers .bmp")
    p.add_argument("--palette", action="store_true", help="Inclure les 256 entrées de palette (8 bpp)")
    p.add_argument("--json", default=None, help="(Optionnel) écrire les en-têtes en JSON")
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)

def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)
    cfg = BMPConfig.from_env()

    report = {}
    ok = 0
    for i, path in enumerate(args.files, 1):
        p = Path(path)
        try:
            with read_file(p, cfg) as bmp:
                d = describe(bmp, palette=args.palette)
        except BMPError as e:
            logging.exception("Échec lecture %s: %s (%s)", p, e, error_string(e.status))
            report[str(p)] = {"error": error_string(e.status)}
            continue
        report[str(p)] = d
        print(f"{p}:")
        for k, v in d.items():
            if k == "palette":
                for idx, rgb in enumerate(v):
                    print(f"  palette[{idx:3d}] = {tuple(rgb)}")
            else:
                print(f"  {k}: {v}")
        logging.info("[%d/%d] OK %s", i, len(args.files), p)
        ok += 1

    if args.json:
        out = Path(args.json); out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
        logging.info("→ écrit %s", out)
    return 0 if ok == len(args.files) else 1

if __name__ == "__main__":
    sys.exit(main())
