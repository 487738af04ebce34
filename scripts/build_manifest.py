#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.justifiedgrid.media.catalog import dump_manifest, scan_folder


def main() -> None:
    parser = argparse.ArgumentParser(description="Scan an image folder and write a layout manifest")
    parser.add_argument("folder", help="Folder containing images")
    parser.add_argument("--out", default="data/manifest.json", help="Manifest path to write")
    args = parser.parse_args()

    images = scan_folder(args.folder)
    dump_manifest(images, args.out)
    print(f"Images found: {len(images)}")
    for img in images[:20]:
        print(f"- {int(img.width)}x{int(img.height)} {img.src}")
    print(f"✅ Manifest written to: {Path(args.out).resolve()}")


if __name__ == "__main__":
    main()
