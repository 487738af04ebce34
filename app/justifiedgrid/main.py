from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from app.justifiedgrid.errors import JustifiedGridError
from app.justifiedgrid.layout.justified import compute_layout
from app.justifiedgrid.layout.models import FinalizedRow, GridImage
from app.justifiedgrid.media.catalog import load_manifest, scan_folder
from app.justifiedgrid.render.html import render_page
from app.justifiedgrid.settings import DEFAULT_SETTINGS, GridSettings

DEFAULT_MANIFEST = "data/sample_images.json"


def load_images(manifest: str | None = None, folder: str | None = None) -> List[GridImage]:
    if folder:
        return scan_folder(folder)
    return load_manifest(manifest or DEFAULT_MANIFEST)


def rows_to_dicts(rows: Sequence[FinalizedRow]) -> list[dict]:
    return [
        {
            "target_width": row.target_width,
            "height": row.height,
            "images": [
                {"id": img.id, "src": img.src, "width": int(img.width), "height": int(img.height)}
                for img in row.images
            ],
        }
        for row in rows
    ]


def print_summary(rows: Sequence[FinalizedRow], settings: GridSettings, width: int) -> None:
    print(f"Container width: {width}px (rows {settings.min_row_height}-{settings.max_row_height}px, gutter {settings.gutter}px)")
    print(f"Rows: {len(rows)}")
    for i, row in enumerate(rows):
        widths = ", ".join(str(int(img.width)) for img in row.images)
        print(f"- row {i}: {len(row)} images, height {row.height}px, width {row.rendered_width(settings.gutter)}px [{widths}]")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a justified image grid layout")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--manifest", help=f"JSON image manifest (default: {DEFAULT_MANIFEST})")
    source.add_argument("--folder", help="Scan a folder of images instead of a manifest")
    parser.add_argument("--width", type=int, required=True, help="Container width in pixels")
    parser.add_argument("--min-row-height", type=int, default=None)
    parser.add_argument("--max-row-height", type=int, default=None)
    parser.add_argument("--gutter", type=int, default=None, help="Spacing between images and rows")
    parser.add_argument("--strict", action="store_true", help="Fail on images with non-positive size")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Print rows as JSON")
    output.add_argument("--html", help="Write a standalone HTML page to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = DEFAULT_SETTINGS.with_overrides(
            min_row_height=args.min_row_height,
            max_row_height=args.max_row_height,
            gutter=args.gutter,
        )
        images = load_images(args.manifest, args.folder)
        rows = compute_layout(images, settings.layout_config(args.width), strict=args.strict)
    except (JustifiedGridError, OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(rows_to_dicts(rows), indent=2))
    elif args.html:
        out = Path(args.html)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(render_page(rows, settings.gutter), encoding="utf-8")
        print(f"Wrote {len(rows)} rows to {out.resolve()}")
    else:
        print_summary(rows, settings, args.width)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
