"""Image sources for the grid: JSON manifests and folder scans.

Only intrinsic sizes matter to the layout, so nothing here decodes pixel
data beyond what Pillow needs to read the header.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List

from PIL import Image

from app.justifiedgrid.errors import ManifestError
from app.justifiedgrid.layout.models import GridImage
from app.justifiedgrid.utils.hashing import path_key

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tif", ".tiff"}

# EXIF orientations that rotate the image by 90 degrees.
_ROTATED_ORIENTATIONS = {5, 6, 7, 8}
_EXIF_ORIENTATION = 0x0112


def _parse_entry(index: int, entry: Any) -> GridImage:
    if not isinstance(entry, dict):
        raise ManifestError(f"entry {index}: expected an object, got {type(entry).__name__}")
    try:
        if "dimensions" in entry:
            dims = entry["dimensions"]
            return GridImage(
                id=str(entry["_id"]),
                src=str(entry["href"]),
                width=float(dims["w"]),
                height=float(dims["h"]),
            )
        return GridImage(
            id=str(entry["id"]),
            src=str(entry["src"]),
            width=float(entry["width"]),
            height=float(entry["height"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ManifestError(f"entry {index}: missing or invalid field ({e})") from e


def load_manifest(path: str | Path) -> List[GridImage]:
    """Load images from a JSON list.

    Accepts both the nested shape ({"_id", "href", "dimensions": {"w", "h"}})
    and the flat shape written by dump_manifest().
    """

    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError(f"cannot read manifest {p}: {e}") from e
    if not isinstance(data, list):
        raise ManifestError(f"manifest {p} must contain a JSON list")
    return [_parse_entry(i, entry) for i, entry in enumerate(data)]


def dump_manifest(images: Iterable[GridImage], path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    entries = [
        {"id": img.id, "src": img.src, "width": img.width, "height": img.height}
        for img in images
    ]
    p.write_text(json.dumps(entries, indent=2) + "\n", encoding="utf-8")


def read_image_size(path: str | Path) -> tuple[int, int]:
    """Displayed (width, height) of an image file, honoring EXIF rotation."""
    with Image.open(path) as im:
        w, h = im.size
        orientation = im.getexif().get(_EXIF_ORIENTATION)
    if orientation in _ROTATED_ORIENTATIONS:
        return h, w
    return w, h


def scan_folder(folder: str | Path) -> List[GridImage]:
    """List images directly inside folder, sorted by file name."""

    root = Path(folder)
    if not root.is_dir():
        raise NotADirectoryError(str(root))

    images: List[GridImage] = []
    files = sorted(
        (p for p in root.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS),
        key=lambda p: p.name.casefold(),
    )
    for p in files:
        try:
            w, h = read_image_size(p)
        except OSError as e:
            logger.warning("Skipping unreadable image %s: %s", p, e)
            continue
        images.append(GridImage(id=path_key(p), src=p.resolve().as_uri(), width=w, height=h))
    return images
