from __future__ import annotations

import hashlib
from pathlib import Path, PureWindowsPath


def normalize_path(path: str | Path) -> str:
    """Normalize separators and case so ids are stable across runs and OSes."""
    return PureWindowsPath(str(path)).as_posix().casefold()


def path_key(path: str | Path) -> str:
    """Stable short id for an image file, derived from its normalized path."""
    return hashlib.sha1(normalize_path(path).encode("utf-8")).hexdigest()[:16]
