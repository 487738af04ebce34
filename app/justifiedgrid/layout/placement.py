"""Absolute geometry for finalized rows.

Renderers that can't use a flex/flow container (Qt widgets, canvases) need
pixel positions. Rows stack top to bottom with the gutter between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from app.justifiedgrid.layout.models import FinalizedRow


@dataclass(frozen=True)
class GridPlacement:
    key: str
    src: str
    row: int
    x: int
    y: int
    width: int
    height: int


def place_rows(rows: Iterable[FinalizedRow], gutter: int) -> Tuple[List[GridPlacement], int]:
    """Compute placements and total height.

    Returns (placements, total_height_px). No gutter follows the last row.
    """

    if gutter < 0:
        raise ValueError("gutter must be >= 0")

    placements: List[GridPlacement] = []
    y = 0
    row_count = 0
    for index, row in enumerate(rows):
        x = 0
        for img in row.images:
            placements.append(
                GridPlacement(
                    key=img.id,
                    src=img.src,
                    row=index,
                    x=x,
                    y=y,
                    width=int(img.width),
                    height=int(img.height),
                )
            )
            x += int(img.width) + gutter
        y += row.height + gutter
        row_count += 1

    total = y - (gutter if row_count else 0)
    return placements, max(0, total)
