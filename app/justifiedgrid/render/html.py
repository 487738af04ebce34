"""Static HTML output for a finalized layout.

Mirrors what a browser view would mount: one flex <li> per row, images
separated by the gutter horizontally, rows separated by the gutter
vertically (nothing after the last row).
"""

from __future__ import annotations

from html import escape
from typing import Iterable, List

from app.justifiedgrid.layout.models import FinalizedRow


def _img_tag(img) -> str:
    w, h = int(img.width), int(img.height)
    return (
        f'<img src="{escape(img.src)}" data-id="{escape(img.id)}" '
        f'width="{w}" height="{h}" loading="lazy" '
        f'style="display: flex; width: {w}px; height: {h}px;">'
    )


def render_html(rows: Iterable[FinalizedRow], gutter: int) -> str:
    rows = list(rows)
    parts: List[str] = ['<ul class="justified-grid" style="list-style: none; margin: 0; padding: 0;">']
    for i, row in enumerate(rows):
        margin = 0 if i == len(rows) - 1 else gutter
        key = escape("-".join(row.ids))
        parts.append(
            f'  <li data-key="{key}" '
            f'style="display: flex; gap: {gutter}px; margin-bottom: {margin}px;">'
        )
        parts.extend(f"    {_img_tag(img)}" for img in row.images)
        parts.append("  </li>")
    parts.append("</ul>")
    return "\n".join(parts) + "\n"


def render_page(rows: Iterable[FinalizedRow], gutter: int, title: str = "JustifiedGrid") -> str:
    """Wrap render_html() in a minimal standalone document."""
    return (
        "<!DOCTYPE html>\n"
        f'<html><head><meta charset="utf-8"><title>{escape(title)}</title></head>\n'
        "<body>\n"
        f"{render_html(rows, gutter)}"
        "</body></html>\n"
    )
