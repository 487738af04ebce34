"""Justified (row-filling) layout helpers.

This module is intentionally UI-framework agnostic.

Goal: given a *known* container width and an ordered list of images with
intrinsic sizes, split the images into rows and scale every row so it spans
the container exactly, keeping each image's aspect ratio.

Sizing happens in two stages:
- packing uses the height clamped into [min_row_height, max_row_height] to
  decide how many images fit in a row;
- finalizing recomputes each image with only the max_row_height cap and then
  scales the whole row to the target width.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Iterable, List

from app.justifiedgrid.errors import InvalidImageError
from app.justifiedgrid.layout.dimensions import capped_width_exact, natural_size
from app.justifiedgrid.layout.models import FinalizedRow, GridImage, LayoutConfig, PendingRow

logger = logging.getLogger(__name__)


# Absorbs float error when a scaled width lands exactly on an integer.
_EPSILON = 1e-9


def _floor(value: float) -> int:
    return max(0, int(math.floor(value + _EPSILON)))


def finalize_row(row: PendingRow, config: LayoutConfig) -> FinalizedRow:
    """Scale a completed row so its images plus gutters span the container.

    The scale factor is the target width over the row's max-capped widths.
    Each width is floored once from the unfloored capped width, and the
    height is derived from that width, so every image stays within one
    pixel of its aspect ratio. Per-image flooring means the widths may fall
    short of the target by up to one pixel per image; that slack is not
    redistributed.

    Heights are only uniform when the images share a capped height; an
    image shorter than max_row_height keeps its relative height within the
    row. FinalizedRow.height is the tallest image.
    """

    count = len(row.images)
    target = config.container_width - (count - 1) * config.gutter

    widths = [capped_width_exact(img, config.max_row_height) for img in row.images]
    total = sum(widths)

    finalized: List[GridImage] = []
    for img, w in zip(row.images, widths):
        if total <= 0 or target <= 0:
            # Can't happen for valid images; finalize at zero size instead of dividing by zero.
            new_w, new_h = 0, 0
        else:
            new_w = _floor(w * target / total)
            new_h = _floor(new_w * img.height / img.width)
        finalized.append(dataclasses.replace(img, width=new_w, height=new_h))

    return FinalizedRow(images=tuple(finalized), target_width=target)


def _accepted_images(images: Iterable[GridImage], strict: bool) -> List[GridImage]:
    accepted: List[GridImage] = []
    for index, img in enumerate(images):
        if img.is_valid:
            accepted.append(img)
            continue
        if strict:
            raise InvalidImageError(
                f"image #{index} ({img.id!r}) has non-positive size {img.width}x{img.height}"
            )
        logger.warning("Skipping image #%d (%r): non-positive size %sx%s", index, img.id, img.width, img.height)
    return accepted


def compute_layout(
    images: Iterable[GridImage],
    config: LayoutConfig,
    *,
    strict: bool = False,
) -> List[FinalizedRow]:
    """Pack images into justified rows.

    Algorithm: single greedy left-to-right pass. An image starts a new row
    when adding it (plus one gutter) would push a non-empty row past the
    container width. The last row is always scaled to fill the container,
    even if that makes it taller than max_row_height.

    Images with a non-positive width or height are skipped with a warning,
    or raise InvalidImageError when strict is set.

    Returns the finalized rows in input order.
    """

    if config.container_width <= 0:
        logger.warning("Justified grid container must have a width (got %s)", config.container_width)
        return []

    rows: List[FinalizedRow] = []
    pending = PendingRow()

    for img in _accepted_images(images, strict):
        w, h = natural_size(img, config.min_row_height, config.max_row_height)

        if pending.images and pending.width + config.gutter + w > config.container_width:
            rows.append(finalize_row(pending, config))
            logger.debug(
                "Row %d finalized with %d images (aspect sum %.3f)", len(rows) - 1, len(pending), pending.aspect_sum
            )
            pending = PendingRow()

        pending.append(img, w, h, config.gutter)

    if pending.images:
        rows.append(finalize_row(pending, config))
        logger.debug(
            "Last row %d finalized with %d images (aspect sum %.3f)", len(rows) - 1, len(pending), pending.aspect_sum
        )

    return rows
