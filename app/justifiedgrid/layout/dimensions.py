"""Natural display sizes for a single image."""

from __future__ import annotations

import math
from typing import Tuple

from app.justifiedgrid.errors import InvalidImageError
from app.justifiedgrid.layout.models import GridImage


def _check(image: GridImage) -> None:
    if not image.is_valid:
        raise InvalidImageError(
            f"image {image.id!r} has non-positive size {image.width}x{image.height}"
        )


def _width_at(image: GridImage, height: float) -> int:
    # Multiply before dividing so an unscaled image keeps its exact width.
    return int(math.floor(height * image.width / image.height))


def natural_size(image: GridImage, min_height: float, max_height: float) -> Tuple[int, float]:
    """Size used while packing: height clamped into [min_height, max_height]."""

    _check(image)
    height = min(max(image.height, min_height), max_height)
    return _width_at(image, height), height


def capped_size(image: GridImage, max_height: float) -> Tuple[int, float]:
    """Size used while finalizing: height only capped at max_height."""

    _check(image)
    height = min(image.height, max_height)
    return _width_at(image, height), height


def capped_width_exact(image: GridImage, max_height: float) -> float:
    """Unfloored width at the capped height, for scaling without compounding rounding."""

    _, height = capped_size(image, max_height)
    return height * image.width / image.height
