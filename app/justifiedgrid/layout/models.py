"""Value types shared by the justified layout helpers.

Everything here is UI-framework agnostic and immutable except PendingRow,
which only lives inside a single compute_layout() call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from app.justifiedgrid.errors import InvalidConfigError

DEFAULT_MIN_ROW_HEIGHT = 150
DEFAULT_MAX_ROW_HEIGHT = 400
DEFAULT_GUTTER = 5


@dataclass(frozen=True)
class GridImage:
    """Input image for layout.

    id and src are opaque to the algorithm; width/height are intrinsic pixels.
    """

    id: str
    src: str
    width: float
    height: float

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class LayoutConfig:
    container_width: int
    min_row_height: int = DEFAULT_MIN_ROW_HEIGHT
    max_row_height: int = DEFAULT_MAX_ROW_HEIGHT
    gutter: int = DEFAULT_GUTTER

    def __post_init__(self) -> None:
        # container_width may be <= 0 before the container is measured; compute_layout() returns [] then.
        if self.min_row_height <= 0:
            raise InvalidConfigError("min_row_height must be > 0")
        if self.max_row_height < self.min_row_height:
            raise InvalidConfigError("max_row_height must be >= min_row_height")
        if self.gutter < 0:
            raise InvalidConfigError("gutter must be >= 0")


@dataclass
class PendingRow:
    """A row under construction.

    width counts natural image widths plus the interior gutters already added.
    """

    images: List[GridImage] = field(default_factory=list)
    width: int = 0
    aspect_sum: float = 0.0

    def __len__(self) -> int:
        return len(self.images)

    def append(self, image: GridImage, natural_width: int, natural_height: float, gutter: int) -> None:
        if self.images:
            self.width += gutter
        self.images.append(image)
        self.width += natural_width
        if natural_height > 0:
            self.aspect_sum += natural_width / natural_height


@dataclass(frozen=True)
class FinalizedRow:
    images: Tuple[GridImage, ...]
    target_width: int

    def __len__(self) -> int:
        return len(self.images)

    @property
    def height(self) -> int:
        return max((int(img.height) for img in self.images), default=0)

    @property
    def content_width(self) -> int:
        """Sum of image widths, gutters excluded."""
        return sum(int(img.width) for img in self.images)

    def rendered_width(self, gutter: int) -> int:
        return self.content_width + gutter * max(0, len(self.images) - 1)

    @property
    def ids(self) -> List[str]:
        return [img.id for img in self.images]
