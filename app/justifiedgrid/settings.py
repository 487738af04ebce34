"""Grid settings shared by the CLI and the native viewer."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from app.justifiedgrid.layout.models import (
    DEFAULT_GUTTER,
    DEFAULT_MAX_ROW_HEIGHT,
    DEFAULT_MIN_ROW_HEIGHT,
    LayoutConfig,
)

DEFAULT_DEBOUNCE_MS = 300


@dataclass(frozen=True)
class GridSettings:
    min_row_height: int = DEFAULT_MIN_ROW_HEIGHT
    max_row_height: int = DEFAULT_MAX_ROW_HEIGHT
    gutter: int = DEFAULT_GUTTER
    debounce_ms: int = DEFAULT_DEBOUNCE_MS

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms must be >= 0")
        # Validates heights and gutter.
        self.layout_config(0)

    def with_overrides(self, **overrides: int | None) -> "GridSettings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def layout_config(self, container_width: int) -> LayoutConfig:
        return LayoutConfig(
            container_width=int(container_width),
            min_row_height=self.min_row_height,
            max_row_height=self.max_row_height,
            gutter=self.gutter,
        )

    @property
    def debounce_s(self) -> float:
        return self.debounce_ms / 1000.0


DEFAULT_SETTINGS = GridSettings()
