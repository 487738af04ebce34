"""Resize-driven relayout.

compute_layout() is pure and knows nothing about when it runs. This module
is the trigger around it: container width changes are coalesced through a
debounce timer and the newest result replaces the published layout.

UI layers feed widths in (e.g. from a Qt resizeEvent) and get rows back via
the on_layout callback, which runs on the timer thread. Qt callers should
forward it through a Signal.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, List, Optional, Tuple

from app.justifiedgrid.layout.justified import compute_layout
from app.justifiedgrid.layout.models import FinalizedRow, GridImage
from app.justifiedgrid.settings import DEFAULT_SETTINGS, GridSettings

logger = logging.getLogger(__name__)

TimerFactory = Callable[..., Any]


class Debouncer:
    """Run callback once, delay_s after the last trigger() call.

    Each trigger cancels the pending timer, so a burst of calls collapses
    into a single callback with the arguments of the final call.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        delay_s: float = 0.3,
        *,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        self._callback = callback
        self.delay_s = delay_s
        self._timer_factory = timer_factory
        self._timer: Any = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self, *args: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self._timer_factory(self.delay_s, self._fire, args=(self._generation, args))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, generation: int, args: Tuple[Any, ...]) -> None:
        with self._lock:
            # A later trigger() or cancel() superseded this timer.
            if generation != self._generation:
                return
            self._timer = None
        self._callback(*args)


class RelayoutController:
    def __init__(
        self,
        images: Iterable[GridImage],
        settings: GridSettings = DEFAULT_SETTINGS,
        on_layout: Optional[Callable[[List[FinalizedRow]], None]] = None,
        *,
        strict: bool = False,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._images: Tuple[GridImage, ...] = tuple(images)
        self._settings = settings
        self._on_layout = on_layout
        self._strict = strict
        self._lock = threading.Lock()
        self._rows: Tuple[FinalizedRow, ...] = ()
        self._width: Optional[int] = None
        self._started = 0
        self._published = 0
        self._debouncer = Debouncer(self.relayout_now, settings.debounce_s, timer_factory=timer_factory)

    @property
    def rows(self) -> Tuple[FinalizedRow, ...]:
        return self._rows

    @property
    def container_width(self) -> Optional[int]:
        return self._width

    @property
    def settings(self) -> GridSettings:
        return self._settings

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def container_resized(self, width: int) -> None:
        """Schedule a relayout at width once resizing settles."""
        self._debouncer.trigger(int(width))

    def relayout_now(self, width: Optional[int] = None) -> Tuple[FinalizedRow, ...]:
        """Compute synchronously (e.g. on mount) and publish the result."""

        with self._lock:
            if width is None:
                width = self._width
            if width is None:
                return self._rows
            self._width = int(width)
            self._started += 1
            run = self._started
            images = self._images
            config = self._settings.layout_config(self._width)

        rows = tuple(compute_layout(images, config, strict=self._strict))

        with self._lock:
            if run < self._published:
                # A newer run already published; drop this stale result.
                logger.debug("Discarding stale layout run %d", run)
                return self._rows
            self._published = run
            self._rows = rows

        if self._on_layout is not None:
            self._on_layout(list(rows))
        return rows

    def set_images(self, images: Iterable[GridImage]) -> None:
        with self._lock:
            self._images = tuple(images)
        self.relayout_now()

    def update_settings(self, settings: GridSettings) -> None:
        with self._lock:
            self._settings = settings
        self._debouncer.delay_s = settings.debounce_s
        self.relayout_now()

    def close(self) -> None:
        self._debouncer.cancel()
