"""Responsive redraw contract for one chart.

A `ChartView` owns a pipeline and a draw target. It subscribes to its
container's size changes on mount, loads its data once, and performs a
full clear-and-redraw whenever the size or data changes while both are
known. Resize bursts are collapsed into the trailing event by a
`Debouncer` scheduled on the asyncio event loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

from artistdash.charts.base import ChartPipeline
from artistdash.loader import LoadError
from artistdash.models import RawRecord, ViewportSize
from artistdash.renderers.svg import SvgSurface

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.2


class RenderState(Enum):
    UNSIZED = "unsized"  # Size unknown or zero on either axis
    SIZED_NO_DATA = "sized_no_data"  # Size known, no (non-empty) data yet
    READY = "ready"  # Size and data known, drawn at least once


class Debouncer:
    """Trailing-edge debounce: only the last call in a burst fires, `delay` seconds later.

    Timers are scheduled with `loop.call_later`; when no loop is given the
    running loop is used at call time.
    """

    def __init__(
        self,
        callback: Callable[..., None],
        delay: float = DEBOUNCE_SECONDS,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._args: tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._args = args
        self._handle = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        args, self._args = self._args, ()
        self._callback(*args)

    def flush(self) -> None:
        """Fire the pending call now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            self._args = ()


class Subscription:
    """Handle returned by `ResizeObserver.observe`; `unsubscribe` is idempotent."""

    def __init__(self, observer: ResizeObserver, callback: Callable[[ViewportSize], None]) -> None:
        self._observer = observer
        self._callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._observer._remove(self._callback)
            self.active = False


class ResizeObserver:
    """Size-change notifications for one host container."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[ViewportSize], None]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def observe(self, callback: Callable[[ViewportSize], None]) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(self, callback)

    def _remove(self, callback: Callable[[ViewportSize], None]) -> None:
        self._callbacks.remove(callback)

    def emit(self, size: ViewportSize) -> None:
        for callback in list(self._callbacks):
            callback(size)


class ChartView:
    """One mounted chart: pipeline + exclusively owned draw target.

    Args:
        pipeline: The chart's prepare/layout/draw chain.
        target: Draw target, cleared and rewritten on every redraw.
        source: Returns the parsed rows; may raise LoadError.
        debounce_seconds: Quiet period before a resize is applied.
        loop: Event loop for debounce timers (running loop if None).
    """

    def __init__(
        self,
        pipeline: ChartPipeline,
        target: SvgSurface,
        source: Callable[[], Sequence[RawRecord]],
        debounce_seconds: float = DEBOUNCE_SECONDS,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.target = target
        self._source = source
        self._resize = Debouncer(self.set_size, debounce_seconds, loop)
        self._subscription: Subscription | None = None
        self._size: ViewportSize | None = None
        self._data: Sequence[Any] = ()
        self.geometry: Any = None
        self.render_count = 0

    @property
    def size(self) -> ViewportSize | None:
        return self._size

    @property
    def data(self) -> Sequence[Any]:
        return self._data

    @property
    def state(self) -> RenderState:
        if self._size is None or not self._size.is_renderable:
            return RenderState.UNSIZED
        if not self._data or self.render_count == 0:
            return RenderState.SIZED_NO_DATA
        return RenderState.READY

    def mount(self, observer: ResizeObserver) -> None:
        """Subscribe to container resizes and load the data once."""
        if self._subscription is not None:
            raise RuntimeError(f"{self.pipeline.name} chart is already mounted")
        self._subscription = observer.observe(self._resize)
        self.load()

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._resize.cancel()

    def load(self) -> bool:
        """Load and prepare the chart's data. Returns False if loading failed.

        A failed load is logged and leaves the chart blank.
        """
        try:
            records = self._source()
        except LoadError as e:
            logger.error("%s chart: %s", self.pipeline.name, e)
            return False
        self.set_data(self.pipeline.prepare(records))
        return True

    def set_data(self, data: Sequence[Any]) -> None:
        self._data = data
        self.redraw()

    def set_size(self, size: ViewportSize) -> None:
        self._size = size
        self.target.resize(size)
        self.redraw()

    def redraw(self) -> None:
        """Clear the target and draw from scratch at the current size.

        Does nothing until the size is renderable and the data is non-empty.
        """
        if self._size is None or not self._size.is_renderable:
            return
        if not self._data:
            return
        geometry = self.pipeline.layout(self._data, self._size)
        self.target.clear()
        self.pipeline.draw(self.target, geometry)
        self.geometry = geometry
        self.render_count += 1
        logger.debug(
            "%s chart redrawn at %gx%g (render %d)",
            self.pipeline.name,
            self._size.width,
            self._size.height,
            self.render_count,
        )
