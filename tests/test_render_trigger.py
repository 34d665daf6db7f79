"""Tests for the debounce, resize subscription, and redraw contract of ChartView."""

from __future__ import annotations

import logging
from functools import partial

import pytest

from artistdash.charts import bar, scatter
from artistdash.loader import LoadError, load_records
from artistdash.models import ViewportSize
from artistdash.render_trigger import (
    ChartView,
    Debouncer,
    RenderState,
    ResizeObserver,
)
from artistdash.renderers.svg import SvgSurface
from conftest import make_record

ROWS = [
    make_record("A", popularity=85, track_popularity=50),
    make_record("B", popularity=90, track_popularity=60),
    make_record("C", popularity=42, track_popularity=20),
]


def _view(fake_loop, pipeline=None, source=lambda: ROWS) -> ChartView:
    pipeline = pipeline or bar.pipeline()
    return ChartView(
        pipeline, SvgSurface(pipeline.surface_id), source, debounce_seconds=0.2, loop=fake_loop
    )


def test_debouncer_fires_only_the_last_call(fake_loop) -> None:
    """A burst inside the delay collapses into one trailing call."""

    calls = []
    debounced = Debouncer(calls.append, 0.2, loop=fake_loop)

    debounced(1)
    fake_loop.advance(0.1)
    debounced(2)
    fake_loop.advance(0.1)
    debounced(3)
    fake_loop.advance(0.19)

    assert calls == []
    fake_loop.advance(0.01)
    assert calls == [3]
    assert not debounced.pending


def test_debouncer_flush_and_cancel(fake_loop) -> None:
    """flush fires immediately; cancel drops the pending call."""

    calls = []
    debounced = Debouncer(calls.append, 0.2, loop=fake_loop)

    debounced("now")
    debounced.flush()
    debounced("never")
    debounced.cancel()
    fake_loop.advance(1)

    assert calls == ["now"]


def test_observer_unsubscribe_is_idempotent() -> None:
    """Unsubscribing twice removes the callback once."""

    observer = ResizeObserver()
    seen = []
    sub = observer.observe(seen.append)

    observer.emit(ViewportSize(10, 10))
    sub.unsubscribe()
    sub.unsubscribe()
    observer.emit(ViewportSize(20, 20))

    assert seen == [ViewportSize(10, 10)]
    assert observer.subscriber_count == 0


def test_resize_burst_redraws_once(fake_loop) -> None:
    """Many resize events inside the quiet period produce a single redraw at the last size."""

    observer = ResizeObserver()
    view = _view(fake_loop)
    view.mount(observer)

    for width in (300, 400, 500, 600):
        observer.emit(ViewportSize(width, 300))
        fake_loop.advance(0.05)
    fake_loop.advance(0.2)

    assert view.render_count == 1
    assert view.size == ViewportSize(600, 300)
    assert view.state is RenderState.READY
    assert view.target.size == ViewportSize(600, 300)


@pytest.mark.parametrize("size_first", [True, False])
def test_size_and_data_in_either_order_render_once(fake_loop, size_first: bool) -> None:
    """Whichever of size and data arrives last triggers exactly one draw."""

    view = _view(fake_loop)
    data = bar.prepare(ROWS)
    size = ViewportSize(800, 400)

    if size_first:
        view.set_size(size)
        assert view.state is RenderState.SIZED_NO_DATA
        view.set_data(data)
    else:
        view.set_data(data)
        assert view.state is RenderState.UNSIZED
        view.set_size(size)

    assert view.render_count == 1
    assert view.geometry == bar.layout(data, size)


def test_zero_size_never_renders(fake_loop) -> None:
    """A container with no width or no height stays unsized."""

    view = _view(fake_loop)
    view.load()

    view.set_size(ViewportSize(0, 300))
    view.set_size(ViewportSize(300, 0))

    assert view.render_count == 0
    assert view.state is RenderState.UNSIZED
    assert view.target.elements == ()


def test_redraw_replaces_previous_output(fake_loop) -> None:
    """Drawing twice at the same size leaves the same elements, not duplicates."""

    view = _view(fake_loop)
    view.load()
    view.set_size(ViewportSize(800, 400))
    first = view.target.elements

    view.redraw()

    assert view.render_count == 2
    assert view.target.elements == first


def test_direct_redraw_respects_zero_size(fake_loop) -> None:
    """Calling redraw by hand at a zero-sized container draws nothing."""

    view = _view(fake_loop)
    view.load()
    view.set_size(ViewportSize(0, 0))

    view.redraw()

    assert view.render_count == 0
    assert view.geometry is None
    assert view.target.elements == ()


def test_direct_redraw_without_data_is_a_no_op(fake_loop) -> None:
    """With a size but no data, redraw does not reach the layout step."""

    view = _view(fake_loop, source=lambda: [])
    view.load()
    view.set_size(ViewportSize(800, 400))

    view.redraw()

    assert view.render_count == 0
    assert view.state is RenderState.SIZED_NO_DATA


def test_load_failure_is_logged_and_chart_stays_blank(fake_loop, tmp_path, caplog) -> None:
    """An unreadable data file is reported and nothing is drawn."""

    source = partial(load_records, tmp_path / "missing.csv")
    view = _view(fake_loop, source=source)

    with caplog.at_level(logging.ERROR, logger="artistdash.render_trigger"):
        assert view.load() is False
    view.set_size(ViewportSize(800, 400))

    assert "bar chart" in caplog.text
    assert view.render_count == 0
    assert view.geometry is None
    assert view.state is RenderState.SIZED_NO_DATA


def test_source_error_type_is_load_error(fake_loop) -> None:
    """Only LoadError is turned into a blank chart; other errors propagate."""

    def broken():
        raise LoadError("bad file")

    def buggy():
        raise KeyError("oops")

    assert _view(fake_loop, source=broken).load() is False
    with pytest.raises(KeyError):
        _view(fake_loop, source=buggy).load()


def test_no_artists_over_threshold_leaves_chart_blank(fake_loop) -> None:
    """Filtered-out data never reaches layout."""

    view = _view(fake_loop, pipeline=scatter.pipeline(threshold=99))
    view.load()
    view.set_size(ViewportSize(800, 400))

    assert view.data == ()
    assert view.render_count == 0


def test_unmount_cancels_pending_resize(fake_loop) -> None:
    """After unmount, neither queued nor new resize events redraw."""

    observer = ResizeObserver()
    view = _view(fake_loop)
    view.mount(observer)

    observer.emit(ViewportSize(800, 400))
    view.unmount()
    fake_loop.advance(1)
    observer.emit(ViewportSize(900, 400))
    fake_loop.advance(1)

    assert view.render_count == 0
    assert observer.subscriber_count == 0


def test_mount_twice_is_an_error(fake_loop) -> None:
    """A view subscribes to one container at a time."""

    observer = ResizeObserver()
    view = _view(fake_loop)
    view.mount(observer)

    with pytest.raises(RuntimeError):
        view.mount(observer)
