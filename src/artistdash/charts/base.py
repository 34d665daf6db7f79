"""Shared pieces of the per-chart pipelines: the pipeline bundle and axis builders."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from artistdash.models import AxisGeometry, RawRecord, Tick, ViewportSize
from artistdash.scales import BandScale, LinearScale, LogScale, format_plain


@dataclass(frozen=True)
class ChartPipeline:
    """One chart's load → aggregate → layout → draw chain.

    `prepare` turns parsed rows into the chart's own aggregated data, `layout`
    turns that data plus a container size into pixel geometry, and `draw`
    writes geometry into a draw target. An empty `prepare` result means the
    chart has nothing to show.
    """

    name: str
    surface_id: str
    prepare: Callable[[Sequence[RawRecord]], Sequence[Any]]
    layout: Callable[[Sequence[Any], ViewportSize], Any]
    draw: Callable[[Any, Any], None]


def bottom_band_axis(scale: BandScale, offset: float, label: str = "") -> AxisGeometry:
    """Bottom axis with one tick centred in each band."""
    half = scale.bandwidth / 2
    ticks = tuple(Tick(position=scale(key) + half, label=key) for key in scale.domain)
    first = scale(scale.domain[0]) if scale.domain else 0.0
    last = scale(scale.domain[-1]) + scale.bandwidth if scale.domain else 0.0
    return AxisGeometry(
        orient="bottom", offset=offset, range=(first, last), ticks=ticks, label=label
    )


def continuous_axis(
    orient: str,
    scale: LinearScale | LogScale,
    offset: float,
    count: int = 10,
    fmt: Callable[[float], str] = format_plain,
    label: str = "",
) -> AxisGeometry:
    """Axis for a continuous scale; `orient` is "bottom" or "left"."""
    ticks = tuple(Tick(position=scale(v), label=fmt(v)) for v in scale.ticks(count))
    return AxisGeometry(
        orient=orient, offset=offset, range=scale.range, ticks=ticks, label=label
    )
