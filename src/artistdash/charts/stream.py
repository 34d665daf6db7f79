"""Streamgraph: stacked mean track duration per release year for a fixed set of artists.

Not placed in the dashboard layout; available through the export command.
"""

from __future__ import annotations

from collections.abc import Sequence

from artistdash.aggregate import aggregate_artist_years
from artistdash.charts.base import ChartPipeline, continuous_axis
from artistdash.models import (
    Margin,
    RawRecord,
    StreamGeometry,
    StreamLayer,
    ViewportSize,
    YearWideRecord,
)
from artistdash.renderers.svg import draw_stream_chart
from artistdash.scales import LinearScale

ARTISTS = ("Taylor Swift", "Drake", "The Weeknd", "Ariana Grande")
YEAR_MIN = 2009
YEAR_MAX = 2025

MARGIN = Margin(top=50, right=160, bottom=60, left=70)
TITLE = "Streamgraph (Avg Track Duration) for Selected Top Artists"
X_LABEL = f"Release Year ({YEAR_MIN}–{YEAR_MAX})"
Y_LABEL = "Stacked Avg Track Duration (min)"
LEGEND_ROW = 16

TABLEAU10 = (
    "#4e79a7",
    "#f28e2c",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc949",
    "#af7aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ab",
)


def prepare(records: Sequence[RawRecord]) -> tuple[YearWideRecord, ...]:
    """One record per year in range. Years without data for an artist hold 0."""
    return aggregate_artist_years(records, ARTISTS, YEAR_MIN, YEAR_MAX)


def stack(
    rows: Sequence[YearWideRecord], keys: Sequence[str]
) -> list[list[tuple[float, float]]]:
    """Additive stacking in key order with a zero baseline.

    Returns one series per key; each series holds a (lower, upper) pair per row.
    """
    series: list[list[tuple[float, float]]] = []
    baseline = [0.0] * len(rows)
    for key in keys:
        layer = []
        for i, row in enumerate(rows):
            lower = baseline[i]
            upper = lower + row.durations.get(key, 0.0)
            layer.append((lower, upper))
            baseline[i] = upper
        series.append(layer)
    return series


def layout(rows: Sequence[YearWideRecord], size: ViewportSize) -> StreamGeometry:
    series = stack(rows, ARTISTS)

    x = LinearScale((YEAR_MIN, YEAR_MAX), (MARGIN.left, size.width - MARGIN.right))
    y_min = min(lo for layer in series for lo, _ in layer)
    y_max = max(hi for layer in series for _, hi in layer)
    y = LinearScale((y_min, y_max), (size.height - MARGIN.bottom, MARGIN.top))

    xs = tuple(x(row.year) for row in rows)
    layers = tuple(
        StreamLayer(
            key=key,
            color=TABLEAU10[i % len(TABLEAU10)],
            xs=xs,
            lower=tuple(y(lo) for lo, _ in layer),
            upper=tuple(y(hi) for _, hi in layer),
        )
        for i, (key, layer) in enumerate(zip(ARTISTS, series))
    )

    legend_origin = (
        size.width - MARGIN.right + 12,
        size.height - MARGIN.bottom - 20 - len(ARTISTS) * LEGEND_ROW,
    )
    return StreamGeometry(
        size=size,
        layers=layers,
        x_axis=continuous_axis(
            "bottom",
            x,
            size.height - MARGIN.bottom,
            count=9,
            fmt=lambda v: str(int(v)),
            label=X_LABEL,
        ),
        y_axis=continuous_axis("left", y, MARGIN.left, count=5, label=Y_LABEL),
        legend_origin=legend_origin,
        title=TITLE,
    )


def pipeline() -> ChartPipeline:
    return ChartPipeline(
        name="stream",
        surface_id="stream-svg",
        prepare=prepare,
        layout=layout,
        draw=draw_stream_chart,
    )
