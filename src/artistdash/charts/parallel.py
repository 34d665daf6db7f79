"""Parallel coordinates: six per-artist metrics for popular artists, one polyline each."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from functools import partial

from artistdash.aggregate import aggregate_artists, filter_by_popularity
from artistdash.charts.base import ChartPipeline, continuous_axis
from artistdash.config import DEFAULT_POPULARITY_THRESHOLD
from artistdash.models import (
    ArtistAggregate,
    Margin,
    ParallelGeometry,
    Polyline,
    RawRecord,
    ViewportSize,
)
from artistdash.renderers.svg import draw_parallel_chart
from artistdash.scales import (
    LinearScale,
    LogScale,
    PointScale,
    extent,
    format_percent,
    format_plain,
    format_si,
)

MARGIN = Margin(top=50, right=20, bottom=60, left=75)
TITLE = "Parallel Coordinates (Popularity ≥ 80) metrics for Artist"
AXIS_TICKS = 4


class Dimension(Enum):
    """Plotted metrics, in axis order. Values are ArtistAggregate attribute names."""

    ARTIST_POPULARITY = "artist_popularity"
    AVG_TRACK_POPULARITY = "avg_track_popularity"
    ARTIST_FOLLOWERS = "artist_followers"
    TRACK_COUNT = "track_count"
    AVG_TRACK_DURATION = "avg_track_duration"
    EXPLICIT_RATE = "explicit_rate"


class ScaleKind(Enum):
    LINEAR = "linear"  # Observed min..max
    LOG = "log"  # Observed range, floor 1, span at least 1
    LINEAR_FIXED = "linear_fixed"  # Fixed domain


SCALE_KINDS: dict[Dimension, ScaleKind] = {
    Dimension.ARTIST_POPULARITY: ScaleKind.LINEAR,
    Dimension.AVG_TRACK_POPULARITY: ScaleKind.LINEAR,
    Dimension.ARTIST_FOLLOWERS: ScaleKind.LOG,
    Dimension.TRACK_COUNT: ScaleKind.LINEAR,
    Dimension.AVG_TRACK_DURATION: ScaleKind.LINEAR,
    Dimension.EXPLICIT_RATE: ScaleKind.LINEAR_FIXED,
}

FIXED_DOMAINS: dict[Dimension, tuple[float, float]] = {
    Dimension.EXPLICIT_RATE: (0.0, 1.0),
}

LABELS: dict[Dimension, str] = {
    Dimension.ARTIST_POPULARITY: "Artist Popularity",
    Dimension.AVG_TRACK_POPULARITY: "Avg Track Popularity",
    Dimension.ARTIST_FOLLOWERS: "Followers",
    Dimension.TRACK_COUNT: "Track Count",
    Dimension.AVG_TRACK_DURATION: "Average Duration (min)",
    Dimension.EXPLICIT_RATE: "Explicit Rate",
}

TICK_FORMATS: dict[Dimension, Callable[[float], str]] = {
    Dimension.ARTIST_FOLLOWERS: format_si,
    Dimension.EXPLICIT_RATE: format_percent,
}


def log_domain(values: Iterable[float]) -> tuple[float, float]:
    """Log-scale domain over the observed values.

    The lower end is at least 1 and the upper end at least one unit above the
    lower end, so a single distinct value still gives a usable scale.
    """
    observed = extent(values)
    lo = max(1.0, observed[0] if observed else 1.0)
    hi = max(lo + 1.0, observed[1] if observed else lo + 1.0)
    return lo, hi


def build_scale(
    dim: Dimension, values: Iterable[float], range: Sequence[float]
) -> LinearScale | LogScale:
    kind = SCALE_KINDS[dim]
    if kind is ScaleKind.LINEAR_FIXED:
        return LinearScale(FIXED_DOMAINS[dim], range)
    if kind is ScaleKind.LOG:
        return LogScale(log_domain(values), range)
    return LinearScale(extent(values) or (0.0, 1.0), range)


def prepare(
    records: Sequence[RawRecord], threshold: float = DEFAULT_POPULARITY_THRESHOLD
) -> tuple[ArtistAggregate, ...]:
    artists = aggregate_artists(
        records,
        required=(
            "artist_popularity",
            "track_popularity",
            "artist_followers",
            "track_duration_min",
        ),
    )
    return filter_by_popularity(artists.values(), threshold)


def layout(artists: Sequence[ArtistAggregate], size: ViewportSize) -> ParallelGeometry:
    dims = tuple(Dimension)
    x = PointScale(
        [d.value for d in dims], (MARGIN.left, size.width - MARGIN.right), padding=0.25
    )
    y_range = (size.height - MARGIN.bottom, MARGIN.top)
    scales = {
        d: build_scale(d, (float(getattr(a, d.value)) for a in artists), y_range)
        for d in dims
    }

    lines = tuple(
        Polyline(
            artist=a.artist,
            points=tuple(
                (x(d.value), scales[d](float(getattr(a, d.value)))) for d in dims
            ),
        )
        for a in artists
    )
    axes = tuple(
        continuous_axis(
            "left",
            scales[d],
            x(d.value),
            count=AXIS_TICKS,
            fmt=TICK_FORMATS.get(d, format_plain),
            label=LABELS[d],
        )
        for d in dims
    )
    return ParallelGeometry(size=size, lines=lines, axes=axes, title=TITLE)


def pipeline(threshold: float = DEFAULT_POPULARITY_THRESHOLD) -> ChartPipeline:
    return ChartPipeline(
        name="parallel",
        surface_id="parallel-svg",
        prepare=partial(prepare, threshold=threshold),
        layout=layout,
        draw=draw_parallel_chart,
    )
