"""Scatter plot: artist popularity vs. mean track popularity for popular artists.

Points are jittered by a few pixels on every layout call so that artists
with identical values do not hide each other. Pass a seeded generator (or
``jitter=0``) to get reproducible coordinates.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import partial

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import to_hex

from artistdash.aggregate import aggregate_artists, filter_by_popularity
from artistdash.charts.base import ChartPipeline, continuous_axis
from artistdash.config import DEFAULT_POPULARITY_THRESHOLD
from artistdash.models import (
    ArtistAggregate,
    GradientStop,
    Margin,
    RawRecord,
    ScatterGeometry,
    ScatterPoint,
    ViewportSize,
)
from artistdash.renderers.svg import draw_scatter_chart
from artistdash.scales import LinearScale, extent

MARGIN = Margin(top=50, right=20, bottom=60, left=75)
TITLE = "Top Artist Popularity (>= 80) vs Avg Track Popularity"
X_LABEL = "Artist Popularity"
Y_LABEL = "Average Track Popularity (per artist)"

X_DOMAIN_FLOOR = 78.0
JITTER_PX = 6.0  # Full width; each point moves at most ±3px per axis
LEGEND_WIDTH = 120
LEGEND_HEIGHT = 10

_BLUES = colormaps["Blues"]


def explicit_color(rate: float) -> str:
    """Fill colour for an explicit-content rate in [0, 1]; the pale end is skipped."""
    rate = min(1.0, max(0.0, rate))
    return to_hex(_BLUES(0.3 + 0.7 * rate))


def prepare(
    records: Sequence[RawRecord], threshold: float = DEFAULT_POPULARITY_THRESHOLD
) -> tuple[ArtistAggregate, ...]:
    artists = aggregate_artists(
        records,
        required=("artist_popularity", "track_popularity", "artist_followers"),
    )
    return filter_by_popularity(artists.values(), threshold)


def layout(
    artists: Sequence[ArtistAggregate],
    size: ViewportSize,
    jitter: float = JITTER_PX,
    rng: np.random.Generator | None = None,
) -> ScatterGeometry:
    """Place one point per artist.

    Args:
        artists: Filtered aggregates (non-empty).
        size: Container size in pixels.
        jitter: Full jitter width in pixels; 0 disables jitter.
        rng: Source of jitter offsets. A fresh unseeded generator if None.

    Returns:
        ScatterGeometry with points, axes, and the explicit-rate legend.
    """
    if rng is None:
        rng = np.random.default_rng()

    popularity = [a.artist_popularity for a in artists]
    x = LinearScale(
        (min(X_DOMAIN_FLOOR, min(popularity)), max(popularity)),
        (MARGIN.left, size.width - MARGIN.right),
    )
    y = LinearScale(
        extent(a.avg_track_popularity for a in artists),
        (size.height - MARGIN.bottom, MARGIN.top),
    )

    offsets = (rng.random((len(artists), 2)) - 0.5) * jitter
    points = tuple(
        ScatterPoint(
            artist=a.artist,
            cx=x(a.artist_popularity) + float(dx),
            cy=y(a.avg_track_popularity) + float(dy),
            fill=explicit_color(a.explicit_rate),
        )
        for a, (dx, dy) in zip(artists, offsets)
    )

    stops = tuple(
        GradientStop(offset=float(t), color=explicit_color(float(t)))
        for t in np.linspace(0.0, 1.0, 11)
    )
    legend_x = size.width - MARGIN.right - LEGEND_WIDTH
    legend_y = size.height - MARGIN.bottom - LEGEND_HEIGHT - 30

    return ScatterGeometry(
        size=size,
        points=points,
        x_axis=continuous_axis(
            "bottom", x, size.height - MARGIN.bottom, label=X_LABEL
        ),
        y_axis=continuous_axis("left", y, MARGIN.left, label=Y_LABEL),
        legend_stops=stops,
        legend_box=(legend_x, legend_y, LEGEND_WIDTH, LEGEND_HEIGHT),
        title=TITLE,
    )


def pipeline(
    threshold: float = DEFAULT_POPULARITY_THRESHOLD,
    jitter: float = JITTER_PX,
    rng: np.random.Generator | None = None,
) -> ChartPipeline:
    return ChartPipeline(
        name="scatter",
        surface_id="scatter-svg",
        prepare=partial(prepare, threshold=threshold),
        layout=partial(layout, jitter=jitter, rng=rng),
        draw=draw_scatter_chart,
    )
