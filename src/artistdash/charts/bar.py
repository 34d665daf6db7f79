"""Bar chart: how many unique artists fall into each 10-point popularity range."""

from __future__ import annotations

from collections.abc import Sequence

from artistdash.aggregate import aggregate_artists, bin_values
from artistdash.charts.base import ChartPipeline, bottom_band_axis, continuous_axis
from artistdash.models import BarChartGeometry, BarRect, Bucket, Margin, RawRecord, ViewportSize
from artistdash.renderers.svg import draw_bar_chart
from artistdash.scales import BandScale, LinearScale

MARGIN = Margin(top=40, right=20, bottom=80, left=60)
TITLE = "Spotify Artist Popularity Distribution (2009 - 2025)"
X_LABEL = "Artist Popularity (10-point ranges)"
Y_LABEL = "Number of Artists (unique artists)"


def prepare(records: Sequence[RawRecord]) -> tuple[Bucket, ...]:
    """Bucket every artist's (max) popularity into ten ranges over [0, 100].

    Returns an empty tuple when no row survives validation.
    """
    artists = aggregate_artists(records, required=("artist_popularity",))
    if not artists:
        return ()
    return bin_values(a.artist_popularity for a in artists.values())


def layout(buckets: Sequence[Bucket], size: ViewportSize) -> BarChartGeometry:
    y_max = max(b.count for b in buckets)

    x = BandScale(
        [b.label for b in buckets],
        (MARGIN.left, size.width - MARGIN.right),
        padding=0.1,
        round=True,
    )
    y = LinearScale((0, y_max), (size.height - MARGIN.bottom, MARGIN.top))

    bars = tuple(
        BarRect(
            label=b.label,
            count=b.count,
            x=x(b.label),
            y=y(b.count),
            width=x.bandwidth,
            height=abs(y(0) - y(b.count)),
        )
        for b in buckets
    )
    return BarChartGeometry(
        size=size,
        bars=bars,
        x_axis=bottom_band_axis(x, size.height - MARGIN.bottom, label=X_LABEL),
        y_axis=continuous_axis("left", y, MARGIN.left, label=Y_LABEL),
        title=TITLE,
    )


def pipeline() -> ChartPipeline:
    return ChartPipeline(
        name="bar",
        surface_id="bar-svg",
        prepare=prepare,
        layout=layout,
        draw=draw_bar_chart,
    )
