"""Aggregation layer: per-artist reduction, popularity threshold, and fixed-width binning."""

import math
from collections import defaultdict
from collections.abc import Iterable, Sequence

import numpy as np

from artistdash.models import (
    UNKNOWN_GENRE,
    ArtistAggregate,
    Bucket,
    RawRecord,
    YearWideRecord,
)

NUMERIC_FIELDS = frozenset(
    {
        "artist_popularity",
        "artist_followers",
        "track_popularity",
        "track_duration_min",
    }
)


class _Accumulator:
    """Running per-artist state during one aggregation pass."""

    __slots__ = (
        "popularity",
        "followers",
        "sum_track_popularity",
        "sum_duration",
        "count",
        "explicit_count",
        "genre",
    )

    def __init__(self) -> None:
        self.popularity = math.nan
        self.followers = math.nan
        self.sum_track_popularity = 0.0
        self.sum_duration = 0.0
        self.count = 0
        self.explicit_count = 0
        self.genre = ""

    def add(self, row: RawRecord) -> None:
        self.popularity = _nanmax(self.popularity, row.artist_popularity)
        self.followers = _nanmax(self.followers, row.artist_followers)
        self.sum_track_popularity += row.track_popularity
        self.sum_duration += row.track_duration_min
        self.count += 1
        self.explicit_count += 1 if row.explicit else 0
        if not self.genre and row.genre:
            self.genre = row.genre

    def freeze(self, artist: str) -> ArtistAggregate:
        return ArtistAggregate(
            artist=artist,
            artist_popularity=self.popularity,
            artist_followers=self.followers,
            avg_track_popularity=self.sum_track_popularity / self.count,
            track_count=self.count,
            avg_track_duration=self.sum_duration / self.count,
            explicit_rate=self.explicit_count / self.count,
            genre=self.genre or UNKNOWN_GENRE,
        )


def _nanmax(a: float, b: float) -> float:
    """max() that ignores NaN on either side, so the result never depends on row order."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)


def aggregate_artists(
    records: Iterable[RawRecord],
    required: Iterable[str] = NUMERIC_FIELDS,
) -> dict[str, ArtistAggregate]:
    """Group records by artist name and reduce each group to an ArtistAggregate.

    A row is skipped when its artist name is blank or any of the `required`
    numeric fields is non-finite. Popularity and followers reduce with max,
    track popularity and duration with a mean, explicit flags with a rate,
    and genre keeps the first non-empty value.

    Args:
        records: Parsed rows, any order.
        required: Names of RawRecord numeric fields that must be finite.

    Returns:
        Mapping of artist name to aggregate, in order of first appearance.
    """
    required = tuple(required)
    unknown = set(required) - NUMERIC_FIELDS
    if unknown:
        raise ValueError(f"Not a numeric field: {sorted(unknown)}")

    groups: dict[str, _Accumulator] = {}
    for row in records:
        if not row.artist_name:
            continue
        if not all(math.isfinite(getattr(row, name)) for name in required):
            continue
        acc = groups.get(row.artist_name)
        if acc is None:
            acc = groups[row.artist_name] = _Accumulator()
        acc.add(row)

    return {artist: acc.freeze(artist) for artist, acc in groups.items()}


def filter_by_popularity(
    aggregates: Iterable[ArtistAggregate], threshold: float
) -> tuple[ArtistAggregate, ...]:
    """Keep artists whose popularity is at least `threshold`."""
    return tuple(a for a in aggregates if a.artist_popularity >= threshold)


def bin_values(
    values: Iterable[float], low: int = 0, high: int = 100, width: int = 10
) -> tuple[Bucket, ...]:
    """Count values into fixed-width buckets over [low, high].

    Buckets are half-open ``[edge, edge + width)`` except the last one, which
    also includes `high`. Values outside the domain and non-finite values are
    not counted.
    """
    edges = np.arange(low, high + width, width)
    finite = np.array([v for v in values if math.isfinite(v)], dtype=float)
    counts, _ = np.histogram(finite, bins=edges)
    return tuple(
        Bucket(low=int(edges[i]), high=int(edges[i + 1]), count=int(counts[i]))
        for i in range(len(counts))
    )


def aggregate_artist_years(
    records: Iterable[RawRecord],
    artists: Sequence[str],
    year_min: int,
    year_max: int,
) -> tuple[YearWideRecord, ...]:
    """Mean track duration per (artist, release year) as one record per year.

    Only rows for `artists` with a finite duration and a release year inside
    ``[year_min, year_max]`` contribute. Every year of the range is present;
    artists without rows in a year get 0.
    """
    tracked = set(artists)
    sums: dict[tuple[str, int], float] = defaultdict(float)
    counts: dict[tuple[str, int], int] = defaultdict(int)
    for row in records:
        if row.artist_name not in tracked:
            continue
        if not math.isfinite(row.track_duration_min) or not math.isfinite(row.release_year):
            continue
        year = int(row.release_year)
        if year < year_min or year > year_max:
            continue
        sums[(row.artist_name, year)] += row.track_duration_min
        counts[(row.artist_name, year)] += 1

    return tuple(
        YearWideRecord(
            year=year,
            durations={
                artist: (
                    sums[(artist, year)] / counts[(artist, year)]
                    if counts.get((artist, year))
                    else 0.0
                )
                for artist in artists
            },
        )
        for year in range(year_min, year_max + 1)
    )
