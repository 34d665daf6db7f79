"""Tests for per-artist aggregation, threshold filtering, and binning."""

from __future__ import annotations

import itertools
import math

import pytest

from artistdash.aggregate import (
    aggregate_artist_years,
    aggregate_artists,
    bin_values,
    filter_by_popularity,
)
from artistdash.models import UNKNOWN_GENRE
from conftest import make_record


def test_max_popularity_and_followers_ignore_row_order() -> None:
    """Popularity and followers reduce to the maximum for every row permutation."""

    rows = [
        make_record("Drake", popularity=90, followers=1_000),
        make_record("Drake", popularity=95, followers=800),
        make_record("Drake", popularity=92, followers=1_500),
    ]

    for perm in itertools.permutations(rows):
        agg = aggregate_artists(perm)["Drake"]
        assert agg.artist_popularity == 95
        assert agg.artist_followers == 1_500
        assert agg.track_count == 3


def test_means_and_count_cover_only_retained_rows() -> None:
    """Averages and counts are taken over exactly the rows that pass validation."""

    rows = [
        make_record("Adele", track_popularity=60, duration=4.0, explicit=True),
        make_record("Adele", track_popularity=80, duration=5.0),
        make_record("Adele", track_popularity=math.nan, duration=9.0),
        make_record("Adele", track_popularity=70, duration=3.0, explicit=True),
    ]

    agg = aggregate_artists(rows)["Adele"]

    assert agg.track_count == 3
    assert agg.avg_track_popularity == pytest.approx(70.0)
    assert agg.avg_track_duration == pytest.approx(4.0)
    assert agg.explicit_rate == pytest.approx(2 / 3)


def test_rejected_rows_do_not_contribute() -> None:
    """Blank artist names and non-finite required fields are dropped without error."""

    rows = [
        make_record("", popularity=99),
        make_record("Adele", popularity=math.nan),
        make_record("Adele", popularity=math.inf),
        make_record("Adele", popularity=70),
    ]

    artists = aggregate_artists(rows)

    assert list(artists) == ["Adele"]
    assert artists["Adele"].artist_popularity == 70
    assert artists["Adele"].track_count == 1


def test_all_rows_rejected_gives_empty_mapping() -> None:
    """A dataset where every row is invalid aggregates to nothing."""

    rows = [make_record("", popularity=50), make_record("X", popularity=math.nan)]

    assert aggregate_artists(rows) == {}


def test_required_fields_limit_validation() -> None:
    """Only the requested fields gate a row; others may be NaN."""

    rows = [
        make_record("Adele", popularity=70, followers=math.nan),
        make_record("Adele", popularity=72, followers=500),
    ]

    agg = aggregate_artists(rows, required=("artist_popularity",))["Adele"]

    assert agg.track_count == 2
    assert agg.artist_popularity == 72
    assert agg.artist_followers == 500


def test_unknown_required_field_is_rejected() -> None:
    """Asking to validate a non-numeric field is a programming error."""

    with pytest.raises(ValueError):
        aggregate_artists([], required=("genre",))


def test_genre_is_first_non_empty_or_unknown() -> None:
    """Genre keeps the first non-empty value and defaults to Unknown."""

    rows = [
        make_record("Adele", genre=""),
        make_record("Adele", genre="pop"),
        make_record("Adele", genre="soul"),
        make_record("Drake"),
    ]

    artists = aggregate_artists(rows)

    assert artists["Adele"].genre == "pop"
    assert artists["Drake"].genre == UNKNOWN_GENRE


def test_threshold_filter_keeps_popularity_at_or_above() -> None:
    """Popularity [79, 80, 95] filtered at 80 keeps exactly [80, 95]."""

    rows = [make_record(f"A{p}", popularity=p) for p in (79, 80, 95)]

    kept = filter_by_popularity(aggregate_artists(rows).values(), 80)

    assert [a.artist_popularity for a in kept] == [80, 95]


def test_binning_boundaries_and_top_edge() -> None:
    """Boundary values go to the upper bucket; 100 lands in the last bucket."""

    buckets = bin_values([0, 9, 10, 55, 100])
    counts = {b.label: b.count for b in buckets}

    assert [b.label for b in buckets] == [f"{i}-{i + 10}" for i in range(0, 100, 10)]
    assert counts == {
        "0-10": 2,
        "10-20": 1,
        "20-30": 0,
        "30-40": 0,
        "40-50": 0,
        "50-60": 1,
        "60-70": 0,
        "70-80": 0,
        "80-90": 0,
        "90-100": 1,
    }


def test_binning_skips_out_of_domain_and_nan() -> None:
    """Values outside [0, 100] and NaN are not counted."""

    buckets = bin_values([-1, 101, math.nan, 50])

    assert sum(b.count for b in buckets) == 1


def test_artist_years_cover_full_range_with_zero_defaults() -> None:
    """Every year in range is present; missing (artist, year) cells are 0."""

    rows = [
        make_record("Drake", duration=3.0, year=2010),
        make_record("Drake", duration=4.0, year=2010),
        make_record("Adele", duration=5.0, year=2011),
        make_record("Drake", duration=6.0, year=2030),
        make_record("Drake", duration=math.nan, year=2012),
    ]

    wide = aggregate_artist_years(rows, ("Drake", "Adele"), 2009, 2013)

    assert [r.year for r in wide] == [2009, 2010, 2011, 2012, 2013]
    by_year = {r.year: r.durations for r in wide}
    assert by_year[2010] == {"Drake": pytest.approx(3.5), "Adele": 0.0}
    assert by_year[2011] == {"Drake": 0.0, "Adele": pytest.approx(5.0)}
    assert by_year[2012] == {"Drake": 0.0, "Adele": 0.0}


def test_artist_years_ignore_untracked_artists() -> None:
    """Rows for artists outside the list never appear."""

    rows = [make_record("Someone Else", duration=3.0, year=2015)]

    wide = aggregate_artist_years(rows, ("Drake",), 2015, 2015)

    assert wide[0].durations == {"Drake": 0.0}
