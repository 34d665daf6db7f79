"""Pytest fixtures shared across the chart pipeline tests."""

from __future__ import annotations

import csv
import math
from collections.abc import Callable, Sequence
from functools import partial
from pathlib import Path
from typing import Any

import pytest

from artistdash.loader import COLUMNS
from artistdash.models import RawRecord


def make_record(
    artist: str = "Artist",
    popularity: float = 50.0,
    followers: float = 1000.0,
    track_popularity: float = 40.0,
    duration: float = 3.5,
    explicit: bool = False,
    genre: str = "",
    year: float = math.nan,
) -> RawRecord:
    """Build a RawRecord with sensible defaults for the fields a test does not care about."""

    return RawRecord(
        artist_name=artist,
        artist_popularity=popularity,
        artist_followers=followers,
        track_popularity=track_popularity,
        track_duration_min=duration,
        explicit=explicit,
        genre=genre,
        release_year=year,
    )


def csv_row(
    artist: str = "Artist",
    popularity: str = "50",
    followers: str = "1000",
    track_popularity: str = "40",
    duration: str = "3.5",
    explicit: str = "False",
    genre: str = "",
    release: str = "2020-01-01",
) -> dict[str, str]:
    """One CSV row as the source file spells it (all text)."""

    return {
        "artist_name": artist,
        "artist_popularity": popularity,
        "artist_followers": followers,
        "track_popularity": track_popularity,
        "track_duration_min": duration,
        "explicit": explicit,
        "artist_genres": genre,
        "album_release_date": release,
    }


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Return a writer that stores rows as a CSV file under tmp_path."""

    def _write(
        rows: Sequence[dict[str, str]],
        name: str = "spotify_data clean.csv",
        columns: Sequence[str] = COLUMNS,
    ) -> Path:
        path = tmp_path / name
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=list(columns), extrasaction="ignore")
            writer.writeheader()
            writer.writerows(rows)
        return path

    return _write


class FakeHandle:
    """Stand-in for asyncio.TimerHandle."""

    def __init__(self, when: float, callback: Callable[[], Any]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeLoop:
    """Manually advanced clock exposing the `call_later` part of an event loop."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeHandle:
        handle = FakeHandle(self.now + delay, partial(callback, *args))
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [h for h in self.handles if not h.cancelled and h.when <= self.now + 1e-9]
        self.handles = [h for h in self.handles if not h.cancelled and h not in due]
        for handle in sorted(due, key=lambda h: h.when):
            handle.callback()


@pytest.fixture
def fake_loop() -> FakeLoop:
    return FakeLoop()
