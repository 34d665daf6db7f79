"""CSV loading layer: reads the catalog file and projects each row into a RawRecord."""

import logging
import math
import re
from collections.abc import Mapping
from pathlib import Path

import pandas as pd

from artistdash.models import RawRecord

logger = logging.getLogger(__name__)

COLUMNS = (
    "artist_name",
    "artist_popularity",
    "artist_followers",
    "track_popularity",
    "track_duration_min",
    "explicit",
    "artist_genres",
    "album_release_date",
)

_YEAR_RE = re.compile(r"^(\d{4})")


class LoadError(Exception):
    """Reading or parsing the source file failed."""


def parse_number(text: str | None) -> float:
    """Decimal number from a CSV field.

    Blank or whitespace-only text reads as 0. A missing field (None) and
    unparsable text, digit separators ("1_000") included, become NaN.
    """
    if text is None:
        return math.nan
    text = str(text).strip()
    if not text:
        return 0.0
    if "_" in text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def parse_bool(text: str | None) -> bool:
    return str(text or "").strip().lower() == "true"


def parse_year(text: str | None) -> float:
    """Leading four-digit year of a date string ("2019-05-01" → 2019.0), else NaN."""
    m = _YEAR_RE.match(str(text or "").strip())
    return float(m.group(1)) if m else math.nan


def parse_row(row: Mapping[str, str]) -> RawRecord:
    """Typed projection of one CSV row. A missing column gives NaN numbers and empty text."""
    return RawRecord(
        artist_name=str(row.get("artist_name") or "").strip(),
        artist_popularity=parse_number(row.get("artist_popularity")),
        artist_followers=parse_number(row.get("artist_followers")),
        track_popularity=parse_number(row.get("track_popularity")),
        track_duration_min=parse_number(row.get("track_duration_min")),
        explicit=parse_bool(row.get("explicit")),
        genre=str(row.get("artist_genres") or "").strip(),
        release_year=parse_year(row.get("album_release_date")),
    )


def load_records(path: Path | str) -> tuple[RawRecord, ...]:
    """Read a comma-separated file with a header row into RawRecords.

    Every column is read as text (no NA inference) so that field typing
    happens in `parse_row` only.

    Args:
        path: Location of the CSV file.

    Returns:
        One RawRecord per data row, in file order.

    Raises:
        LoadError: If the file is missing, unreadable, or not valid CSV.
    """
    path = Path(path)
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise LoadError(f"Could not load {path}: {e}") from e

    # Short rows leave NaN cells even without NA inference
    df = df.fillna("")

    records = tuple(parse_row(row) for row in df.to_dict("records"))
    logger.info("Loaded %d rows from %s", len(records), path)
    return records
