"""Runtime settings read from the environment (and `.env` via python-dotenv)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_ROOT = Path(__file__).parent.parent.parent

DEFAULT_DATA_PATH = _ROOT / "data" / "spotify_data clean.csv"
DEFAULT_DEBOUNCE_MS = 200
DEFAULT_POPULARITY_THRESHOLD = 80.0


class ConfigError(Exception):
    """Invalid environment setting."""


@dataclass(frozen=True)
class Settings:
    data_path: Path
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    popularity_threshold: float = DEFAULT_POPULARITY_THRESHOLD
    log_level: str = "INFO"

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


def _env_number(name: str, default: float, cast: type) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def load_settings() -> Settings:
    """Build Settings from ARTISTDASH_* environment variables.

    Raises:
        ConfigError: If a numeric setting does not parse or is out of range.
    """
    load_dotenv()

    data_path = Path(os.environ.get("ARTISTDASH_DATA_PATH") or DEFAULT_DATA_PATH)
    debounce_ms = int(_env_number("ARTISTDASH_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS, int))
    if debounce_ms <= 0:
        raise ConfigError(f"ARTISTDASH_DEBOUNCE_MS must be positive, got {debounce_ms}")
    threshold = float(
        _env_number(
            "ARTISTDASH_POPULARITY_THRESHOLD", DEFAULT_POPULARITY_THRESHOLD, float
        )
    )
    log_level = (os.environ.get("ARTISTDASH_LOG_LEVEL") or "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown ARTISTDASH_LOG_LEVEL: {log_level}")

    return Settings(
        data_path=data_path,
        debounce_ms=debounce_ms,
        popularity_threshold=threshold,
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a basic stream handler on the root logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
