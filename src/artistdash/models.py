"""Data model definitions: explicit boundaries between load, aggregate, layout, and render layers."""

from dataclasses import dataclass, field

UNKNOWN_GENRE = "Unknown"


@dataclass(frozen=True)
class RawRecord:
    """One parsed row of the source CSV. Not yet validated."""

    artist_name: str  # Trimmed; may be empty
    artist_popularity: float  # 0–100, NaN if unparsable
    artist_followers: float  # >= 0, NaN if unparsable
    track_popularity: float  # 0–100, NaN if unparsable
    track_duration_min: float  # Minutes, NaN if unparsable
    explicit: bool
    genre: str  # Trimmed; may be empty
    release_year: float  # Leading 4-digit year of album_release_date, NaN if none


@dataclass(frozen=True)
class ArtistAggregate:
    """Per-artist summary statistics over every retained row of that artist."""

    artist: str
    artist_popularity: float  # Max over rows
    artist_followers: float  # Max over rows
    avg_track_popularity: float
    track_count: int
    avg_track_duration: float  # Minutes
    explicit_rate: float  # 0..1
    genre: str = UNKNOWN_GENRE


@dataclass(frozen=True)
class Bucket:
    """A fixed-width popularity interval and the number of artists in it."""

    low: int
    high: int
    count: int

    @property
    def label(self) -> str:
        return f"{self.low}-{self.high}"


@dataclass(frozen=True)
class YearWideRecord:
    """Mean track duration per tracked artist for one calendar year (0 if absent)."""

    year: int
    durations: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ViewportSize:
    """Observed size of a chart's host container, in pixels."""

    width: float
    height: float

    @property
    def is_renderable(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float


# --- Layout output: pixel-space geometry consumed by renderers ---


@dataclass(frozen=True)
class Tick:
    """A single axis tick. `position` is along the axis in pixels."""

    position: float
    label: str


@dataclass(frozen=True)
class AxisGeometry:
    """An axis line with ticks, anchored at `offset` on the cross axis."""

    orient: str  # "bottom" or "left"
    offset: float  # y for bottom axes, x for left axes
    range: tuple[float, float]
    ticks: tuple[Tick, ...]
    label: str = ""


@dataclass(frozen=True)
class BarRect:
    label: str
    count: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class BarChartGeometry:
    size: ViewportSize
    bars: tuple[BarRect, ...]
    x_axis: AxisGeometry
    y_axis: AxisGeometry
    title: str


@dataclass(frozen=True)
class ScatterPoint:
    artist: str
    cx: float
    cy: float
    fill: str  # Hex colour derived from explicit_rate


@dataclass(frozen=True)
class GradientStop:
    offset: float  # 0..1
    color: str


@dataclass(frozen=True)
class ScatterGeometry:
    size: ViewportSize
    points: tuple[ScatterPoint, ...]
    x_axis: AxisGeometry
    y_axis: AxisGeometry
    legend_stops: tuple[GradientStop, ...]
    legend_box: tuple[float, float, float, float]  # x, y, width, height
    title: str


@dataclass(frozen=True)
class Polyline:
    artist: str
    points: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class ParallelGeometry:
    size: ViewportSize
    lines: tuple[Polyline, ...]
    axes: tuple[AxisGeometry, ...]  # One vertical axis per dimension, in dimension order
    title: str


@dataclass(frozen=True)
class StreamLayer:
    """One stacked band: `lower`/`upper` are pixel y values aligned with `xs`."""

    key: str
    color: str
    xs: tuple[float, ...]
    lower: tuple[float, ...]
    upper: tuple[float, ...]


@dataclass(frozen=True)
class StreamGeometry:
    size: ViewportSize
    layers: tuple[StreamLayer, ...]
    x_axis: AxisGeometry
    y_axis: AxisGeometry
    legend_origin: tuple[float, float]
    title: str
