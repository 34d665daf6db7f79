"""Position scales and tick generation for chart layout.

Scales map data values to pixel positions. Linear and log scales are
continuous; band and point scales place discrete categories. Tick steps
follow the usual 1-2-5 progression so axes read the same as a browser
chart library's would.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def _tick_spec(start: float, stop: float, count: int) -> tuple[int, int, float]:
    step = (stop - start) / max(1, count)
    power = math.floor(math.log10(step))
    error = step / 10**power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = 10**-power / factor
        i1 = _round_half_up(start * inc)
        i2 = _round_half_up(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        return i1, i2, -inc
    inc = 10**power * factor
    i1 = _round_half_up(start / inc)
    i2 = _round_half_up(stop / inc)
    if i1 * inc < start:
        i1 += 1
    if i2 * inc > stop:
        i2 -= 1
    return i1, i2, inc


def linear_ticks(start: float, stop: float, count: int = 10) -> list[float]:
    """Roughly `count` evenly spaced round values inside [start, stop]."""
    if count <= 0 or not (math.isfinite(start) and math.isfinite(stop)):
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    i1, i2, inc = _tick_spec(start, stop, count)
    if i2 < i1:
        return []
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        values = [(i1 + i) * inc for i in range(i2 - i1 + 1)]
    return values[::-1] if reverse else values


def extent(values: Iterable[float]) -> tuple[float, float] | None:
    """(min, max) of the finite values, or None when there are none."""
    finite = [v for v in values if math.isfinite(v)]
    if not finite:
        return None
    return min(finite), max(finite)


class LinearScale:
    """Continuous linear map from `domain` to `range`.

    A degenerate domain (both ends equal) maps every value to the middle of
    the range.
    """

    def __init__(self, domain: Sequence[float], range: Sequence[float]) -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range[0]), float(range[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        t = (value - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def ticks(self, count: int = 10) -> list[float]:
        return linear_ticks(self.domain[0], self.domain[1], count)


class LogScale:
    """Base-10 logarithmic map. Domain ends must be positive.

    Inputs below the domain floor are clamped to it so lookups never
    produce infinities.
    """

    def __init__(self, domain: Sequence[float], range: Sequence[float]) -> None:
        d0, d1 = float(domain[0]), float(domain[1])
        if d0 <= 0 or d1 <= 0:
            raise ValueError(f"Log scale domain must be positive, got {domain!r}")
        self.domain = (d0, d1)
        self.range = (float(range[0]), float(range[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        value = max(value, min(d0, d1))
        t = (math.log10(value) - math.log10(d0)) / (math.log10(d1) - math.log10(d0))
        return r0 + t * (r1 - r0)

    def ticks(self, count: int = 10) -> list[float]:
        """Powers of ten inside the domain, thinned to about `count` values.

        Falls back to linear ticks when the domain spans less than a decade.
        """
        lo, hi = sorted(self.domain)
        first = math.ceil(math.log10(lo))
        last = math.floor(math.log10(hi))
        if last - first < 1:
            return linear_ticks(lo, hi, count)
        powers = list(range(first, last + 1))
        stride = max(1, math.ceil(len(powers) / max(1, count)))
        return [10.0**p for p in powers[::stride]]


class BandScale:
    """Discrete categories mapped to equal-width bands with padding.

    `padding` applies to both inner and outer spacing; with `round=True`
    band starts and width are snapped to whole pixels.
    """

    def __init__(
        self,
        domain: Sequence[str],
        range: Sequence[float],
        padding: float = 0.0,
        round: bool = False,
    ) -> None:
        self.domain = tuple(domain)
        start, stop = float(range[0]), float(range[1])
        n = len(self.domain)
        step = (stop - start) / max(1, n - padding + padding * 2)
        if round:
            step = math.floor(step)
        start += (stop - start - step * (n - padding)) * 0.5
        bandwidth = step * (1 - padding)
        if round:
            start = _round_half_up(start)
            bandwidth = _round_half_up(bandwidth)
        self.step = step
        self.bandwidth = float(bandwidth)
        self._positions = {key: start + step * i for i, key in enumerate(self.domain)}

    def __call__(self, key: str) -> float:
        return self._positions[key]


class PointScale:
    """Discrete categories mapped to evenly spaced points with outer padding."""

    def __init__(
        self, domain: Sequence[str], range: Sequence[float], padding: float = 0.0
    ) -> None:
        self.domain = tuple(domain)
        start, stop = float(range[0]), float(range[1])
        n = len(self.domain)
        step = (stop - start) / max(1, n - 1 + padding * 2)
        start += (stop - start - step * (n - 1)) * 0.5
        self.step = step
        self._positions = {key: start + step * i for i, key in enumerate(self.domain)}

    def __call__(self, key: str) -> float:
        return self._positions[key]


# --- Tick label formats ---


def format_plain(value: float) -> str:
    """Shortest readable decimal: 20 → "20", 0.5 → "0.5"."""
    value = round(value, 10)
    if value == int(value):
        return str(int(value))
    return f"{value:g}"


_SI_PREFIXES = ((1e12, "T"), (1e9, "G"), (1e6, "M"), (1e3, "k"))


def format_si(value: float) -> str:
    """SI-prefixed number with trailing zeros trimmed: 2500000 → "2.5M"."""
    for factor, prefix in _SI_PREFIXES:
        if abs(value) >= factor:
            return format_plain(round(value / factor, 3)) + prefix
    return format_plain(round(value, 3))


def format_percent(value: float) -> str:
    return f"{value:.0%}"
