"""SVG chart renderer.

Draws already-computed chart geometry into an `SvgSurface`, the per-chart
draw target. A surface is cleared and rewritten from scratch on every
redraw; nothing else writes to it. `render_svg_html` wraps a surface in a
self-contained page for st.components.v1.html().

Coordinates are pixels with the origin at the top-left of the container,
so geometry from the layout step is written as-is.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from artistdash.models import AxisGeometry, ViewportSize

if TYPE_CHECKING:
    from artistdash.models import (
        BarChartGeometry,
        ParallelGeometry,
        ScatterGeometry,
        StreamGeometry,
    )

_BG = "#ffffff"
_INK = "#333333"
_BAR_FILL = "lightgrey"
_POINT_STROKE = "#1f3b73"
_LINE_COLOR = "teal"
_FONT = "'Helvetica Neue', Arial, sans-serif"


class SvgSurface:
    """An exclusively owned, uniquely identified SVG drawing surface."""

    def __init__(self, element_id: str, size: ViewportSize | None = None) -> None:
        self.element_id = element_id
        self.size = size or ViewportSize(0, 0)
        self._elements: list[str] = []

    @property
    def elements(self) -> tuple[str, ...]:
        return tuple(self._elements)

    def clear(self) -> None:
        self._elements.clear()

    def append(self, markup: str) -> None:
        self._elements.append(markup)

    def resize(self, size: ViewportSize) -> None:
        self.size = size

    def to_svg(self) -> str:
        w, h = self.size.width, self.size.height
        body = "\n  ".join(self._elements)
        return (
            f'<svg id="{self.element_id}" xmlns="http://www.w3.org/2000/svg"'
            f' width="100%" height="100%" viewBox="0 0 {w:g} {h:g}">\n  {body}\n</svg>'
        )


def _text(
    x: float,
    y: float,
    content: str,
    size: str = ".9rem",
    anchor: str = "middle",
    weight: str = "normal",
    rotate: bool = False,
) -> str:
    transform = ' transform="rotate(-90)"' if rotate else ""
    return (
        f'<text x="{x:.2f}" y="{y:.2f}"{transform} text-anchor="{anchor}"'
        f' font-size="{size}" font-weight="{weight}" fill="{_INK}">'
        f"{html.escape(content)}</text>"
    )


def _axis(axis: AxisGeometry) -> str:
    """Axis line, tick marks, and tick labels as one <g>."""
    r0, r1 = axis.range
    parts: list[str] = []
    if axis.orient == "bottom":
        y = axis.offset
        parts.append(
            f'<line x1="{r0:.2f}" y1="{y:.2f}" x2="{r1:.2f}" y2="{y:.2f}" stroke="{_INK}"/>'
        )
        for tick in axis.ticks:
            parts.append(
                f'<line x1="{tick.position:.2f}" y1="{y:.2f}" x2="{tick.position:.2f}"'
                f' y2="{y + 6:.2f}" stroke="{_INK}"/>'
            )
            parts.append(_text(tick.position, y + 18, tick.label, size=".7rem"))
    else:
        x = axis.offset
        parts.append(
            f'<line x1="{x:.2f}" y1="{r0:.2f}" x2="{x:.2f}" y2="{r1:.2f}" stroke="{_INK}"/>'
        )
        for tick in axis.ticks:
            parts.append(
                f'<line x1="{x - 6:.2f}" y1="{tick.position:.2f}" x2="{x:.2f}"'
                f' y2="{tick.position:.2f}" stroke="{_INK}"/>'
            )
            parts.append(
                _text(x - 9, tick.position + 4, tick.label, size=".7rem", anchor="end")
            )
    return '<g class="axis">' + "".join(parts) + "</g>"


def _title(size: ViewportSize, top_margin: float, title: str) -> str:
    return _text(size.width / 2, top_margin / 2, title, size="1rem", weight="bold")


def _axis_labels(size: ViewportSize, x_axis: AxisGeometry, y_axis: AxisGeometry) -> list[str]:
    # Left-axis labels are rotated, so x carries the (negated) vertical centre
    return [
        _text(size.width / 2, x_axis.offset + 40, x_axis.label),
        _text(-(size.height / 2), y_axis.offset - 45, y_axis.label, rotate=True),
    ]


def draw_bar_chart(target: SvgSurface, geometry: BarChartGeometry) -> None:
    target.append(_axis(geometry.x_axis))
    target.append(_axis(geometry.y_axis))
    for label in _axis_labels(geometry.size, geometry.x_axis, geometry.y_axis):
        target.append(label)
    rects = "".join(
        f'<rect x="{b.x:.2f}" y="{b.y:.2f}" width="{b.width:.2f}" height="{b.height:.2f}"'
        f' fill="{_BAR_FILL}"><title>{html.escape(b.label)}: {b.count}</title></rect>'
        for b in geometry.bars
    )
    target.append(f'<g class="bars">{rects}</g>')
    target.append(_title(geometry.size, geometry.y_axis.range[1], geometry.title))


def draw_scatter_chart(target: SvgSurface, geometry: ScatterGeometry) -> None:
    target.append(_axis(geometry.x_axis))
    target.append(_axis(geometry.y_axis))
    for label in _axis_labels(geometry.size, geometry.x_axis, geometry.y_axis):
        target.append(label)
    target.append(_title(geometry.size, geometry.y_axis.range[1], geometry.title))

    circles = "".join(
        f'<circle cx="{p.cx:.2f}" cy="{p.cy:.2f}" r="3.5" fill="{p.fill}" opacity="0.9"'
        f' stroke="{_POINT_STROKE}" stroke-width="0.4">'
        f"<title>{html.escape(p.artist)}</title></circle>"
        for p in geometry.points
    )
    target.append(f'<g class="points">{circles}</g>')

    # Gradient id is scoped by surface id so several scatter charts can share a page
    grad_id = f"{target.element_id}-explicit-rate"
    stops = "".join(
        f'<stop offset="{s.offset * 100:.0f}%" stop-color="{s.color}"/>'
        for s in geometry.legend_stops
    )
    target.append(
        f'<defs><linearGradient id="{grad_id}" x1="0%" x2="100%" y1="0%" y2="0%">'
        f"{stops}</linearGradient></defs>"
    )
    lx, ly, lw, lh = geometry.legend_box
    target.append(
        f'<rect x="{lx:.2f}" y="{ly:.2f}" width="{lw:.2f}" height="{lh:.2f}"'
        f' fill="url(#{grad_id})" stroke="#999"/>'
    )
    target.append(_text(lx - 25, ly + lh + 14, "0% explicit", size=".75rem", anchor="start"))
    target.append(_text(lx + lw + 20, ly + lh + 14, "100% explicit", size=".75rem", anchor="end"))
    target.append(_text(lx + lw / 2, ly - 6, "Explicit Content Rate", size=".8rem"))


def draw_parallel_chart(target: SvgSurface, geometry: ParallelGeometry) -> None:
    paths = "".join(
        '<path d="M'
        + " L".join(f"{x:.2f},{y:.2f}" for x, y in line.points)
        + f'" fill="none" stroke="{_LINE_COLOR}" stroke-width="1" opacity="0.18">'
        f"<title>{html.escape(line.artist)}</title></path>"
        for line in geometry.lines
    )
    target.append(f'<g class="lines">{paths}</g>')
    for axis in geometry.axes:
        target.append(_axis(axis))
        target.append(
            _text(axis.offset, geometry.size.height - 20, axis.label, size=".75rem")
        )
    target.append(_title(geometry.size, geometry.axes[0].range[1], geometry.title))


def draw_stream_chart(target: SvgSurface, geometry: StreamGeometry) -> None:
    bands: list[str] = []
    for layer in geometry.layers:
        top = [f"{x:.2f},{y:.2f}" for x, y in zip(layer.xs, layer.upper)]
        bottom = [f"{x:.2f},{y:.2f}" for x, y in zip(reversed(layer.xs), reversed(layer.lower))]
        bands.append(
            f'<path d="M{" L".join(top + bottom)} Z" fill="{layer.color}" opacity="0.9">'
            f"<title>{html.escape(layer.key)}</title></path>"
        )
    target.append('<g class="layers">' + "".join(bands) + "</g>")
    target.append(_axis(geometry.x_axis))
    target.append(_axis(geometry.y_axis))
    for label in _axis_labels(geometry.size, geometry.x_axis, geometry.y_axis):
        target.append(label)
    target.append(_title(geometry.size, geometry.y_axis.range[1], geometry.title))

    lx, ly = geometry.legend_origin
    items = [_text(0, -8, "Artists", size=".8rem", anchor="start", weight="bold")]
    for i, layer in enumerate(geometry.layers):
        y0 = i * 16
        items.append(f'<rect x="0" y="{y0}" width="12" height="12" fill="{layer.color}"/>')
        items.append(_text(18, y0 + 10, layer.key, size=".8rem", anchor="start"))
    target.append(f'<g transform="translate({lx:.2f},{ly:.2f})">' + "".join(items) + "</g>")


def render_svg_html(surface: SvgSurface) -> str:
    """Return a self-contained HTML page showing one surface at full size.

    Args:
        surface: A drawn (or blank) chart surface.

    Returns:
        HTML string suitable for st.components.v1.html().
    """
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
html, body {{
    width: 100%;
    height: 100%;
    background: {_BG};
    font-family: {_FONT};
    overflow: hidden;
}}
svg {{ display: block; }}
</style>
</head>
<body>
{surface.to_svg()}
</body>
</html>"""
