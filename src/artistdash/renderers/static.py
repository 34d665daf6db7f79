"""Matplotlib static PNG renderer.

Draws the same pixel-space geometry as the SVG renderer onto a figure whose
data coordinates are the container's pixels (y pointing down).
"""

from functools import singledispatch
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.axes import Axes  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

from artistdash.models import (  # noqa: E402
    AxisGeometry,
    BarChartGeometry,
    ParallelGeometry,
    ScatterGeometry,
    StreamGeometry,
    ViewportSize,
)

_ROOT = Path(__file__).parent.parent.parent.parent
_DPI = 100
_INK = "#333333"


def _draw_axis(ax: Axes, axis: AxisGeometry) -> None:
    r0, r1 = axis.range
    if axis.orient == "bottom":
        ax.plot([r0, r1], [axis.offset, axis.offset], color=_INK, linewidth=0.8)
        for tick in axis.ticks:
            ax.plot([tick.position] * 2, [axis.offset, axis.offset + 6], color=_INK, linewidth=0.8)
            ax.text(tick.position, axis.offset + 18, tick.label, ha="center", fontsize=7)
    else:
        ax.plot([axis.offset, axis.offset], [r0, r1], color=_INK, linewidth=0.8)
        for tick in axis.ticks:
            ax.plot([axis.offset - 6, axis.offset], [tick.position] * 2, color=_INK, linewidth=0.8)
            ax.text(axis.offset - 9, tick.position, tick.label, ha="right", va="center", fontsize=7)


def _draw_frame(ax: Axes, size: ViewportSize, title: str, top: float) -> None:
    ax.text(size.width / 2, top / 2, title, ha="center", va="center", fontsize=10, fontweight="bold")


def _draw_xy_labels(ax: Axes, size: ViewportSize, x_axis: AxisGeometry, y_axis: AxisGeometry) -> None:
    ax.text(size.width / 2, x_axis.offset + 40, x_axis.label, ha="center", fontsize=9)
    ax.text(y_axis.offset - 45, size.height / 2, y_axis.label, ha="center", va="center", rotation=90, fontsize=9)


@singledispatch
def _draw(geometry: object, ax: Axes) -> None:
    raise TypeError(f"No static renderer for {type(geometry).__name__}")


@_draw.register
def _(geometry: BarChartGeometry, ax: Axes) -> None:
    for b in geometry.bars:
        ax.add_patch(Rectangle((b.x, b.y), b.width, b.height, facecolor="lightgrey"))
    _draw_axis(ax, geometry.x_axis)
    _draw_axis(ax, geometry.y_axis)
    _draw_xy_labels(ax, geometry.size, geometry.x_axis, geometry.y_axis)
    _draw_frame(ax, geometry.size, geometry.title, geometry.y_axis.range[1])


@_draw.register
def _(geometry: ScatterGeometry, ax: Axes) -> None:
    ax.scatter(
        [p.cx for p in geometry.points],
        [p.cy for p in geometry.points],
        s=12,
        c=[p.fill for p in geometry.points],
        edgecolors="#1f3b73",
        linewidths=0.4,
        alpha=0.9,
    )
    _draw_axis(ax, geometry.x_axis)
    _draw_axis(ax, geometry.y_axis)
    _draw_xy_labels(ax, geometry.size, geometry.x_axis, geometry.y_axis)
    _draw_frame(ax, geometry.size, geometry.title, geometry.y_axis.range[1])

    # Gradient legend as adjacent slices, one per stop interval
    lx, ly, lw, lh = geometry.legend_box
    stops = geometry.legend_stops
    for left, right in zip(stops, stops[1:]):
        x0 = lx + left.offset * lw
        ax.add_patch(Rectangle((x0, ly), (right.offset - left.offset) * lw, lh, facecolor=left.color, linewidth=0))
    ax.add_patch(Rectangle((lx, ly), lw, lh, fill=False, edgecolor="#999999", linewidth=0.8))
    ax.text(lx + lw / 2, ly - 6, "Explicit Content Rate", ha="center", fontsize=8)


@_draw.register
def _(geometry: ParallelGeometry, ax: Axes) -> None:
    for line in geometry.lines:
        xs, ys = zip(*line.points)
        ax.plot(xs, ys, color="teal", linewidth=1, alpha=0.18)
    for axis in geometry.axes:
        _draw_axis(ax, axis)
        ax.text(axis.offset, geometry.size.height - 20, axis.label, ha="center", fontsize=7)
    _draw_frame(ax, geometry.size, geometry.title, geometry.axes[0].range[1])


@_draw.register
def _(geometry: StreamGeometry, ax: Axes) -> None:
    for layer in geometry.layers:
        ax.fill_between(layer.xs, layer.lower, layer.upper, color=layer.color, alpha=0.9, linewidth=0)
    _draw_axis(ax, geometry.x_axis)
    _draw_axis(ax, geometry.y_axis)
    _draw_xy_labels(ax, geometry.size, geometry.x_axis, geometry.y_axis)
    _draw_frame(ax, geometry.size, geometry.title, geometry.y_axis.range[1])

    lx, ly = geometry.legend_origin
    ax.text(lx, ly - 8, "Artists", fontsize=8, fontweight="bold")
    for i, layer in enumerate(geometry.layers):
        ax.add_patch(Rectangle((lx, ly + i * 16), 12, 12, facecolor=layer.color))
        ax.text(lx + 18, ly + i * 16 + 10, layer.key, fontsize=8)


def render_static_chart(
    geometry: BarChartGeometry | ScatterGeometry | ParallelGeometry | StreamGeometry,
) -> Figure:
    """Render chart geometry as a matplotlib figure at the geometry's pixel size.

    Args:
        geometry: Output of a chart layout step.

    Returns:
        matplotlib Figure object.
    """
    size = geometry.size
    fig, ax = plt.subplots(figsize=(size.width / _DPI, size.height / _DPI), dpi=_DPI)
    fig.subplots_adjust(left=0, right=1, top=1, bottom=0)
    fig.patch.set_facecolor("white")
    ax.set_xlim(0, size.width)
    ax.set_ylim(size.height, 0)
    ax.axis("off")
    _draw(geometry, ax)
    return fig


def save_static_chart(
    geometry: BarChartGeometry | ScatterGeometry | ParallelGeometry | StreamGeometry,
    name: str,
    output_path: Path | None = None,
) -> Path:
    """Save chart geometry as a PNG file.

    Args:
        geometry: Output of a chart layout step.
        name: Chart name, used for the default filename.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        output_path = _ROOT / "results" / f"{name}.png"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(geometry)
    fig.savefig(output_path, facecolor="white")
    plt.close(fig)
    return output_path
