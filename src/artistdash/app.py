"""Artist popularity dashboard: Streamlit host for the chart views."""

import asyncio
from functools import partial

import streamlit as st
import streamlit.components.v1 as components
from streamlit_js_eval import streamlit_js_eval

from artistdash.charts.base import ChartPipeline
from artistdash.charts.registry import dashboard_pipelines
from artistdash.config import Settings, configure_logging, load_settings
from artistdash.loader import load_records
from artistdash.models import ViewportSize
from artistdash.render_trigger import ChartView, ResizeObserver
from artistdash.renderers.svg import SvgSurface, render_svg_html
from artistdash.viewport import track_viewport_width

_ROW_HEIGHT = 420  # Each of the two layout rows
_GUTTER = 16
_PAGE_PADDING = 48

settings = load_settings()
configure_logging(settings.log_level)

st.set_page_config(
    page_title="Artist Popularity Dashboard",
    page_icon="♪",
    layout="wide",
    initial_sidebar_state="collapsed",
)

st.markdown(
    """
    <style>
    /* Hide streamlit_js_eval invisible iframe */
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    [data-testid="stHeader"], [data-testid="stToolbar"] { display: none !important; }
    [data-testid="stMainBlockContainer"] {
        padding-top: 1rem !important;
        padding-bottom: 0 !important;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Container size (browser viewport via streamlit-js-eval) ---
# Nothing is drawn until the browser has reported its width; later browser
# resizes rerun the script with the new width.
_viewport_width = track_viewport_width(
    st.session_state,
    lambda js, key: streamlit_js_eval(js_expressions=js, key=key, height=0),
    settings.debounce_ms,
)
if _viewport_width is None:
    st.stop()


def _container_sizes(viewport_width: int) -> tuple[ViewportSize, ViewportSize, ViewportSize]:
    """Two-row layout: one full-width chart on top, two half-width charts below."""
    full = max(0, viewport_width - _PAGE_PADDING)
    half = max(0, (full - _GUTTER) / 2)
    return (
        ViewportSize(full, _ROW_HEIGHT),
        ViewportSize(half, _ROW_HEIGHT),
        ViewportSize(half, _ROW_HEIGHT),
    )


async def _render_views(
    pipelines: tuple[ChartPipeline, ...],
    sizes: tuple[ViewportSize, ...],
    cfg: Settings,
) -> list[ChartView]:
    """Mount each chart, report its container size, and wait out the debounce."""
    loop = asyncio.get_running_loop()
    views: list[ChartView] = []
    observers: list[ResizeObserver] = []
    for pipeline in pipelines:
        view = ChartView(
            pipeline,
            SvgSurface(pipeline.surface_id),
            source=partial(load_records, cfg.data_path),
            debounce_seconds=cfg.debounce_seconds,
            loop=loop,
        )
        observer = ResizeObserver()
        view.mount(observer)
        views.append(view)
        observers.append(observer)

    for observer, size in zip(observers, sizes):
        observer.emit(size)
    await asyncio.sleep(cfg.debounce_seconds * 1.5)

    for view in views:
        view.unmount()
    return views


bar_view, scatter_view, parallel_view = asyncio.run(
    _render_views(
        dashboard_pipelines(settings),
        _container_sizes(_viewport_width),
        settings,
    )
)

# --- Layout ---
components.html(render_svg_html(bar_view.target), height=_ROW_HEIGHT, scrolling=False)
col1, col2 = st.columns(2)
with col1:
    components.html(render_svg_html(scatter_view.target), height=_ROW_HEIGHT, scrolling=False)
with col2:
    components.html(render_svg_html(parallel_view.target), height=_ROW_HEIGHT, scrolling=False)
