"""Browser viewport width for the Streamlit host, kept current across reruns.

The width is read once through streamlit-js-eval and cached in session
state. A second component then waits in the browser for the next resize
(debounced in JS) and resolves with the new width, which triggers a rerun.
Each resolved listener is replaced by a fresh one under a new key, so
every later resize is seen too.
"""

from collections.abc import Callable, MutableMapping
from typing import Any

WIDTH_JS = "window.parent.innerWidth"

_WIDTH_KEY = "viewport_width"
_GENERATION_KEY = "viewport_generation"


def resize_listener_js(debounce_ms: int) -> str:
    """JS promise that resolves with the viewport width after the next resize burst."""
    return f"""
new Promise((resolve) => {{
    const host = window.parent;
    let timer = null;
    host.addEventListener("resize", () => {{
        clearTimeout(timer);
        timer = setTimeout(() => resolve(host.innerWidth), {debounce_ms});
    }});
}})
"""


def track_viewport_width(
    state: MutableMapping[str, Any],
    query: Callable[[str, str], Any],
    debounce_ms: int,
) -> int | None:
    """Return the current viewport width, or None until the browser reports it.

    Args:
        state: Per-session storage (st.session_state).
        query: Evaluates a JS expression in the browser under a component key
            and returns its value, or None while it is pending.
        debounce_ms: Quiet period before a resize is reported.

    Returns:
        Width in CSS pixels, or None on the first run.
    """
    if _WIDTH_KEY not in state:
        width = query(WIDTH_JS, "_viewport_width")
        # None until the JS call returns; the next rerun retries
        if width is None:
            return None
        state[_WIDTH_KEY] = int(width)
        state[_GENERATION_KEY] = 0

    js = resize_listener_js(debounce_ms)
    resized = query(js, f"_viewport_resize_{state[_GENERATION_KEY]}")
    if resized is not None:
        state[_WIDTH_KEY] = int(resized)
        state[_GENERATION_KEY] += 1
        query(js, f"_viewport_resize_{state[_GENERATION_KEY]}")
    return state[_WIDTH_KEY]
