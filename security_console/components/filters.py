"""
Sidebar filter controls shared by every panel.
"""

from typing import Any, Optional

import streamlit as st

from security_console.api.models import SecurityApiKey
from security_console.utils.helpers import time_range_bounds

TIME_RANGES = ["1h", "6h", "24h", "7d", "30d"]
PLATFORMS = ["", "anthropic", "openai", "gemini", "antigravity", "opencode", "codex"]


def _parse_id(raw: str) -> Optional[int]:
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        st.sidebar.warning(f"Ignoring invalid id: {raw}")
        return None
    return value if value > 0 else None


def render_filter_sidebar(
    api_keys: list[SecurityApiKey],
    default_time_range: str = "24h",
) -> dict[str, Any]:
    """
    Render filter inputs in the sidebar.

    Args:
        api_keys: Keys offered in the API key selector
        default_time_range: Preselected time range

    Returns:
        Dict of set filter values, keyed by wire parameter name
    """
    st.sidebar.subheader("Filters")

    index = TIME_RANGES.index(default_time_range) if default_time_range in TIME_RANGES else 2
    time_range = st.sidebar.selectbox("Time range", TIME_RANGES, index=index)
    query = st.sidebar.text_input("Keyword", placeholder="Search message previews")
    platform = st.sidebar.selectbox("Platform", PLATFORMS, format_func=lambda p: p or "All")
    model = st.sidebar.text_input("Model")
    user_id = _parse_id(st.sidebar.text_input("User ID"))

    key_options = {"All keys": None}
    key_options.update({f"{k.name} (#{k.id})": k.id for k in api_keys})
    api_key_label = st.sidebar.selectbox("API key", list(key_options.keys()))

    filters = {
        "time_range": time_range,
        "q": query.strip(),
        "platform": platform,
        "model": model.strip(),
        "user_id": user_id,
        "api_key_id": key_options[api_key_label],
    }
    return {k: v for k, v in filters.items() if v not in (None, "")}


def session_params(filters: dict[str, Any]) -> dict[str, Any]:
    """Filter values accepted by the session endpoints."""
    return dict(filters)


def log_params(filters: dict[str, Any]) -> dict[str, Any]:
    """Filter values accepted by the stats and log endpoints (no keyword)."""
    return {k: v for k, v in filters.items() if k != "q"}


def body_params(filters: dict[str, Any]) -> dict[str, Any]:
    """
    Filter values for JSON request bodies.

    Bodies carry absolute start_time/end_time instead of a relative range.
    """
    params = {k: v for k, v in filters.items() if k != "time_range"}
    if filters.get("time_range"):
        start_time, end_time = time_range_bounds(filters["time_range"])
        params["start_time"] = start_time
        params["end_time"] = end_time
    return params
