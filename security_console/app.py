"""
Main Streamlit application for the security chat audit console.

Run with: streamlit run security_console/app.py
"""

import streamlit as st

from security_console.api.client import APIClient, APIError
from security_console.api.models import MessageFilter, SummarizeRequest
from security_console.components.ai_assistant import (
    render_ai_chat,
    render_ai_key_selector,
    render_summary,
)
from security_console.components.filters import (
    body_params,
    log_params,
    render_filter_sidebar,
    session_params,
)
from security_console.components.log_viewer import render_log_list
from security_console.components.maintenance import (
    render_delete_logs_section,
    render_export_section,
)
from security_console.components.session_table import (
    handle_session_action,
    render_bulk_actions,
    render_session_list,
)
from security_console.components.stats_panel import render_stats_panel
from security_console.config import config
from security_console.utils.helpers import (
    build_chat_context,
    clamp_page,
    page_count,
    sync_page,
)
from security_console.utils.logging_config import setup_logging


# =============================================================================
# Page Configuration
# =============================================================================

st.set_page_config(
    page_title=config.page_title,
    page_icon=config.page_icon,
    layout=config.layout,
    initial_sidebar_state="expanded",
)

setup_logging(config.log_level)


# =============================================================================
# Session State Initialization
# =============================================================================


def init_session_state():
    """Initialize all session state variables."""
    if "current_session_id" not in st.session_state:
        st.session_state.current_session_id = None
    if "sessions_page" not in st.session_state:
        st.session_state.sessions_page = 1
    if "summary" not in st.session_state:
        st.session_state.summary = None
    if "ai_messages" not in st.session_state:
        st.session_state.ai_messages = []
    if "api_keys" not in st.session_state:
        st.session_state.api_keys = None


init_session_state()


# =============================================================================
# API Client
# =============================================================================

api_client = APIClient(
    config.api_base_url,
    token=config.api_token or None,
    timeout=config.request_timeout,
)


def load_api_keys():
    """Load the API keys once per browser session."""
    if st.session_state.api_keys is not None:
        return st.session_state.api_keys
    try:
        st.session_state.api_keys = api_client.list_api_keys()
    except APIError as e:
        st.sidebar.error(f"Failed to load API keys: {e.message}")
        return []
    return st.session_state.api_keys


# =============================================================================
# Overview Tab
# =============================================================================


def render_overview(filters: dict):
    """Render statistics and the session list."""
    try:
        stats = api_client.get_stats(log_params(filters))
        render_stats_panel(stats)
    except APIError as e:
        st.error(f"Failed to load statistics: {e.message}")

    st.divider()

    params = session_params(filters)
    params["page"] = sync_page(st.session_state, filters)
    params["page_size"] = config.sessions_page_size
    try:
        sessions = api_client.list_sessions(params)
    except APIError as e:
        st.error(f"Failed to load sessions: {e.message}")
        return
    page_size = sessions.page_size or config.sessions_page_size
    if clamp_page(st.session_state, sessions.total, page_size):
        st.rerun()

    st.subheader(f"Sessions ({sessions.total})")
    render_pagination(sessions.total, page_size)

    action, session_id = render_session_list(
        sessions.items, st.session_state.current_session_id
    )
    if action:
        st.session_state.current_session_id = handle_session_action(
            action, session_id, api_client
        )
        st.rerun()

    if sessions.items and render_bulk_actions(api_client, sessions.items, filters):
        st.session_state.current_session_id = None
        st.rerun()


def render_pagination(total: int, page_size: int):
    """Render previous/next controls for the session list."""
    if not page_size or total <= page_size:
        return
    pages = page_count(total, page_size)
    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        if st.button("Previous", disabled=st.session_state.sessions_page <= 1):
            st.session_state.sessions_page -= 1
            st.rerun()
    with col2:
        st.caption(f"Page {st.session_state.sessions_page} of {pages}")
    with col3:
        if st.button("Next", disabled=st.session_state.sessions_page >= pages):
            st.session_state.sessions_page += 1
            st.rerun()


# =============================================================================
# Session Detail Tab
# =============================================================================


def render_session_detail(api_keys: list):
    """Render logs and the AI assistant for the selected session."""
    session_id = st.session_state.current_session_id
    if not session_id:
        st.info("Select a session in the overview to inspect its logs.")
        return

    st.header(session_id)

    try:
        logs = api_client.list_messages(
            MessageFilter(session_id=session_id, page_size=config.messages_page_size)
        )
    except APIError as e:
        st.error(f"Failed to load logs: {e.message}")
        return

    logs_col, ai_col = st.columns([3, 2])

    with logs_col:
        render_log_list(logs.items, logs.total)

    with ai_col:
        st.subheader("AI assistant")
        ai_api_key_id = render_ai_key_selector(api_keys)

        if st.button("Summarize session", type="primary"):
            with st.spinner("Summarizing..."):
                try:
                    st.session_state.summary = api_client.summarize(
                        SummarizeRequest(
                            session_id=session_id, ai_api_key_id=ai_api_key_id
                        )
                    )
                except APIError as e:
                    st.error(f"Summary failed: {e.message}")

        if st.session_state.summary:
            render_summary(st.session_state.summary)

        st.divider()
        render_ai_chat(
            api_client,
            build_chat_context(logs.items),
            ai_api_key_id=ai_api_key_id,
        )


# =============================================================================
# Maintenance Tab
# =============================================================================


def render_maintenance(filters: dict, api_keys: list):
    """Render window summaries, exports and deletion."""
    st.subheader("Summarize time window")
    st.caption("Summarizes every log matching the sidebar filters.")
    ai_api_key_id = render_ai_key_selector(api_keys, key="window_ai_api_key")
    if st.button("Summarize window"):
        window = body_params(log_params(filters))
        payload = SummarizeRequest(
            start_time=window.get("start_time"),
            end_time=window.get("end_time"),
            user_id=window.get("user_id"),
            api_key_id=window.get("api_key_id"),
            ai_api_key_id=ai_api_key_id,
        )
        with st.spinner("Summarizing..."):
            try:
                render_summary(api_client.summarize(payload))
            except APIError as e:
                st.error(f"Summary failed: {e.message}")

    st.divider()
    st.subheader("Export")
    render_export_section(api_client, session_params(filters), log_params(filters))

    st.divider()
    st.subheader("Delete logs")
    if render_delete_logs_section(api_client, log_params(filters)):
        st.session_state.current_session_id = None


# =============================================================================
# Main
# =============================================================================


def main():
    """Main application entry point."""
    st.sidebar.title(config.page_title)
    api_keys = load_api_keys()
    filters = render_filter_sidebar(api_keys, config.default_time_range)

    overview_tab, detail_tab, maintenance_tab = st.tabs(
        ["Overview", "Session", "Maintenance"]
    )
    with overview_tab:
        render_overview(filters)
    with detail_tab:
        render_session_detail(api_keys)
    with maintenance_tab:
        render_maintenance(filters, api_keys)


if __name__ == "__main__":
    main()
