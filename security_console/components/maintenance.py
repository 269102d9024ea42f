"""
Export and retention maintenance component.
"""

from typing import Any

import streamlit as st

from security_console.api.client import APIClient, APIError
from security_console.api.models import ExportFile, LogDeleteRequest
from security_console.components.filters import body_params


def _render_download(export: ExportFile, label: str):
    if export.truncated:
        st.warning("Export was truncated by the server row limit")
    st.download_button(
        label,
        data=export.content,
        file_name=export.filename,
        mime=export.content_type,
    )


def render_export_section(
    api_client: APIClient,
    session_filters: dict[str, Any],
    log_filters: dict[str, Any],
):
    """
    Render session CSV and log archive exports.

    Args:
        api_client: APIClient instance
        session_filters: Active session filters
        log_filters: Active log filters
    """
    col1, col2 = st.columns(2)

    with col1:
        if st.button("Prepare sessions CSV"):
            try:
                st.session_state.sessions_export = api_client.export_sessions(
                    session_filters
                )
            except APIError as e:
                st.error(f"Export failed: {e.message}")
        if st.session_state.get("sessions_export"):
            _render_download(st.session_state.sessions_export, "Download sessions CSV")

    with col2:
        if st.button("Prepare logs archive"):
            with st.spinner("Exporting logs..."):
                try:
                    st.session_state.logs_export = api_client.export_logs(log_filters)
                except APIError as e:
                    st.error(f"Export failed: {e.message}")
        if st.session_state.get("logs_export"):
            _render_download(st.session_state.logs_export, "Download logs archive")


def render_delete_logs_section(api_client: APIClient, log_filters: dict[str, Any]) -> bool:
    """
    Render deletion of every log matching the active filters.

    Args:
        api_client: APIClient instance
        log_filters: Active log filters

    Returns:
        True if logs were deleted
    """
    st.caption(
        "Deletes every log matching the sidebar filters in the selected time range."
    )
    confirm = st.checkbox("I understand this cannot be undone", key="confirm_delete_logs")
    if not st.button("Delete matching logs", disabled=not confirm, type="primary"):
        return False

    payload = LogDeleteRequest(**body_params(log_filters))
    try:
        result = api_client.delete_logs(payload)
    except APIError as e:
        st.error(f"Delete failed: {e.message}")
        return False

    st.success(
        f"Deleted {result.logs_deleted} logs across {result.sessions_deleted} sessions"
    )
    return True
