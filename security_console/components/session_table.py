"""
Session list component with selection and deletion.
"""

from typing import Any, Optional

import streamlit as st

from security_console.api.client import APIClient, APIError
from security_console.api.models import BulkDeleteRequest, SecurityChatSession
from security_console.components.filters import body_params
from security_console.utils.helpers import format_datetime, truncate_text


def render_session_list(
    sessions: list[SecurityChatSession],
    current_session_id: Optional[str] = None,
) -> tuple[Optional[str], Optional[str]]:
    """
    Render the session list.

    Args:
        sessions: Sessions on the current page
        current_session_id: Currently selected session ID

    Returns:
        Tuple of (action, session_id) where action is:
        - "select": Select a session
        - "delete": Delete a session
        - None: No action
    """
    if not sessions:
        st.info("No chat sessions in this time range")
        return (None, None)

    for session in sessions:
        action = _render_session_item(session, current_session_id)
        if action:
            return action

    return (None, None)


def _render_session_item(
    session: SecurityChatSession,
    current_session_id: Optional[str],
) -> Optional[tuple[str, str]]:
    is_current = session.session_id == current_session_id
    title = truncate_text(session.message_preview or session.session_id, 80)

    with st.container():
        col0, col1, col2 = st.columns([1, 10, 1])

        with col0:
            st.checkbox(
                "Select",
                key=f"bulk_{session.session_id}",
                label_visibility="collapsed",
            )

        with col1:
            button_type = "primary" if is_current else "secondary"
            if st.button(
                title,
                key=f"session_{session.session_id}",
                use_container_width=True,
                type=button_type,
            ):
                return ("select", session.session_id)

            owner = session.user_email or (
                f"user #{session.user_id}" if session.user_id else "unknown user"
            )
            st.caption(
                f"{session.request_count} requests | {owner} | "
                f"{session.platform or '-'} / {session.model or '-'} | "
                f"{format_datetime(session.last_at)}"
            )

        with col2:
            if st.button("X", key=f"delete_{session.session_id}", help="Delete session"):
                return ("delete", session.session_id)

    return None


def selected_session_ids(sessions: list[SecurityChatSession]) -> list[str]:
    """Session IDs whose bulk checkbox is ticked."""
    return [
        s.session_id for s in sessions if st.session_state.get(f"bulk_{s.session_id}")
    ]


def render_bulk_actions(
    api_client: APIClient,
    sessions: list[SecurityChatSession],
    filters: dict[str, Any],
) -> bool:
    """
    Render bulk delete buttons.

    Args:
        api_client: APIClient instance
        sessions: Sessions on the current page
        filters: Active session filters, used for select-all deletion

    Returns:
        True if anything was deleted
    """
    selected = selected_session_ids(sessions)
    col1, col2 = st.columns(2)

    with col1:
        if st.button(f"Delete selected ({len(selected)})", disabled=not selected):
            return _bulk_delete(api_client, BulkDeleteRequest(session_ids=selected))

    with col2:
        confirm = st.checkbox("Confirm delete of all matching sessions")
        if st.button("Delete all matching", disabled=not confirm):
            payload = BulkDeleteRequest(select_all=True, **body_params(filters))
            return _bulk_delete(api_client, payload)

    return False


def _bulk_delete(api_client: APIClient, payload: BulkDeleteRequest) -> bool:
    try:
        result = api_client.bulk_delete_sessions(payload)
    except APIError as e:
        st.error(f"Bulk delete failed: {e.message}")
        return False
    st.success(
        f"Deleted {result.sessions_deleted} sessions ({result.logs_deleted} logs)"
    )
    return True


def handle_session_action(
    action: str,
    session_id: Optional[str],
    api_client: APIClient,
) -> Optional[str]:
    """
    Handle session list actions.

    Args:
        action: Action type ("select", "delete")
        session_id: Session ID the action applies to
        api_client: APIClient instance

    Returns:
        New current session ID, or None when nothing is selected
    """
    current = st.session_state.get("current_session_id")

    if action == "select":
        st.session_state.summary = None
        st.session_state.ai_messages = []
        return session_id

    if action == "delete":
        try:
            result = api_client.delete_session(session_id)
        except APIError as e:
            st.error(f"Delete failed: {e.message}")
            return current
        st.toast(f"Deleted {result.logs_deleted} logs")
        if current == session_id:
            return None
        return current

    return current
