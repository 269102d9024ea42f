"""
Chat log viewer for a single session.
"""

import streamlit as st

from security_console.api.models import SecurityChatLog, SecurityChatMessage
from security_console.utils.helpers import (
    format_datetime,
    group_messages_by_source,
    role_label,
)


def _render_message(message: SecurityChatMessage):
    chat_role = "assistant" if message.role == "assistant" else "user"
    with st.chat_message(chat_role):
        st.caption(f"#{message.index} {role_label(message.role)}")
        st.markdown(message.content)


def render_log(log: SecurityChatLog):
    """
    Render one chat log with request and response messages.

    Args:
        log: SecurityChatLog to display
    """
    status = log.status_code if log.status_code is not None else "-"
    header = (
        f"{format_datetime(log.created_at)} | {log.model or '-'} | "
        f"status {status}{' | stream' if log.stream else ''}"
    )
    with st.expander(header, expanded=False):
        st.caption(
            f"Log #{log.id} | {log.request_path or '-'} | "
            f"request {log.request_id or '-'}"
        )
        request, response = group_messages_by_source(log)
        for message in request:
            _render_message(message)
        if response:
            st.divider()
            for message in response:
                _render_message(message)


def render_log_list(logs: list[SecurityChatLog], total: int):
    """
    Render the chat logs of the selected session.

    Args:
        logs: Logs on the current page
        total: Total number of logs in the session
    """
    if not logs:
        st.info("No logs recorded for this session")
        return

    st.markdown(f"**{total} log(s) in session**")
    for log in logs:
        render_log(log)
