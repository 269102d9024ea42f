"""
AI assistant components: summary report and follow-up chat.
"""

from typing import Optional

import streamlit as st

from security_console.api.client import APIClient, APIError
from security_console.api.models import (
    AIChatRequest,
    ChatTurn,
    SecurityApiKey,
    SecurityChatSummary,
)

_RISK_COLORS = {
    "low": "green",
    "medium": "orange",
    "high": "red",
    "critical": "red",
}


def render_ai_key_selector(
    api_keys: list[SecurityApiKey], key: str = "ai_api_key"
) -> Optional[int]:
    """
    Render the selector for the API key used to call the AI.

    Returns:
        Selected key ID, or None to let the server choose
    """
    active = [k for k in api_keys if k.status == "active"]
    options = {"Server default": None}
    options.update({f"{k.name} (#{k.id})": k.id for k in active})
    label = st.selectbox("AI API key", list(options.keys()), key=key)
    return options[label]


def render_summary(summary: SecurityChatSummary):
    """
    Render a summary with risk level, findings and actions.

    Args:
        summary: SecurityChatSummary from the summarize endpoint
    """
    if summary.risk_level:
        color = _RISK_COLORS.get(summary.risk_level.lower(), "gray")
        st.markdown(f"Risk level: :{color}[**{summary.risk_level.upper()}**]")

    st.markdown(summary.summary)

    if summary.sensitive_findings:
        st.markdown("**Sensitive findings**")
        for finding in summary.sensitive_findings:
            st.markdown(f"- {finding}")

    if summary.recommended_actions:
        st.markdown("**Recommended actions**")
        for action in summary.recommended_actions:
            st.markdown(f"- {action}")


def render_ai_chat(
    api_client: APIClient,
    context: str,
    ai_api_key_id: Optional[int] = None,
):
    """
    Render the follow-up chat with the security AI.

    The conversation is kept in st.session_state.ai_messages and the
    whole history is sent on every turn.

    Args:
        api_client: APIClient instance
        context: Plain-text context built from the selected logs
        ai_api_key_id: Key used to call the AI
    """
    for turn in st.session_state.ai_messages:
        with st.chat_message(turn.role):
            st.markdown(turn.content)

    user_input = st.chat_input(
        placeholder="Ask about this session...",
        key="ai_chat_input",
    )
    if not user_input:
        return

    st.session_state.ai_messages.append(ChatTurn(role="user", content=user_input))
    with st.chat_message("user"):
        st.markdown(user_input)

    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            try:
                reply = api_client.chat_with_ai(
                    AIChatRequest(
                        messages=st.session_state.ai_messages,
                        context=context or None,
                        ai_api_key_id=ai_api_key_id,
                    )
                )
            except APIError as e:
                st.error(f"AI request failed: {e.message}")
                st.session_state.ai_messages.pop()
                return
        st.markdown(reply.summary)

    st.session_state.ai_messages.append(ChatTurn(role="assistant", content=reply.summary))
