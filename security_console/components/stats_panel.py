"""
Statistics panel component.
"""

import streamlit as st

from security_console.api.models import SecurityChatStats
from security_console.utils.helpers import format_bytes, format_datetime, format_ratio


def render_stats_panel(stats: SecurityChatStats):
    """
    Render aggregate statistics and the platform share.

    Args:
        stats: SecurityChatStats for the current filters
    """
    st.caption(
        f"{format_datetime(stats.start_time)} - {format_datetime(stats.end_time)}"
    )

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Requests", stats.request_count)
    col2.metric("Sessions", stats.session_count)
    col3.metric("Requests / day", f"{stats.avg_requests_per_day:.1f}")
    col4.metric("Sessions / day", f"{stats.avg_sessions_per_day:.1f}")

    st.caption(
        f"Estimated log size: {format_bytes(stats.estimated_bytes)} | "
        f"Table size: {format_bytes(stats.table_bytes)}"
    )

    if not stats.platform_share:
        return

    st.markdown(f"**Platform share** (by {stats.platform_share_basis})")
    columns = st.columns(len(stats.platform_share))
    for column, (name, share) in zip(columns, sorted(stats.platform_share.items())):
        column.metric(name, share.count, format_ratio(share.ratio), delta_color="off")
