"""
Utility functions and helpers for the console.
"""

import re
from collections.abc import Iterable, MutableMapping
from datetime import datetime, timedelta, timezone
from typing import Optional

from security_console.api.models import SecurityChatLog, SecurityChatMessage

_BYTE_UNITS = ["B", "KiB", "MiB", "GiB", "TiB"]

_TIME_RANGE_RE = re.compile(r"(\d+)([mhd])")
_TIME_UNITS = {"m": "minutes", "h": "hours", "d": "days"}

_ROLE_LABELS = {
    "system": "System",
    "user": "User",
    "assistant": "Assistant",
    "tool": "Tool",
}


def truncate_text(text: str, max_length: int = 200) -> str:
    """
    Truncate text to max length with ellipsis.

    Args:
        text: Text to truncate
        max_length: Maximum length

    Returns:
        Truncated text with "..." if needed
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def format_datetime(dt) -> str:
    """
    Format datetime for display.

    Args:
        dt: datetime object

    Returns:
        Formatted string (e.g., "Dec 30, 2024 2:30 PM")
    """
    return dt.strftime("%b %d, %Y %I:%M %p")


def format_ratio(ratio: float) -> str:
    """Format a 0-1 ratio as a percentage string (e.g., "25.0%")."""
    return f"{ratio * 100:.1f}%"


def format_bytes(size: int) -> str:
    """
    Format a byte count with binary units.

    Args:
        size: Number of bytes

    Returns:
        Human readable size (e.g., "1.5 KiB")
    """
    value = float(size)
    for unit in _BYTE_UNITS:
        if abs(value) < 1024 or unit == _BYTE_UNITS[-1]:
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def role_label(role: str) -> str:
    """Display label for a message role."""
    role = (role or "").strip().lower()
    return _ROLE_LABELS.get(role, role.capitalize() or "User")


def group_messages_by_source(
    log: SecurityChatLog,
) -> tuple[list[SecurityChatMessage], list[SecurityChatMessage]]:
    """
    Split a log's messages into request and response parts.

    Messages keep their index order; sources other than "response"
    are treated as request messages.
    """
    ordered = sorted(log.messages, key=lambda m: m.index)
    request = [m for m in ordered if m.source != "response"]
    response = [m for m in ordered if m.source == "response"]
    return request, response


def _blank(value) -> str:
    return "" if value is None else str(value)


def format_log_text(log: SecurityChatLog) -> str:
    """
    Render one chat log in the text layout of the log export archive.

    Messages are written in stored order and every block ends with a blank line.
    """
    created_at = log.created_at.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    lines = [
        "----",
        f"id: {log.id}",
        f"created_at: {created_at}",
        f"session_id: {log.session_id}",
        f"request_id: {_blank(log.request_id)}",
        f"client_request_id: {_blank(log.client_request_id)}",
        f"user_id: {_blank(log.user_id)}",
        f"api_key_id: {_blank(log.api_key_id)}",
        f"account_id: {_blank(log.account_id)}",
        f"group_id: {_blank(log.group_id)}",
        f"platform: {_blank(log.platform)}",
        f"model: {_blank(log.model)}",
        f"request_path: {_blank(log.request_path)}",
        f"status_code: {_blank(log.status_code)}",
        f"stream: {str(log.stream).lower()}",
        "messages:",
    ]
    for msg in log.messages:
        lines.append(f"[{msg.index}][{msg.source}][{msg.role}]")
        if msg.content:
            lines.append(msg.content)
        lines.append("")
    lines.append("")
    return "".join(line + "\n" for line in lines)


def build_chat_context(logs: Iterable[SecurityChatLog], max_length: int = 20000) -> str:
    """
    Build a plain-text context block from chat logs for the AI assistant.

    Args:
        logs: Chat logs to include, in display order
        max_length: Maximum context length in characters

    Returns:
        Context string, truncated with "..." when too long
    """
    blocks = [format_log_text(log) for log in logs]
    return truncate_text("".join(blocks), max_length)


def time_range_bounds(
    time_range: str, now: Optional[datetime] = None
) -> tuple[datetime, datetime]:
    """
    Resolve a relative time range such as "24h" or "7d" to absolute bounds.

    Args:
        time_range: Number followed by "m", "h" or "d"
        now: End of the range, defaults to the current UTC time

    Returns:
        Tuple of (start_time, end_time)

    Raises:
        ValueError: If the range cannot be parsed
    """
    match = _TIME_RANGE_RE.fullmatch(time_range.strip().lower())
    if not match:
        raise ValueError(f"Invalid time range: {time_range}")
    amount, unit = int(match.group(1)), match.group(2)
    end = now or datetime.now(timezone.utc)
    return end - timedelta(**{_TIME_UNITS[unit]: amount}), end


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for total items, at least 1."""
    if page_size <= 0 or total <= 0:
        return 1
    return (total + page_size - 1) // page_size


def sync_page(state: MutableMapping, filters: dict, key: str = "sessions") -> int:
    """
    Return the current page for a paged list, resetting to 1 when filters change.

    Args:
        state: Session state holding "<key>_page" and "<key>_filters"
        filters: Active filter values
        key: Prefix of the state entries

    Returns:
        Page to request
    """
    page_key, filters_key = f"{key}_page", f"{key}_filters"
    if state.get(filters_key) != filters:
        state[filters_key] = dict(filters)
        state[page_key] = 1
    return state.get(page_key, 1)


def clamp_page(state: MutableMapping, total: int, page_size: int, key: str = "sessions") -> bool:
    """
    Move the stored page back into range after a list loads.

    Returns:
        True if the page changed and the list must be reloaded
    """
    page_key = f"{key}_page"
    last = page_count(total, page_size)
    if state.get(page_key, 1) > last:
        state[page_key] = last
        return True
    return False
