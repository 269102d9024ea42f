"""Tests for sidebar filter values."""

from datetime import timedelta

from security_console.api.models import LogDeleteRequest
from security_console.components.filters import (
    PLATFORMS,
    body_params,
    log_params,
    session_params,
)


def test_platforms_include_stats_buckets():
    assert PLATFORMS[0] == ""
    assert {"opencode", "codex"} <= set(PLATFORMS)


def test_log_params_drop_keyword():
    filters = {"time_range": "24h", "q": "secret", "platform": "codex"}

    assert session_params(filters) == filters
    assert log_params(filters) == {"time_range": "24h", "platform": "codex"}


def test_body_params_resolve_time_range():
    params = body_params({"time_range": "7d", "platform": "opencode", "user_id": 3})

    assert "time_range" not in params
    assert params["end_time"] - params["start_time"] == timedelta(days=7)
    assert LogDeleteRequest(**params).to_wire()["platform"] == "opencode"
