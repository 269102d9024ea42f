"""Tests for the admin security API client."""

from datetime import datetime, timezone

import httpx
import pytest

from security_console.api.client import APIClient, APIError
from security_console.api.models import (
    AIChatRequest,
    BulkDeleteRequest,
    ChatTurn,
    LogDeleteRequest,
    LogFilter,
    MessageFilter,
    SessionFilter,
    SummarizeRequest,
)

PREFIX = "/api/v1/admin/security"


# =============================================================================
# Sessions
# =============================================================================


def test_list_sessions_sends_filters_as_query(api_client, transport, session_payload):
    transport.reply(
        {"items": [session_payload], "total": 1, "page": 2, "page_size": 20}
    )

    result = api_client.list_sessions(
        SessionFilter(page=2, page_size=20, query="report", platform="anthropic", user_id=7)
    )

    request = transport.last
    assert request.method == "GET"
    assert request.url.path == f"{PREFIX}/sessions"
    assert dict(request.url.params) == {
        "page": "2",
        "page_size": "20",
        "q": "report",
        "platform": "anthropic",
        "user_id": "7",
    }
    assert result.total == 1
    assert result.page == 2
    assert result.items[0].session_id == "sess-123"
    assert result.items[0].last_at == datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def test_list_sessions_accepts_plain_mapping(api_client, transport):
    transport.reply({"items": [], "total": 0, "page": 1, "page_size": 50})

    api_client.list_sessions({"q": "secret", "time_range": "7d", "custom": "x", "model": None})

    assert dict(transport.last.url.params) == {
        "q": "secret",
        "time_range": "7d",
        "custom": "x",
    }


def test_list_sessions_serializes_datetimes(api_client, transport):
    transport.reply({"items": [], "total": 0, "page": 1, "page_size": 50})

    api_client.list_sessions(
        SessionFilter(
            start_time=datetime(2026, 10, 1, tzinfo=timezone.utc),
            end_time=datetime(2026, 10, 2, 12, tzinfo=timezone.utc),
        )
    )

    params = transport.last.url.params
    assert params["start_time"] == "2026-10-01T00:00:00Z"
    assert params["end_time"] == "2026-10-02T12:00:00Z"


def test_request_carries_bearer_token(api_client, transport):
    transport.reply({"items": [], "total": 0, "page": 1, "page_size": 50})

    api_client.list_sessions()

    assert transport.last.headers["authorization"] == "Bearer admin-token"
    assert transport.last.url.params == httpx.QueryParams()


def test_no_authorization_header_without_token(transport):
    client = APIClient("http://gateway.test/api/v1/", transport=transport)
    transport.reply([])

    client.list_api_keys()

    assert "authorization" not in transport.last.headers
    assert transport.last.url.path == f"{PREFIX}/api-keys"


def test_delete_session(api_client, transport):
    transport.reply({"logs_deleted": 5, "sessions_deleted": 1})

    result = api_client.delete_session("sess-123", user_id=7)

    request = transport.last
    assert request.method == "DELETE"
    assert request.url.path == f"{PREFIX}/sessions/sess-123"
    assert dict(request.url.params) == {"user_id": "7"}
    assert result.logs_deleted == 5
    assert result.sessions_deleted == 1


def test_delete_session_escapes_session_id(api_client, transport):
    transport.reply({"logs_deleted": 0, "sessions_deleted": 0})

    api_client.delete_session("team/a b")

    assert transport.last.url.raw_path.endswith(b"/sessions/team%2Fa%20b")


def test_bulk_delete_by_ids(api_client, transport):
    transport.reply({"logs_deleted": 9, "sessions_deleted": 2})

    result = api_client.bulk_delete_sessions(BulkDeleteRequest(session_ids=["a", "b"]))

    request = transport.last
    assert request.method == "POST"
    assert request.url.path == f"{PREFIX}/sessions/bulk-delete"
    assert transport.last_json() == {"session_ids": ["a", "b"], "select_all": False}
    assert result.sessions_deleted == 2


def test_bulk_delete_select_all_uses_filter_fields(api_client, transport):
    transport.reply({"logs_deleted": 100, "sessions_deleted": 10})

    api_client.bulk_delete_sessions(
        {
            "select_all": True,
            "q": "password",
            "platform": "openai",
            "start_time": datetime(2026, 10, 1, tzinfo=timezone.utc),
        }
    )

    assert transport.last_json() == {
        "select_all": True,
        "q": "password",
        "platform": "openai",
        "start_time": "2026-10-01T00:00:00Z",
    }


def test_export_sessions_returns_csv(api_client, transport):
    csv_body = b"session_id,user_email\nsess-123,ops@example.com\n"
    transport.reply_raw(
        content=csv_body,
        headers={
            "content-type": "text/csv; charset=utf-8",
            "content-disposition": "attachment; filename=security_sessions.csv",
            "x-export-truncated": "true",
        },
    )

    export = api_client.export_sessions({"platform": "anthropic"})

    assert transport.last.url.path == f"{PREFIX}/sessions/export"
    assert export.filename == "security_sessions.csv"
    assert export.truncated is True
    assert export.text().splitlines()[1] == "sess-123,ops@example.com"


# =============================================================================
# Messages / Logs
# =============================================================================


def test_list_messages(api_client, transport, log_payload):
    transport.reply({"items": [log_payload], "total": 1, "page": 1, "page_size": 200})

    result = api_client.list_messages(MessageFilter(session_id="sess-123", page_size=200))

    request = transport.last
    assert request.url.path == f"{PREFIX}/messages"
    assert dict(request.url.params) == {"session_id": "sess-123", "page_size": "200"}
    log = result.items[0]
    assert log.id == 42
    assert log.stream is True
    assert [m.index for m in log.messages] == [2, 0, 1]


def test_list_messages_does_not_require_session_id(api_client, transport):
    transport.reply({"items": [], "total": 0, "page": 1, "page_size": 200})

    api_client.list_messages()

    assert transport.last.url.params == httpx.QueryParams()


def test_list_logs_has_no_timeout(api_client, transport, log_payload):
    transport.reply({"items": [log_payload], "total": 1, "page": 1, "page_size": 500})

    result = api_client.list_logs(LogFilter(request_path="/v1/messages", group_id=2))

    request = transport.last
    assert request.url.path == f"{PREFIX}/logs"
    assert dict(request.url.params) == {"request_path": "/v1/messages", "group_id": "2"}
    assert request.extensions["timeout"]["read"] is None
    assert result.items[0].request_path == "/v1/messages"


def test_regular_calls_use_configured_timeout(api_client, transport):
    transport.reply([])

    api_client.list_api_keys()

    assert transport.last.extensions["timeout"]["read"] == 30


def test_export_logs_returns_zip_without_timeout(api_client, transport):
    import io
    import zipfile

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("security_logs_20261017_20261018.txt", "----\nid: 42\n")
    transport.reply_raw(
        content=buffer.getvalue(),
        headers={
            "content-type": "application/zip",
            "content-disposition": "attachment; filename=security_logs_20261017_20261018.txt.zip",
        },
    )

    export = api_client.export_logs({"time_range": "24h"})

    request = transport.last
    assert request.url.path == f"{PREFIX}/logs/export"
    assert request.extensions["timeout"]["read"] is None
    assert export.filename == "security_logs_20261017_20261018.txt.zip"
    assert export.truncated is False
    assert export.text() == "----\nid: 42\n"


def test_delete_logs(api_client, transport):
    transport.reply({"logs_deleted": 12, "sessions_deleted": 3})

    result = api_client.delete_logs(LogDeleteRequest(user_id=7, model="gpt-4o"))

    request = transport.last
    assert request.method == "POST"
    assert request.url.path == f"{PREFIX}/logs/delete"
    assert transport.last_json() == {"user_id": 7, "model": "gpt-4o"}
    assert result.logs_deleted == 12
    assert result.sessions_deleted == 3


def test_get_stats(api_client, transport):
    transport.reply(
        {
            "start_time": "2026-10-17T00:00:00Z",
            "end_time": "2026-10-18T00:00:00Z",
            "request_count": 40,
            "session_count": 8,
            "avg_requests_per_day": 40.0,
            "avg_sessions_per_day": 8.0,
            "estimated_bytes": 2048,
            "table_bytes": 8192,
            "platform_share": {
                "opencode": {"count": 10, "ratio": 0.25},
                "codex": {"count": 20, "ratio": 0.5},
                "other": {"count": 10, "ratio": 0.25},
            },
            "platform_share_basis": "request",
        }
    )

    stats = api_client.get_stats({"time_range": "24h", "platform": "openai"})

    assert transport.last.url.path == f"{PREFIX}/stats"
    assert dict(transport.last.url.params) == {"time_range": "24h", "platform": "openai"}
    assert stats.request_count == 40
    assert stats.platform_share["codex"].ratio == 0.5
    assert sum(s.count for s in stats.platform_share.values()) == stats.request_count


# =============================================================================
# AI Assistant
# =============================================================================


def test_summarize(api_client, transport):
    transport.reply(
        {
            "summary": "User shared credentials.",
            "sensitive_findings": ["API key in prompt"],
            "risk_level": "high",
            "recommended_actions": ["Rotate the key"],
        }
    )

    summary = api_client.summarize(SummarizeRequest(session_id="sess-123", ai_api_key_id=3))

    assert transport.last.url.path == f"{PREFIX}/summarize"
    assert transport.last_json() == {"session_id": "sess-123", "ai_api_key_id": 3}
    assert summary.risk_level == "high"
    assert summary.sensitive_findings == ["API key in prompt"]


def test_summarize_without_findings(api_client, transport):
    transport.reply({"summary": "plain text answer"})

    summary = api_client.summarize()

    assert transport.last_json() == {}
    assert summary.summary == "plain text answer"
    assert summary.sensitive_findings is None


def test_chat_with_ai(api_client, transport):
    transport.reply({"summary": "No secrets were shared."})

    reply = api_client.chat_with_ai(
        AIChatRequest(
            messages=[ChatTurn(role="user", content="Any secrets?")],
            context="----\nid: 42",
            model="gpt-4o-mini",
        )
    )

    assert transport.last.url.path == f"{PREFIX}/ai-chat"
    assert transport.last_json() == {
        "messages": [{"role": "user", "content": "Any secrets?"}],
        "context": "----\nid: 42",
        "model": "gpt-4o-mini",
    }
    assert reply.summary == "No secrets were shared."


def test_list_api_keys(api_client, transport):
    transport.reply(
        [
            {"id": 1, "name": "default", "group_id": None, "status": "active"},
            {"id": 2, "name": "audit", "group_id": 4, "status": "disabled"},
        ]
    )

    keys = api_client.list_api_keys()

    assert transport.last.method == "GET"
    assert [k.name for k in keys] == ["default", "audit"]
    assert keys[0].group_id is None
    assert keys[1].group_id == 4


# =============================================================================
# Responses and Errors
# =============================================================================


def test_unwrapped_response_is_accepted(api_client, transport):
    transport.responses.append(
        httpx.Response(200, json={"logs_deleted": 1, "sessions_deleted": 0})
    )

    result = api_client.delete_logs({})

    assert result.logs_deleted == 1


def test_http_error_uses_envelope_message(api_client, transport):
    transport.reply(None, status_code=400, code=400, message="session_id is required")

    with pytest.raises(APIError) as exc_info:
        api_client.list_messages()

    assert exc_info.value.message == "session_id is required"
    assert exc_info.value.status_code == 400
    assert exc_info.value.code == 400


def test_http_error_uses_detail(api_client, transport):
    transport.responses.append(httpx.Response(503, json={"detail": "unavailable"}))

    with pytest.raises(APIError) as exc_info:
        api_client.get_stats()

    assert exc_info.value.message == "unavailable"
    assert exc_info.value.status_code == 503


def test_http_error_with_text_body(api_client, transport):
    transport.reply_raw(status_code=502, content=b"Bad Gateway")

    with pytest.raises(APIError) as exc_info:
        api_client.export_logs()

    assert exc_info.value.message == "Bad Gateway"
    assert exc_info.value.status_code == 502


def test_nonzero_envelope_code_raises(api_client, transport):
    transport.reply(None, code=1001, message="security chat AI disabled")

    with pytest.raises(APIError) as exc_info:
        api_client.chat_with_ai({"messages": [{"role": "user", "content": "hi"}]})

    assert exc_info.value.message == "security chat AI disabled"
    assert exc_info.value.code == 1001
    assert exc_info.value.status_code == 200


def test_invalid_json_raises(api_client, transport):
    transport.reply_raw(content=b"<html>oops</html>")

    with pytest.raises(APIError, match="Invalid JSON"):
        api_client.list_sessions()


def test_connection_error_raises_api_error():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = APIClient("http://gateway.test/api/v1", transport=httpx.MockTransport(refuse))

    with pytest.raises(APIError, match="Connection error") as exc_info:
        client.list_sessions()

    assert exc_info.value.status_code is None


def test_one_request_per_call(api_client, transport):
    transport.reply_raw(status_code=500, content=b"boom")

    with pytest.raises(APIError):
        api_client.list_api_keys()

    assert len(transport.requests) == 1


def test_null_messages_and_items_parse_as_empty(api_client, transport, log_payload):
    log_payload["messages"] = None
    transport.reply({"items": [log_payload], "total": 1, "page": 1, "page_size": 200})
    transport.reply({"items": None, "total": 0, "page": 1, "page_size": 50})

    logs = api_client.list_messages({"session_id": "sess-123"})
    sessions = api_client.list_sessions()

    assert logs.items[0].messages == []
    assert sessions.items == []


def test_mismatched_response_raises_api_error(api_client, transport, session_payload):
    del session_payload["last_at"]
    transport.reply({"items": [session_payload], "total": 1, "page": 1, "page_size": 50})

    with pytest.raises(APIError, match="Invalid response") as exc_info:
        api_client.list_sessions()

    assert exc_info.value.status_code == 200


def test_empty_stats_response_raises_api_error(api_client, transport):
    transport.reply(None)

    with pytest.raises(APIError, match="Invalid response"):
        api_client.get_stats()


def test_null_delete_result_defaults_to_zero(api_client, transport):
    transport.reply(None)

    result = api_client.delete_session("sess-123")

    assert result.logs_deleted == 0
    assert result.sessions_deleted == 0
