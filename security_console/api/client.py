"""
HTTP client for the admin security API.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Optional, Union, get_origin
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from .models import (
    AIChatRequest,
    BulkDeleteRequest,
    DeleteResult,
    ExportFile,
    LogDeleteRequest,
    LogFilter,
    MessageFilter,
    SecurityApiKey,
    SecurityChatLogList,
    SecurityChatSessionList,
    SecurityChatStats,
    SecurityChatSummary,
    SessionFilter,
    SummarizeRequest,
    WireModel,
)

logger = logging.getLogger(__name__)

SECURITY_PREFIX = "/admin/security"

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)

Payload = Union[WireModel, Mapping[str, Any], None]


class APIError(Exception):
    """API communication error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


def _wire(model_cls: type[WireModel], value: Payload) -> dict[str, Any]:
    """Coerce a request model or plain mapping into its wire dict."""
    if value is None:
        return {}
    if isinstance(value, WireModel):
        return value.to_wire()
    return model_cls.model_validate(dict(value)).to_wire()


def _filename_from_disposition(header: Optional[str], default: str) -> str:
    if not header:
        return default
    match = _FILENAME_RE.search(header)
    return match.group(1).strip() if match else default


class APIClient:
    """HTTP client for admin security API calls."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: int = 120,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _http(self, no_timeout: bool = False) -> httpx.Client:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=None if no_timeout else self.timeout,
            transport=self.transport,
        )

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise APIError for 4xx/5xx responses."""
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_detail = e.response.text or str(e)
            code = None
            try:
                body = e.response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                error_detail = body.get("message") or body.get("detail") or error_detail
                code = body.get("code")
            logger.warning(
                f"{response.request.method} {response.request.url.path} "
                f"failed with {e.response.status_code}: {error_detail}"
            )
            raise APIError(str(error_detail), e.response.status_code, code) from e

    def _handle_response(self, response: httpx.Response) -> Any:
        """Handle HTTP response, unwrap the envelope and raise appropriate errors."""
        self._raise_for_status(response)
        try:
            body = response.json()
        except ValueError as e:
            raise APIError("Invalid JSON response", response.status_code) from e

        # Envelope: {"code": 0, "message": "success", "data": ...}
        if isinstance(body, dict) and "code" in body and (
            "data" in body or "message" in body
        ):
            code = body.get("code")
            if code not in (0, None):
                message = body.get("message") or f"Request failed with code {code}"
                raise APIError(message, response.status_code, code)
            return body.get("data")
        return body

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        response_model: Any = None,
        no_timeout: bool = False,
    ) -> Any:
        logger.debug(f"{method} {path} params={params}")
        try:
            with self._http(no_timeout=no_timeout) as client:
                response = client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            raise APIError(f"Connection error: {str(e)}") from e
        data = self._handle_response(response)
        if response_model is None:
            return data
        return self._parse(response_model, data, response.status_code)

    def _parse(self, response_model: Any, data: Any, status_code: int) -> Any:
        """Validate response data into response_model, raising APIError on mismatch."""
        if data is None:
            data = [] if get_origin(response_model) is list else {}
        try:
            return TypeAdapter(response_model).validate_python(data)
        except ValidationError as e:
            logger.warning(f"Response did not match {response_model}: {e}")
            raise APIError(f"Invalid response: {e}", status_code) from e

    def _download(
        self,
        path: str,
        params: dict[str, Any],
        default_filename: str,
        no_timeout: bool = False,
    ) -> ExportFile:
        logger.debug(f"GET {path} params={params} (download)")
        try:
            with self._http(no_timeout=no_timeout) as client:
                response = client.get(path, params=params)
        except httpx.RequestError as e:
            raise APIError(f"Connection error: {str(e)}") from e
        self._raise_for_status(response)
        return ExportFile(
            filename=_filename_from_disposition(
                response.headers.get("content-disposition"), default_filename
            ),
            content_type=response.headers.get(
                "content-type", "application/octet-stream"
            ),
            content=response.content,
            truncated=response.headers.get("x-export-truncated", "").lower() == "true",
        )

    # =========================================================================
    # Sessions
    # =========================================================================

    def list_sessions(
        self, filters: Union[SessionFilter, Mapping[str, Any], None] = None
    ) -> SecurityChatSessionList:
        """
        List chat sessions.

        Args:
            filters: SessionFilter or raw query parameters

        Returns:
            SecurityChatSessionList page
        """
        return self._request(
            "GET",
            f"{SECURITY_PREFIX}/sessions",
            params=_wire(SessionFilter, filters),
            response_model=SecurityChatSessionList,
        )

    def delete_session(
        self,
        session_id: str,
        user_id: Optional[int] = None,
        api_key_id: Optional[int] = None,
    ) -> DeleteResult:
        """
        Delete every log of one session.

        Args:
            session_id: Session identifier
            user_id: Restrict deletion to this user
            api_key_id: Restrict deletion to this API key

        Returns:
            DeleteResult with removed counts
        """
        params = {}
        if user_id is not None:
            params["user_id"] = user_id
        if api_key_id is not None:
            params["api_key_id"] = api_key_id
        return self._request(
            "DELETE",
            f"{SECURITY_PREFIX}/sessions/{quote(session_id, safe='')}",
            params=params,
            response_model=DeleteResult,
        )

    def bulk_delete_sessions(
        self, payload: Union[BulkDeleteRequest, Mapping[str, Any]]
    ) -> DeleteResult:
        """
        Delete a list of sessions, or all sessions matching a filter.

        Args:
            payload: BulkDeleteRequest; set select_all to delete by filter

        Returns:
            DeleteResult with removed counts
        """
        return self._request(
            "POST",
            f"{SECURITY_PREFIX}/sessions/bulk-delete",
            json=_wire(BulkDeleteRequest, payload),
            response_model=DeleteResult,
        )

    def export_sessions(
        self, filters: Union[SessionFilter, Mapping[str, Any], None] = None
    ) -> ExportFile:
        """
        Download matching sessions as CSV.

        Args:
            filters: SessionFilter or raw query parameters

        Returns:
            ExportFile; truncated is set when the server capped the rows
        """
        return self._download(
            f"{SECURITY_PREFIX}/sessions/export",
            _wire(SessionFilter, filters),
            "security_sessions.csv",
        )

    # =========================================================================
    # Messages / Logs
    # =========================================================================

    def list_messages(
        self, filters: Union[MessageFilter, Mapping[str, Any], None] = None
    ) -> SecurityChatLogList:
        """
        List the chat logs of a session.

        Args:
            filters: MessageFilter (the server requires session_id)

        Returns:
            SecurityChatLogList page
        """
        return self._request(
            "GET",
            f"{SECURITY_PREFIX}/messages",
            params=_wire(MessageFilter, filters),
            response_model=SecurityChatLogList,
        )

    def list_logs(
        self, filters: Union[LogFilter, Mapping[str, Any], None] = None
    ) -> SecurityChatLogList:
        """List chat logs across sessions. Runs without a timeout."""
        return self._request(
            "GET",
            f"{SECURITY_PREFIX}/logs",
            params=_wire(LogFilter, filters),
            no_timeout=True,
            response_model=SecurityChatLogList,
        )

    def export_logs(
        self, filters: Union[LogFilter, Mapping[str, Any], None] = None
    ) -> ExportFile:
        """
        Download matching logs as a zipped text file. Runs without a timeout.

        Args:
            filters: LogFilter or raw query parameters

        Returns:
            ExportFile holding the zip archive
        """
        return self._download(
            f"{SECURITY_PREFIX}/logs/export",
            _wire(LogFilter, filters),
            "security_logs.txt.zip",
            no_timeout=True,
        )

    def delete_logs(
        self, payload: Union[LogDeleteRequest, Mapping[str, Any]]
    ) -> DeleteResult:
        """
        Delete logs matching a filter.

        Args:
            payload: LogDeleteRequest

        Returns:
            DeleteResult with removed log and session counts
        """
        return self._request(
            "POST",
            f"{SECURITY_PREFIX}/logs/delete",
            json=_wire(LogDeleteRequest, payload),
            response_model=DeleteResult,
        )

    def get_stats(
        self, filters: Union[LogFilter, Mapping[str, Any], None] = None
    ) -> SecurityChatStats:
        """
        Get aggregate statistics, including the platform share.

        Args:
            filters: LogFilter or raw query parameters

        Returns:
            SecurityChatStats
        """
        return self._request(
            "GET",
            f"{SECURITY_PREFIX}/stats",
            params=_wire(LogFilter, filters),
            response_model=SecurityChatStats,
        )

    # =========================================================================
    # AI Assistant
    # =========================================================================

    def summarize(
        self, payload: Union[SummarizeRequest, Mapping[str, Any], None] = None
    ) -> SecurityChatSummary:
        """
        Summarize a session or time window and report risk findings.

        Args:
            payload: SummarizeRequest

        Returns:
            SecurityChatSummary
        """
        return self._request(
            "POST",
            f"{SECURITY_PREFIX}/summarize",
            json=_wire(SummarizeRequest, payload),
            response_model=SecurityChatSummary,
        )

    def chat_with_ai(
        self, payload: Union[AIChatRequest, Mapping[str, Any]]
    ) -> SecurityChatSummary:
        """
        Continue a conversation with the security AI.

        Args:
            payload: AIChatRequest with messages and optional context

        Returns:
            SecurityChatSummary whose summary holds the reply
        """
        return self._request(
            "POST",
            f"{SECURITY_PREFIX}/ai-chat",
            json=_wire(AIChatRequest, payload),
            response_model=SecurityChatSummary,
        )

    def list_api_keys(self) -> list[SecurityApiKey]:
        """List the caller's API keys usable for AI requests."""
        return self._request(
            "GET", f"{SECURITY_PREFIX}/api-keys", response_model=list[SecurityApiKey]
        )
