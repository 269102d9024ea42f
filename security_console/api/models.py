"""
Pydantic models for the admin security API.

Response Models:
- SecurityChatSession / SecurityChatSessionList: Session overview
- SecurityChatLog / SecurityChatLogList: Recorded exchanges
- SecurityChatSummary: AI summary and chat replies
- SecurityChatStats / PlatformShare: Aggregate statistics
- SecurityApiKey: Key descriptors usable for AI calls
- DeleteResult: Counts returned by every delete operation

Request Models:
- SessionFilter, MessageFilter, LogFilter: Query parameters
- SummarizeRequest, BulkDeleteRequest, LogDeleteRequest, AIChatRequest: JSON bodies
"""

import io
import zipfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Chat Log Models
# =============================================================================


class SecurityChatMessage(BaseModel):
    """A single role-tagged message inside a chat log."""

    role: str
    content: str = ""
    source: str = Field("request", description="'request', 'response' or other")
    index: int = 0


class SecurityChatSession(BaseModel):
    """A session grouping one or more chat logs."""

    session_id: str
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    api_key_id: Optional[int] = None
    account_id: Optional[int] = None
    group_id: Optional[int] = None
    platform: Optional[str] = None
    model: Optional[str] = None
    message_preview: Optional[str] = None
    last_at: datetime
    request_count: int = 0


class SecurityChatLog(BaseModel):
    """A recorded request/response exchange."""

    id: int
    session_id: str
    request_id: Optional[str] = None
    client_request_id: Optional[str] = None
    user_id: Optional[int] = None
    api_key_id: Optional[int] = None
    account_id: Optional[int] = None
    group_id: Optional[int] = None
    platform: Optional[str] = None
    model: Optional[str] = None
    request_path: Optional[str] = None
    stream: bool = False
    status_code: Optional[int] = None
    messages: list[SecurityChatMessage] = Field(default_factory=list)
    created_at: datetime

    @field_validator("messages", mode="before")
    @classmethod
    def messages_not_null(cls, value: Any) -> Any:
        return [] if value is None else value


class SecurityChatSessionList(BaseModel):
    """Paged list of sessions."""

    items: list[SecurityChatSession] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 0

    @field_validator("items", mode="before")
    @classmethod
    def items_not_null(cls, value: Any) -> Any:
        return [] if value is None else value


class SecurityChatLogList(BaseModel):
    """Paged list of chat logs."""

    items: list[SecurityChatLog] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 0

    @field_validator("items", mode="before")
    @classmethod
    def items_not_null(cls, value: Any) -> Any:
        return [] if value is None else value


# =============================================================================
# AI / Key / Delete Models
# =============================================================================


class SecurityChatSummary(BaseModel):
    """Summary (or chat reply) produced by the security AI assistant."""

    summary: str = ""
    sensitive_findings: Optional[list[str]] = None
    risk_level: Optional[str] = None
    recommended_actions: Optional[list[str]] = None


class SecurityApiKey(BaseModel):
    """API key descriptor."""

    id: int
    name: str
    group_id: Optional[int] = None
    status: str


class DeleteResult(BaseModel):
    """Counts of removed rows."""

    logs_deleted: int = 0
    sessions_deleted: int = 0


# =============================================================================
# Statistics Models
# =============================================================================


class PlatformShare(BaseModel):
    """Request count and ratio for one platform bucket."""

    count: int = 0
    ratio: float = 0.0


class SecurityChatStats(BaseModel):
    """Aggregate statistics over a time window."""

    start_time: datetime
    end_time: datetime
    request_count: int = 0
    session_count: int = 0
    avg_requests_per_day: float = 0.0
    avg_sessions_per_day: float = 0.0
    estimated_bytes: int = 0
    table_bytes: int = 0
    platform_share: dict[str, PlatformShare] = Field(default_factory=dict)
    platform_share_basis: str = "request"


# =============================================================================
# Export
# =============================================================================


@dataclass
class ExportFile:
    """Binary download returned by the export endpoints."""

    filename: str
    content_type: str
    content: bytes
    truncated: bool = False

    @property
    def is_zip(self) -> bool:
        return "zip" in self.content_type or self.content[:4] == b"PK\x03\x04"

    def text(self, encoding: str = "utf-8") -> str:
        """
        Decode the export as text.

        Zip archives hold a single text member; its content is returned.
        """
        if not self.is_zip:
            return self.content.decode(encoding)
        with zipfile.ZipFile(io.BytesIO(self.content)) as archive:
            names = archive.namelist()
            if not names:
                return ""
            return archive.read(names[0]).decode(encoding)

    def save(self, directory: str | Path) -> Path:
        """Write the export into directory and return the file path."""
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.content)
        return path


# =============================================================================
# Request Models
# =============================================================================


class WireModel(BaseModel):
    """Base for request models; unknown keys are passed through."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to wire form, dropping unset values."""
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)


class SessionFilter(WireModel):
    """Query parameters for listing and exporting sessions."""

    page: Optional[int] = None
    page_size: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    time_range: Optional[str] = None
    query: Optional[str] = Field(None, alias="q")
    session_id: Optional[str] = None
    platform: Optional[str] = None
    model: Optional[str] = None
    user_id: Optional[int] = None
    api_key_id: Optional[int] = None


class MessageFilter(WireModel):
    """Query parameters for listing the logs of one session."""

    session_id: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    user_id: Optional[int] = None
    api_key_id: Optional[int] = None


class LogDeleteRequest(WireModel):
    """Filter body for deleting logs."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    session_id: Optional[str] = None
    user_id: Optional[int] = None
    api_key_id: Optional[int] = None
    account_id: Optional[int] = None
    group_id: Optional[int] = None
    platform: Optional[str] = None
    model: Optional[str] = None
    request_path: Optional[str] = None


class LogFilter(LogDeleteRequest):
    """Query parameters for stats, log listing and log export."""

    page: Optional[int] = None
    page_size: Optional[int] = None
    time_range: Optional[str] = None


class SummarizeRequest(WireModel):
    """Body for summarizing a session or a time window."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    user_id: Optional[int] = None
    api_key_id: Optional[int] = None
    session_id: Optional[str] = None
    ai_api_key_id: Optional[int] = None


class BulkDeleteRequest(WireModel):
    """Body for deleting several sessions, or every session matching a filter."""

    session_ids: Optional[list[str]] = None
    user_id: Optional[int] = None
    api_key_id: Optional[int] = None
    account_id: Optional[int] = None
    group_id: Optional[int] = None
    select_all: bool = False
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    query: Optional[str] = Field(None, alias="q")
    platform: Optional[str] = None
    model: Optional[str] = None


class ChatTurn(WireModel):
    """One message of an AI chat conversation."""

    role: str = "user"
    content: str


class AIChatRequest(WireModel):
    """Body for a follow-up conversation with the security AI."""

    messages: list[ChatTurn] = Field(default_factory=list)
    context: Optional[str] = None
    model: Optional[str] = None
    ai_api_key_id: Optional[int] = None
