"""
API client and models for the admin security backend.
"""

from .client import APIClient, APIError
from .models import (
    AIChatRequest,
    BulkDeleteRequest,
    ChatTurn,
    DeleteResult,
    ExportFile,
    LogDeleteRequest,
    LogFilter,
    MessageFilter,
    PlatformShare,
    SecurityApiKey,
    SecurityChatLog,
    SecurityChatLogList,
    SecurityChatMessage,
    SecurityChatSession,
    SecurityChatSessionList,
    SecurityChatStats,
    SecurityChatSummary,
    SessionFilter,
    SummarizeRequest,
)

__all__ = [
    "AIChatRequest",
    "APIClient",
    "APIError",
    "BulkDeleteRequest",
    "ChatTurn",
    "DeleteResult",
    "ExportFile",
    "LogDeleteRequest",
    "LogFilter",
    "MessageFilter",
    "PlatformShare",
    "SecurityApiKey",
    "SecurityChatLog",
    "SecurityChatLogList",
    "SecurityChatMessage",
    "SecurityChatSession",
    "SecurityChatSessionList",
    "SecurityChatStats",
    "SecurityChatSummary",
    "SessionFilter",
    "SummarizeRequest",
]
