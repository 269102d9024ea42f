"""
Configuration settings for the security admin console.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _get_env_int(key: str, default: int) -> int:
    """Get integer from environment variable or return default."""
    value = os.getenv(key)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            pass
    return default


@dataclass
class Config:
    """Console configuration settings."""

    api_base_url: str = field(
        default_factory=lambda: os.getenv(
            "SECURITY_API_BASE_URL", "http://localhost:8080/api/v1"
        )
    )
    api_token: str = field(default_factory=lambda: os.getenv("SECURITY_API_TOKEN", ""))
    request_timeout: int = field(
        default_factory=lambda: _get_env_int("REQUEST_TIMEOUT", 120)
    )
    sessions_page_size: int = field(
        default_factory=lambda: _get_env_int("SESSIONS_PAGE_SIZE", 50)
    )
    messages_page_size: int = field(
        default_factory=lambda: _get_env_int("MESSAGES_PAGE_SIZE", 200)
    )
    default_time_range: str = field(
        default_factory=lambda: os.getenv("DEFAULT_TIME_RANGE", "24h")
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    page_title: str = "Security Chat Audit"
    page_icon: str = "shield"
    layout: str = "wide"


config = Config()
