"""
Security chat audit console and admin API client.
"""

from security_console.api import APIClient, APIError

__version__ = "0.1.0"

__all__ = ["APIClient", "APIError", "__version__"]
