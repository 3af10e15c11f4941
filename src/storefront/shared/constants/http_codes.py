"""HTTP Status Code Constants.

This module contains HTTP status code constants for clear and
type-safe handling of API responses and network operations.
"""


class HTTPStatusCodes:
    """HTTP status code classification helpers."""

    @staticmethod
    def is_success(code: int) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= code < 300

    @staticmethod
    def is_server_error(code: int) -> bool:
        """Check if status code indicates server error (5xx)."""
        return 500 <= code < 600


class HTTPHeaders:
    """Common HTTP header names."""

    ACCEPT = "Accept"
    USER_AGENT = "User-Agent"


class ContentTypes:
    """Common content type values."""

    JSON = "application/json"
