"""Exception types raised by the admin client.

Every failure an operation can hit falls into one of four buckets:

- TransportError: the request never produced a response (DNS, refused, timeout)
- ApiResponseError: the backend answered with a non-2xx status; carries the
  server's ``message`` when the body was JSON and had one
- ValidationError: the draft was rejected locally before any request
- FileTooLargeError: a staged upload exceeded the size limit

Controllers catch ``AdminClientError`` and turn it into one line of text with
``user_message``.
"""

from typing import Any, Dict, List, Optional

from catalog_admin.config import GENERIC_ERROR_MESSAGE

__all__ = [
    "AdminClientError",
    "TransportError",
    "ApiResponseError",
    "ValidationError",
    "FileTooLargeError",
    "user_message",
    "extract_server_message",
    "describe",
]


class AdminClientError(Exception):
    """Base class for all admin client errors."""


class TransportError(AdminClientError):
    """Raised when the backend could not be reached."""


class ApiResponseError(AdminClientError):
    """Raised when the backend returns a non-2xx status."""

    def __init__(self, status_code: int, server_message: Optional[str] = None, url: str = ""):
        self.status_code = status_code
        self.server_message = server_message
        self.url = url
        detail = server_message or "no message"
        super().__init__(f"HTTP {status_code} from {url or 'backend'}: {detail}")


class ValidationError(AdminClientError):
    """Raised when a draft fails local validation."""

    def __init__(self, fields: List[str], message: Optional[str] = None):
        self.fields = list(fields)
        if message is None:
            message = "Please fill in the required fields: " + ", ".join(self.fields)
        super().__init__(message)


class FileTooLargeError(AdminClientError):
    """Raised when a selected file exceeds the upload limit."""

    def __init__(self, name: str, size: int, limit: int):
        self.name = name
        self.size = size
        self.limit = limit
        super().__init__(
            f"{name} is too large ({size / (1024 * 1024):.1f}MB). "
            f"Please use a file smaller than {limit // (1024 * 1024)}MB."
        )


def extract_server_message(body: Any) -> Optional[str]:
    """Pull a ``message`` string out of a decoded JSON error body."""
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def user_message(exc: BaseException, fallback: Optional[str] = None) -> str:
    """Convert any client error into a single user-visible string.

    Preference order: server-provided message, the caller's fallback,
    then the generic message. Local validation errors always show their own
    text because it names the missing fields.
    """
    if isinstance(exc, ApiResponseError):
        if exc.server_message:
            return exc.server_message
    elif isinstance(exc, (ValidationError, FileTooLargeError)):
        return str(exc)
    return fallback or GENERIC_ERROR_MESSAGE


def describe(exc: BaseException) -> Dict[str, Any]:
    """Structured description of an error for event logging."""
    info: Dict[str, Any] = {"error_type": type(exc).__name__, "error": str(exc)}
    if isinstance(exc, ApiResponseError):
        info["status_code"] = exc.status_code
    return info
