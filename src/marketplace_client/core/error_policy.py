"""
Error classification for failed requests.

Maps a failed response (or a raised exception) to the ApiError the caller
receives, together with the side effects the client has to apply. Kept free
of I/O so the whole table can be tested without a transport.
"""
import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..errors import (
    ERROR_TYPE_NETWORK,
    ERROR_TYPE_STREAM,
    ERROR_TYPE_TIMEOUT,
    ERROR_TYPE_UNEXPECTED,
    ApiError,
    RequestCancelledError,
    StreamIncompleteError,
)

AUTH_ENDPOINT_MARKERS = ("/login", "/register", "/forgot-password", "/reset-password")

MSG_NOT_FOUND = "The requested resource was not found"
MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_SESSION_ENDED = "Session ended"
MSG_LOGIN_REQUIRED = "Please log in to continue"
MSG_FORBIDDEN = "You don't have permission to perform this action"
MSG_SERVER_ERROR = "Server error. Please try again later"
MSG_UNAVAILABLE = "Service temporarily unavailable. Please try again later"
MSG_RATE_LIMITED = "Too many requests. Please wait a moment and try again"
MSG_STREAM_FAILED = "The request failed while streaming"
MSG_NETWORK = "Network error. Please check your connection."
MSG_TIMEOUT = "Request timed out. Please try again."
MSG_UNEXPECTED = "An unexpected error occurred. Please try again."

_FIXED_STATUS_MESSAGES = {
    403: MSG_FORBIDDEN,
    500: MSG_SERVER_ERROR,
    503: MSG_UNAVAILABLE,
    429: MSG_RATE_LIMITED,
}

# Messages containing these never raise a notification
_QUIET_MARKERS = ("Chat not found", "not found")


@dataclass
class ErrorDecision:
    """Classified error plus the side effects that go with it."""
    error: ApiError
    notify: bool = False
    expire_session: bool = False


def is_auth_endpoint(endpoint: str) -> bool:
    return any(marker in endpoint for marker in AUTH_ENDPOINT_MARKERS)


def _server_message(data: Any) -> Optional[str]:
    if isinstance(data, dict):
        message = data.get("message")
        if message:
            return str(message)
    return None


def _blob_message(data: Any) -> Optional[str]:
    if not isinstance(data, (bytes, bytearray)) or not data:
        return None
    text = bytes(data).decode("utf-8", errors="replace")
    if not text:
        return None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return text
    return _server_message(parsed)


def classify_http_failure(
    endpoint: str,
    status: int,
    data: Any,
    *,
    logging_out: bool,
    blob: bool = False,
) -> ErrorDecision:
    """Classify a response whose status is not 2xx."""
    server_message = _blob_message(data) if blob else _server_message(data)
    message = server_message or f"HTTP error! status: {status}"
    expire_session = False

    if status == 404:
        message = MSG_NOT_FOUND
    elif status == 401:
        if is_auth_endpoint(endpoint):
            message = server_message or MSG_INVALID_CREDENTIALS
        elif logging_out:
            error = ApiError(MSG_SESSION_ENDED, endpoint=endpoint, status=401, silent=True)
            return ErrorDecision(error=error)
        else:
            message = MSG_LOGIN_REQUIRED
            expire_session = True
    elif status in _FIXED_STATUS_MESSAGES:
        message = _FIXED_STATUS_MESSAGES[status]

    error = ApiError(message, endpoint=endpoint, status=status)

    if logging_out:
        notify = False
    elif status == 401:
        notify = not expire_session
    else:
        notify = not any(marker in message for marker in _QUIET_MARKERS)

    return ErrorDecision(error=error, notify=notify, expire_session=expire_session)


def classify_stream_failure(endpoint: str, payload: Any, *, logging_out: bool) -> ErrorDecision:
    """Classify an ``error`` event received over a successful response."""
    message = _server_message(payload) or MSG_STREAM_FAILED
    error = ApiError(message, endpoint=endpoint, type=ERROR_TYPE_STREAM)
    return ErrorDecision(error=error, notify=not logging_out)


def classify_exception(endpoint: str, exc: BaseException, *, logging_out: bool) -> ErrorDecision:
    """Classify an exception raised while sending or reading a request."""
    if isinstance(exc, StreamIncompleteError):
        error: ApiError = StreamIncompleteError(endpoint)
    elif isinstance(exc, (httpx.TimeoutException, RequestCancelledError)):
        error = ApiError(MSG_TIMEOUT, endpoint=endpoint, type=ERROR_TYPE_TIMEOUT, original_error=exc)
    elif isinstance(exc, httpx.TransportError):
        error = ApiError(MSG_NETWORK, endpoint=endpoint, type=ERROR_TYPE_NETWORK, original_error=exc)
    else:
        error = ApiError(MSG_UNEXPECTED, endpoint=endpoint, type=ERROR_TYPE_UNEXPECTED, original_error=exc)
    return ErrorDecision(error=error, notify=not logging_out)
