"""
Error types raised by marketplace-client.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Classified error kinds that are not tied to an HTTP status
ERROR_TYPE_NETWORK = "network"
ERROR_TYPE_TIMEOUT = "timeout"
ERROR_TYPE_STREAM = "stream"
ERROR_TYPE_UNEXPECTED = "unexpected"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ApiError(Exception):
    """
    Classified error raised for every failed request.

    Attributes:
        message: User facing message.
        status: HTTP status, or None for failures without a response.
        endpoint: Endpoint path the request targeted.
        timestamp: ISO-8601 UTC creation time.
        type: Failure kind for non-HTTP failures (network, timeout, stream, unexpected).
        silent: True when the caller should not surface the error (logout in progress).
        original_error: The underlying exception, when one was converted.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str,
        status: Optional[int] = None,
        type: Optional[str] = None,
        silent: bool = False,
        original_error: Optional[BaseException] = None,
        timestamp: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.endpoint = endpoint
        self.type = type
        self.silent = silent
        self.original_error = original_error
        self.timestamp = timestamp or _utc_timestamp()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "status": self.status,
            "endpoint": self.endpoint,
            "timestamp": self.timestamp,
            "type": self.type,
            "silent": self.silent,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, status={self.status!r}, "
            f"endpoint={self.endpoint!r}, type={self.type!r}, silent={self.silent!r})"
        )


class StreamIncompleteError(ApiError):
    """The progress stream ended before any final payload arrived."""

    MESSAGE = "Stream ended without a completion payload."

    def __init__(self, endpoint: str = "") -> None:
        super().__init__(self.MESSAGE, endpoint=endpoint, type=ERROR_TYPE_STREAM)


class RequestCancelledError(Exception):
    """Raised at a suspension point once a CancellationToken is cancelled."""


class ConfigError(ValueError):
    """Invalid client configuration file."""
