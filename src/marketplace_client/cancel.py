"""
Cooperative cancellation for in-flight requests.
"""
import threading
from typing import Optional

from .errors import RequestCancelledError


class CancellationToken:
    """
    Flag checked by the client before the network call and before every
    stream chunk read. Safe to cancel from another thread.
    """

    def __init__(self) -> None:
        self._cancelled = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        self._reason = reason
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise RequestCancelledError(self._reason or "Request cancelled")
