"""
Client-side session state.

The session token, the cached user profile and the logout flag live in a
string key/value ``SessionStorage``. ``SessionState`` wraps a storage with the
flags the request facade consults, and is injected per client so separate
clients (and tests) never share redirect state.
"""
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger(__name__)
LOG_PREFIX = "[Session]"

TOKEN_KEY = "token"
USER_KEY = "user"
LOGGING_OUT_KEY = "isLoggingOut"


class SessionStorage(ABC):
    """Synchronous string key/value storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage(SessionStorage):
    """Process-local storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)


class JsonFileStorage(SessionStorage):
    """Storage persisted as a flat JSON object on disk."""

    def __init__(self, path: str):
        self._path = path
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self._path):
            return {}
        with open(self._path, "r", encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError:
                logger.warning(f"{LOG_PREFIX} Ignoring unreadable session file {self._path}")
                return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self._path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp_path, self._path)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = str(value)
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


class SessionState:
    """
    Session token, cached user and the redirect/logout flags.

    The redirect flag guards the forced re-authentication so it happens at
    most once, even when several requests fail at the same time.
    """

    def __init__(self, storage: Optional[SessionStorage] = None):
        self.storage = storage or MemoryStorage()
        self._redirecting = False
        self._redirect_lock = threading.Lock()

    @property
    def token(self) -> Optional[str]:
        return self.storage.get_item(TOKEN_KEY) or None

    def current_user(self) -> Optional[Dict[str, Any]]:
        raw = self.storage.get_item(USER_KEY)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"{LOG_PREFIX} Stored user is not valid JSON, ignoring it")
            return None

    def sign_in(self, user: Dict[str, Any], token: str) -> None:
        """Persist a fresh session and re-arm the expiry redirect."""
        self.storage.set_item(USER_KEY, json.dumps(user))
        self.storage.set_item(TOKEN_KEY, token)
        with self._redirect_lock:
            self._redirecting = False

    def update_user(self, user: Dict[str, Any]) -> None:
        self.storage.set_item(USER_KEY, json.dumps(user))

    def clear(self) -> None:
        """Forget the token and the cached user."""
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)

    def is_logging_out(self) -> bool:
        return self.storage.get_item(LOGGING_OUT_KEY) == "true"

    @contextmanager
    def logging_out(self) -> Iterator[None]:
        """
        Sign out. Requests failing inside the block raise silently flagged
        errors and trigger neither toasts nor redirects.
        """
        self.storage.set_item(LOGGING_OUT_KEY, "true")
        self.clear()
        try:
            yield
        finally:
            self.storage.remove_item(LOGGING_OUT_KEY)

    def is_redirecting(self) -> bool:
        with self._redirect_lock:
            return self._redirecting

    def set_redirecting(self, value: bool = True) -> None:
        with self._redirect_lock:
            self._redirecting = value

    def try_begin_redirect(self) -> bool:
        """Atomically claim the redirect; False if one already happened."""
        with self._redirect_lock:
            if self._redirecting:
                return False
            self._redirecting = True
            return True
