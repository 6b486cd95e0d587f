"""
Auth handler utilities for marketplace_client.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..session import SessionState

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH]"

AUTH_HEADER_NAME = "auth-token"


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 10 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 10:
        return "*" * len(val)
    return val[:10] + "*" * (len(val) - 10)


class AuthHandler(ABC):
    """Auth handler interface."""

    @abstractmethod
    def get_header(self) -> Optional[Dict[str, str]]:
        """Get auth header for the next request."""
        ...

    def invalidate(self) -> None:
        """Forget credentials after the session expired."""


class SessionTokenAuthHandler(AuthHandler):
    """
    Sends the stored session token under ``auth-token``.

    The token is read from storage for every request, so a token cleared
    after an expired session is never sent again.
    """

    def __init__(self, session: SessionState, header_name: str = AUTH_HEADER_NAME):
        self._session = session
        self._header_name = header_name

    def get_header(self) -> Optional[Dict[str, str]]:
        token = self._session.token
        if not token:
            return None
        logger.debug(
            f"{LOG_PREFIX} SessionTokenAuthHandler.get_header: {self._header_name}={_mask_value(token)}"
        )
        return {self._header_name: token}


class StaticTokenAuthHandler(AuthHandler):
    """
    Fixed token, for service-to-service use.

    Once the session it belongs to expires the token is dropped and no
    header is sent again.
    """

    def __init__(self, token: Optional[str], header_name: str = AUTH_HEADER_NAME):
        self._token = token
        self._header_name = header_name

    def get_header(self) -> Optional[Dict[str, str]]:
        if not self._token:
            return None
        logger.debug(
            f"{LOG_PREFIX} StaticTokenAuthHandler.get_header: {self._header_name}={_mask_value(self._token)}"
        )
        return {self._header_name: self._token}

    def invalidate(self) -> None:
        if self._token:
            logger.info(f"{LOG_PREFIX} Dropping expired static token {_mask_value(self._token)}")
        self._token = None


def create_auth_handler(session: SessionState, token: Optional[str] = None) -> AuthHandler:
    """Create auth handler: an explicit token wins over the session store."""
    if token:
        logger.debug(f"{LOG_PREFIX} create_auth_handler: static token={_mask_value(token)}")
        return StaticTokenAuthHandler(token)
    return SessionTokenAuthHandler(session)
