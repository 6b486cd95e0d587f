"""
High-level MarketplaceClient implementation.
"""
import logging
from typing import Any, Dict, Optional

from .config import ClientConfig
from .core.base_client import BaseClient
from .core.request import RequestBuilder
from .effects import Navigator, Notifier
from .resources import (
    AuthResource,
    BillingResource,
    BriefsResource,
    ChatsResource,
    ConversationsResource,
    ImagesResource,
    NotificationsResource,
    SubscriptionsResource,
)
from .session import SessionState

logger = logging.getLogger(__name__)
LOG_PREFIX = "[MarketplaceClient]"


class MarketplaceClient(BaseClient):
    """
    HTTP client with convenience methods and the backend's endpoint groups.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[SessionState] = None,
        notifier: Optional[Notifier] = None,
        navigator: Optional[Navigator] = None,
        token: Optional[str] = None,
    ):
        super().__init__(config, session=session, notifier=notifier, navigator=navigator, token=token)
        self.auth = AuthResource(self)
        self.chats = ChatsResource(self)
        self.images = ImagesResource(self)
        self.billing = BillingResource(self)
        self.briefs = BriefsResource(self)
        self.conversations = ConversationsResource(self)
        self.notifications = NotificationsResource(self)
        self.subscriptions = SubscriptionsResource(self)

    @classmethod
    def create(cls, config: Optional[ClientConfig] = None, **kwargs: Any) -> "MarketplaceClient":
        """Factory method to create a client."""
        return cls(config, **kwargs)

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
                  headers: Optional[Dict[str, str]] = None) -> Any:
        """Execute GET request."""
        opts = RequestBuilder("GET").params(params or {}).headers(headers or {})
        return await self.request(endpoint, opts.build())

    async def post(self, endpoint: str, body: Any = None,
                   headers: Optional[Dict[str, str]] = None) -> Any:
        """Execute POST request."""
        opts = RequestBuilder("POST").body(body).headers(headers or {})
        return await self.request(endpoint, opts.build())

    async def put(self, endpoint: str, body: Any = None,
                  headers: Optional[Dict[str, str]] = None) -> Any:
        """Execute PUT request."""
        opts = RequestBuilder("PUT").body(body).headers(headers or {})
        return await self.request(endpoint, opts.build())

    async def patch(self, endpoint: str, body: Any = None,
                    headers: Optional[Dict[str, str]] = None) -> Any:
        """Execute PATCH request."""
        opts = RequestBuilder("PATCH").body(body).headers(headers or {})
        return await self.request(endpoint, opts.build())

    async def delete(self, endpoint: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """Execute DELETE request."""
        opts = RequestBuilder("DELETE").headers(headers or {})
        return await self.request(endpoint, opts.build())

    async def sign_in(self, email: str, password: str) -> Any:
        """
        Log in and persist the returned user and token in the session.

        The backend answers ``{"status": "success", "data": {"user", "token"}}``;
        any other shape is returned untouched without storing anything.
        """
        response = await self.auth.login(email, password)
        data = response.get("data") if isinstance(response, dict) else None
        if isinstance(data, dict) and data.get("token"):
            self.session.sign_in(data.get("user") or {}, data["token"])
            logger.info(f"{LOG_PREFIX} Signed in as {email}")
        return response

    def sign_out(self) -> None:
        """Forget the session and return to the landing page."""
        with self.session.logging_out():
            self.navigator.navigate("/")
