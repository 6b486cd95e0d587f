from .auth_handler import (
    AUTH_HEADER_NAME,
    AuthHandler,
    SessionTokenAuthHandler,
    StaticTokenAuthHandler,
    create_auth_handler,
)

__all__ = [
    "AUTH_HEADER_NAME",
    "AuthHandler",
    "SessionTokenAuthHandler",
    "StaticTokenAuthHandler",
    "create_auth_handler",
]
