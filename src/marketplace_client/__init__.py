"""
Marketplace Client - async HTTP client for the creative-marketplace backend
"""

__version__ = "0.1.0"

from .config import ClientConfig, TimeoutConfig, DefaultSerializer, load_config_file
from .types import BlobResponse, MultipartForm, RequestOptions, StreamResult
from .errors import ApiError, ConfigError, RequestCancelledError, StreamIncompleteError
from .cancel import CancellationToken
from .session import JsonFileStorage, MemoryStorage, SessionState, SessionStorage
from .effects import (
    CallbackNavigator,
    CallbackNotifier,
    LoggingNavigator,
    LoggingNotifier,
    Navigator,
    Notifier,
)
from .auth.auth_handler import AuthHandler, create_auth_handler
from .core.base_client import BaseClient
from .core.request import RequestBuilder
from .streaming.ndjson_reader import read_progress_stream
from .client import MarketplaceClient

__all__ = [
    "ClientConfig", "TimeoutConfig", "DefaultSerializer", "load_config_file",
    "BlobResponse", "MultipartForm", "RequestOptions", "StreamResult",
    "ApiError", "ConfigError", "RequestCancelledError", "StreamIncompleteError",
    "CancellationToken",
    "JsonFileStorage", "MemoryStorage", "SessionState", "SessionStorage",
    "CallbackNavigator", "CallbackNotifier", "LoggingNavigator", "LoggingNotifier",
    "Navigator", "Notifier",
    "AuthHandler", "create_auth_handler",
    "BaseClient",
    "RequestBuilder",
    "read_progress_stream",
    "MarketplaceClient",
]
