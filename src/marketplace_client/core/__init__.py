from .base_client import BaseClient
from .request import RequestBuilder

__all__ = ["BaseClient", "RequestBuilder"]
