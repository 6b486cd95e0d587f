"""
Request builder helper.
"""
from typing import Any, Dict, Optional

from ..cancel import CancellationToken
from ..types import HttpMethod, MultipartForm, ProgressCallback, RequestBody, RequestOptions


class RequestBuilder:
    """Fluent builder for RequestOptions."""

    def __init__(self, method: HttpMethod = "GET"):
        self._options: RequestOptions = {
            "method": method,
            "headers": {},
            "params": {},
        }

    def method(self, method: HttpMethod) -> "RequestBuilder":
        self._options["method"] = method
        return self

    def header(self, key: str, value: str) -> "RequestBuilder":
        self._options["headers"][key] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "RequestBuilder":
        self._options["headers"].update(headers)
        return self

    def param(self, key: str, value: Any) -> "RequestBuilder":
        if value is not None:
            self._options["params"][key] = value
        return self

    def params(self, params: Dict[str, Any]) -> "RequestBuilder":
        for key, value in params.items():
            self.param(key, value)
        return self

    def json(self, data: Any) -> "RequestBuilder":
        self._options["body"] = data
        return self

    def body(self, data: RequestBody) -> "RequestBuilder":
        self._options["body"] = data
        return self

    def form(self, form: MultipartForm) -> "RequestBuilder":
        self._options["body"] = form
        return self

    def blob(self) -> "RequestBuilder":
        self._options["response_type"] = "blob"
        return self

    def on_progress(self, callback: Optional[ProgressCallback]) -> "RequestBuilder":
        if callback is not None:
            self._options["on_progress"] = callback
        return self

    def cancel_token(self, token: Optional[CancellationToken]) -> "RequestBuilder":
        if token is not None:
            self._options["cancel_token"] = token
        return self

    def timeout(self, timeout: float) -> "RequestBuilder":
        self._options["timeout"] = timeout
        return self

    def build(self) -> RequestOptions:
        """Get the constructed options."""
        return self._options
