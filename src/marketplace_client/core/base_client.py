"""
Core HTTP client implementation based on httpx.
"""
import json
import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from ..auth.auth_handler import AuthHandler, create_auth_handler
from ..config import ClientConfig, ResolvedConfig, resolve_config
from ..effects import LoggingNavigator, LoggingNotifier, Navigator, Notifier
from ..errors import ApiError, StreamIncompleteError
from ..session import SessionState
from ..streaming.ndjson_reader import read_progress_stream
from ..types import BlobResponse, MultipartForm, RequestOptions
from .error_policy import (
    ErrorDecision,
    classify_exception,
    classify_http_failure,
    classify_stream_failure,
)

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[MarketplaceClient]"
JSON_CONTENT_TYPE = "application/json"
NDJSON_CONTENT_TYPE = "application/x-ndjson"
STREAM_PROGRESS_HEADER = "x-stream-progress"
SESSION_EXPIRED_REDIRECT = "/"


def _format_body(body: Any) -> str:
    """
    Format body for logging safeguards against binary data.
    """
    if body is None:
        return "<empty>"
    if isinstance(body, (bytes, bytearray)):
        return f"<binary data: {len(body)} bytes>"
    if isinstance(body, MultipartForm):
        return f"<multipart form: fields={sorted(body.fields)}, files={len(body.files)}>"
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    text = str(body)
    if len(text) > 5000:
        return text[:5000] + "... (truncated)"
    return text


def _has_header(headers: Dict[str, str], name: str) -> bool:
    lowered = name.lower()
    return any(key.lower() == lowered for key in headers)


class BaseClient:
    """
    Base HTTP client wrapping httpx.AsyncClient.

    Every backend call goes through ``request()``, which attaches the session
    token, reads JSON, binary or NDJSON progress responses, and turns every
    failure into an ApiError after applying its side effects (notification,
    forced re-authentication).
    """
    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[SessionState] = None,
        notifier: Optional[Notifier] = None,
        navigator: Optional[Navigator] = None,
        token: Optional[str] = None,
    ):
        config = config or ClientConfig.from_env()
        self._config_raw = config
        self._config: ResolvedConfig = resolve_config(config)
        self._client: Optional[httpx.AsyncClient] = config.httpx_client
        self.session = session or SessionState()
        self.notifier = notifier or LoggingNotifier()
        self.navigator = navigator or LoggingNavigator()
        self._auth_handler: AuthHandler = create_auth_handler(self.session, token)

        # Flag to track if we own the client (created it)
        self._own_client = self._client is None

    @property
    def base_url(self) -> str:
        return self._config.base_url

    async def connect(self) -> None:
        """Initialize the client if needed."""
        if self._client:
            return

        timeout = httpx.Timeout(
            connect=self._config.timeout.connect,
            read=self._config.timeout.read,
            write=self._config.timeout.write,
            pool=self._config.timeout.pool
        )

        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=timeout,
            headers=self._config.headers,
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the client if we own it."""
        if self._own_client and self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _build_request(self, endpoint: str, options: RequestOptions) -> httpx.Request:
        assert self._client is not None

        method = options.get("method", "GET")
        headers = dict(options.get("headers") or {})
        body = options.get("body")
        kwargs: Dict[str, Any] = {}

        if isinstance(body, MultipartForm):
            # No Content-Type: httpx sets multipart/form-data with its boundary
            files = list(body.files)
            if files:
                kwargs["data"] = body.fields or None
            else:
                files = [(name, (None, str(value))) for name, value in body.fields.items()]
            kwargs["files"] = files
        elif body is not None and body not in ("", b""):
            if not _has_header(headers, "Content-Type"):
                headers["Content-Type"] = JSON_CONTENT_TYPE
            if isinstance(body, (str, bytes)):
                kwargs["content"] = body
            else:
                kwargs["content"] = self._config.serializer.serialize(body)

        auth_headers = self._auth_handler.get_header()
        if auth_headers:
            headers.update(auth_headers)

        if options.get("on_progress") is not None:
            headers[STREAM_PROGRESS_HEADER] = "1"
            if not _has_header(headers, "Accept"):
                headers["Accept"] = NDJSON_CONTENT_TYPE

        timeout = options.get("timeout")
        if timeout is not None:
            kwargs["timeout"] = timeout

        return self._client.build_request(
            method=method,
            url=endpoint,
            headers=headers,
            params=options.get("params") or None,
            **kwargs,
        )

    def _apply(self, decision: ErrorDecision) -> None:
        """Run the side effects of a classified failure."""
        if decision.expire_session:
            self._auth_handler.invalidate()
        if decision.expire_session and self.session.try_begin_redirect():
            logger.info(f"{LOG_PREFIX} Session expired, clearing credentials and redirecting")
            self.session.clear()
            self.navigator.navigate(SESSION_EXPIRED_REDIRECT)
        if decision.notify:
            self.notifier.error(decision.error.message)

    async def _read_body(
        self, response: httpx.Response, options: RequestOptions
    ) -> Tuple[Any, bool]:
        """Read the response body; returns (data, in-band stream error)."""
        # Failed responses carry a plain error body, not NDJSON
        on_progress = options.get("on_progress")
        if on_progress is not None and response.is_success:
            result = await read_progress_stream(
                response.aiter_bytes(), on_progress, options.get("cancel_token")
            )
            return result.payload, result.is_error

        body = await response.aread()
        if options.get("response_type") == "blob" and on_progress is None:
            return body, False

        content_type = response.headers.get("content-type", "")
        if JSON_CONTENT_TYPE in content_type:
            return response.json(), False
        return {"message": response.text}, False

    async def _execute(self, endpoint: str, options: RequestOptions) -> Any:
        if not self._client:
            await self.connect()
        assert self._client is not None

        cancel_token = options.get("cancel_token")
        http_request = self._build_request(endpoint, options)

        logger.debug(
            f"{LOG_PREFIX} Request: {http_request.method} {http_request.url} "
            f"body={_format_body(options.get('body'))}"
        )

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        response = await self._client.send(http_request, stream=True)
        try:
            data, stream_error = await self._read_body(response, options)
        finally:
            await response.aclose()

        is_blob = options.get("response_type") == "blob" and options.get("on_progress") is None

        if not response.is_success:
            logger.error(
                f"{LOG_PREFIX} Request failed: {http_request.method} {endpoint} "
                f"status={response.status_code}"
            )
            decision = classify_http_failure(
                endpoint,
                response.status_code,
                data,
                logging_out=self.session.is_logging_out(),
                blob=is_blob,
            )
            self._apply(decision)
            raise decision.error

        if stream_error:
            logger.error(f"{LOG_PREFIX} Stream reported an error: {http_request.method} {endpoint}")
            decision = classify_stream_failure(
                endpoint, data, logging_out=self.session.is_logging_out()
            )
            self._apply(decision)
            raise decision.error

        if is_blob:
            return BlobResponse(data=data, headers=response.headers, status=response.status_code)

        return data

    async def request(self, endpoint: str, options: Optional[RequestOptions] = None) -> Any:
        """
        Execute a request against ``base_url + endpoint``.

        Returns the parsed payload, or a BlobResponse for
        ``response_type="blob"``. Raises ApiError for every failure.
        """
        options = options or {}
        try:
            return await self._execute(endpoint, options)
        except ApiError as e:
            if not isinstance(e, StreamIncompleteError):
                raise
            # Raised by the reader without request context
            decision = classify_exception(
                endpoint, e, logging_out=self.session.is_logging_out()
            )
            self._apply(decision)
            raise decision.error from e
        except Exception as e:
            logger.error(f"{LOG_PREFIX} Request error: {endpoint}: {e!r}")
            decision = classify_exception(
                endpoint, e, logging_out=self.session.is_logging_out()
            )
            self._apply(decision)
            raise decision.error from e
