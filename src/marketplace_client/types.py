"""
Core type definitions for marketplace-client.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, Protocol, Tuple, TypedDict, Union, runtime_checkable

import httpx

# HTTP Methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Only "blob" changes how the body is read; anything else means JSON/text
ResponseType = Optional[Literal["blob"]]

ProgressCallback = Callable[[Dict[str, Any]], None]

# httpx file tuple: (filename, content, content_type)
FileField = Tuple[str, Union[bytes, Any], Optional[str]]


@dataclass
class MultipartForm:
    """
    Multipart form body.

    Requests carrying a form never get an explicit Content-Type; httpx
    writes the header with the multipart boundary itself.
    """
    fields: Dict[str, Any] = field(default_factory=dict)
    files: List[Tuple[str, FileField]] = field(default_factory=list)

    def add_field(self, name: str, value: Any) -> "MultipartForm":
        self.fields[name] = value
        return self

    def add_file(
        self,
        name: str,
        filename: str,
        content: Union[bytes, Any],
        content_type: Optional[str] = None,
    ) -> "MultipartForm":
        self.files.append((name, (filename, content, content_type)))
        return self


RequestBody = Union[Dict[str, Any], List[Any], str, bytes, MultipartForm, None]


class RequestOptions(TypedDict, total=False):
    """Options for a facade request."""
    method: HttpMethod
    body: RequestBody
    headers: Dict[str, str]
    params: Dict[str, Any]  # Query parameters
    response_type: ResponseType
    on_progress: Optional[ProgressCallback]
    cancel_token: Any  # CancellationToken
    timeout: Union[float, None]


_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


@dataclass
class BlobResponse:
    """Binary payload returned together with the response headers."""
    data: bytes
    headers: httpx.Headers
    status: int

    @property
    def filename(self) -> Optional[str]:
        """Filename advertised by Content-Disposition, if any."""
        disposition = self.headers.get("content-disposition")
        if not disposition:
            return None
        match = _FILENAME_RE.search(disposition)
        return match.group(1).strip() if match else None


@dataclass
class StreamResult:
    """Outcome of reading a progress stream."""
    payload: Any
    is_error: bool = False


@runtime_checkable
class Serializer(Protocol):
    """Protocol for serialization."""
    def serialize(self, data: Any) -> str: ...
    def deserialize(self, data: str) -> Any: ...
