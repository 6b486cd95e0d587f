"""
Shared helpers for endpoint groups.
"""
import asyncio
import mimetypes
import os
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union

from ..types import FileField

if TYPE_CHECKING:
    from ..core.base_client import BaseClient

# A path on disk, or an explicit (filename, content[, content_type]) tuple
FileInput = Union[str, "os.PathLike[str]", Tuple[str, bytes], Tuple[str, bytes, Optional[str]]]


def _read_file(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()


async def to_file_field(file: FileInput) -> FileField:
    """
    Normalize a file argument to the httpx (filename, content, content_type) tuple.

    Paths are read in a worker thread so the event loop is not blocked.
    """
    if isinstance(file, tuple):
        filename, content = file[0], file[1]
        content_type = file[2] if len(file) > 2 else None
        return filename, content, content_type or mimetypes.guess_type(filename)[0]

    path = os.fspath(file)
    content = await asyncio.to_thread(_read_file, path)
    filename = os.path.basename(path)
    return filename, content, mimetypes.guess_type(filename)[0]


def compact(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop None values from query params."""
    return {key: value for key, value in params.items() if value is not None}


class Resource:
    """Base for a group of backend endpoints sharing one client."""

    def __init__(self, client: "BaseClient"):
        self._client = client
