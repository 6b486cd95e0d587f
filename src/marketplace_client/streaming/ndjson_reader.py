"""
NDJSON progress stream reader.

Progress-enabled endpoints answer with newline-delimited JSON events:

    {"type": "stage", "data": {...}}      progress, forwarded to on_progress
    {"type": "complete", "data": {...}}   final payload
    {"type": "error", "data": {...}}      in-band failure, ends the stream
    {...}                                 untyped object, final payload

Lines are framed on ``\\n`` only. A newline inside a JSON string value from a
misbehaving upstream splits that event; such fragments fail to parse and are
logged and dropped.
"""
import codecs
import json
import logging
from typing import Any, AsyncIterable, Optional

from ..cancel import CancellationToken
from ..errors import StreamIncompleteError
from ..types import ProgressCallback, StreamResult

logger = logging.getLogger(__name__)
LOG_PREFIX = "[NDJSONReader]"

EVENT_STAGE = "stage"
EVENT_COMPLETE = "complete"
EVENT_ERROR = "error"

_MAX_LOGGED_LINE = 200


class _StreamState:
    def __init__(self, on_progress: Optional[ProgressCallback]):
        self.on_progress = on_progress
        self.payload: Any = None
        self.is_error = False

    @property
    def has_payload(self) -> bool:
        # JSON null counts as no payload
        return self.payload is not None

    def set_payload(self, payload: Any) -> None:
        self.payload = payload

    def process_line(self, line: str) -> None:
        if not line:
            return
        try:
            event = json.loads(line)
        except json.JSONDecodeError:
            logger.warning(
                f"{LOG_PREFIX} Discarding unparsable stream line: {line[:_MAX_LOGGED_LINE]!r}"
            )
            return

        event_type = event.get("type") if isinstance(event, dict) else None
        if not event_type:
            self.set_payload(event)
            return

        data = event.get("data")
        if event_type == EVENT_STAGE:
            if self.on_progress is not None:
                self.on_progress(data or {})
        elif event_type == EVENT_COMPLETE:
            self.set_payload(data)
        elif event_type == EVENT_ERROR:
            self.set_payload(data or {})
            self.is_error = True
        else:
            logger.debug(f"{LOG_PREFIX} Ignoring unknown event type {event_type!r}")


async def read_progress_stream(
    chunks: AsyncIterable[bytes],
    on_progress: Optional[ProgressCallback] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> StreamResult:
    """
    Consume an NDJSON progress stream.

    Returns the final payload and whether it came from an ``error`` event.
    Raises StreamIncompleteError if the body ends without any payload.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    state = _StreamState(on_progress)
    buffer = ""
    iterator = chunks.__aiter__()

    while not state.is_error:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        try:
            chunk = await iterator.__anext__()
        except StopAsyncIteration:
            break

        buffer += decoder.decode(chunk)
        newline_index = buffer.find("\n")
        while newline_index >= 0:
            raw_line = buffer[:newline_index].strip()
            buffer = buffer[newline_index + 1:]
            state.process_line(raw_line)
            if state.is_error:
                break
            newline_index = buffer.find("\n")

    buffer += decoder.decode(b"", final=True)
    remainder = buffer.strip()
    if not state.is_error and remainder and not state.has_payload:
        state.process_line(remainder)

    if not state.has_payload:
        raise StreamIncompleteError()

    return StreamResult(payload=state.payload, is_error=state.is_error)
