from .ndjson_reader import (
    EVENT_COMPLETE,
    EVENT_ERROR,
    EVENT_STAGE,
    read_progress_stream,
)

__all__ = [
    "EVENT_COMPLETE",
    "EVENT_ERROR",
    "EVENT_STAGE",
    "read_progress_stream",
]
