"""Event sinks for translated records.

This module defines the sink contract the importer forwards validated
records to, plus a buffered JSON-lines implementation.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, TextIO

from core.errors import SkySinkError
from core.types import OutputRecord


class EventSink(Protocol):
    """Destination for validated event records, in translation order."""

    def add_event(self, record: OutputRecord) -> None:
        """Accept one validated record."""

    def flush(self) -> None:
        """Deliver any buffered records."""

    def close(self) -> None:
        """Flush and release resources."""


class JsonlEventSink:
    """Buffered sink writing one JSON line per event.

    Each line wraps the event with its destination table so the output
    can be replayed into the event store.
    """

    def __init__(self, stream: TextIO, table_name: str | None, batch_size: int) -> None:
        """Initialize sink.

        Args:
            stream: Writable text stream.
            table_name: Destination table recorded on every line.
            batch_size: Events buffered before an automatic flush.
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive.")
        self._stream = stream
        self._table_name = table_name
        self._batch_size = batch_size
        self._pending: list[OutputRecord] = []
        self._written = 0

    @property
    def events_written(self) -> int:
        """Return events delivered to the stream so far."""
        return self._written

    def add_event(self, record: OutputRecord) -> None:
        self._pending.append(record)
        if len(self._pending) >= self._batch_size:
            self.flush()

    def flush(self) -> None:
        if not self._pending:
            return
        lines = [_encode_event(self._table_name, record) for record in self._pending]
        try:
            self._stream.write("".join(lines))
            self._stream.flush()
        except OSError as error:
            raise SkySinkError(
                f"Failed to write {len(lines)} events: {error}. Check the output destination."
            ) from error
        self._written += len(lines)
        self._pending.clear()

    def close(self) -> None:
        self.flush()


def _encode_event(table_name: str | None, record: OutputRecord) -> str:
    payload: dict[str, Any] = {"table": table_name, "event": record}
    try:
        return json.dumps(payload, default=str) + "\n"
    except (TypeError, ValueError) as error:
        raise SkySinkError(
            f"Failed to encode event as JSON: {error}. "
            "Make transform expressions emit JSON-compatible values."
        ) from error
