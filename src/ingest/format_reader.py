"""Format readers for importer input files.

This module turns delimited text and JSON streams into lazy sequences
of raw records. Readers re-open their file on every call, so each
invocation restarts from the first record.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Iterator, Sequence, TextIO

from core.constants import (
    CSV_FIELD_SIZE_LIMIT,
    DEFAULT_JSON_CHUNK_SIZE,
    DEFAULT_MAX_JSON_RECORD_SIZE,
    DELIMITER_BY_FILE_TYPE,
    FILE_TYPE_JSON,
)
from core.errors import SkyIngestError
from core.types import SourceRow
from ingest.file_types import resolve_file_type

# Longest partial token (literal, number tail, unicode escape) a chunk can cut.
_JSON_TAIL_WINDOW = 16


def read_records(
    file_path: str | Path,
    file_type: str | None = None,
    headers: Sequence[str] | None = None,
) -> Iterator[SourceRow]:
    """Open an input file and iterate its raw records.

    Args:
        file_path: Input file path.
        file_type: Optional type override; otherwise inferred by extension.
        headers: Explicit column names for delimited files.

    Returns:
        Lazy iterator of source rows.

    Raises:
        UnsupportedFileTypeError: If the file type cannot be resolved.
    """
    resolved_type = resolve_file_type(file_path, file_type)
    path = Path(file_path).expanduser()
    if resolved_type == FILE_TYPE_JSON:
        return _iter_json_file(path)
    return _iter_delimited_file(path, DELIMITER_BY_FILE_TYPE[resolved_type], headers)


def parse_delimited_stream(
    stream: TextIO,
    delimiter: str,
    headers: Sequence[str] | None = None,
    source: str = "<stream>",
) -> Iterator[SourceRow]:
    """Iterate records from delimited text.

    Without explicit headers the first non-blank row names the columns.
    With explicit headers every row is data. Empty cells and cells missing
    from short rows read as ``None``; extra cells are dropped.

    Args:
        stream: Text stream opened with ``newline=""``.
        delimiter: Column separator.
        headers: Optional explicit column names.
        source: Name used in error messages.

    Yields:
        Source rows keyed by column name.

    Raises:
        SkyIngestError: If the text is undecodable or not valid delimited text.
    """
    csv.field_size_limit(CSV_FIELD_SIZE_LIMIT)
    reader = csv.reader(stream, delimiter=delimiter)
    column_names = list(headers) if headers is not None else None
    try:
        for row in reader:
            if not row:
                continue
            if column_names is None:
                column_names = row
                continue
            values = {name: _cell_value(row, index) for index, name in enumerate(column_names)}
            yield SourceRow(line_number=reader.line_num, values=values)
    except UnicodeDecodeError as error:
        raise SkyIngestError(
            f"Failed to decode input near {source}:{reader.line_num + 1}: {error.reason}. "
            "Save the file as UTF-8 and retry import."
        ) from error
    except csv.Error as error:
        raise SkyIngestError(
            f"Failed to parse delimited record at {source}:{reader.line_num}: {error}. "
            "Fix the row and retry import."
        ) from error


def parse_json_stream(
    stream: TextIO,
    source: str = "<stream>",
    chunk_size: int = DEFAULT_JSON_CHUNK_SIZE,
    max_record_size: int = DEFAULT_MAX_JSON_RECORD_SIZE,
) -> Iterator[SourceRow]:
    """Iterate top-level JSON objects from a stream.

    Values may be concatenated or separated by whitespace. The stream is
    read in chunks, so only the value being decoded is held in memory.
    Malformed input fails as soon as the bad token is buffered.

    Args:
        stream: Text stream.
        source: Name used in error messages.
        chunk_size: Characters read per chunk.
        max_record_size: Largest single value, in characters, accepted.

    Yields:
        One source row per top-level JSON value.

    Raises:
        SkyIngestError: If a value is malformed, truncated, oversized,
            undecodable, or not an object.
    """
    decoder = json.JSONDecoder()
    buffer = ""
    line_number = 1
    at_eof = False
    while True:
        stripped = buffer.lstrip()
        line_number += buffer.count("\n", 0, len(buffer) - len(stripped))
        buffer = stripped
        if not buffer:
            if at_eof:
                return
            buffer = _read_chunk(stream, chunk_size, source, line_number)
            at_eof = not buffer
            continue
        try:
            value, end = decoder.raw_decode(buffer)
        except json.JSONDecodeError as error:
            if at_eof or not _may_be_incomplete(error, buffer):
                raise SkyIngestError(
                    f"Failed to parse JSON record at {source}:{line_number}: "
                    f"{error.msg}. Fix the JSON syntax and retry import."
                ) from error
            _check_record_size(buffer, max_record_size, source, line_number)
            chunk = _read_chunk(stream, max(chunk_size, len(buffer)), source, line_number)
            at_eof = not chunk
            buffer += chunk
            continue
        if end == len(buffer) and not at_eof:
            # A number or literal may continue in the next chunk.
            chunk = _read_chunk(stream, chunk_size, source, line_number)
            if chunk:
                buffer += chunk
                continue
            at_eof = True
        yield SourceRow(
            line_number=line_number,
            values=_expect_json_object(value, source, line_number),
        )
        line_number += buffer.count("\n", 0, end)
        buffer = buffer[end:]


def _may_be_incomplete(error: json.JSONDecodeError, buffer: str) -> bool:
    if error.msg.startswith("Unterminated string"):
        return True
    return error.pos >= len(buffer.rstrip()) - _JSON_TAIL_WINDOW


def _check_record_size(buffer: str, max_record_size: int, source: str, line_number: int) -> None:
    if len(buffer) > max_record_size:
        raise SkyIngestError(
            f"JSON record at {source}:{line_number} exceeds {max_record_size} characters. "
            "Split the record or check for unbalanced brackets."
        )


def _read_chunk(stream: TextIO, size: int, source: str, line_number: int) -> str:
    try:
        return stream.read(size)
    except UnicodeDecodeError as error:
        raise SkyIngestError(
            f"Failed to decode input near {source}:{line_number}: {error.reason}. "
            "Save the file as UTF-8 and retry import."
        ) from error


def _cell_value(row: list[str], index: int) -> str | None:
    if index >= len(row) or row[index] == "":
        return None
    return row[index]


def _iter_delimited_file(
    path: Path, delimiter: str, headers: Sequence[str] | None
) -> Iterator[SourceRow]:
    with _open_input(path, newline="") as stream:
        yield from parse_delimited_stream(stream, delimiter, headers, source=str(path))


def _iter_json_file(path: Path) -> Iterator[SourceRow]:
    with _open_input(path) as stream:
        yield from parse_json_stream(stream, source=str(path))


def _open_input(path: Path, newline: str | None = None) -> TextIO:
    """Open an input file for reading.

    Raises:
        SkyIngestError: If the file is missing or unreadable.
    """
    try:
        return open(path, "r", encoding="utf-8-sig", newline=newline)
    except OSError as error:
        raise SkyIngestError(
            f"Failed to read input file at {path}: {error.strerror}. "
            "Provide an existing, readable file."
        ) from error


def _expect_json_object(value: Any, source: str, line_number: int) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    raise SkyIngestError(
        f"Invalid JSON record at {source}:{line_number}: expected object, "
        f"got {type(value).__name__}. Emit one JSON object per record."
    )
