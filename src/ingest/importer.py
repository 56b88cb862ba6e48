"""Import orchestration.

This module reads each input file, translates every record with the
compiled transform, validates required event fields, and forwards
valid events to the sink. Invalid records are skipped with a
diagnostic; transform failures abort the run.
"""

from __future__ import annotations

from typing import Any

from core.config import SkyConfig
from core.constants import OBJECT_ID_FIELD, TIMESTAMP_FIELD
from core.errors import InvalidRecordError
from core.logging_config import get_logger
from core.types import (
    ImportOptions,
    ImportSummary,
    InvalidRecordReport,
    OutputRecord,
    TransformSpec,
)
from ingest.format_reader import read_records
from ingest.transform_loader import load_transform_text
from store.event_sink import EventSink
from transform.compiler import compile_transform
from transform.engine import TranslationEngine
from transform.expression import PythonExpressionEvaluator, load_capabilities

_LOGGER = get_logger(__name__)


class EventImporter:
    """Runner for one import over a list of files.

    The transform is compiled once and shared by every record of the run.
    """

    def __init__(self, options: ImportOptions, config: SkyConfig, sink: EventSink) -> None:
        self._options = options
        self._sink = sink
        transform_text = load_transform_text(options.transform, config)
        self._spec = compile_transform(transform_text)
        evaluator = PythonExpressionEvaluator(load_capabilities(self._spec.requires))
        self._engine = TranslationEngine(evaluator)

    @property
    def spec(self) -> TransformSpec:
        """Return the compiled transform for this run."""
        return self._spec

    def run(self) -> ImportSummary:
        """Import all files in order and return run counts.

        Raises:
            SkyError: For unsupported files, unreadable input, coercion or
                expression failures. Invalid records never raise.
        """
        records_read = 0
        events_written = 0
        invalid_records: list[InvalidRecordReport] = []
        for file_path in self._options.files:
            file_records, file_events = self._import_file(file_path, invalid_records)
            records_read += file_records
            events_written += file_events
        self._sink.close()
        summary = ImportSummary(
            files_processed=len(self._options.files),
            records_read=records_read,
            events_written=events_written,
            invalid_records=tuple(invalid_records),
        )
        _LOGGER.info(
            "import_complete",
            files=summary.files_processed,
            records_read=summary.records_read,
            events_written=summary.events_written,
            records_skipped=len(summary.invalid_records),
        )
        return summary

    def _import_file(
        self, file_path: str, invalid_records: list[InvalidRecordReport]
    ) -> tuple[int, int]:
        records_read = 0
        events_written = 0
        rows = read_records(file_path, self._options.file_type, self._options.headers)
        for row in rows:
            records_read += 1
            output = self._engine.translate(row.values, self._spec)
            try:
                validate_event(output, row.line_number)
            except InvalidRecordError as error:
                invalid_records.append(
                    InvalidRecordReport(
                        source=file_path, line_number=error.line_number, reason=error.reason
                    )
                )
                _LOGGER.error(
                    "invalid_record",
                    source=file_path,
                    line=error.line_number,
                    reason=error.reason,
                )
                continue
            self._sink.add_event(output)
            events_written += 1
        _LOGGER.info(
            "file_imported",
            source=file_path,
            records_read=records_read,
            events_written=events_written,
        )
        return records_read, events_written


def validate_event(output: OutputRecord, line_number: int) -> None:
    """Check the fields every event needs.

    Args:
        output: Translated record.
        line_number: Input line used in the diagnostic.

    Raises:
        InvalidRecordError: If the object id is not a positive number or
            the timestamp is missing.
    """
    if not _is_positive_number(output.get(OBJECT_ID_FIELD)):
        raise InvalidRecordError(line_number, "Invalid object id")
    if output.get(TIMESTAMP_FIELD) is None:
        raise InvalidRecordError(line_number, "Invalid timestamp")


def run_import(options: ImportOptions, config: SkyConfig, sink: EventSink) -> ImportSummary:
    """Compile the transform and import every file into the sink."""
    return EventImporter(options, config, sink).run()


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value > 0
