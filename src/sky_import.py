"""Public SDK surface for the event importer.

This module provides a stable import path for library users.
It re-exports the compiler, engine, importer, and typed models.
"""

from __future__ import annotations

from typing import TextIO

from core.config import SkyConfig
from core.types import (
    Expression,
    Extraction,
    FieldRule,
    ImportOptions,
    ImportSummary,
    InvalidRecordReport,
    SourceRow,
    TransformSpec,
)
from ingest.file_types import resolve_file_type
from ingest.format_reader import parse_delimited_stream, parse_json_stream, read_records
from ingest.importer import EventImporter, run_import, validate_event
from ingest.transform_loader import load_transform_text
from store.event_sink import EventSink, JsonlEventSink
from transform.coercion import register_coercion, supported_coercions
from transform.compiler import compile_transform
from transform.engine import TranslationEngine, translate_record
from transform.expression import ExpressionEvaluator, PythonExpressionEvaluator


def import_to_jsonl(
    options: ImportOptions,
    output_stream: TextIO,
    config: SkyConfig | None = None,
) -> ImportSummary:
    """Import files and write validated events as JSON lines.

    Args:
        options: Files, transform, and reader options.
        output_stream: Writable text stream for events.
        config: Runtime config; read from the environment when omitted.

    Returns:
        Run counts and skipped-record diagnostics.
    """
    runtime_config = config or SkyConfig.from_env()
    table_name = options.table_name or runtime_config.table_name
    sink = JsonlEventSink(output_stream, table_name, runtime_config.batch_size)
    return run_import(options, runtime_config, sink)


__all__ = [
    "EventImporter",
    "EventSink",
    "Expression",
    "ExpressionEvaluator",
    "Extraction",
    "FieldRule",
    "ImportOptions",
    "ImportSummary",
    "InvalidRecordReport",
    "JsonlEventSink",
    "PythonExpressionEvaluator",
    "SkyConfig",
    "SourceRow",
    "TransformSpec",
    "TranslationEngine",
    "compile_transform",
    "import_to_jsonl",
    "load_transform_text",
    "parse_delimited_stream",
    "parse_json_stream",
    "read_records",
    "register_coercion",
    "resolve_file_type",
    "run_import",
    "supported_coercions",
    "translate_record",
    "validate_event",
]
