"""Shared typed models.

This module defines immutable data models used by the transform
compiler, translation engine, format readers, and importer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

RawRecord = Mapping[str, Any]
OutputRecord = dict[str, Any]


@dataclass(frozen=True)
class Extraction:
    """Copy one input field into the output, optionally coerced.

    Attributes:
        input_field: Key read from the raw input record.
        coercion: Optional type tag applied to the raw value.
    """

    input_field: str
    coercion: str | None = None


@dataclass(frozen=True)
class Expression:
    """Run scripted code against the input and in-progress output.

    Attributes:
        code: Python statements executed with ``input`` and ``output`` bound.
    """

    code: str


RuleAction = Union[Extraction, Expression]


@dataclass(frozen=True)
class FieldRule:
    """One compiled mapping from the transform ``fields`` tree.

    Attributes:
        output_path: Non-empty key path in the output record.
        action: Extraction or expression producing the value.
    """

    output_path: tuple[str, ...]
    action: RuleAction

    @property
    def dotted_path(self) -> str:
        """Return the output path joined with dots."""
        return ".".join(self.output_path)


@dataclass(frozen=True)
class TransformSpec:
    """Compiled transform specification.

    Attributes:
        rules: Field rules in specification order.
        translate: Optional catch-all expression run after all rules.
        requires: Module names the expression evaluator must expose.
    """

    rules: tuple[FieldRule, ...] = ()
    translate: str | None = None
    requires: tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceRow:
    """One raw record read from an input file.

    Attributes:
        line_number: One-based input line used for diagnostics.
        values: Field mapping produced by the format reader.
    """

    line_number: int
    values: RawRecord


@dataclass(frozen=True)
class ImportOptions:
    """Import command options.

    Attributes:
        files: Input file paths processed in order.
        transform: Named transform or transform file path.
        table_name: Optional destination table override.
        headers: Explicit column names for delimited files.
        file_type: Optional file type override (csv, tsv, json).
    """

    files: tuple[str, ...]
    transform: str
    table_name: str | None = None
    headers: tuple[str, ...] | None = None
    file_type: str | None = None


@dataclass(frozen=True)
class InvalidRecordReport:
    """Diagnostic for a translated record skipped by validation."""

    source: str
    line_number: int
    reason: str


@dataclass(frozen=True)
class ImportSummary:
    """Counts and diagnostics from one import run.

    Attributes:
        files_processed: Number of input files fully read.
        records_read: Raw records translated across all files.
        events_written: Validated records forwarded to the sink.
        invalid_records: Skipped records in input order.
    """

    files_processed: int
    records_read: int
    events_written: int
    invalid_records: tuple[InvalidRecordReport, ...] = field(default_factory=tuple)
