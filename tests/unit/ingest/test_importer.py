"""Unit tests for import orchestration."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from core.config import SkyConfig
from core.errors import CoercionError, ExpressionEvaluationError, InvalidRecordError
from core.types import ImportOptions, OutputRecord
from ingest.importer import EventImporter, run_import, validate_event
from tests.fixture_paths import fixture_path


class _ListSink:
    """In-memory sink capturing forwarded events."""

    def __init__(self) -> None:
        self.events: list[OutputRecord] = []
        self.closed = False

    def add_event(self, record: OutputRecord) -> None:
        self.events.append(record)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        self.closed = True


def _options(*files: str, transform: str = "transforms/events.yml") -> ImportOptions:
    return ImportOptions(
        files=tuple(str(fixture_path(file_name)) for file_name in files),
        transform=str(fixture_path(transform)),
    )


def test_run_import_skips_invalid_records_and_continues(sky_env: None) -> None:
    """Invalid records should be reported by line while later records still import."""
    sink = _ListSink()

    summary = run_import(_options("input/events.csv"), SkyConfig.from_env(), sink)

    assert [event["object_id"] for event in sink.events] == [1, 3]
    assert [(r.line_number, r.reason) for r in summary.invalid_records] == [
        (3, "Invalid object id"),
        (4, "Invalid timestamp"),
    ]
    assert (summary.records_read, summary.events_written) == (4, 2)


def test_run_import_builds_nested_typed_events(sky_env: None) -> None:
    """Forwarded events should carry coerced, nested output."""
    sink = _ListSink()

    run_import(_options("input/events.csv"), SkyConfig.from_env(), sink)

    assert sink.events[0] == {
        "object_id": 1,
        "timestamp": "2013-01-01T00:00:00Z",
        "action": {"name": "signup"},
        "data": {"price": 0.0, "vip": False},
    }


def test_run_import_processes_files_in_order(sky_env: None) -> None:
    """Multiple files should be imported sequentially and the sink closed."""
    sink = _ListSink()

    summary = run_import(
        _options("input/events.csv", "input/events.json"), SkyConfig.from_env(), sink
    )

    assert [event["object_id"] for event in sink.events] == [1, 3, 10, 11]
    assert summary.files_processed == 2 and sink.closed is True
    assert summary.invalid_records[-1].line_number == 2


def test_run_import_runs_scripted_transform_with_headers(sky_env: None) -> None:
    """Expression rules, translate, and required modules should all apply."""
    sink = _ListSink()
    options = ImportOptions(
        files=(str(fixture_path("input/orders.tsv")),),
        transform=str(fixture_path("transforms/scripted.yml")),
        headers=("user_id", "ts", "action", "price", "qty"),
    )

    run_import(options, SkyConfig.from_env(), sink)

    assert [event["data"]["total"] for event in sink.events] == [7, 5]
    assert sink.events[0]["action"] == {"name": "SIGNUP"}


def test_run_import_aborts_on_coercion_error(
    sky_env: None, write_transform: Callable[[str], Path]
) -> None:
    """Coercion failures should abort the run instead of skipping the record."""
    transform_path = write_transform("fields:\n  object_id: action:int\n")
    options = ImportOptions(
        files=(str(fixture_path("input/events.csv")),), transform=str(transform_path)
    )

    with pytest.raises(CoercionError, match="signup"):
        run_import(options, SkyConfig.from_env(), _ListSink())


def test_run_import_aborts_on_expression_error(
    sky_env: None, write_transform: Callable[[str], Path]
) -> None:
    """Expression failures should abort the run."""
    transform_path = write_transform("translate: output['x'] = 1 / 0\n")
    options = ImportOptions(
        files=(str(fixture_path("input/events.csv")),), transform=str(transform_path)
    )

    with pytest.raises(ExpressionEvaluationError, match="ZeroDivisionError"):
        run_import(options, SkyConfig.from_env(), _ListSink())


def test_event_importer_exposes_compiled_transform(sky_env: None) -> None:
    """The importer should compile the transform once at construction."""
    importer = EventImporter(_options("input/events.csv"), SkyConfig.from_env(), _ListSink())

    assert len(importer.spec.rules) == 5


@pytest.mark.parametrize(
    ("output", "reason"),
    [
        ({"timestamp": "t"}, "Invalid object id"),
        ({"object_id": 0, "timestamp": "t"}, "Invalid object id"),
        ({"object_id": "7", "timestamp": "t"}, "Invalid object id"),
        ({"object_id": True, "timestamp": "t"}, "Invalid object id"),
        ({"object_id": 7, "timestamp": None}, "Invalid timestamp"),
    ],
)
def test_validate_event_rejects_missing_required_fields(output: OutputRecord, reason: str) -> None:
    """Records need a positive numeric object id and a timestamp."""
    with pytest.raises(InvalidRecordError) as error_info:
        validate_event(output, 12)

    assert (error_info.value.line_number, error_info.value.reason) == (12, reason)


def test_validate_event_accepts_positive_id_and_timestamp() -> None:
    """A positive id and present timestamp should pass validation."""
    validate_event({"object_id": 1.5, "timestamp": 0}, 1)
