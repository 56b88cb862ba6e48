"""Integration tests for the file-to-event import workflow."""

from __future__ import annotations

import io
import json
from dataclasses import replace
from pathlib import Path

from core.config import SkyConfig
from core.types import ImportOptions
from sky_import import import_to_jsonl
from tests.fixture_paths import fixture_path


def test_named_transform_import_flow(tmp_path: Path, sky_env: None) -> None:
    """A named transform from the configured directory should drive a CSV import."""
    (tmp_path / "signups.yml").write_text(
        "fields:\n"
        "  object_id: user_id:int\n"
        "  timestamp: ts\n"
        "  data:\n"
        "    price: price:float\n"
        "    label: \"{output['data']['label'] = input['action'] + '!'}\"\n",
        encoding="utf-8",
    )
    config = replace(SkyConfig.from_env(), transforms_dir=tmp_path, table_name="events")
    stream = io.StringIO()
    options = ImportOptions(files=(str(fixture_path("input/events.csv")),), transform="signups")

    summary = import_to_jsonl(options, stream, config)

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert summary.events_written == len(lines) == 2
    assert lines[1] == {
        "table": "events",
        "event": {
            "object_id": 3,
            "timestamp": "2013-01-01T00:03:00Z",
            "data": {"price": 9.99, "label": "purchase!"},
        },
    }
