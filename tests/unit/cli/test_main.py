"""Unit tests for CLI command handling."""

from __future__ import annotations

import json
from pathlib import Path

from cli.main import main
from tests.fixture_paths import fixture_path


def test_cli_import_writes_events_to_stdout(capsys, sky_env: None) -> None:
    """CLI import should print one JSON line per valid event."""
    args = [
        "import",
        str(fixture_path("input/events.csv")),
        "--transform",
        str(fixture_path("transforms/events.yml")),
        "--table",
        "users",
    ]

    exit_code = main(args)
    lines = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert [json.loads(line)["table"] for line in lines] == ["users", "users"]


def test_cli_import_writes_output_file(tmp_path: Path, sky_env: None) -> None:
    """CLI import should honor the output path option."""
    output_path = tmp_path / "events.jsonl"
    args = [
        "import",
        str(fixture_path("input/events.json")),
        "-t",
        str(fixture_path("transforms/events.yml")),
        "-o",
        str(output_path),
        "--batch-size",
        "1",
    ]

    exit_code = main(args)

    events = [json.loads(line)["event"] for line in output_path.read_text().splitlines()]
    assert exit_code == 0 and [event["object_id"] for event in events] == [10, 11]


def test_cli_import_reports_unsupported_file_type(capsys, sky_env: None) -> None:
    """Unsupported input files should exit non-zero with an error message."""
    args = [
        "import",
        str(fixture_path("input/events.xml")),
        "-t",
        "sky",
    ]

    exit_code = main(args)

    assert exit_code == 1 and "events.xml" in capsys.readouterr().err


def test_cli_import_reports_undecodable_input(tmp_path: Path, capsys, sky_env: None) -> None:
    """Input that is not UTF-8 should exit non-zero with an error message."""
    input_path = tmp_path / "bad.csv"
    input_path.write_bytes(b"user_id,ts\n1,\xff\xfe\n")

    exit_code = main(["import", str(input_path), "-t", "sky"])

    assert exit_code == 1 and "[ERROR]" in capsys.readouterr().err


def test_cli_import_rejects_non_positive_batch_size(capsys, sky_env: None) -> None:
    """A zero batch size should be reported as a configuration error."""
    args = [
        "import",
        str(fixture_path("input/events.csv")),
        "-t",
        "sky",
        "--batch-size",
        "0",
    ]

    assert main(args) == 1 and "--batch-size" in capsys.readouterr().err


def test_cli_compile_prints_rules(capsys, sky_env: None) -> None:
    """CLI compile should list each compiled rule with its source."""
    exit_code = main(["compile", str(fixture_path("transforms/scripted.yml"))])
    lines = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert lines[0] == "object_id\textract\tuser_id\tint"
    assert lines[-1] == "require\tmath"


def test_cli_transforms_lists_bundled_names(capsys, sky_env: None) -> None:
    """CLI transforms should list the bundled named transforms."""
    exit_code = main(["transforms"])

    assert exit_code == 0 and "sky" in capsys.readouterr().out.split()
