"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def sky_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear importer environment variables for deterministic config."""
    for name in ("SKY_TRANSFORMS_DIR", "SKY_TABLE", "SKY_BATCH_SIZE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_transform(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper writing transform text to a temporary YAML file."""

    def _write(content: str, name: str = "transform.yml") -> Path:
        transform_path = tmp_path / name
        transform_path.write_text(content, encoding="utf-8")
        return transform_path

    return _write
