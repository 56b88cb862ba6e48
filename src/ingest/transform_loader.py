"""Transform specification lookup.

This module resolves a transform reference to its text. Bare words
name a transform in the configured or bundled library; anything else
is a file path.
"""

from __future__ import annotations

import re
from pathlib import Path

from core.config import SkyConfig
from core.constants import NAMED_TRANSFORM_SUFFIXES
from core.errors import TransformNotFoundError

_NAMED_TRANSFORM_PATTERN = re.compile(r"\w+")
_BUNDLED_TRANSFORMS_DIR = Path(__file__).resolve().parent.parent / "transform" / "named_transforms"


def load_transform_text(reference: str, config: SkyConfig) -> str:
    """Load transform text for a name or path.

    Args:
        reference: Named transform (e.g. ``sky``) or transform file path.
        config: Runtime config providing the optional transforms directory.

    Returns:
        Raw transform text.

    Raises:
        TransformNotFoundError: If the transform cannot be located.
    """
    if _NAMED_TRANSFORM_PATTERN.fullmatch(reference):
        return _read_transform_file(_find_named_transform(reference, config))
    transform_path = Path(reference).expanduser().resolve()
    if not transform_path.is_file():
        raise TransformNotFoundError(
            f"Transform file not found: {transform_path}. Provide a valid transform path."
        )
    return _read_transform_file(transform_path)


def list_named_transforms(config: SkyConfig) -> tuple[str, ...]:
    """Return transform names available for bare-word lookup."""
    names: set[str] = set()
    for directory in _search_dirs(config):
        if not directory.is_dir():
            continue
        for candidate in directory.iterdir():
            if candidate.is_file() and candidate.suffix in NAMED_TRANSFORM_SUFFIXES:
                names.add(candidate.stem)
    return tuple(sorted(names))


def _find_named_transform(name: str, config: SkyConfig) -> Path:
    searched: list[str] = []
    for directory in _search_dirs(config):
        for suffix in NAMED_TRANSFORM_SUFFIXES:
            candidate = directory / f"{name}{suffix}"
            if candidate.is_file():
                return candidate
            searched.append(str(candidate))
    raise TransformNotFoundError(
        f"Named transform not available: {name} (searched {', '.join(searched)}). "
        "Use an available name or a transform file path."
    )


def _search_dirs(config: SkyConfig) -> list[Path]:
    directories = [_BUNDLED_TRANSFORMS_DIR]
    if config.transforms_dir is not None:
        directories.insert(0, config.transforms_dir)
    return directories


def _read_transform_file(transform_path: Path) -> str:
    try:
        return transform_path.read_text(encoding="utf-8")
    except OSError as error:
        raise TransformNotFoundError(
            f"Failed to read transform at {transform_path}: {error}. "
            "Check file permissions and retry."
        ) from error
