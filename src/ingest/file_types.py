"""Input file type resolution.

This module maps input paths to format reader types by extension,
with an optional explicit override.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import FILE_TYPE_BY_EXTENSION, SUPPORTED_FILE_TYPES
from core.errors import UnsupportedFileTypeError


def resolve_file_type(file_path: str | Path, override: str | None = None) -> str:
    """Resolve the reader type for an input file.

    Args:
        file_path: Input path; only its extension is inspected.
        override: Optional explicit type (csv, tsv, json).

    Returns:
        Normalized file type.

    Raises:
        UnsupportedFileTypeError: If neither override nor extension is supported.
    """
    if override is not None:
        normalized_override = override.strip().lower()
        if normalized_override in SUPPORTED_FILE_TYPES:
            return normalized_override
        raise UnsupportedFileTypeError(
            f"File type not supported by importer: {override} (file {file_path}). "
            f"Use one of: {', '.join(SUPPORTED_FILE_TYPES)}."
        )
    suffix = Path(file_path).suffix.lower()
    file_type = FILE_TYPE_BY_EXTENSION.get(suffix)
    if file_type is None:
        raise UnsupportedFileTypeError(
            f"File type not supported by importer: {suffix or '<no extension>'} "
            f"(file {file_path}). Rename the file or pass an explicit file type."
        )
    return file_type
