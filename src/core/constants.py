"""Core constants used across importer modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_BATCH_SIZE = 1000
DEFAULT_JSON_CHUNK_SIZE = 65536
DEFAULT_MAX_JSON_RECORD_SIZE = 64 * 1024 * 1024
CSV_FIELD_SIZE_LIMIT = 2**31 - 1
OBJECT_ID_FIELD = "object_id"
TIMESTAMP_FIELD = "timestamp"
TRANSFORM_FIELDS_KEY = "fields"
TRANSFORM_TRANSLATE_KEY = "translate"
TRANSFORM_REQUIRE_KEY = "require"
NAMED_TRANSFORM_SUFFIXES = (".yml", ".yaml")
FILE_TYPE_CSV = "csv"
FILE_TYPE_TSV = "tsv"
FILE_TYPE_JSON = "json"
SUPPORTED_FILE_TYPES = (FILE_TYPE_CSV, FILE_TYPE_TSV, FILE_TYPE_JSON)
FILE_TYPE_BY_EXTENSION = {
    ".csv": FILE_TYPE_CSV,
    ".tsv": FILE_TYPE_TSV,
    ".txt": FILE_TYPE_TSV,
    ".json": FILE_TYPE_JSON,
    ".jsonl": FILE_TYPE_JSON,
    ".ndjson": FILE_TYPE_JSON,
}
DELIMITER_BY_FILE_TYPE = {
    FILE_TYPE_CSV: ",",
    FILE_TYPE_TSV: "\t",
}
BOOLEAN_TRUE_TOKENS = frozenset({"true", "t", "yes", "y", "1", "on"})
BOOLEAN_FALSE_TOKENS = frozenset({"false", "f", "no", "n", "0", "off"})
