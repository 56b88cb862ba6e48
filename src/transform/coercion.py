"""Field value coercions.

This module converts raw text or JSON values into typed output values.
Tags are looked up in a process-wide registry that callers can extend.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from core.constants import BOOLEAN_FALSE_TOKENS, BOOLEAN_TRUE_TOKENS
from core.errors import CoercionError

CoercionFunction = Callable[[Any], Any]

_COERCIONS: dict[str, CoercionFunction] = {}


def register_coercion(tag: str, function: CoercionFunction) -> None:
    """Register or replace a coercion tag.

    Args:
        tag: Type tag used after the colon in extraction rules.
        function: Converter raising ValueError or TypeError on bad input.

    Raises:
        ValueError: If tag is empty.
    """
    normalized_tag = tag.strip().lower()
    if not normalized_tag:
        raise ValueError("Coercion tag must be a non-empty string.")
    _COERCIONS[normalized_tag] = function


def is_known_coercion(tag: str) -> bool:
    """Return whether a coercion tag is registered."""
    return tag.strip().lower() in _COERCIONS


def supported_coercions() -> tuple[str, ...]:
    """Return registered coercion tags in sorted order."""
    return tuple(sorted(_COERCIONS))


def coerce_value(field: str, raw_value: Any, coercion: str | None) -> Any:
    """Convert a raw field value using a coercion tag.

    Missing values stay missing. Untagged and unknown tags pass the raw
    value through untouched.

    Args:
        field: Input field name, used for error context.
        raw_value: Value read from the raw record.
        coercion: Optional coercion tag.

    Returns:
        Converted value.

    Raises:
        CoercionError: If the value cannot be converted.
    """
    if raw_value is None or coercion is None:
        return raw_value
    function = _COERCIONS.get(coercion.strip().lower())
    if function is None:
        return raw_value
    try:
        return function(raw_value)
    except (TypeError, ValueError) as error:
        raise CoercionError(field, raw_value, coercion) from error


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        raise TypeError("booleans are not integers")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value} has a fractional part")
        return int(value)
    text = str(value).strip()
    if not text:
        return None
    return int(text, 10)


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        raise TypeError("booleans are not floats")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    return float(text)


def _to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    if text in BOOLEAN_TRUE_TOKENS:
        return True
    if text in BOOLEAN_FALSE_TOKENS:
        return False
    raise ValueError(f"unrecognized boolean token '{value}'")


def _to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, bool)):
        return json.dumps(value, sort_keys=True)
    return str(value)


for _tag in ("int", "integer"):
    register_coercion(_tag, _to_int)
for _tag in ("float", "double"):
    register_coercion(_tag, _to_float)
for _tag in ("bool", "boolean"):
    register_coercion(_tag, _to_bool)
for _tag in ("string", "str"):
    register_coercion(_tag, _to_string)
