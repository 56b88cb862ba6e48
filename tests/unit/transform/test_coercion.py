"""Unit tests for field coercions."""

from __future__ import annotations

import pytest

from core.errors import CoercionError
from transform.coercion import coerce_value, register_coercion, supported_coercions


@pytest.mark.parametrize(
    ("raw_value", "coercion", "expected"),
    [
        ("5", "int", 5),
        (" -7 ", "integer", -7),
        (4.0, "int", 4),
        ("2.5", "float", 2.5),
        (3, "double", 3.0),
        ("YES", "bool", True),
        ("off", "boolean", False),
        (False, "bool", False),
        (12, "string", "12"),
        ("7", "INT", 7),
        ("", "int", None),
        (None, "float", None),
        ("abc", None, "abc"),
        ("abc", "mystery", "abc"),
    ],
)
def test_coerce_value_converts_supported_tags(raw_value, coercion, expected) -> None:
    """Known tags should convert and unknown or missing tags pass through."""
    assert coerce_value("field", raw_value, coercion) == expected


def test_coerce_value_raises_with_field_and_raw_value() -> None:
    """Unconvertible values should raise a coercion error with context."""
    with pytest.raises(CoercionError) as error_info:
        coerce_value("user_id", "abc", "int")

    assert (error_info.value.field, error_info.value.raw_value) == ("user_id", "abc")
    assert error_info.value.coercion == "int"


@pytest.mark.parametrize(
    ("raw_value", "coercion"),
    [(True, "int"), (2.5, "int"), ("maybe", "bool"), (False, "float")],
)
def test_coerce_value_rejects_ambiguous_values(raw_value, coercion) -> None:
    """Booleans as numbers, fractional ints, and unknown tokens should fail."""
    with pytest.raises(CoercionError):
        coerce_value("field", raw_value, coercion)


def test_coerce_value_string_serializes_json_containers() -> None:
    """String coercion should render lists and objects as JSON text."""
    assert coerce_value("tags", {"b": 1, "a": [1]}, "string") == '{"a": [1], "b": 1}'


def test_coerce_value_string_spells_booleans_as_json() -> None:
    """String coercion should render JSON booleans as true and false."""
    assert [coerce_value("flag", value, "string") for value in (True, False)] == [
        "true",
        "false",
    ]


def test_register_coercion_adds_custom_tag() -> None:
    """Registered tags should be available to extraction rules."""
    register_coercion("upper", lambda value: str(value).upper())

    assert "upper" in supported_coercions()
    assert coerce_value("name", "sky", "upper") == "SKY"
