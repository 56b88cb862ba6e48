"""Transform specification compiler.

This module parses YAML transform text into a flat, ordered list of
field rules. Nested ``fields`` mappings become output paths; later
rules for the same path override earlier ones at translation time.
"""

from __future__ import annotations

import json
import re
import textwrap
from typing import Mapping, Sequence, cast

import yaml

from core.constants import (
    TRANSFORM_FIELDS_KEY,
    TRANSFORM_REQUIRE_KEY,
    TRANSFORM_TRANSLATE_KEY,
)
from core.errors import TransformParseError
from core.logging_config import get_logger
from core.types import Expression, Extraction, FieldRule, TransformSpec
from transform.coercion import is_known_coercion
from transform.expression import compile_expression

_LOGGER = get_logger(__name__)
_EXPRESSION_PATTERN = re.compile(r"\s*\{(.*)\}\s*", re.DOTALL)
_KNOWN_ROOT_KEYS = {TRANSFORM_FIELDS_KEY, TRANSFORM_TRANSLATE_KEY, TRANSFORM_REQUIRE_KEY}


def compile_transform(spec_text: str) -> TransformSpec:
    """Compile transform text into a transform spec.

    Args:
        spec_text: YAML (or JSON) transform document.

    Returns:
        Immutable compiled transform.

    Raises:
        TransformParseError: If the document shape is invalid.
    """
    payload = _load_yaml_payload(spec_text)
    root_mapping = _expect_mapping(payload, "transform root")
    _warn_unknown_root_keys(root_mapping)
    raw_fields = root_mapping.get(TRANSFORM_FIELDS_KEY)
    fields = {} if raw_fields is None else _expect_mapping(raw_fields, "transform 'fields'")
    rules = tuple(_compile_fields(fields, ()))
    translate = _parse_translate(root_mapping)
    requires = _parse_requires(root_mapping)
    _LOGGER.info(
        "transform_compiled",
        rule_count=len(rules),
        has_translate=translate is not None,
        requires=list(requires),
    )
    return TransformSpec(rules=rules, translate=translate, requires=requires)


def parse_field_rule(output_path: tuple[str, ...], value: str) -> FieldRule:
    """Compile one leaf string into a field rule.

    Args:
        output_path: Full output path for the rule.
        value: Either ``{code}`` or ``input_field[:coercion]``.

    Returns:
        Expression or extraction rule.

    Raises:
        TransformParseError: If the leaf cannot be compiled.
    """
    dotted_path = ".".join(output_path)
    match = _EXPRESSION_PATTERN.fullmatch(value)
    if match is not None:
        code = _normalize_code(match.group(1))
        compile_expression(code, dotted_path)
        return FieldRule(output_path=output_path, action=Expression(code=code))
    input_field, _, coercion = value.strip().partition(":")
    input_field = input_field.strip()
    coercion = coercion.strip()
    if not input_field:
        raise TransformParseError(
            f"Invalid field rule for '{dotted_path}': missing input field name in '{value}'. "
            "Use 'input_field' or 'input_field:type'."
        )
    if coercion and not is_known_coercion(coercion):
        _LOGGER.warning("unknown_coercion", field=dotted_path, coercion=coercion)
    return FieldRule(
        output_path=output_path,
        action=Extraction(input_field=input_field, coercion=coercion or None),
    )


def _load_yaml_payload(spec_text: str) -> object:
    try:
        payload = cast(object, yaml.safe_load(spec_text))
    except yaml.YAMLError as error:
        raise TransformParseError(
            f"Failed to parse YAML transform: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise TransformParseError("Transform is empty. Define a 'fields' mapping.")
    return payload


def _compile_fields(
    fields: Mapping[str, object], path_prefix: tuple[str, ...]
) -> list[FieldRule]:
    rules: list[FieldRule] = []
    for key, value in fields.items():
        output_path = path_prefix + (key,)
        if isinstance(value, str):
            rules.append(parse_field_rule(output_path, value))
        elif isinstance(value, Mapping):
            nested = _expect_mapping(value, f"transform field '{'.'.join(output_path)}'")
            rules.extend(_compile_fields(nested, output_path))
        else:
            raise TransformParseError(
                f"Invalid data type for '{'.'.join(output_path)}' in transform: "
                f"{type(value).__name__}. Use a string rule or a nested mapping."
            )
    return rules


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            normalized_mapping[_key_text(key, context)] = payload
        return normalized_mapping
    raise TransformParseError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _key_text(key: object, context: str) -> str:
    """Return a mapping key as text; YAML reads ``1:`` or ``on:`` as scalars."""
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, bool):
        return json.dumps(key)
    if isinstance(key, (int, float)):
        return str(key)
    raise TransformParseError(
        f"Invalid {context}: unsupported key type {type(key).__name__}. "
        "Use scalar keys such as names or numbers."
    )


def _parse_translate(root_mapping: Mapping[str, object]) -> str | None:
    raw_translate = root_mapping.get(TRANSFORM_TRANSLATE_KEY)
    if raw_translate is None:
        return None
    if not isinstance(raw_translate, str):
        raise TransformParseError(
            f"Transform field 'translate' must be a string, got {type(raw_translate).__name__}."
        )
    match = _EXPRESSION_PATTERN.fullmatch(raw_translate)
    code = _normalize_code(match.group(1) if match is not None else raw_translate)
    compile_expression(code, TRANSFORM_TRANSLATE_KEY)
    return code


def _parse_requires(root_mapping: Mapping[str, object]) -> tuple[str, ...]:
    raw_requires = root_mapping.get(TRANSFORM_REQUIRE_KEY)
    if raw_requires is None:
        return ()
    if not isinstance(raw_requires, Sequence) or isinstance(raw_requires, (str, bytes)):
        raise TransformParseError(
            f"Transform field 'require' must be a list, got {type(raw_requires).__name__}."
        )
    requires: list[str] = []
    for item in raw_requires:
        if not isinstance(item, str) or not item.strip():
            raise TransformParseError(
                "Transform field 'require' must only contain module names."
            )
        requires.append(item.strip())
    return tuple(requires)


def _normalize_code(code: str) -> str:
    # Block scalars keep their indentation; exec needs column zero.
    return textwrap.dedent(code).strip()


def _warn_unknown_root_keys(root_mapping: Mapping[str, object]) -> None:
    unknown_keys = sorted(set(root_mapping) - _KNOWN_ROOT_KEYS)
    if unknown_keys:
        _LOGGER.warning("unknown_transform_keys", keys=unknown_keys)
