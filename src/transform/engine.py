"""Record translation engine.

This module applies compiled field rules to one raw record at a time.
Rules run in specification order and write into nested output paths;
the catch-all ``translate`` expression runs last.
"""

from __future__ import annotations

from typing import Any, Sequence

from core.constants import TRANSFORM_TRANSLATE_KEY
from core.types import Expression, Extraction, FieldRule, OutputRecord, RawRecord, TransformSpec
from transform.coercion import coerce_value
from transform.expression import ExpressionEvaluator, PythonExpressionEvaluator


class TranslationEngine:
    """Translate raw records into output records.

    The engine holds no per-record state. The evaluator is shared across
    records so compiled expression code is reused.
    """

    def __init__(self, evaluator: ExpressionEvaluator | None = None) -> None:
        self._evaluator: ExpressionEvaluator = evaluator or PythonExpressionEvaluator()

    def translate(self, raw: RawRecord, spec: TransformSpec) -> OutputRecord:
        """Build an output record from one raw record.

        Args:
            raw: Raw input record.
            spec: Compiled transform.

        Returns:
            Fresh, possibly nested, output record.

        Raises:
            CoercionError: If an extraction value cannot be converted.
            ExpressionEvaluationError: If an expression raises.
        """
        output: OutputRecord = {}
        for rule in spec.rules:
            self._apply_rule(rule, raw, output)
        if spec.translate is not None:
            self._evaluator.run(spec.translate, TRANSFORM_TRANSLATE_KEY, raw, output)
        return output

    def _apply_rule(self, rule: FieldRule, raw: RawRecord, output: OutputRecord) -> None:
        action = rule.action
        if isinstance(action, Extraction):
            raw_value = raw.get(action.input_field)
            value = coerce_value(action.input_field, raw_value, action.coercion)
            set_path(output, rule.output_path, value)
        elif isinstance(action, Expression):
            self._evaluator.run(action.code, rule.dotted_path, raw, output)
        else:
            raise TypeError(f"Unsupported rule action: {type(action).__name__}")


def set_path(output: OutputRecord, path: Sequence[str], value: Any) -> None:
    """Write a value at a nested path, creating objects on demand.

    Only the leaf key is overwritten, so siblings sharing a prefix are
    preserved. A non-object found at an intermediate level is replaced.

    Args:
        output: Record to mutate.
        path: Non-empty key path.
        value: Value written at the leaf.

    Raises:
        ValueError: If path is empty.
    """
    if not path:
        raise ValueError("Output path must contain at least one key.")
    node = output
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value


def translate_record(
    raw: RawRecord,
    spec: TransformSpec,
    evaluator: ExpressionEvaluator | None = None,
) -> OutputRecord:
    """Translate a single record with a one-off engine."""
    return TranslationEngine(evaluator).translate(raw, spec)
