"""Scripted expression evaluation.

This module runs transform expressions as Python statements with the
raw input record bound read-only and the output record bound mutable.
"""

from __future__ import annotations

import builtins
import importlib
from types import CodeType, MappingProxyType, ModuleType
from typing import Any, Iterable, Mapping, Protocol

from core.errors import ExpressionEvaluationError, SkyDependencyError, TransformParseError
from core.types import OutputRecord, RawRecord


class ExpressionEvaluator(Protocol):
    """Capability interface used by the translation engine."""

    def run(self, code: str, source: str, raw: RawRecord, output: OutputRecord) -> None:
        """Execute code for one record, mutating ``output`` in place."""


def compile_expression(code: str, source: str) -> CodeType:
    """Compile expression code into an exec-mode code object.

    Args:
        code: Python statements.
        source: Output path or ``translate``, used for error context.

    Returns:
        Compiled code object.

    Raises:
        TransformParseError: If the code has a syntax error.
    """
    try:
        return compile(code, f"<transform:{source}>", "exec")
    except SyntaxError as error:
        raise TransformParseError(
            f"Invalid expression for '{source}' in transform: {error.msg} "
            f"(line {error.lineno}). Fix the expression syntax."
        ) from error


def load_capabilities(module_names: Iterable[str]) -> dict[str, ModuleType]:
    """Import modules requested by a transform.

    Each module is bound under its top-level package name, the same name
    an ``import`` statement would bind.

    Args:
        module_names: Dotted module names from the ``require`` list.

    Returns:
        Namespace entries keyed by binding name.

    Raises:
        SkyDependencyError: If a module cannot be imported.
    """
    capabilities: dict[str, ModuleType] = {}
    for module_name in module_names:
        try:
            importlib.import_module(module_name)
        except ImportError as error:
            raise SkyDependencyError(
                f"Transform requires module '{module_name}', but it cannot be imported: "
                f"{error}. Install the module or remove it from 'require'."
            ) from error
        top_level_name = module_name.split(".", 1)[0]
        capabilities[top_level_name] = importlib.import_module(top_level_name)
    return capabilities


class PythonExpressionEvaluator:
    """Evaluate expressions with Python ``exec``.

    Code objects are compiled once per distinct source text and reused
    across records.
    """

    def __init__(self, capabilities: Mapping[str, Any] | None = None) -> None:
        self._capabilities = dict(capabilities or {})
        self._compiled: dict[str, CodeType] = {}

    def run(self, code: str, source: str, raw: RawRecord, output: OutputRecord) -> None:
        """Execute expression code for one record.

        Args:
            code: Python statements.
            source: Output path or ``translate``, used for error context.
            raw: Raw input record, exposed read-only as ``input``.
            output: Output record being built, exposed as ``output``.

        Raises:
            ExpressionEvaluationError: If the code raises.
        """
        compiled = self._compiled.get(code)
        if compiled is None:
            compiled = compile_expression(code, source)
            self._compiled[code] = compiled
        namespace: dict[str, Any] = {
            "__builtins__": builtins,
            **self._capabilities,
            "input": MappingProxyType(dict(raw)),
            "output": output,
        }
        try:
            exec(compiled, namespace)
        except Exception as error:
            raise ExpressionEvaluationError(
                source, f"{type(error).__name__}: {error}"
            ) from error
