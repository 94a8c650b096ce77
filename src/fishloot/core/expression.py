"""Arithmetic expression evaluation with textual placeholder substitution.

Weights in the loot configuration may be written as arithmetic over two kinds
of placeholders:

* ``{name}`` is replaced from the values a :class:`LootContext` exposes.
* ``{{group_<tags>}}`` is replaced from the aggregate table built once per
  configuration generation (tags joined with ``&``, any order).

Expressions are parsed with :mod:`ast` and walked against a whitelist of
operators and functions; nothing is ever handed to ``eval``.
"""
from __future__ import annotations

import ast
import math
import operator
import re
from functools import lru_cache
from typing import Callable, Mapping

from .types import COMBINATION_SEPARATOR, GROUP_PLACEHOLDER_PREFIX


class ExpressionError(Exception):
    """Base exception for expression handling."""


class EvaluationError(ExpressionError):
    """Raised when an expression is malformed or cannot be computed."""


class UnresolvedPlaceholderError(ExpressionError):
    """Raised when a ``{{group_*}}`` token has no aggregate entry."""

    def __init__(self, group_key: str) -> None:
        super().__init__(f"No aggregate weight for group combination '{group_key}'.")
        self.group_key = group_key


_BINARY_OPERATORS: dict[type, Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS: dict[type, Callable[[float], float]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_FUNCTIONS: dict[str, Callable[..., float]] = {
    "abs": abs,
    "min": min,
    "max": max,
    "floor": math.floor,
    "ceil": math.ceil,
    "sqrt": math.sqrt,
    "round": round,
}

_CONTEXT_TOKEN = re.compile(r"(?<!\{)\{([A-Za-z0-9_.:\-]+)\}(?!\})")
_GROUP_TOKEN = re.compile(r"\{\{" + GROUP_PLACEHOLDER_PREFIX + r"([^{}]+)\}\}")


def canonical_group_key(combination: str) -> str:
    """Return the order-independent key for a tag combination ("b&a" -> "a&b")."""
    tags = [tag.strip() for tag in combination.split(COMBINATION_SEPARATOR)]
    return COMBINATION_SEPARATOR.join(sorted(tags))


def has_group_placeholders(text: str) -> bool:
    return _GROUP_TOKEN.search(text) is not None


def has_placeholders(text: str) -> bool:
    return "{" in text or "}" in text


def substitute_context(text: str, values: Mapping[str, str]) -> str:
    """Replace ``{name}`` tokens; unknown names and ``{{...}}`` tokens are left as-is."""

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in values:
            return values[key]
        return match.group(0)

    return _CONTEXT_TOKEN.sub(_replace, text)


def substitute_groups(text: str, group_weights: Mapping[str, float]) -> str:
    """Replace ``{{group_<combo>}}`` tokens with aggregate totals."""

    def _replace(match: re.Match[str]) -> str:
        key = canonical_group_key(match.group(1))
        weight = group_weights.get(key)
        if weight is None or weight <= 0:
            raise UnresolvedPlaceholderError(key)
        return repr(float(weight))

    return _GROUP_TOKEN.sub(_replace, text)


def evaluate(text: str) -> float:
    """Evaluate an arithmetic expression and return the result as a float."""
    if has_placeholders(text):
        raise EvaluationError(f"Unresolved placeholder in expression: {text!r}")
    tree = _parse(text)
    try:
        result = float(_eval_node(tree.body))
    except (ZeroDivisionError, OverflowError, ValueError, TypeError) as exc:
        raise EvaluationError(f"Cannot evaluate {text!r}: {exc}") from exc
    if not math.isfinite(result):
        raise EvaluationError(f"Expression {text!r} is not a finite number.")
    return result


@lru_cache(maxsize=1024)
def _parse(text: str) -> ast.Expression:
    stripped = text.strip()
    if not stripped:
        raise EvaluationError("Empty expression.")
    try:
        return ast.parse(stripped, mode="eval")
    except SyntaxError as exc:
        raise EvaluationError(f"Malformed expression {text!r}: {exc.msg}") from exc


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise EvaluationError(f"Unsupported literal: {node.value!r}")
        return float(node.value)
    if isinstance(node, ast.BinOp):
        binary = _BINARY_OPERATORS.get(type(node.op))
        if binary is None:
            raise EvaluationError(f"Unsupported operator: {type(node.op).__name__}")
        return binary(_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp):
        unary = _UNARY_OPERATORS.get(type(node.op))
        if unary is None:
            raise EvaluationError(f"Unsupported operator: {type(node.op).__name__}")
        return unary(_eval_node(node.operand))
    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCTIONS or node.keywords:
            raise EvaluationError("Unsupported function call.")
        args = [_eval_node(arg) for arg in node.args]
        if not args:
            raise EvaluationError(f"{node.func.id}() needs at least one argument.")
        return _FUNCTIONS[node.func.id](*args)
    raise EvaluationError(f"Unsupported expression element: {type(node).__name__}")
