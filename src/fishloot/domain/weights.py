"""Weight operations: the value half of a ``target:weight`` rule."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Union

from fishloot.core.expression import (
    EvaluationError,
    UnresolvedPlaceholderError,
    evaluate,
    has_placeholders,
    substitute_context,
    substitute_groups,
)

from .context import LootContext

logger = logging.getLogger(__name__)

DEFAULT_ESTIMATE_WEIGHT = 1.0


@dataclass(frozen=True, slots=True)
class ConstantWeight:
    value: float

    @property
    def is_constant(self) -> bool:
        return True

    @property
    def constant_value(self) -> float:
        return self.value

    def resolve(self, context: LootContext, group_weights: Mapping[str, float]) -> float:
        return max(0.0, self.value)

    def estimate(
        self, group_weights: Mapping[str, float], fallback: float = DEFAULT_ESTIMATE_WEIGHT
    ) -> float:
        return max(0.0, self.value)


@dataclass(frozen=True, slots=True)
class ExpressionWeight:
    expression: str

    @property
    def is_constant(self) -> bool:
        return False

    @property
    def constant_value(self) -> float:
        """Expressions cannot be resolved statically and count as zero."""
        return 0.0

    def resolve(self, context: LootContext, group_weights: Mapping[str, float]) -> float:
        """Resolve against a live context; any failure yields weight 0."""
        text = substitute_context(self.expression, context.placeholder_values())
        try:
            text = substitute_groups(text, group_weights)
            return max(0.0, evaluate(text))
        except UnresolvedPlaceholderError as exc:
            logger.warning("Weight %r: %s; using weight 0", self.expression, exc)
        except EvaluationError as exc:
            logger.warning("Weight %r could not be evaluated: %s; using weight 0", self.expression, exc)
        return 0.0

    def estimate(
        self, group_weights: Mapping[str, float], fallback: float = DEFAULT_ESTIMATE_WEIGHT
    ) -> float:
        """Best-effort, context-free value used for probability analysis."""
        try:
            text = substitute_groups(self.expression, group_weights)
        except UnresolvedPlaceholderError as exc:
            logger.warning("Weight %r: %s; estimating %s", self.expression, exc, fallback)
            return fallback
        if has_placeholders(text):
            return fallback
        try:
            return max(0.0, evaluate(text))
        except EvaluationError as exc:
            logger.warning("Weight %r could not be evaluated: %s; estimating %s", self.expression, exc, fallback)
            return fallback


WeightOperation = Union[ConstantWeight, ExpressionWeight]


def parse_weight(raw: object) -> WeightOperation:
    """Build a weight operation from a config value.

    Numbers, and strings that read as numbers (``"15"``, ``"+15"``), become
    constants; every other string is kept as an expression.
    """
    if isinstance(raw, bool):
        raise ValueError("Weight must be a number or an expression string.")
    if isinstance(raw, (int, float)):
        return ConstantWeight(float(raw))
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("Weight must be a number or an expression string.")
    text = raw.strip()
    if text.startswith("+"):
        text = text[1:].strip()
    try:
        value = float(text)
    except ValueError:
        return ExpressionWeight(text)
    if not math.isfinite(value):
        raise ValueError("Weight must be finite.")
    return ConstantWeight(value)
