"""Requirement predicates gating loot groups."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Tuple

from .context import LootContext


class Requirement(Protocol):
    """Boolean predicate evaluated against a loot context."""

    def is_satisfied(self, context: LootContext) -> bool:
        ...


def all_satisfied(requirements: Tuple[Requirement, ...], context: LootContext) -> bool:
    """Evaluate requirements in order, stopping at the first failure."""
    for requirement in requirements:
        if not requirement.is_satisfied(context):
            return False
    return True


def _matches(actual: Any, expected: Any) -> bool:
    return actual == expected or str(actual) == str(expected)


@dataclass(frozen=True, slots=True)
class ConstantRequirement:
    result: bool

    def is_satisfied(self, context: LootContext) -> bool:
        return self.result


def can_ever_pass(requirements: Tuple[Requirement, ...]) -> bool:
    """Return False when some requirement fails whatever the context holds."""
    return not any(
        isinstance(requirement, ConstantRequirement) and not requirement.result
        for requirement in requirements
    )


@dataclass(frozen=True, slots=True)
class ArgEqualsRequirement:
    arg: str
    value: Any

    def is_satisfied(self, context: LootContext) -> bool:
        if not context.has_arg(self.arg):
            return False
        return _matches(context.arg(self.arg), self.value)


@dataclass(frozen=True, slots=True)
class ArgInRequirement:
    """Passes when the argument is one of ``values`` (or is not, when negated)."""

    arg: str
    values: Tuple[Any, ...]
    negate: bool = False

    def is_satisfied(self, context: LootContext) -> bool:
        if not context.has_arg(self.arg):
            return self.negate
        actual = context.arg(self.arg)
        found = any(_matches(actual, value) for value in self.values)
        return not found if self.negate else found


@dataclass(frozen=True, slots=True)
class ArgRangeRequirement:
    arg: str
    minimum: float | None = None
    maximum: float | None = None

    def is_satisfied(self, context: LootContext) -> bool:
        raw = context.arg(self.arg)
        if raw is None or isinstance(raw, bool):
            return False
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return False
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True


@dataclass(frozen=True, slots=True)
class HasArgRequirement:
    arg: str

    def is_satisfied(self, context: LootContext) -> bool:
        return context.arg(self.arg) is not None
