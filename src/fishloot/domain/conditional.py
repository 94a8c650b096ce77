"""Nested, requirement-gated groups of weighted rules."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping, Tuple

from .context import LootContext
from .requirements import Requirement, all_satisfied, can_ever_pass
from .targets import RuleTarget
from .weights import WeightOperation


@dataclass(frozen=True, slots=True)
class WeightRule:
    """One ``target:weight`` pair listed by a group."""

    target: RuleTarget
    operation: WeightOperation


@dataclass(frozen=True, slots=True)
class ConditionalElement:
    """A group node. Each node exclusively owns its ``children``."""

    requirements: Tuple[Requirement, ...] = ()
    element: Tuple[WeightRule, ...] = ()
    children: Mapping[str, "ConditionalElement"] = field(default_factory=dict)

    def is_satisfied(self, context: LootContext) -> bool:
        return all_satisfied(self.requirements, context)

    def can_be_satisfied(self) -> bool:
        """Context-free check: False only for groups that are closed for good."""
        return can_ever_pass(self.requirements)

    def describe_requirements(self) -> str:
        count = len(self.requirements)
        if count == 0:
            return ""
        return f"{count} condition" if count == 1 else f"{count} conditions"


def join_descriptions(parent: str, own: str) -> str:
    if not parent:
        return own
    if not own:
        return parent
    return f"{parent}, {own}"


def walk_groups(groups: Mapping[str, ConditionalElement]) -> Iterator[tuple[str, ConditionalElement]]:
    """Yield ``(group_id, node)`` depth-first, parents before children."""
    for group_id, node in groups.items():
        yield group_id, node
        yield from walk_groups(node.children)
