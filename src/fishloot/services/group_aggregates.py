"""Precomputed combination totals backing ``{{group_*}}`` placeholders."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from types import MappingProxyType
from typing import Dict, Mapping

from fishloot.core.expression import canonical_group_key
from fishloot.core.types import COMBINATION_SEPARATOR
from fishloot.domain.conditional import ConditionalElement, walk_groups
from fishloot.domain.defs import LootDef
from fishloot.domain.targets import LootTarget

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GroupAggregates:
    """Read-only result of one precomputation pass."""

    totals: Mapping[str, float]
    actual_group_ids: frozenset[str]

    def total_for(self, combination: str) -> float | None:
        return self.totals.get(canonical_group_key(combination))


def collect_actual_group_ids(groups: Mapping[str, ConditionalElement]) -> frozenset[str]:
    """Return the ids of every configured group level, nested ones included."""
    return frozenset(group_id for group_id, _ in walk_groups(groups))


def build_group_aggregates(
    groups: Mapping[str, ConditionalElement],
    loots: Mapping[str, LootDef],
) -> GroupAggregates:
    """Sum constant weights per two-tag combination of each listed loot.

    Only plain ``loot:weight`` rules with constant weights count. Expression
    weights cannot be resolved without a context and contribute nothing.
    """
    totals: Dict[str, float] = {}
    for group_id, node in walk_groups(groups):
        for rule in node.element:
            if not isinstance(rule.target, LootTarget) or not rule.operation.is_constant:
                continue
            weight = rule.operation.constant_value
            if weight <= 0:
                continue
            loot = loots.get(rule.target.loot_id)
            if loot is None:
                continue
            for first, second in combinations(sorted(set(loot.groups)), 2):
                key = canonical_group_key(f"{first}{COMBINATION_SEPARATOR}{second}")
                totals[key] = totals.get(key, 0.0) + weight

    actual_group_ids = collect_actual_group_ids(groups)
    logger.debug(
        "Precomputed %d combination totals over %d groups.", len(totals), len(actual_group_ids)
    )
    return GroupAggregates(
        totals=MappingProxyType({key: total for key, total in totals.items() if total > 0}),
        actual_group_ids=actual_group_ids,
    )
