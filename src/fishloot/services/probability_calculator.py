"""Reverse analysis: per-group catch probabilities of a loot."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping

from fishloot.domain.conditional import ConditionalElement, join_descriptions
from fishloot.domain.context import LootContext
from fishloot.domain.defs import LootType
from fishloot.domain.weights import DEFAULT_ESTIMATE_WEIGHT
from fishloot.services.generation import LootGeneration

logger = logging.getLogger(__name__)

GenerationSource = Callable[[], LootGeneration]


@dataclass(frozen=True, slots=True)
class GroupProbabilityInfo:
    """Chance of a loot within one group, in percent."""

    group_id: str
    probability: float
    conditions_description: str = ""

    @property
    def formatted_probability(self) -> str:
        return f"{self.probability:.2f}%"


class GroupProbabilityCalculator:
    """Turns configured weights into human-readable percentages.

    Every group's own rules are weighed without a live context: constant
    weights are used as-is and expressions that cannot be computed count as
    ``fallback_weight``. Without an ``analysis_context`` only groups that can
    never open (a ``never`` or unknown requirement) are left out; with one,
    requirements are checked against it. A group that is left out takes its
    sub-groups with it.

    Results are cached per loot id until :meth:`clear_cache`, which the loot
    service calls on every reload. A result computed against a generation
    that was swapped out meanwhile is returned but not cached.
    """

    def __init__(
        self,
        generation_source: GenerationSource,
        analysis_context: LootContext | None = None,
        fallback_weight: float = DEFAULT_ESTIMATE_WEIGHT,
    ) -> None:
        self._generation_source = generation_source
        self._analysis_context = analysis_context
        self._fallback_weight = fallback_weight
        self._cache: Dict[str, Dict[str, GroupProbabilityInfo]] = {}
        self._cache_lock = threading.Lock()

    def calculate_group_probabilities(self, loot_id: str) -> Dict[str, GroupProbabilityInfo]:
        cached = self._cache.get(loot_id)
        if cached is not None:
            return dict(cached)

        generation = self._generation_source()
        loot = generation.get_loot(loot_id)
        if loot is None or loot.type is not LootType.ITEM:
            return {}

        aggregates = generation.aggregates()
        result: Dict[str, GroupProbabilityInfo] = {}
        for group_id, node in generation.groups.items():
            self._visit(loot_id, group_id, node, "", generation, aggregates.totals, result)
        result = {
            group_id: info
            for group_id, info in result.items()
            if group_id in aggregates.actual_group_ids
        }

        if result:
            with self._cache_lock:
                if self._generation_source() is generation:
                    self._cache[loot_id] = dict(result)
        return result

    def _visit(
        self,
        loot_id: str,
        group_id: str,
        node: ConditionalElement,
        parent_description: str,
        generation: LootGeneration,
        group_weights: Mapping[str, float],
        result: Dict[str, GroupProbabilityInfo],
    ) -> None:
        try:
            if not self._is_open(node):
                logger.debug("Group %s is closed for analysis.", group_id)
                return
            description = join_descriptions(parent_description, node.describe_requirements())
            weights = self._estimate_weights(node, generation, group_weights)
        except Exception as exc:
            logger.warning("Skipping group %s while analysing %s: %s", group_id, loot_id, exc)
            return

        weight = weights.get(loot_id, 0.0)
        if weight > 0:
            probability = weight / sum(weights.values()) * 100.0
            result[group_id] = GroupProbabilityInfo(group_id, probability, description)
            logger.debug("%s in group %s: %.2f%%", loot_id, group_id, probability)

        for child_id, child in node.children.items():
            self._visit(loot_id, child_id, child, description, generation, group_weights, result)

    def _is_open(self, node: ConditionalElement) -> bool:
        if self._analysis_context is None:
            return node.can_be_satisfied()
        return node.is_satisfied(self._analysis_context)

    def _estimate_weights(
        self,
        node: ConditionalElement,
        generation: LootGeneration,
        group_weights: Mapping[str, float],
    ) -> Dict[str, float]:
        weights: Dict[str, float] = {}
        for rule in node.element:
            weight = rule.operation.estimate(group_weights, self._fallback_weight)
            if weight <= 0:
                continue
            for target_id in rule.target.expand(generation.loots.values()):
                weights[target_id] = weights.get(target_id, 0.0) + weight
        return weights

    def get_loot_groups(self, loot_id: str) -> List[str]:
        loot = self._generation_source().get_loot(loot_id)
        return list(loot.groups) if loot is not None else []

    def get_group_probability(self, loot_id: str, group_id: str) -> GroupProbabilityInfo | None:
        return self.calculate_group_probabilities(loot_id).get(group_id)

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()
        logger.debug("Group probability cache cleared.")
