"""Context-driven weight collection and cumulative-weight sampling."""
from __future__ import annotations

import logging
from typing import Dict, Mapping

from fishloot.core.rng import RNG
from fishloot.domain.conditional import ConditionalElement
from fishloot.domain.context import LootContext
from fishloot.domain.defs import EffectDef, LootDef
from fishloot.domain.targets import LootTarget, parse_target
from fishloot.services.errors import NoEligibleLootError
from fishloot.services.generation import LootGeneration

logger = logging.getLogger(__name__)


class WeightedSelector:
    """Builds the effective weight map for one attempt and draws from it."""

    def __init__(self, rng: RNG) -> None:
        self._rng = rng

    def collect_weights(
        self,
        generation: LootGeneration,
        start_nodes: Mapping[str, ConditionalElement],
        context: LootContext,
        effect: EffectDef | None = None,
    ) -> Dict[str, float]:
        """Return ``loot_id -> weight`` for every loot with a positive weight.

        Keys keep the order in which loots were first reached, which follows
        the configuration order and is stable within a generation.
        """
        group_weights = generation.aggregates().totals
        weights: Dict[str, float] = {}
        for node in start_nodes.values():
            self._accumulate(node, generation, context, group_weights, weights)
        if effect:
            self._apply_effect(effect, generation, weights)
        return {loot_id: weight for loot_id, weight in weights.items() if weight > 0}

    def _accumulate(
        self,
        node: ConditionalElement,
        generation: LootGeneration,
        context: LootContext,
        group_weights: Mapping[str, float],
        weights: Dict[str, float],
    ) -> None:
        if not node.is_satisfied(context):
            return
        for rule in node.element:
            weight = rule.operation.resolve(context, group_weights)
            if weight <= 0:
                continue
            for loot_id in rule.target.expand(generation.loots.values()):
                weights[loot_id] = weights.get(loot_id, 0.0) + weight
        for child in node.children.values():
            self._accumulate(child, generation, context, group_weights, weights)

    @staticmethod
    def _apply_effect(effect: EffectDef, generation: LootGeneration, weights: Dict[str, float]) -> None:
        for modifier in effect.modifiers:
            try:
                target = parse_target(modifier.target)
            except ValueError as exc:
                logger.warning("Ignoring effect modifier for %r: %s", modifier.target, exc)
                continue
            loot_ids = list(target.expand(generation.loots.values()))
            if isinstance(target, LootTarget) and target.loot_id not in generation.loots:
                loot_ids = list(generation.group_members(target.loot_id))
                if not loot_ids:
                    logger.warning("Effect modifier target %r matches no loot or tag", modifier.target)
                    continue
            for loot_id in loot_ids:
                current = weights.get(loot_id, 0.0)
                if current <= 0 and not modifier.ignore_conditions:
                    continue
                weights[loot_id] = modifier.apply(current)

    def sample(self, weights: Mapping[str, float]) -> str:
        """Pick one key with probability proportional to its weight."""
        total = sum(weight for weight in weights.values() if weight > 0)
        if total <= 0:
            raise NoEligibleLootError("No loot has a positive weight.")
        roll = self._rng.uniform_below(total)
        cumulative = 0.0
        chosen = ""
        for loot_id, weight in weights.items():
            if weight <= 0:
                continue
            cumulative += weight
            chosen = loot_id
            if cumulative > roll:
                break
        return chosen

    def select(
        self,
        generation: LootGeneration,
        start_nodes: Mapping[str, ConditionalElement],
        context: LootContext,
        effect: EffectDef | None = None,
    ) -> LootDef:
        weights = self.collect_weights(generation, start_nodes, context, effect)
        return generation.loots[self.sample(weights)]
