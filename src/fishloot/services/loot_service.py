"""Loot registry access, reloads and live loot selection."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping

from fishloot.core.rng import RNG
from fishloot.data.repositories import LootConditionsRepository, LootRepository, RequirementFactory
from fishloot.domain.conditional import ConditionalElement
from fishloot.domain.context import LootContext
from fishloot.domain.defs import EffectDef, LootDef
from fishloot.services.generation import LootGeneration
from fishloot.services.weighted_selector import WeightedSelector

logger = logging.getLogger(__name__)

ReloadHook = Callable[[], None]


class LootService:
    """Owns the current generation and answers gameplay loot requests.

    Reads grab the generation reference once and work only against it, so a
    concurrent reload is never observed half-way.
    """

    def __init__(
        self,
        loot_repo: LootRepository,
        conditions_repo: LootConditionsRepository,
        rng: RNG,
        selector: WeightedSelector | None = None,
    ) -> None:
        self._loot_repo = loot_repo
        self._conditions_repo = conditions_repo
        self._selector = selector or WeightedSelector(rng)
        self._reload_hooks: List[ReloadHook] = []
        self._generation = LootGeneration.empty()
        self.reload()

    @classmethod
    def from_definitions(
        cls,
        rng: RNG,
        base_path: Path | str | None = None,
        requirement_factories: Mapping[str, RequirementFactory] | None = None,
    ) -> "LootService":
        loot_repo = LootRepository(base_path=base_path)
        conditions_repo = LootConditionsRepository(
            loot_repo=loot_repo,
            requirement_factories=requirement_factories,
            base_path=base_path,
        )
        return cls(loot_repo, conditions_repo, rng)

    @classmethod
    def from_sections(
        cls,
        loot_sections: object,
        condition_sections: object,
        rng: RNG,
        requirement_factories: Mapping[str, RequirementFactory] | None = None,
    ) -> "LootService":
        loot_repo = LootRepository(sections=loot_sections)
        conditions_repo = LootConditionsRepository(
            loot_repo=loot_repo,
            requirement_factories=requirement_factories,
            sections=condition_sections,
        )
        return cls(loot_repo, conditions_repo, rng)

    # ---------------------------------------------------------------- Reloads
    def current_generation(self) -> LootGeneration:
        return self._generation

    def add_reload_hook(self, hook: ReloadHook) -> None:
        """Register a callback run after every successful reload."""
        self._reload_hooks.append(hook)

    def reload(
        self,
        loot_sections: object | None = None,
        condition_sections: object | None = None,
    ) -> LootGeneration:
        """Rebuild every structure and swap in the new generation.

        When sections are omitted the repositories re-read their previous
        source. Structural errors propagate and leave the current generation
        in place.
        """
        self._loot_repo.refresh(loot_sections)
        self._conditions_repo.refresh(condition_sections)
        generation = LootGeneration(
            self._generation.number + 1,
            self._loot_repo.as_mapping(),
            self._conditions_repo.as_mapping(),
        )
        self._generation = generation
        logger.debug(
            "Loaded loot generation %d: %d loots, %d top-level groups.",
            generation.number,
            len(generation.loots),
            len(generation.groups),
        )
        for hook in self._reload_hooks:
            hook()
        return generation

    # ---------------------------------------------------------------- Registry
    def get_loot(self, loot_id: str) -> LootDef | None:
        return self._generation.get_loot(loot_id)

    def get_registered_loots(self) -> List[LootDef]:
        return list(self._generation.loots.values())

    def get_group_members(self, tag: str) -> List[str]:
        """Return the ids of every loot tagged with ``tag``."""
        return list(self._generation.group_members(tag))

    # ---------------------------------------------------------------- Selection
    def get_weight_map(
        self,
        effect: EffectDef | None,
        context: LootContext,
        group_ids: Iterable[str] | None = None,
    ) -> Dict[str, float]:
        generation = self._generation
        return self._selector.collect_weights(
            generation, self._start_nodes(generation, group_ids), context, effect
        )

    def get_weighted_loots(self, effect: EffectDef | None, context: LootContext) -> List[str]:
        """Return the ids of every loot that could be caught right now."""
        return list(self.get_weight_map(effect, context))

    def get_next_loot(
        self,
        effect: EffectDef | None,
        context: LootContext,
        group_ids: Iterable[str] | None = None,
    ) -> LootDef:
        """Draw one loot; raises NoEligibleLootError when nothing is eligible."""
        generation = self._generation
        return self._selector.select(
            generation, self._start_nodes(generation, group_ids), context, effect
        )

    @staticmethod
    def _start_nodes(
        generation: LootGeneration, group_ids: Iterable[str] | None
    ) -> Mapping[str, ConditionalElement]:
        if group_ids is None:
            return generation.groups
        return {group_id: generation.find_group(group_id) for group_id in group_ids}
