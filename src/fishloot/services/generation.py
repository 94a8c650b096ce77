"""Immutable snapshot of one configuration load."""
from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Dict, List, Mapping

from fishloot.domain.conditional import ConditionalElement, walk_groups
from fishloot.domain.defs import LootDef
from fishloot.services.group_aggregates import GroupAggregates, build_group_aggregates


class LootGeneration:
    """Loots, group tree and aggregate table of a single (re)load.

    A generation is never mutated after construction; a reload builds a new
    one and swaps the reference. The aggregate table is computed on first
    use, exactly once, behind a lock.
    """

    def __init__(
        self,
        number: int,
        loots: Mapping[str, LootDef],
        groups: Mapping[str, ConditionalElement],
    ) -> None:
        self._number = number
        self._loots = MappingProxyType(dict(loots))
        self._groups = MappingProxyType(dict(groups))
        members: Dict[str, List[str]] = {}
        for loot in self._loots.values():
            for tag in loot.groups:
                members.setdefault(tag, []).append(loot.id)
        self._members = MappingProxyType({tag: tuple(ids) for tag, ids in members.items()})
        self._aggregates: GroupAggregates | None = None
        self._lock = threading.Lock()

    @classmethod
    def empty(cls) -> "LootGeneration":
        return cls(0, {}, {})

    @property
    def number(self) -> int:
        return self._number

    @property
    def loots(self) -> Mapping[str, LootDef]:
        return self._loots

    @property
    def groups(self) -> Mapping[str, ConditionalElement]:
        return self._groups

    def get_loot(self, loot_id: str) -> LootDef | None:
        return self._loots.get(loot_id)

    def group_members(self, tag: str) -> tuple[str, ...]:
        return self._members.get(tag, ())

    def find_group(self, group_id: str) -> ConditionalElement:
        """Return a group by id at any depth; raises KeyError when absent."""
        for candidate_id, node in walk_groups(self._groups):
            if candidate_id == group_id:
                return node
        raise KeyError(group_id)

    def aggregates(self) -> GroupAggregates:
        aggregates = self._aggregates
        if aggregates is None:
            with self._lock:
                if self._aggregates is None:
                    self._aggregates = build_group_aggregates(self._groups, self._loots)
                aggregates = self._aggregates
        return aggregates
