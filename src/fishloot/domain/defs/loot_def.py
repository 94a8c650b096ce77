"""Loot definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Tuple


class LootType(Enum):
    """What kind of outcome a loot produces when caught."""

    ITEM = "ITEM"
    ENTITY = "ENTITY"
    BLOCK = "BLOCK"
    SCORE = "SCORE"


@dataclass(frozen=True, slots=True)
class LootDef:
    """One obtainable reward outcome.

    ``groups`` holds the tags the loot belongs to; they drive combination
    targets such as ``ocean&no_star`` and the ``{{group_*}}`` aggregates.
    """

    id: str
    type: LootType = LootType.ITEM
    groups: Tuple[str, ...] = ()
    nick: str = ""
    lore: Tuple[str, ...] = ()
    score: float = 0.0
    instant_game: bool = False
    disable_game: bool = False
    disable_stats: bool = False
    show_in_finder: bool = True
    prevent_grabbing: bool = False
    to_inventory: bool = False
    custom_data: Mapping[str, str] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.nick or self.id

    def has_groups(self, tags: Tuple[str, ...] | frozenset[str]) -> bool:
        """Return True when every tag in ``tags`` is one of this loot's groups."""
        return set(tags).issubset(self.groups)
