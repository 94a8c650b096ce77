"""Rule targets: a single loot id or a tag combination directive."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

from fishloot.core.expression import canonical_group_key
from fishloot.core.types import COMBINATION_SEPARATOR, FOR_EACH_PREFIX

from .defs import LootDef


@dataclass(frozen=True, slots=True)
class LootTarget:
    loot_id: str

    def expand(self, loots: Iterable[LootDef]) -> Iterator[str]:
        yield self.loot_id


@dataclass(frozen=True, slots=True)
class CombinationTarget:
    """Every loot whose groups are a superset of ``tags``."""

    tags: Tuple[str, ...]

    @property
    def key(self) -> str:
        return canonical_group_key(COMBINATION_SEPARATOR.join(self.tags))

    def expand(self, loots: Iterable[LootDef]) -> Iterator[str]:
        for loot in loots:
            if loot.has_groups(self.tags):
                yield loot.id


RuleTarget = Union[LootTarget, CombinationTarget]


def is_combination(text: str) -> bool:
    return text.startswith(FOR_EACH_PREFIX) or COMBINATION_SEPARATOR in text


def parse_target(text: str) -> RuleTarget:
    """Parse ``fish_id``, ``a&b`` or ``group_for_each:a&b``.

    Raises ValueError for an empty id or an empty tag in a combination.
    """
    stripped = text.strip()
    if not stripped:
        raise ValueError("Target must not be empty.")
    if not is_combination(stripped):
        return LootTarget(stripped)
    directive = stripped[len(FOR_EACH_PREFIX):] if stripped.startswith(FOR_EACH_PREFIX) else stripped
    tags = tuple(tag.strip() for tag in directive.split(COMBINATION_SEPARATOR))
    if not tags or any(not tag for tag in tags):
        raise ValueError(f"Combination target '{text}' has an empty tag.")
    return CombinationTarget(tuple(sorted(set(tags))))
