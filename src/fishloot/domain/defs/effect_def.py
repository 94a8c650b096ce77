"""Effect definition primitives."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from fishloot.core.types import ModifierKind


@dataclass(frozen=True, slots=True)
class WeightModifier:
    """Adjusts the weight of a loot id or of every loot matching a tag directive.

    Modifiers only touch loots that already have a positive weight, unless
    ``ignore_conditions`` is set, in which case the target loots are adjusted
    even when no reachable group listed them.
    """

    target: str
    kind: ModifierKind
    amount: float
    ignore_conditions: bool = False

    def apply(self, weight: float) -> float:
        if self.kind == "add":
            return weight + self.amount
        return weight * self.amount


@dataclass(frozen=True, slots=True)
class EffectDef:
    """Transient modifier set active for a single fishing attempt."""

    modifiers: Tuple[WeightModifier, ...] = ()

    @classmethod
    def empty(cls) -> "EffectDef":
        return cls()

    def __bool__(self) -> bool:
        return bool(self.modifiers)
