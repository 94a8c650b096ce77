"""Domain definition exports."""

from .effect_def import EffectDef, WeightModifier
from .loot_def import LootDef, LootType

__all__ = [
    "EffectDef",
    "LootDef",
    "LootType",
    "WeightModifier",
]
