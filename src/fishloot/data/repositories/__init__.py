"""Repository exports."""

from .loot_conditions_repo import BUILTIN_REQUIREMENTS, LootConditionsRepository, RequirementFactory
from .loot_repo import LootRepository

__all__ = [
    "BUILTIN_REQUIREMENTS",
    "LootConditionsRepository",
    "LootRepository",
    "RequirementFactory",
]
