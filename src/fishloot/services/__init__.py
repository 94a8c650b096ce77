"""Service layer exports."""

from .errors import NoEligibleLootError
from .generation import LootGeneration
from .group_aggregates import GroupAggregates, build_group_aggregates
from .loot_service import LootService
from .probability_calculator import GroupProbabilityCalculator, GroupProbabilityInfo
from .weighted_selector import WeightedSelector

__all__ = [
    "GroupAggregates",
    "GroupProbabilityCalculator",
    "GroupProbabilityInfo",
    "LootGeneration",
    "LootService",
    "NoEligibleLootError",
    "WeightedSelector",
    "build_group_aggregates",
]
