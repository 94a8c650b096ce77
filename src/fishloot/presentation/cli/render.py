"""Plain-text rendering for the operator CLI."""
from __future__ import annotations

import os
from typing import Mapping

from fishloot.services.probability_calculator import GroupProbabilityInfo


def debug_enabled() -> bool:
    """Return True only when FISHLOOT_DEBUG is explicitly set to '1'."""
    return os.getenv("FISHLOOT_DEBUG") == "1"


def render_group_probabilities(loot_id: str, probabilities: Mapping[str, GroupProbabilityInfo]) -> list[str]:
    if not probabilities:
        return [f"{loot_id} cannot be caught in any configured group."]
    lines = [f"{loot_id}:"]
    for info in probabilities.values():
        line = f"  {info.group_id}: {info.formatted_probability}"
        if info.conditions_description:
            line += f" [{info.conditions_description}]"
        lines.append(line)
    return lines


def render_simulation(counts: Mapping[str, int], draws: int, misses: int) -> list[str]:
    lines = [f"{draws} draws:"]
    for loot_id, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
        lines.append(f"  {loot_id}: {count} ({count / draws * 100:.2f}%)")
    if misses:
        lines.append(f"  nothing: {misses} ({misses / draws * 100:.2f}%)")
    return lines
