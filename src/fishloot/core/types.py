"""Shared type aliases for the core and domain layers."""
from typing import Literal

ModifierKind = Literal["add", "multiply"]

COMBINATION_SEPARATOR = "&"
FOR_EACH_PREFIX = "group_for_each:"
GROUP_PLACEHOLDER_PREFIX = "group_"

__all__ = [
    "COMBINATION_SEPARATOR",
    "FOR_EACH_PREFIX",
    "GROUP_PLACEHOLDER_PREFIX",
    "ModifierKind",
]
