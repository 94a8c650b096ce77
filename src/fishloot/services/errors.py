"""Service-layer exceptions."""


class NoEligibleLootError(Exception):
    """Raised when no loot has a positive weight for a draw (nothing is caught)."""
