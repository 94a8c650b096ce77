"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random


class RNG:
    """Wrapper around random.Random used for every loot draw."""

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._random = Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def uniform_below(self, upper: float) -> float:
        """Return a float r such that 0 <= r < upper."""
        if upper <= 0:
            raise ValueError("Upper bound must be positive.")
        return self._random.random() * upper
