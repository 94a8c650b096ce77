import pytest

from fishloot.core.rng import RNG


def test_rng_determinism_same_seed() -> None:
    rng_a = RNG(12345)
    rng_b = RNG(12345)

    floats_a = [rng_a.random() for _ in range(5)]
    floats_b = [rng_b.random() for _ in range(5)]
    rolls_a = [rng_a.uniform_below(40.0) for _ in range(5)]
    rolls_b = [rng_b.uniform_below(40.0) for _ in range(5)]

    assert floats_a == floats_b
    assert rolls_a == rolls_b
    assert rng_a.seed == 12345


def test_rng_different_seed() -> None:
    rng_a = RNG(11111)
    rng_b = RNG(22222)

    draws_a = [rng_a.random() for _ in range(5)]
    draws_b = [rng_b.random() for _ in range(5)]

    assert draws_a != draws_b


def test_uniform_below_stays_in_range() -> None:
    rng = RNG(7)
    for _ in range(1000):
        roll = rng.uniform_below(3.5)
        assert 0.0 <= roll < 3.5


def test_uniform_below_rejects_non_positive_bound() -> None:
    with pytest.raises(ValueError):
        RNG(1).uniform_below(0.0)
