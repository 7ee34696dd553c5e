import pytest

from skirmish.core.rng import RNG


def test_rng_determinism_same_seed() -> None:
    rng_a = RNG(12345)
    rng_b = RNG(12345)

    ints_a = [rng_a.randint(1, 100) for _ in range(5)]
    ints_b = [rng_b.randint(1, 100) for _ in range(5)]
    rolls_a = [rng_a.d20() for _ in range(5)]
    rolls_b = [rng_b.d20() for _ in range(5)]
    choices_a = [rng_a.choice(["a", "b", "c"]) for _ in range(5)]
    choices_b = [rng_b.choice(["a", "b", "c"]) for _ in range(5)]

    assert ints_a == ints_b
    assert rolls_a == rolls_b
    assert choices_a == choices_b


def test_rng_different_seed() -> None:
    rng_a = RNG(11111)
    rng_b = RNG(22222)

    draws_a = [rng_a.randint(1, 100) for _ in range(5)]
    draws_b = [rng_b.randint(1, 100) for _ in range(5)]

    assert draws_a != draws_b


def test_d20_stays_on_the_die() -> None:
    rng = RNG(7)
    rolls = {rng.d20() for _ in range(500)}

    assert rolls <= set(range(1, 21))
    assert 1 in rolls and 20 in rolls


def test_percent_edges_do_not_draw() -> None:
    rng = RNG(3)
    reference = RNG(3)

    assert rng.percent(0) is False
    assert rng.percent(-10) is False
    assert rng.percent(100) is True
    assert rng.percent(150) is True
    assert rng.random() == reference.random()


def test_vary_stays_within_variance() -> None:
    rng = RNG(99)
    values = [rng.vary(100, 0.15) for _ in range(200)]

    assert all(85 <= value <= 115 for value in values)


def test_choice_rejects_empty_sequence() -> None:
    with pytest.raises(ValueError):
        RNG(1).choice([])
