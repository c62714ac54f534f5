import pytest

from adventure_book.core.rng import DiceRNG


def test_rng_determinism_same_seed() -> None:
    rng_a = DiceRNG(12345)
    rng_b = DiceRNG(12345)

    dice_a = [rng_a.die(2, 6) for _ in range(5)]
    dice_b = [rng_b.die(2, 6) for _ in range(5)]
    pools_a = [rng_a.pool(4, 6, 4) for _ in range(5)]
    pools_b = [rng_b.pool(4, 6, 4) for _ in range(5)]
    explodes_a = [rng_a.die_explode(3, 6) for _ in range(5)]
    explodes_b = [rng_b.die_explode(3, 6) for _ in range(5)]

    assert dice_a == dice_b
    assert pools_a == pools_b
    assert explodes_a == explodes_b


def test_rng_different_seed() -> None:
    rng_a = DiceRNG(11111)
    rng_b = DiceRNG(22222)

    draws_a = [rng_a.die(1, 100) for _ in range(5)]
    draws_b = [rng_b.die(1, 100) for _ in range(5)]

    assert draws_a != draws_b


def test_rng_keeps_seed() -> None:
    assert DiceRNG(42).seed == 42


@pytest.mark.parametrize("amount, sides", [(1, 1), (1, 20), (3, 6), (10, 4)])
def test_die_stays_within_combined_range(amount: int, sides: int) -> None:
    rng = DiceRNG(7)
    for _ in range(1000):
        roll = rng.die(amount, sides)
        assert amount <= roll <= amount * sides


def test_die_is_a_single_draw_not_a_sum() -> None:
    rng = DiceRNG(3)
    rolls = {rng.die(3, 6) for _ in range(2000)}

    # Every value in [3, 18] shows up with a uniform draw.
    assert rolls == set(range(3, 19))


def test_pool_counts_stay_within_dice_amount() -> None:
    rng = DiceRNG(99)
    for _ in range(500):
        assert 0 <= rng.pool(5, 6, 4) <= 5
        assert 0 <= rng.pool_reverse(5, 6, 2) <= 5


def test_pool_threshold_at_one_counts_every_die() -> None:
    rng = DiceRNG(5)

    assert rng.pool(6, 10, 1) == 6


def test_pool_reverse_threshold_at_sides_counts_every_die() -> None:
    rng = DiceRNG(5)

    assert rng.pool_reverse(6, 10, 10) == 6


def test_die_explode_is_at_least_amount() -> None:
    rng = DiceRNG(2024)
    rolls = [rng.die_explode(2, 4) for _ in range(1000)]

    assert min(rolls) >= 2
    # Some die shows its maximum and rerolls in a thousand tries.
    assert max(rolls) > 8


@pytest.mark.parametrize(
    "call",
    [
        lambda rng: rng.die(0, 6),
        lambda rng: rng.die(1, 0),
        lambda rng: rng.die(-2, 6),
        lambda rng: rng.pool(3, 6, 0),
        lambda rng: rng.pool_reverse(0, 6, 3),
        lambda rng: rng.die_explode(1, 0),
        lambda rng: rng.die_explode(2, 1),
    ],
)
def test_rng_rejects_non_positive_arguments(call) -> None:
    with pytest.raises(ValueError):
        call(DiceRNG(1))
