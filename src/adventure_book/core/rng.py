"""Deterministic dice engine built on top of random.Random."""
from __future__ import annotations

from random import Random


class DiceRNG:
    """Wrapper around random.Random that rolls dice deterministically.

    All helpers require strictly positive arguments and raise ValueError
    otherwise.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._random = Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def die(self, amount: int, sides: int) -> int:
        """Return one draw across the combined range [amount, amount * sides]."""
        _require_positive(amount=amount, sides=sides)
        return self._random.randint(amount, amount * sides)

    def pool(self, amount: int, sides: int, threshold: int) -> int:
        """Roll `amount` dice and count the ones showing at least `threshold`."""
        _require_positive(amount=amount, sides=sides, threshold=threshold)
        return sum(1 for _ in range(amount) if self.die(1, sides) >= threshold)

    def pool_reverse(self, amount: int, sides: int, threshold: int) -> int:
        """Roll `amount` dice and count the ones showing at most `threshold`."""
        _require_positive(amount=amount, sides=sides, threshold=threshold)
        return sum(1 for _ in range(amount) if self.die(1, sides) <= threshold)

    def die_explode(self, amount: int, sides: int) -> int:
        """Roll `amount` dice, rerolling and adding every die that shows its maximum."""
        _require_positive(amount=amount, sides=sides)
        if sides == 1:
            raise ValueError("Exploding dice need at least two sides.")
        total = 0
        for _ in range(amount):
            while True:
                roll = self.die(1, sides)
                total += roll
                if roll != sides:
                    break
        return total


def _require_positive(**values: int) -> None:
    for label, value in values.items():
        if value <= 0:
            raise ValueError(f"Dice {label} must be positive, got {value}.")
