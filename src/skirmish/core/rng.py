"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import MutableSequence, Sequence, TypeVar

T_co = TypeVar("T_co")


class RNG:
    """Wrapper around random.Random that provides deterministic helpers."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def d20(self) -> int:
        """Roll a twenty-sided die."""
        return self._random.randint(1, 20)

    def percent(self, chance: float) -> bool:
        """Return True with the given percentage chance (0-100)."""
        if chance >= 100:
            return True
        if chance <= 0:
            return False
        return self._random.random() * 100 < chance

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return self._random.choice(seq)

    def shuffle(self, seq: MutableSequence[T_co]) -> None:
        """Shuffle the sequence in-place."""
        self._random.shuffle(seq)

    def vary(self, value: float, variance: float) -> int:
        """Return ``value`` jittered by +/- ``variance`` (a fraction), floored."""
        factor = 1 + (self._random.random() * 2 - 1) * variance
        return int(value * factor)
