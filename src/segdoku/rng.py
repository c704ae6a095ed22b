"""Seeded random source shared by every stage of board generation."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

MAX_SAFE_INTEGER = 2**53 - 1

_LCG_MULTIPLIER = 1664525
_LCG_INCREMENT = 1013904223
_LCG_MODULUS = 2**32


class RNG(ABC):
    """
    Base random source. Subclasses only implement `next`; `get_next`, `pick`
    and `shuffle` are derived from it so a fixed-sequence double can stand in
    for the real generator in tests.
    """

    def __init__(self, seed: int):
        self.seed = seed

    @abstractmethod
    def next(self, lower: int, upper: int) -> int:
        """Return an integer in [lower, upper]; `upper <= lower` yields `lower`."""

    def get_next(self, a: int, b: Optional[int] = None) -> int:
        if b is None:
            return self.next(0, a)
        return self.next(a, b)

    def pick(self, items: Sequence[T]) -> T:
        return items[self.get_next(0, len(items) - 1)]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.get_next(0, i)
            result[i], result[j] = result[j], result[i]
        return result


class LcgRNG(RNG):
    """Linear congruential generator (Numerical Recipes constants)."""

    def __init__(self, seed: int):
        super().__init__(seed)
        self.state = seed

    def next(self, lower: int, upper: int) -> int:
        if upper <= lower:
            return lower

        self.state = (self.state * _LCG_MULTIPLIER + _LCG_INCREMENT) % _LCG_MODULUS
        return lower + self.state % (upper - lower + 1)


def create_rng(seed: int) -> RNG:
    return LcgRNG(seed)
