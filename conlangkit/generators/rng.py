#!/usr/bin/env python3
"""
Seeded Random Source
====================
Deterministic pseudo-random source shared by every generation routine.

A linear congruential generator (multiplier 1664525, increment
1013904223, modulus 2**32) drives all sampling, so a given seed always
yields the same stream. Regenerating a language or sharing a seed with
someone else depends on that.

Derived operations:
- next_int: integer in a half-open range
- pick / pick_weighted: uniform and weighted selection
- pick_with_preference: style-biased selection (preferred 3x, avoided dropped)
- shuffle: Fisher-Yates on a copy
"""

import math
from typing import Any, Iterable, List, Sequence, TypeVar

T = TypeVar('T')

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32

# Selection weight of a preferred phoneme relative to a neutral one
PREFERENCE_WEIGHT = 3


def _weight_of(item: Any) -> float:
    """Read the weight of a record or mapping; absent weights count as 1."""
    if isinstance(item, dict):
        weight = item.get('weight', 1)
    else:
        weight = getattr(item, 'weight', 1)
    return 1 if weight is None else weight


class SeededRNG:
    """
    Deterministic random number generator.

    Each generation run owns one instance; state never crosses calls.
    """

    def __init__(self, seed: int):
        self.seed = int(seed) % LCG_MODULUS

    def next(self) -> float:
        """Return the next float in [0.0, 1.0)."""
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed / LCG_MODULUS

    def next_int(self, minimum: int, maximum: int) -> int:
        """Return an integer N such that minimum <= N < maximum."""
        return math.floor(self.next() * (maximum - minimum)) + minimum

    def pick(self, seq: Sequence[T]) -> T:
        """Return a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot pick from empty sequence")
        return seq[self.next_int(0, len(seq))]

    def pick_weighted(self, items: Sequence[T]) -> T:
        """
        Choose from records carrying a ``weight`` attribute (or key).

        Args:
            items: Weighted records; a zero total weight returns the first.

        Returns:
            Randomly selected record, proportional to its weight
        """
        if not items:
            raise IndexError("Cannot pick from empty sequence")

        total = sum(_weight_of(item) for item in items)
        if total <= 0:
            return items[0]

        r = self.next() * total
        for item in items:
            weight = _weight_of(item)
            if weight <= 0:
                continue
            r -= weight
            if r <= 0:
                return item

        return items[-1]

    def pick_with_preference(self,
                             seq: Sequence[T],
                             preferred: Iterable[T] = (),
                             avoided: Iterable[T] = ()) -> T:
        """
        Pick with a style bias.

        Avoided items are removed unless that would leave nothing, in
        which case the full sequence is used. Preferred items then get
        PREFERENCE_WEIGHT times the weight of the others.
        """
        if not seq:
            raise IndexError("Cannot pick from empty sequence")

        avoided = set(avoided or ())
        candidates = [item for item in seq if item not in avoided]
        if not candidates:
            candidates = list(seq)

        preferred = set(preferred or ())
        if not preferred:
            return self.pick(candidates)

        weighted = [
            {'value': item, 'weight': PREFERENCE_WEIGHT if item in preferred else 1}
            for item in candidates
        ]
        return self.pick_weighted(weighted)['value']

    def shuffle(self, seq: Sequence[T]) -> List[T]:
        """Return a shuffled copy; the input is never mutated."""
        result = list(seq)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(0, i + 1)
            result[i], result[j] = result[j], result[i]
        return result


__all__ = [
    'SeededRNG',
    'PREFERENCE_WEIGHT',
    'LCG_MULTIPLIER',
    'LCG_INCREMENT',
    'LCG_MODULUS',
]
