"""
Music Domain Services

Randomisation rules for the queue. Every method takes the random source as
an argument so sessions can share one seeded generator in tests.
"""

from __future__ import annotations

import random
from typing import TypeVar

T = TypeVar("T")


class ShuffleDomainService:
    """Queue ordering rules used when the shuffle flag is active."""

    @classmethod
    def shuffle(cls, items: list[T], rng: random.Random) -> None:
        """Permute ``items`` in place with the Durstenfeld variant of Fisher-Yates.

        Walks ``i`` from the last index down to 1 and swaps element ``i`` with
        a uniformly chosen element in ``[0, i]``.
        """
        for i in range(len(items) - 1, 0, -1):
            j = rng.randint(0, i)
            items[i], items[j] = items[j], items[i]

    @classmethod
    def biased_insert_index(cls, length: int, rng: random.Random) -> int:
        """Pick an insertion index in ``[0, length]`` skewed towards the tail.

        Two independent uniform draws are taken and the larger one wins, which
        makes a just-finished looped track less likely to come round again
        within a short span.
        """
        if length <= 0:
            return 0
        return max(rng.randint(0, length), rng.randint(0, length))
