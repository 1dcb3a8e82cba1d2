"""Unbiased random k-permutations of a card sequence (Robert Floyd's algorithm).

Floyd's sampler draws exactly ``k`` random integers per selection, no matter
how large the source is, and the resulting index list is itself in uniformly
random order, so every ordered ``k``-selection is equally likely:

    S := []
    for J in N-k .. N-1:
        T := uniform integer in [0, J]
        if T in S: insert J right after T
        else:      prepend T

The random source is a small protocol so production code can use a seeded
Mersenne Twister while tests inject scripted draws.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple, TypeVar, Union

T = TypeVar("T")


class RandomSource(Protocol):
    def draw(self, upper: int) -> int:
        """Return an integer drawn uniformly from ``[0, upper]``."""
        ...


class SeededRandom:
    """`RandomSource` backed by :class:`random.Random`."""

    def __init__(self, seed: Optional[Union[int, str]] = None) -> None:
        self._rng = random.Random(seed)

    @classmethod
    def for_stream(cls, seed: int, stream: int) -> "SeededRandom":
        # String seeds are hashed with SHA-512, so neighbouring streams share no state.
        return cls(f"{seed}/{stream}")

    def draw(self, upper: int) -> int:
        return self._rng.randrange(upper + 1)


@dataclass(frozen=True)
class SeededStreams:
    """Picklable factory handing each simulation chunk its own generator."""

    seed: int = 1

    def __call__(self, stream: int) -> SeededRandom:
        return SeededRandom.for_stream(self.seed, stream)


def permutations(k: int, source: Sequence[T], rng: RandomSource) -> Iterator[List[T]]:
    """Yield an endless stream of random ordered ``k``-selections from ``source``."""
    n = len(source)
    if k < 0 or k > n:
        raise ValueError(f"Cannot select {k} of {n} elements")
    return _floyd(k, tuple(source), rng)


def _floyd(k: int, items: Tuple[T, ...], rng: RandomSource) -> Iterator[List[T]]:
    n = len(items)
    while True:
        selected: List[int] = []
        for j in range(n - k, n):
            t = rng.draw(j)
            if t in selected:
                selected.insert(selected.index(t) + 1, j)
            else:
                selected.insert(0, t)
        assert len(selected) == k, "bug: floyd selection has the wrong length"
        yield [items[idx] for idx in selected]
