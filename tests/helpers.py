from __future__ import annotations

import itertools
from typing import Iterable, List

from engine.cards import Card, parse_cards
from engine.evaluator import Hand, evaluate_best


def cards(text: str) -> List[Card]:
    return parse_cards(text)


def hand(text: str) -> Hand:
    return evaluate_best(parse_cards(text))


class ScriptedRandom:
    """RandomSource that replays a fixed list of draws (wrapped into range)."""

    def __init__(self, draws: Iterable[int]) -> None:
        self._draws = itertools.cycle(list(draws))
        self.calls: List[int] = []

    def draw(self, upper: int) -> int:
        self.calls.append(upper)
        return next(self._draws) % (upper + 1)


def mean(data: List[int]) -> float:
    return sum(data) / len(data)


def std_deviation(data: List[int]) -> float:
    data_mean = mean(data)
    variance = sum((value - data_mean) ** 2 for value in data) / len(data)
    return variance ** 0.5
