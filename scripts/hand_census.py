#!/usr/bin/env python3
"""Evaluate every 5- or 7-card combination and compare category counts.

The seven-card census covers all 133,784,560 hands; it is split by the
lowest card of each combination so it parallelises across processes.

Example:
    python scripts/hand_census.py --cards 5
    python scripts/hand_census.py --cards 7 --workers 8
"""

from __future__ import annotations

import argparse
import itertools
import logging
import sys
import time
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from typing import Dict

from engine.cards import full_deck
from engine.evaluator import HandType, evaluate_best

LOGGER = logging.getLogger("hand_census")

EXPECTED: Dict[int, Dict[HandType, int]] = {
    5: {
        HandType.STRAIGHT_FLUSH: 40,
        HandType.FOUR_OF_A_KIND: 624,
        HandType.FULL_HOUSE: 3_744,
        HandType.FLUSH: 5_108,
        HandType.STRAIGHT: 10_200,
        HandType.THREE_OF_A_KIND: 54_912,
        HandType.TWO_PAIR: 123_552,
        HandType.PAIR: 1_098_240,
        HandType.HIGH_CARD: 1_302_540,
    },
    7: {
        HandType.STRAIGHT_FLUSH: 41_584,
        HandType.FOUR_OF_A_KIND: 224_848,
        HandType.FULL_HOUSE: 3_473_184,
        HandType.FLUSH: 4_047_644,
        HandType.STRAIGHT: 6_180_020,
        HandType.THREE_OF_A_KIND: 6_461_620,
        HandType.TWO_PAIR: 31_433_400,
        HandType.PAIR: 58_627_800,
        HandType.HIGH_CARD: 23_294_460,
    },
}


def census_from(first: int, size: int) -> Counter:
    """Count categories for every combination whose lowest deck index is ``first``."""
    deck = full_deck()
    counts: Counter = Counter()
    lead = deck[first]
    for rest in itertools.combinations(deck[first + 1 :], size - 1):
        counts[evaluate_best((lead, *rest)).hand_type] += 1
    return counts


def census(size: int, workers: int) -> Counter:
    firsts = range(52 - size + 1)
    total: Counter = Counter()
    with ProcessPoolExecutor(max_workers=workers) as executor:
        for partial in executor.map(census_from, firsts, itertools.repeat(size)):
            total.update(partial)
    return total


def main() -> int:
    parser = argparse.ArgumentParser(description="Exhaustive hand category census")
    parser.add_argument("--cards", type=int, choices=(5, 7), default=5)
    parser.add_argument("--workers", type=int, default=None)
    args = parser.parse_args()

    started = time.monotonic()
    counts = census(args.cards, args.workers)
    LOGGER.info("Census of %d-card hands finished in %.1fs", args.cards, time.monotonic() - started)

    mismatches = 0
    for hand_type in sorted(HandType, reverse=True):
        expected = EXPECTED[args.cards][hand_type]
        actual = counts[hand_type]
        flag = "" if actual == expected else "  <-- expected {:,}".format(expected)
        if flag:
            mismatches += 1
        print(f"{hand_type.display_name:16} {actual:>12,}{flag}")
    return 1 if mismatches else 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
