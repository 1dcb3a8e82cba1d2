from __future__ import annotations

import functools
import itertools
import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple, Union

from .cards import HOLE_CARDS_PER_PLAYER, Card
from .deck import Deck
from .evaluator import Hand, HandType, evaluate_players
from .models import Outcome
from .permutations import RandomSource, permutations

LOGGER = logging.getLogger("odds_engine")

BOARD_LENGTH = 5
DEFAULT_CHUNK_SIZE = 10_000

RandomFactory = Callable[[int], RandomSource]


@dataclass(frozen=True)
class HandOutcome:
    hand: Hand
    outcome: Outcome


def classify_outcomes(hands: Sequence[Hand]) -> List[HandOutcome]:
    """Mark the best hand a win (a tie when shared) and everything else a loss."""
    if not hands:
        raise ValueError("At least one hand required")
    best = max(hands)
    winners = sum(1 for hand in hands if hand == best)
    top = Outcome.WIN if winners == 1 else Outcome.TIE
    return [HandOutcome(hand, top if hand == best else Outcome.LOSS) for hand in hands]


def resolve_outcomes(players: Sequence[Sequence[Card]], board: Sequence[Card]) -> List[HandOutcome]:
    return classify_outcomes(evaluate_players(players, board))


@dataclass
class HandOdds:
    """Win/tie/loss counters and hand-type histogram for one seat (or a merged field)."""

    seats: FrozenSet[int]
    wins: int = 0
    ties: int = 0
    losses: int = 0
    hand_types: Dict[HandType, int] = field(default_factory=dict)

    @classmethod
    def for_seat(cls, seat: int) -> "HandOdds":
        return cls(seats=frozenset((seat,)))

    @property
    def seat(self) -> Optional[int]:
        if len(self.seats) != 1:
            return None
        return next(iter(self.seats))

    @property
    def is_field(self) -> bool:
        return len(self.seats) > 1

    @property
    def total(self) -> int:
        return self.wins + self.ties + self.losses

    def update(self, outcome: HandOutcome, count: int = 1) -> None:
        if outcome.outcome is Outcome.WIN:
            self.wins += count
        elif outcome.outcome is Outcome.TIE:
            self.ties += count
        else:
            self.losses += count
        hand_type = outcome.hand.hand_type
        self.hand_types[hand_type] = self.hand_types.get(hand_type, 0) + count

    def merge(self, other: "HandOdds") -> "HandOdds":
        hand_types: Dict[HandType, int] = {}
        for hand_type in HandType:
            count = self.hand_types.get(hand_type, 0) + other.hand_types.get(hand_type, 0)
            if count:
                hand_types[hand_type] = count
        return HandOdds(
            seats=self.seats | other.seats,
            wins=self.wins + other.wins,
            ties=self.ties + other.ties,
            losses=self.losses + other.losses,
            hand_types=hand_types,
        )

    def _percent(self, count: int) -> float:
        total = self.total
        if total == 0:
            return 0.0
        return 100.0 * count / total

    @property
    def win_percent(self) -> float:
        return self._percent(self.wins)

    @property
    def tie_percent(self) -> float:
        return self._percent(self.ties)

    @property
    def loss_percent(self) -> float:
        return self._percent(self.losses)

    def frequency_of(self, hand_type: HandType) -> int:
        return self.hand_types.get(hand_type, 0)

    def distribution(self) -> List[Tuple[HandType, float]]:
        """Percent of scenarios ending in each hand type, most frequent first."""
        ordered = sorted(self.hand_types.items(), key=lambda item: (item[1], item[0]), reverse=True)
        return [(hand_type, self._percent(count)) for hand_type, count in ordered]


@dataclass
class Odds:
    """Per-seat accumulators; seats are numbered from 1 in contest order."""

    players: List[HandOdds]

    @classmethod
    def empty(cls, contestants: int) -> "Odds":
        return cls([HandOdds.for_seat(seat) for seat in range(1, contestants + 1)])

    def update(self, outcomes: Sequence[HandOutcome], count: int = 1) -> None:
        if len(outcomes) != len(self.players):
            raise ValueError(f"Expected {len(self.players)} outcomes, got {len(outcomes)}")
        for odds, outcome in zip(self.players, outcomes):
            odds.update(outcome, count)

    def merge(self, other: "Odds") -> "Odds":
        if len(other.players) != len(self.players):
            raise ValueError("Cannot merge odds for different tables")
        return Odds([mine.merge(theirs) for mine, theirs in zip(self.players, other.players)])

    def merge_unknown_players(self, known: int) -> "Odds":
        """Fold every seat after the first ``known`` into one field accumulator.

        Unknown opponents are interchangeable, so their individual numbers
        carry no information; the merged entry reports the field average.
        """
        if len(self.players) - known <= 1:
            return Odds(list(self.players))
        unknown = functools.reduce(HandOdds.merge, self.players[known:])
        return Odds(list(self.players[:known]) + [unknown])

    def __iter__(self) -> Iterator[HandOdds]:
        return iter(self.players)

    def __len__(self) -> int:
        return len(self.players)

    def __getitem__(self, idx: int) -> HandOdds:
        return self.players[idx]


@dataclass(frozen=True)
class ScenarioPlan:
    """Read-only description of what every random scenario has to fill in."""

    players: Tuple[Tuple[Card, ...], ...]
    board: Tuple[Card, ...]
    remaining: Tuple[Card, ...]
    opponents: int = 0
    folded: int = 0

    @property
    def unknown_hole_cards(self) -> int:
        return HOLE_CARDS_PER_PLAYER * (self.opponents + self.folded)

    @property
    def unknown_cards(self) -> int:
        return self.unknown_hole_cards + BOARD_LENGTH - len(self.board)

    @property
    def contestants(self) -> int:
        return len(self.players) + self.opponents

    def play_scenario(self, scenario: Sequence[Card]) -> List[HandOutcome]:
        split = self.unknown_hole_cards
        # Folded seats come first: their cards leave the deck but they never contest.
        extra_players = [
            tuple(scenario[idx : idx + HOLE_CARDS_PER_PLAYER])
            for idx in range(HOLE_CARDS_PER_PLAYER * self.folded, split, HOLE_CARDS_PER_PLAYER)
        ]
        community = (*self.board, *scenario[split:])
        return resolve_outcomes([*self.players, *extra_players], community)

    def outcomes(self, rng: RandomSource) -> Iterator[List[HandOutcome]]:
        """Lazily score random scenarios; stop iterating to stop the work."""
        for scenario in permutations(self.unknown_cards, self.remaining, rng):
            yield self.play_scenario(scenario)


def _run_chunk(plan: ScenarioPlan, chunk: Tuple[int, int], rng_factory: RandomFactory) -> Odds:
    index, size = chunk
    odds = Odds.empty(plan.contestants)
    for outcomes in itertools.islice(plan.outcomes(rng_factory(index)), size):
        odds.update(outcomes)
    return odds


def plan_chunks(samples: int, chunk_size: int) -> List[Tuple[int, int]]:
    """Split ``samples`` into (chunk index, size) pairs independent of worker count."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    chunks = []
    for index, start in enumerate(range(0, samples, chunk_size)):
        chunks.append((index, min(chunk_size, samples - start)))
    return chunks


def simulate_odds(
    opponents: int,
    folded: int,
    players: Sequence[Sequence[Card]],
    board: Sequence[Card],
    deck: Union[Deck, Sequence[Card]],
    samples: int,
    rng_factory: RandomFactory,
    *,
    workers: Optional[int] = 1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Odds:
    """Estimate win/tie/loss odds for every contestant by random completion.

    ``players`` are the known hole cards; ``opponents`` more seats receive
    random hole cards, and ``folded`` further seats are dealt (consuming
    cards) but not scored. Contestant order in the result is known players
    first, then opponents. Chunk ``i`` always draws from ``rng_factory(i)``,
    so the merged counters do not depend on ``workers``.
    """
    if opponents < 0 or folded < 0:
        raise ValueError("Opponent counts cannot be negative")
    if samples < 0:
        raise ValueError("Sample count cannot be negative")
    if len(board) > BOARD_LENGTH:
        raise ValueError(f"Board has more than {BOARD_LENGTH} cards")

    remaining = deck.cards() if isinstance(deck, Deck) else tuple(deck)
    plan = ScenarioPlan(
        players=tuple(tuple(hole) for hole in players),
        board=tuple(board),
        remaining=remaining,
        opponents=opponents,
        folded=folded,
    )
    if plan.contestants == 0:
        raise ValueError("At least one contestant required")
    if plan.unknown_cards > len(remaining):
        raise ValueError(f"Need {plan.unknown_cards} unknown cards but only {len(remaining)} remain")

    odds = Odds.empty(plan.contestants)
    if plan.unknown_cards == 0:
        LOGGER.debug("No unknown cards; scoring a single showdown for %d samples", samples)
        if samples:
            odds.update(plan.play_scenario(()), count=samples)
        return odds

    chunks = plan_chunks(samples, chunk_size)
    LOGGER.debug(
        "Simulating %d samples in %d chunks (%d unknown cards, workers=%s)",
        samples,
        len(chunks),
        plan.unknown_cards,
        workers,
    )
    if workers == 1 or len(chunks) <= 1:
        partials = [_run_chunk(plan, chunk, rng_factory) for chunk in chunks]
    else:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            partials = list(
                executor.map(
                    _run_chunk,
                    itertools.repeat(plan),
                    chunks,
                    itertools.repeat(rng_factory),
                )
            )
    return functools.reduce(Odds.merge, partials, odds)
