from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .cards import HOLE_CARDS_PER_PLAYER, Card
from .deck import Deck
from .models import SimulationConfig
from .odds import BOARD_LENGTH, HandOutcome, Odds, RandomFactory, resolve_outcomes, simulate_odds
from .permutations import SeededStreams

LOGGER = logging.getLogger("odds_engine")

# Game validates one request and picks the exact or the sampled path. No
# parsing or rendering lives here; callers hand in cards and read results.

VALID_BOARD_LENGTHS = (0, 3, 4, 5)


@dataclass
class GameOutcome:
    cards_remaining: int
    outcomes: Optional[List[HandOutcome]] = None
    odds: Optional[Odds] = None

    @property
    def is_resolved(self) -> bool:
        return self.outcomes is not None


class Game:
    """One hold'em situation: known hole cards, known board, unknown seats."""

    def __init__(
        self,
        players: Sequence[Sequence[Card]],
        board: Sequence[Card] = (),
        opponents: int = 0,
        folded: int = 0,
    ) -> None:
        if not players:
            raise ValueError("At least one player with known hole cards required")
        for idx, hole in enumerate(players, start=1):
            if len(hole) != HOLE_CARDS_PER_PLAYER:
                raise ValueError(f"Player {idx} needs {HOLE_CARDS_PER_PLAYER} hole cards, got {len(hole)}")
        if len(board) not in VALID_BOARD_LENGTHS:
            raise ValueError(f"Board must have 0, 3, 4 or 5 cards, got {len(board)}")
        if opponents < 0 or folded < 0:
            raise ValueError("Opponent counts cannot be negative")

        self.players: Tuple[Tuple[Card, ...], ...] = tuple(tuple(hole) for hole in players)
        self.board: Tuple[Card, ...] = tuple(board)
        self.opponents = opponents
        self.folded = folded

    def is_over(self) -> bool:
        return len(self.board) == BOARD_LENGTH and self.opponents == 0

    def build_deck(self) -> Deck:
        """Deck without every known card; raises DuplicateCardError on reuse."""
        known = [card for hole in self.players for card in hole]
        known.extend(self.board)
        return Deck.without(known)

    def play(
        self,
        config: Optional[SimulationConfig] = None,
        rng_factory: Optional[RandomFactory] = None,
    ) -> GameOutcome:
        config = config or SimulationConfig()
        deck = self.build_deck()
        cards_remaining = len(deck)

        if self.is_over():
            LOGGER.debug("All cards known; resolving showdown directly")
            return GameOutcome(
                cards_remaining=cards_remaining,
                outcomes=resolve_outcomes(self.players, self.board),
            )

        odds = simulate_odds(
            self.opponents,
            self.folded,
            self.players,
            self.board,
            deck,
            config.samples,
            rng_factory or SeededStreams(config.seed),
            workers=config.workers,
            chunk_size=config.chunk_size,
        )
        return GameOutcome(cards_remaining=cards_remaining, odds=odds)
