"""Hold'em hand evaluation and Monte Carlo odds, shared by the CLI and the service."""

from .cards import HOLE_CARDS_PER_PLAYER, Card, Rank, Suit, cards_to_labels, full_deck, parse_cards, parse_label
from .deck import Deck, DeckError, DuplicateCardError
from .display import board_streets, describe_hand, format_percent
from .evaluator import Hand, HandType, evaluate_best, evaluate_players
from .game import Game, GameOutcome
from .models import Outcome, ServiceConfig, SimulationConfig, Street
from .odds import (
    BOARD_LENGTH,
    HandOdds,
    HandOutcome,
    Odds,
    classify_outcomes,
    resolve_outcomes,
    simulate_odds,
)
from .permutations import RandomSource, SeededRandom, SeededStreams, permutations

__all__ = [
    "HOLE_CARDS_PER_PLAYER",
    "BOARD_LENGTH",
    "Card",
    "Rank",
    "Suit",
    "cards_to_labels",
    "full_deck",
    "parse_cards",
    "parse_label",
    "Deck",
    "DeckError",
    "DuplicateCardError",
    "board_streets",
    "describe_hand",
    "format_percent",
    "Hand",
    "HandType",
    "evaluate_best",
    "evaluate_players",
    "Game",
    "GameOutcome",
    "Outcome",
    "ServiceConfig",
    "SimulationConfig",
    "Street",
    "HandOdds",
    "HandOutcome",
    "Odds",
    "classify_outcomes",
    "resolve_outcomes",
    "simulate_odds",
    "RandomSource",
    "SeededRandom",
    "SeededStreams",
    "permutations",
]
