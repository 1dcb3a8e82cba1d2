from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence, TextIO

from engine.cards import HOLE_CARDS_PER_PLAYER, Card, cards_to_labels, parse_label
from engine.deck import DeckError
from engine.display import board_streets, describe_hand
from engine.game import Game, GameOutcome
from engine.models import Outcome, SimulationConfig

LOGGER = logging.getLogger("odds_calculator")

_OUTCOME_SUFFIX = {
    Outcome.WIN: "(winner)",
    Outcome.TIE: "(tie)",
    Outcome.LOSS: "(lost)",
}


def _card(text: str) -> Card:
    try:
        return parse_label(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="holdem-odds",
        description=(
            "Texas hold'em odds simulator. With every hole card and all five board cards known "
            "it reports the winners; otherwise it estimates each player's odds from random deals."
        ),
    )
    parser.add_argument("hole_cards", nargs="+", type=_card, help="Pairs of hole cards per known player, e.g. As Kd 5h Tc")
    parser.add_argument("-b", "--board", nargs="+", type=_card, default=[], help="Flop, turn and river, e.g. 2s 3h 4c 5d 6s")
    parser.add_argument("-o", "--opponents", type=int, default=0, help="Extra players with unknown hole cards")
    parser.add_argument("-f", "--folded", type=int, default=0, help="Extra players with unknown hole cards who folded")
    parser.add_argument("-s", "--seed", type=int, default=1, help="RNG seed for the random deals")
    parser.add_argument("-p", "--samples", type=int, default=1_000_000, help="Number of random deals to simulate")
    parser.add_argument("-w", "--workers", type=int, default=None, help="Worker processes (default: all CPUs)")
    parser.add_argument("-d", "--distribution", action="store_true", help="Also print the hand-type distribution")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _validate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if len(args.hole_cards) % HOLE_CARDS_PER_PLAYER:
        parser.error("hole cards must come in pairs")
    if args.board and not 3 <= len(args.board) <= 5:
        parser.error("board takes 3 to 5 cards")
    if args.opponents < 0 or args.folded < 0:
        parser.error("opponent counts cannot be negative")
    if args.samples <= 0:
        parser.error("samples must be positive")
    if args.workers is not None and args.workers <= 0:
        parser.error("workers must be positive")


def _players(hole_cards: Sequence[Card]) -> List[List[Card]]:
    return [
        list(hole_cards[idx : idx + HOLE_CARDS_PER_PLAYER])
        for idx in range(0, len(hole_cards), HOLE_CARDS_PER_PLAYER)
    ]


def render_deal(players: Sequence[Sequence[Card]], board: Sequence[Card], out: TextIO) -> None:
    for idx, hole in enumerate(players, start=1):
        print(f"player {idx:2} was dealt: {' '.join(cards_to_labels(hole))}", file=out)
    for street, cards in board_streets(board):
        print(f"{street.value}: {' '.join(cards_to_labels(cards))}", file=out)


def render_outcome(outcome: GameOutcome, known_players: int, distribution: bool, out: TextIO) -> None:
    print(file=out)
    print(f"{outcome.cards_remaining} cards remain.", file=out)
    print(file=out)

    if outcome.outcomes is not None:
        for idx, result in enumerate(outcome.outcomes, start=1):
            print(f"player {idx:2} has {describe_hand(result.hand)} {_OUTCOME_SUFFIX[result.outcome]}", file=out)
        return

    assert outcome.odds is not None
    for odds in outcome.odds.merge_unknown_players(known_players):
        if odds.is_field:
            label = f"{len(odds.seats):2} opponents: "
        else:
            label = f"   player {odds.seat:2}: "
        print(
            f"{label}win {odds.win_percent:5.2f}%, tie {odds.tie_percent:5.2f}%, loss {odds.loss_percent:5.2f}%",
            file=out,
        )
        if not distribution:
            continue
        for hand_type, percent in odds.distribution():
            print(f"{hand_type.display_name:20}: {percent:5.2f}%", file=out)
        print(file=out)


def run(
    argv: Optional[Sequence[str]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    parser = build_parser()
    args = parser.parse_args(argv)
    _validate(parser, args)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    players = _players(args.hole_cards)
    render_deal(players, args.board, out)

    config = SimulationConfig(samples=args.samples, seed=args.seed, workers=args.workers)
    try:
        game = Game(players, args.board, opponents=args.opponents, folded=args.folded)
        outcome = game.play(config)
    except DeckError as exc:
        print(f"error: {exc}", file=err)
        return 2
    except ValueError as exc:
        # Counts the deck cannot satisfy, e.g. too many opponents.
        LOGGER.debug("Rejected request: %s", exc)
        print(f"error: {exc}", file=err)
        return 2

    render_outcome(outcome, len(players), args.distribution, out)
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    sys.exit(run())
