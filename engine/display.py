from __future__ import annotations

from typing import List, Sequence, Tuple

from .cards import Card, Rank, cards_to_labels
from .evaluator import Hand, HandType
from .models import Street

VERBOSE_RANKS = {
    Rank.DEUCE: "Deuce",
    Rank.TREY: "Trey",
    Rank.FOUR: "Four",
    Rank.FIVE: "Five",
    Rank.SIX: "Six",
    Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight",
    Rank.NINE: "Nine",
    Rank.TEN: "Ten",
    Rank.JACK: "Jack",
    Rank.QUEEN: "Queen",
    Rank.KING: "King",
    Rank.ACE: "Ace",
}

PLURAL_RANKS = {rank: f"{name}s" for rank, name in VERBOSE_RANKS.items()}
PLURAL_RANKS[Rank.SIX] = "Sixes"

_STREET_SLICES = (
    (Street.FLOP, slice(0, 3)),
    (Street.TURN, slice(3, 4)),
    (Street.RIVER, slice(4, 5)),
)


def describe_rank(hand: Hand) -> str:
    """Short phrase naming the ranks that make the hand, e.g. ``Aces full of Eights``."""
    high = hand.cards[0].rank
    hand_type = hand.hand_type
    if hand_type in (HandType.STRAIGHT_FLUSH, HandType.STRAIGHT, HandType.FLUSH):
        return f"{VERBOSE_RANKS[high]} high"
    if hand_type == HandType.FULL_HOUSE:
        return f"{PLURAL_RANKS[high]} full of {PLURAL_RANKS[hand.cards[3].rank]}"
    if hand_type == HandType.TWO_PAIR:
        return f"{PLURAL_RANKS[high]} and {PLURAL_RANKS[hand.cards[2].rank]}"
    if hand_type in (HandType.FOUR_OF_A_KIND, HandType.THREE_OF_A_KIND, HandType.PAIR):
        return PLURAL_RANKS[high]
    return VERBOSE_RANKS[high]


def describe_hand(hand: Hand) -> str:
    cards = " ".join(cards_to_labels(hand.cards))
    return f"{hand.hand_type.display_name}, {describe_rank(hand)}: {cards}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


def board_streets(board: Sequence[Card]) -> List[Tuple[Street, List[Card]]]:
    """Split the community cards into the streets that have been dealt."""
    streets = []
    for street, window in _STREET_SLICES:
        cards = list(board[window])
        if cards:
            streets.append((street, cards))
    return streets
