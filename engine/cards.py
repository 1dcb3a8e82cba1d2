from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Sequence, Union

RANKS = "23456789TJQKA"
SUITS = "hcsd"

HOLE_CARDS_PER_PLAYER = 2


class Rank(IntEnum):
    DEUCE = 2
    TREY = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def ordinal(self) -> int:
        """Bucket index (0 for Deuce, 12 for Ace) used by the counting arrays."""
        return self.value - 2

    @property
    def label(self) -> str:
        return RANKS[self.value - 2]

    @classmethod
    def from_label(cls, label: str) -> "Rank":
        if len(label) != 1 or label not in RANKS:
            raise ValueError(f"Invalid rank: {label}")
        return cls(RANKS.index(label) + 2)


class Suit(Enum):
    HEARTS = "h"
    CLUBS = "c"
    SPADES = "s"
    DIAMONDS = "d"

    @property
    def index(self) -> int:
        return _SUIT_INDEX[self]

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "Suit":
        if len(label) != 1 or label not in SUITS:
            raise ValueError(f"Invalid suit: {label}")
        return cls(label)


_SUIT_INDEX = {suit: idx for idx, suit in enumerate(Suit)}


@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        if not isinstance(self.rank, Rank):
            raise ValueError(f"Invalid rank: {self.rank}")
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{self.rank.label}{self.suit.value}"

    def __str__(self) -> str:
        return self.label


def full_deck() -> List[Card]:
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    return Card(Rank.from_label(label[0]), Suit.from_label(label[1]))


def parse_cards(labels: Union[str, Sequence[str]]) -> List[Card]:
    """Parse ``"As Kd"`` or ``["As", "Kd"]`` into cards."""
    if isinstance(labels, str):
        labels = labels.split()
    return [parse_label(label) for label in labels]


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]
