from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from functools import total_ordering
from typing import Iterable, List, Optional, Sequence, Tuple

from .cards import HOLE_CARDS_PER_PLAYER, Card, Rank, Suit

HAND_SIZE = 5
MAX_CARDS = HAND_SIZE + HOLE_CARDS_PER_PLAYER


class HandType(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    HandType.HIGH_CARD: "High Card",
    HandType.PAIR: "Pair",
    HandType.TWO_PAIR: "Two Pair",
    HandType.THREE_OF_A_KIND: "Three of a Kind",
    HandType.STRAIGHT: "Straight",
    HandType.FLUSH: "Flush",
    HandType.FULL_HOUSE: "Full House",
    HandType.FOUR_OF_A_KIND: "Four of a Kind",
    HandType.STRAIGHT_FLUSH: "Straight Flush",
}


@total_ordering
@dataclass(frozen=True, eq=False)
class Hand:
    """Best five cards of a player, ordered from most to least significant.

    Hands compare by category first and then rank by rank down the five
    cards; suits never matter. A wheel is stored as 5-4-3-2-A so it sorts
    below every other straight.
    """

    hand_type: HandType
    cards: Tuple[Card, ...]
    strength: Tuple[int, Tuple[int, ...]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        assert len(self.cards) == HAND_SIZE, f"bug: hand has {len(self.cards)} cards"
        ranks = tuple(card.rank.value for card in self.cards)
        object.__setattr__(self, "strength", (int(self.hand_type), ranks))

    @property
    def ranks(self) -> Tuple[Rank, ...]:
        return tuple(card.rank for card in self.cards)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hand):
            return NotImplemented
        return self.strength == other.strength

    def __lt__(self, other: "Hand") -> bool:
        if not isinstance(other, Hand):
            return NotImplemented
        return self.strength < other.strength

    def __hash__(self) -> int:
        return hash(self.strength)


def evaluate_best(cards: Iterable[Card]) -> Hand:
    """Return the strongest five-card hand made from 5 to 7 distinct cards."""
    ordered = sorted(cards, key=_card_order, reverse=True)
    if not HAND_SIZE <= len(ordered) <= MAX_CARDS:
        raise ValueError(f"Expected {HAND_SIZE} to {MAX_CARDS} cards, got {len(ordered)}")

    flush = _find_flush(ordered)
    candidates = [
        _find_straight_flush(flush, ordered),
        flush,
        _find_groups(ordered),
        _find_straight(ordered),
    ]
    made = [hand for hand in candidates if hand is not None]
    if not made:
        return _high_card(ordered)
    return max(made)


def evaluate_players(players: Sequence[Sequence[Card]], board: Sequence[Card]) -> List[Hand]:
    return [evaluate_best([*hole, *board]) for hole in players]


def _card_order(card: Card) -> Tuple[int, int]:
    return card.rank.value, card.suit.index


def _high_card(ordered: Sequence[Card]) -> Hand:
    return Hand(HandType.HIGH_CARD, tuple(ordered[:HAND_SIZE]))


def _find_flush(ordered: Sequence[Card]) -> Optional[Hand]:
    counts = [0] * len(Suit)
    for card in ordered:
        counts[card.suit.index] += 1
    for suit in Suit:
        if counts[suit.index] >= HAND_SIZE:
            suited = [card for card in ordered if card.suit is suit]
            return Hand(HandType.FLUSH, tuple(suited[:HAND_SIZE]))
    return None


def _find_straight_flush(flush: Optional[Hand], ordered: Sequence[Card]) -> Optional[Hand]:
    if flush is None:
        return None
    suit = flush.cards[0].suit
    suited = [card for card in ordered if card.suit is suit]
    return _find_straight(suited, HandType.STRAIGHT_FLUSH)


def _find_straight(ordered: Sequence[Card], hand_type: HandType = HandType.STRAIGHT) -> Optional[Hand]:
    by_rank: List[Optional[Card]] = [None] * len(Rank)
    for card in ordered:
        if by_rank[card.rank.ordinal] is None:
            by_rank[card.rank.ordinal] = card

    run: List[Card] = []
    for slot in range(Rank.ACE.ordinal, -1, -1):
        card = by_rank[slot]
        if card is None:
            run = []
            continue
        run.append(card)
        if len(run) == HAND_SIZE:
            return Hand(hand_type, tuple(run))
    return _find_wheel(by_rank, hand_type)


def _find_wheel(by_rank: Sequence[Optional[Card]], hand_type: HandType) -> Optional[Hand]:
    # A-2-3-4-5: the ace plays low and the five is the high card.
    low_run = [by_rank[rank.ordinal] for rank in (Rank.FIVE, Rank.FOUR, Rank.TREY, Rank.DEUCE)]
    ace = by_rank[Rank.ACE.ordinal]
    if ace is None or any(card is None for card in low_run):
        return None
    return Hand(hand_type, (*low_run, ace))


def _find_groups(ordered: Sequence[Card]) -> Optional[Hand]:
    counts = [0] * len(Rank)
    for card in ordered:
        counts[card.rank.ordinal] += 1

    quads: List[Rank] = []
    trips: List[Rank] = []
    pairs: List[Rank] = []
    for rank in reversed(Rank):
        count = counts[rank.ordinal]
        if count == 4:
            quads.append(rank)
        elif count == 3:
            trips.append(rank)
        elif count == 2:
            pairs.append(rank)

    if quads:
        return _assemble(HandType.FOUR_OF_A_KIND, quads[:1], ordered)
    if len(trips) >= 2:
        return _assemble(HandType.FULL_HOUSE, trips[:2], ordered)
    if trips and pairs:
        return _assemble(HandType.FULL_HOUSE, [trips[0], pairs[0]], ordered)
    if trips:
        return _assemble(HandType.THREE_OF_A_KIND, trips[:1], ordered)
    if len(pairs) >= 2:
        return _assemble(HandType.TWO_PAIR, pairs[:2], ordered)
    if pairs:
        return _assemble(HandType.PAIR, pairs[:1], ordered)
    return None


def _assemble(hand_type: HandType, group_ranks: Sequence[Rank], ordered: Sequence[Card]) -> Hand:
    """Lay out the grouped ranks in order, then fill with the best kickers."""
    grouped = [card for rank in group_ranks for card in ordered if card.rank is rank]
    kickers = [card for card in ordered if card.rank not in group_ranks]
    return Hand(hand_type, tuple((grouped + kickers)[:HAND_SIZE]))
