from __future__ import annotations

from typing import Iterable, Iterator, Set, Tuple

from .cards import Card, full_deck


class DeckError(ValueError):
    code = "DECK_ERROR"


class DuplicateCardError(DeckError):
    """A known card was requested twice (or was already dealt elsewhere)."""

    code = "DUPLICATE_CARD"

    def __init__(self, card: Card) -> None:
        super().__init__(f"Duplicate card: {card.label}")
        self.card = card


def _canonical(card: Card) -> Tuple[int, int]:
    return card.suit.index, card.rank.value


class Deck:
    """The 52-card universe minus every card already assigned to a seat or the board."""

    def __init__(self) -> None:
        self._cards: Set[Card] = set(full_deck())

    @classmethod
    def without(cls, cards: Iterable[Card]) -> "Deck":
        deck = cls()
        for card in cards:
            deck.remove(card)
        return deck

    def remove(self, card: Card) -> None:
        if card not in self._cards:
            raise DuplicateCardError(card)
        self._cards.remove(card)

    def cards(self) -> Tuple[Card, ...]:
        # Fixed order so seeded simulations replay identically.
        return tuple(sorted(self._cards, key=_canonical))

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards())

    def __len__(self) -> int:
        return len(self._cards)
