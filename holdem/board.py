from __future__ import annotations

from typing import Iterable, List

from .cards import Card, Deck

MAX_BOARD_CARDS = 5


class Board:
    """Community cards revealed as flop (3), turn (1) and river (1)."""

    def __init__(self) -> None:
        self._cards: List[Card] = []

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self):
        return iter(list(self._cards))

    def add_card(self, card: Card) -> None:
        if len(self._cards) >= MAX_BOARD_CARDS:
            raise RuntimeError("Board cannot have more than 5 community cards")
        if card in self._cards:
            raise ValueError(f"{card.label} is already on the board")
        self._cards.append(card)

    def add_cards(self, cards: Iterable[Card]) -> None:
        for card in cards:
            self.add_card(card)

    # Each stage burns one card before revealing and returns the burnt card.

    def deal_flop(self, deck: Deck) -> Card:
        if self._cards:
            raise RuntimeError("Flop already dealt")
        burnt = deck.deal()
        self.add_cards(deck.deal_many(3))
        return burnt

    def deal_turn(self, deck: Deck) -> Card:
        if len(self._cards) != 3:
            raise RuntimeError("Turn can only be dealt after flop")
        burnt = deck.deal()
        self.add_card(deck.deal())
        return burnt

    def deal_river(self, deck: Deck) -> Card:
        if len(self._cards) != 4:
            raise RuntimeError("River can only be dealt after turn")
        burnt = deck.deal()
        self.add_card(deck.deal())
        return burnt

    def deal_next(self, deck: Deck) -> Card:
        if not self._cards:
            return self.deal_flop(deck)
        if len(self._cards) == 3:
            return self.deal_turn(deck)
        return self.deal_river(deck)

    @property
    def flop(self) -> List[Card]:
        if len(self._cards) < 3:
            raise RuntimeError("Flop not yet dealt")
        return self._cards[:3]

    @property
    def turn(self) -> Card:
        if len(self._cards) < 4:
            raise RuntimeError("Turn not yet dealt")
        return self._cards[3]

    @property
    def river(self) -> Card:
        if len(self._cards) < 5:
            raise RuntimeError("River not yet dealt")
        return self._cards[4]

    @property
    def is_complete(self) -> bool:
        return len(self._cards) == MAX_BOARD_CARDS

    def clear(self) -> None:
        self._cards.clear()

    def labels(self) -> List[str]:
        return [card.label for card in self._cards]

    def __str__(self) -> str:
        if not self._cards:
            return "Board: Empty"
        return "Board: " + " ".join(self.labels())
