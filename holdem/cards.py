from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

RANKS = "23456789TJQKA"
SUITS = "hdcs"
RANK_VALUE = {rank: idx for idx, rank in enumerate(RANKS, start=2)}

_RANK_NAMES = {11: "Jack", 12: "Queen", 13: "King", 14: "Ace"}
_SUIT_NAMES = {"h": "Hearts", "d": "Diamonds", "c": "Clubs", "s": "Spades"}


@dataclass(frozen=True)
class Card:
    rank: int
    suit: str

    def __post_init__(self) -> None:
        if not isinstance(self.rank, int) or not 2 <= self.rank <= 14:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{RANKS[self.rank - 2]}{self.suit}"

    @property
    def name(self) -> str:
        rank_name = _RANK_NAMES.get(self.rank, str(self.rank))
        return f"{rank_name} of {_SUIT_NAMES[self.suit]}"

    def __str__(self) -> str:
        return self.label


class Deck:
    """Stack of cards; the last element is the top and dealing pops from it.

    Index based helpers (``peek``, ``deal_at``, ``replace_at``) count from the
    top: index 0 is the next card to be dealt.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)
        self._cards: List[Card] = []
        self.reset()

    @classmethod
    def stacked(cls, top_first: Sequence[Card]) -> "Deck":
        """Build an unshuffled deck that deals ``top_first`` in order."""
        if len(set(top_first)) != len(top_first):
            raise ValueError("Duplicate cards in stacked deck")
        deck = cls()
        deck._cards = list(reversed(top_first))
        return deck

    def reset(self) -> None:
        self._cards = [Card(rank, suit) for suit in SUITS for rank in range(2, 15)]

    def shuffle(self) -> None:
        self._rng.shuffle(self._cards)

    def reset_and_shuffle(self) -> None:
        self.reset()
        self.shuffle()

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def remaining(self) -> int:
        return len(self._cards)

    def deal(self) -> Card:
        if not self._cards:
            raise RuntimeError("Cannot deal from empty deck")
        return self._cards.pop()

    def deal_many(self, count: int) -> List[Card]:
        if count > len(self._cards):
            raise RuntimeError(f"Cannot deal {count} cards, only {len(self._cards)} remaining")
        return [self.deal() for _ in range(count)]

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._cards)

    def _position(self, index: int) -> int:
        if not self._cards:
            raise RuntimeError("Deck is empty")
        if not self.is_valid_index(index):
            raise IndexError(f"Index must be between 0 and {len(self._cards) - 1}")
        return len(self._cards) - 1 - index

    def peek(self, index: int = 0) -> Card:
        return self._cards[self._position(index)]

    def peek_many(self, count: int) -> List[Card]:
        if count <= 0:
            raise ValueError("Count must be positive")
        if count > len(self._cards):
            raise RuntimeError(f"Cannot peek {count} cards, only {len(self._cards)} remaining")
        return [self.peek(idx) for idx in range(count)]

    def deal_at(self, index: int) -> Card:
        return self._cards.pop(self._position(index))

    def replace_at(self, index: int, card: Card) -> Card:
        """Swap ``card`` into the given position and return the card it replaced."""
        if card in self._cards:
            raise ValueError(f"{card.label} is already in the deck")
        position = self._position(index)
        replaced = self._cards[position]
        self._cards[position] = card
        return replaced

    def cards(self) -> List[Card]:
        """Top first copy of the remaining cards."""
        return list(reversed(self._cards))


def build_deck(seed: Optional[int] = None) -> Deck:
    deck = Deck(seed)
    deck.shuffle()
    return deck


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) != 2 or label[0] not in RANK_VALUE:
        raise ValueError(f"Invalid card label: {label}")
    return Card(RANK_VALUE[label[0]], label[1])


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
