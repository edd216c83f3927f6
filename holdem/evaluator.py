from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .cards import Card

BAND_WIDTH = 100
# Scores stay strictly below band base + 99 so categories never overlap.
BAND_SPAN = 99
TIEBREAK_DIGITS = 5
TIEBREAK_RADIX = 13


class HandCategory(IntEnum):
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9

    @property
    def base_score(self) -> int:
        return int(self) * BAND_WIDTH

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class HandResult:
    category: HandCategory
    score: float
    cards: Tuple[Card, ...]

    def __str__(self) -> str:
        labels = " ".join(card.label for card in self.cards)
        return f"{self.category.label} (Score: {self.score:.2f}) - {labels}"


def evaluate_best(cards: Sequence[Card]) -> HandResult:
    """Score the best five-card hand out of 5 to 7 cards. Higher is better."""
    if len(cards) < 5:
        raise ValueError(f"At least 5 cards are required, got {len(cards)}")
    if len(cards) > 7:
        raise ValueError(f"At most 7 cards can be evaluated, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise ValueError("Duplicate cards in hand")

    best: Optional[HandResult] = None
    for combo in itertools.combinations(cards, 5):
        result = _evaluate_five(combo)
        if best is None or result.score > best.score:
            best = result
    assert best is not None
    return best


def evaluate_hand(hole_cards: Iterable[Card], board: Iterable[Card]) -> HandResult:
    return evaluate_best(list(hole_cards) + list(board))


def describe_rank(result: HandResult) -> str:
    return result.category.key


def _evaluate_five(cards: Sequence[Card]) -> HandResult:
    ordered = sorted(cards, key=lambda card: card.rank, reverse=True)

    counts: Dict[int, int] = {}
    for card in ordered:
        counts.setdefault(card.rank, 0)
        counts[card.rank] += 1
    # (rank, count) with the biggest groups first, ties by rank.
    groups = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)

    flush_cards = _flush_cards(ordered)
    straight_high = _straight_high(ordered)
    flush_straight_high = _straight_high(flush_cards) if flush_cards else None

    if flush_straight_high:
        used = _straight_cards(flush_cards, flush_straight_high)
        if flush_straight_high == 14:
            return _result(HandCategory.ROYAL_FLUSH, [flush_straight_high], used)
        return _result(HandCategory.STRAIGHT_FLUSH, [flush_straight_high], used)

    top_rank, top_count = groups[0]
    if top_count == 4:
        kickers = _kickers(ordered, exclude=(top_rank,), limit=1)
        return _result(HandCategory.FOUR_OF_A_KIND, [top_rank] + kickers, _grouped(ordered, groups))

    if top_count == 3 and len(groups) > 1 and groups[1][1] >= 2:
        return _result(HandCategory.FULL_HOUSE, [top_rank, groups[1][0]], _grouped(ordered, groups))

    if flush_cards:
        top_five = flush_cards[:5]
        return _result(HandCategory.FLUSH, [card.rank for card in top_five], top_five)

    if straight_high:
        return _result(HandCategory.STRAIGHT, [straight_high], _straight_cards(ordered, straight_high))

    if top_count == 3:
        kickers = _kickers(ordered, exclude=(top_rank,), limit=2)
        return _result(HandCategory.THREE_OF_A_KIND, [top_rank] + kickers, _grouped(ordered, groups))

    pairs = [rank for rank, count in groups if count == 2]
    if len(pairs) >= 2:
        high_pair, low_pair = pairs[0], pairs[1]
        kickers = _kickers(ordered, exclude=(high_pair, low_pair), limit=1)
        return _result(HandCategory.TWO_PAIR, [high_pair, low_pair] + kickers, _grouped(ordered, groups))

    if pairs:
        kickers = _kickers(ordered, exclude=(pairs[0],), limit=3)
        return _result(HandCategory.ONE_PAIR, [pairs[0]] + kickers, _grouped(ordered, groups))

    return _result(HandCategory.HIGH_CARD, [card.rank for card in ordered[:5]], ordered[:5])


def _result(category: HandCategory, ranks: List[int], used: Sequence[Card]) -> HandResult:
    return HandResult(category=category, score=category.base_score + _tiebreak(ranks), cards=tuple(used[:5]))


def _tiebreak(ranks: List[int]) -> float:
    # Base-13 number over five positions; missing trailing positions count as zero.
    value = 0
    for idx in range(TIEBREAK_DIGITS):
        digit = ranks[idx] - 2 if idx < len(ranks) else 0
        value = value * TIEBREAK_RADIX + digit
    return value * BAND_SPAN / TIEBREAK_RADIX**TIEBREAK_DIGITS


def _kickers(ordered: Sequence[Card], exclude: Tuple[int, ...], limit: int) -> List[int]:
    return [card.rank for card in ordered if card.rank not in exclude][:limit]


def _grouped(ordered: Sequence[Card], groups: List[Tuple[int, int]]) -> List[Card]:
    position = {rank: idx for idx, (rank, _) in enumerate(groups)}
    return sorted(ordered, key=lambda card: position[card.rank])


def _flush_cards(ordered: Sequence[Card]) -> List[Card]:
    by_suit: Dict[str, List[Card]] = {}
    for card in ordered:
        by_suit.setdefault(card.suit, []).append(card)
    for suited in by_suit.values():
        if len(suited) >= 5:
            return suited
    return []


def _straight_high(cards: Sequence[Card]) -> Optional[int]:
    ranks = sorted({card.rank for card in cards}, reverse=True)
    for idx in range(len(ranks) - 4):
        window = ranks[idx : idx + 5]
        if window[0] - window[4] == 4:
            return window[0]
    if {14, 5, 4, 3, 2}.issubset(ranks):  # wheel, ace plays low
        return 5
    return None


def _straight_cards(cards: Sequence[Card], high: int) -> List[Card]:
    wanted = [14 if rank == 1 else rank for rank in range(high, high - 5, -1)]
    picked: List[Card] = []
    for rank in wanted:
        picked.append(next(card for card in cards if card.rank == rank))
    return picked
