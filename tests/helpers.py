from __future__ import annotations

from typing import Optional, Sequence

from holdem.bots import passive_strategy
from holdem.cards import Deck, parse_cards
from holdem.game import GameManager
from holdem.models import Player, TableConfig


def create_game(
    *,
    players: int = 3,
    starting_stack: int = 1_000,
    stacks: Optional[Sequence[int]] = None,
    sb: int = 10,
    bb: int = 20,
) -> GameManager:
    """Instantiate a game with players numbered from 1."""
    balances = list(stacks) if stacks is not None else [starting_stack] * players
    seated = [Player(idx, f"Player{idx}", balance) for idx, balance in enumerate(balances, start=1)]
    return GameManager(seated, TableConfig(small_blind=sb, big_blind=bb))


def stacked_deck(hole_cards: Sequence[Sequence[str]], board: Sequence[str] = ()) -> Deck:
    """Deck that deals ``hole_cards`` (listed in deal order, left of the dealer first)
    then burns one card before each board stage. Unused cards follow in a fixed order."""
    first_round = [hole[0] for hole in hole_cards]
    second_round = [hole[1] for hole in hole_cards]
    holes = parse_cards(first_round + second_round)
    community = parse_cards(list(board))
    spare = [card for card in Deck().cards() if card not in holes and card not in community]

    order = list(holes)
    for stage in (community[:3], community[3:4], community[4:5]):
        if not stage:
            break
        order.append(spare.pop(0))
        order.extend(stage)
    order.extend(spare)
    return Deck.stacked(order)


def force_deck(monkeypatch, deck: Deck) -> None:
    monkeypatch.setattr("holdem.game.build_deck", lambda seed=None: deck)


def play_passively(game: GameManager, limit: int = 500) -> None:
    """Check or call every decision until the hand finishes."""
    for _ in range(limit):
        if not game.is_hand_active:
            return
        action, amount = passive_strategy(game)
        result = game.submit_action(action, amount)
        assert result.success, result.message
    raise AssertionError("hand did not finish")
