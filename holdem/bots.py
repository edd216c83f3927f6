from __future__ import annotations

import random
from typing import List, Optional, Tuple

from .cards import Card
from .game import GameManager
from .models import ActionType, Phase

Decision = Tuple[ActionType, int]


def _rough_hand_strength(hole: List[Card]) -> int:
    """Very rough proxy for hand quality used to drive aggression choices."""
    if len(hole) < 2:
        return 0

    values = [card.rank for card in hole]
    score = sum(values)
    if values[0] == values[1]:
        score += 14  # pairs are quite strong pre-flop
    else:
        gap = abs(values[0] - values[1])
        if gap == 1:
            score += 4
        elif gap == 2:
            score += 2
    if hole[0].suit == hole[1].suit:
        score += 3
    if min(values) >= 11:
        score += 2

    return score


def _should_raise(strength: int, phase: Phase, facing_bet: bool, rng: random.Random) -> bool:
    base = 0.2 if facing_bet else 0.35
    phase_bonus = {
        Phase.PREFLOP: 0.0,
        Phase.FLOP: 0.05,
        Phase.TURN: 0.1,
        Phase.RIVER: 0.12,
    }.get(phase, 0.0)
    scaled_strength = min(strength / 45.0, 0.45)
    probability = min(0.85, base + phase_bonus + scaled_strength)

    # Always attack with premium holdings.
    if strength >= 36:
        return True
    return rng.random() < probability


def _choose_raise_amount(
    min_raise_to: Optional[int],
    max_raise_to: Optional[int],
    facing_bet: bool,
    rng: random.Random,
) -> int:
    if min_raise_to is None:
        raise ValueError("Raise requested without a minimum amount")
    if max_raise_to is None or max_raise_to <= min_raise_to:
        return min_raise_to

    span = max_raise_to - min_raise_to
    roll = rng.random()

    # Facing a bet: lean toward bigger responses, otherwise probe more often.
    if facing_bet:
        if roll < 0.2:
            return min_raise_to
        if roll > 0.85:
            return max_raise_to
    else:
        if roll < 0.35:
            return min_raise_to
        if roll > 0.9:
            return max_raise_to

    return min_raise_to + int(span * rng.random())


def baseline_strategy(game: GameManager, rng: Optional[random.Random] = None) -> Decision:
    """Aggressive demo bot: mixes in random raises with a bias toward stronger holdings."""
    rng = rng or random.Random()
    legal, call_amount, min_raise_to, max_raise_to = game.legal_actions()
    player = game.current_player
    if player is None or not legal:
        return ActionType.FOLD, 0

    strength = _rough_hand_strength(player.hole_cards)
    facing_bet = call_amount > 0

    if ActionType.RAISE in legal and _should_raise(strength, game.phase, facing_bet, rng):
        return ActionType.RAISE, _choose_raise_amount(min_raise_to, max_raise_to, facing_bet, rng)

    if ActionType.CALL in legal:
        return ActionType.CALL, 0
    if ActionType.CHECK in legal:
        return ActionType.CHECK, 0
    if ActionType.ALL_IN in legal and facing_bet:
        # Cannot cover the bet with a call; shove the rest instead of folding.
        return ActionType.ALL_IN, 0
    return ActionType.FOLD, 0


def passive_strategy(game: GameManager) -> Decision:
    """Check when free, call otherwise. Never raises."""
    legal, _, _, _ = game.legal_actions()
    if ActionType.CHECK in legal:
        return ActionType.CHECK, 0
    if ActionType.CALL in legal:
        return ActionType.CALL, 0
    return ActionType.FOLD, 0
