"""Texas Hold'em rules engine: cards, hand evaluation, side pots, betting turns and hand flow."""

from .board import Board
from .cards import RANKS, SUITS, Card, Deck, build_deck, parse_cards, parse_label
from .evaluator import HandCategory, HandResult, describe_rank, evaluate_best, evaluate_hand
from .game import GameManager, HandContext
from .models import (
    ActionResult,
    ActionStatus,
    ActionType,
    Phase,
    Player,
    PotAward,
    ShowdownResult,
    TableConfig,
)
from .pots import PlayerContribution, Pot, compute_pots, verify_fairness, verify_money_conservation
from .repository import GameRepository
from .turns import TurnManager

__all__ = [
    "Board",
    "RANKS",
    "SUITS",
    "Card",
    "Deck",
    "build_deck",
    "parse_cards",
    "parse_label",
    "HandCategory",
    "HandResult",
    "describe_rank",
    "evaluate_best",
    "evaluate_hand",
    "GameManager",
    "HandContext",
    "ActionResult",
    "ActionStatus",
    "ActionType",
    "Phase",
    "Player",
    "PotAward",
    "ShowdownResult",
    "TableConfig",
    "PlayerContribution",
    "Pot",
    "compute_pots",
    "verify_fairness",
    "verify_money_conservation",
    "GameRepository",
    "TurnManager",
]
