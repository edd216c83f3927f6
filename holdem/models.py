from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .cards import Card
from .evaluator import HandResult
from .pots import Pot

MAX_HOLE_CARDS = 2


class Phase(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    PREFLOP = "PREFLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    FINISHED = "FINISHED"


BETTING_PHASES = (Phase.PREFLOP, Phase.FLOP, Phase.TURN, Phase.RIVER)


class ActionType(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"
    CANCEL = "CANCEL"


class ActionStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a host request. Domain rejections are reported, never raised."""

    status: ActionStatus
    message: str
    action: Optional[ActionType] = None
    amount: int = 0

    @classmethod
    def ok(cls, message: str, action: Optional[ActionType] = None, amount: int = 0) -> "ActionResult":
        return cls(ActionStatus.SUCCESS, message, action, amount)

    @classmethod
    def failed(cls, message: str, action: Optional[ActionType] = None) -> "ActionResult":
        return cls(ActionStatus.FAILED, message, action)

    @classmethod
    def cancelled(cls, message: str = "Action cancelled") -> "ActionResult":
        return cls(ActionStatus.CANCELLED, message, ActionType.CANCEL)

    @property
    def success(self) -> bool:
        return self.status == ActionStatus.SUCCESS

    @property
    def is_cancelled(self) -> bool:
        return self.status == ActionStatus.CANCELLED

    def __str__(self) -> str:
        if self.is_cancelled:
            return f"Cancelled: {self.message}"
        action = self.action.value if self.action else "GAME"
        suffix = f" ({self.amount})" if self.amount > 0 else ""
        return f"{action}: {self.message}{suffix}"


@dataclass
class TableConfig:
    small_blind: int = 50
    big_blind: int = 100
    # 2 hole cards each plus 3 burns and 5 board cards must fit in 52.
    max_players: int = 22

    def __post_init__(self) -> None:
        if self.small_blind <= 0:
            raise ValueError("Small blind must be positive")
        if self.big_blind < self.small_blind:
            raise ValueError("Big blind must be at least the small blind")
        if not 2 <= self.max_players <= 22:
            raise ValueError("max_players must be between 2 and 22")


@dataclass
class Player:
    player_id: int
    name: str
    balance: int
    current_bet: int = 0
    total_bet: int = 0
    folded: bool = False
    all_in: bool = False
    has_acted: bool = False
    hole_cards: List[Card] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Player name cannot be empty")
        if self.balance < 0:
            raise ValueError("Starting balance cannot be negative")

    def reset_for_hand(self) -> None:
        self.current_bet = 0
        self.total_bet = 0
        self.folded = False
        self.all_in = False
        self.has_acted = False
        self.hole_cards.clear()

    def reset_for_round(self) -> None:
        self.current_bet = 0
        self.has_acted = False

    def can_act(self) -> bool:
        return not self.folded and not self.all_in

    def add_hole_card(self, card: Card) -> None:
        if len(self.hole_cards) >= MAX_HOLE_CARDS:
            raise RuntimeError(f"{self.name} already has {MAX_HOLE_CARDS} hole cards")
        self.hole_cards.append(card)

    def commit(self, amount: int) -> int:
        """Move chips from balance into the current bet; caps at the balance."""
        if amount < 0:
            raise ValueError("Amount to commit cannot be negative")
        amount = min(amount, self.balance)
        self.balance -= amount
        self.current_bet += amount
        self.total_bet += amount
        if self.balance == 0:
            self.all_in = True
        return amount

    def add_funds(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("Amount to add cannot be negative")
        self.balance += amount

    def status(self) -> str:
        if self.folded:
            return "FOLDED"
        if self.all_in:
            return "ALL_IN"
        return "ACTIVE"


@dataclass(frozen=True)
class PotAward:
    pot_name: str
    player_id: int
    amount: int


@dataclass
class ShowdownResult:
    pots: List[Pot]
    awards: List[PotAward]
    hands: Dict[int, HandResult] = field(default_factory=dict)
    uncontested: bool = False

    def winnings(self) -> Dict[int, int]:
        totals: Dict[int, int] = {}
        for award in self.awards:
            totals[award.player_id] = totals.get(award.player_id, 0) + award.amount
        return totals

    def winners(self, pot_name: str) -> List[int]:
        return [award.player_id for award in self.awards if award.pot_name == pot_name]
