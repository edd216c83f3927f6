from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .board import Board
from .cards import Card, Deck, build_deck, cards_to_labels
from .evaluator import HandResult, evaluate_hand
from .models import (
    BETTING_PHASES,
    ActionResult,
    ActionType,
    Phase,
    Player,
    PotAward,
    ShowdownResult,
    TableConfig,
)
from .pots import Pot, compute_pots, contributions_from_players
from .turns import TurnManager

LOGGER = logging.getLogger("holdem.game")

# GameManager keeps all table state in memory. No prompting or networking
# lives here, only poker rules, chip accounting and phase sequencing.

_NEXT_PHASE = {
    Phase.PREFLOP: Phase.FLOP,
    Phase.FLOP: Phase.TURN,
    Phase.TURN: Phase.RIVER,
}


@dataclass
class HandContext:
    # Everything that only lives for one hand.
    hand_id: str
    seed: int
    dealer_index: int
    deck: Deck
    players: List[Player]
    burn_pile: List[Card] = field(default_factory=list)
    small_blind_id: Optional[int] = None
    big_blind_id: Optional[int] = None


class GameManager:
    """Runs hands of No-Limit Texas Hold'em for a single table."""

    def __init__(self, players: Sequence[Player], config: Optional[TableConfig] = None) -> None:
        self.config = config or TableConfig()
        if len(players) < 2:
            raise ValueError("Need at least 2 players")
        if len(players) > self.config.max_players:
            raise ValueError(f"At most {self.config.max_players} players can sit at the table")
        ids = [player.player_id for player in players]
        if len(set(ids)) != len(ids):
            raise ValueError("Player ids must be unique")

        self.players: List[Player] = list(players)
        self.board = Board()
        self.phase = Phase.NOT_STARTED
        self.dealer_position = 0
        self.hand_counter = 0
        self.hand: Optional[HandContext] = None
        self.turn_manager: Optional[TurnManager] = None
        self.last_result: Optional[ShowdownResult] = None

    # Read-only state -------------------------------------------------

    @property
    def is_hand_active(self) -> bool:
        return self.phase in BETTING_PHASES

    @property
    def current_player(self) -> Optional[Player]:
        if not self.is_hand_active or self.turn_manager is None:
            return None
        return self.turn_manager.current_player

    @property
    def current_bet(self) -> int:
        return self.turn_manager.current_bet if self.turn_manager else 0

    @property
    def minimum_raise(self) -> int:
        return self.turn_manager.min_raise if self.turn_manager else self.config.big_blind

    @property
    def burn_pile(self) -> List[Card]:
        return list(self.hand.burn_pile) if self.hand else []

    @property
    def total_pot(self) -> int:
        if not self.hand:
            return 0
        return sum(player.total_bet for player in self.hand.players)

    def player(self, player_id: int) -> Player:
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise KeyError(f"Unknown player {player_id}")

    def pots(self) -> List[Pot]:
        if not self.hand:
            return []
        return compute_pots(contributions_from_players(self.hand.players))

    def legal_actions(self) -> Tuple[List[ActionType], int, Optional[int], Optional[int]]:
        """Legal moves for the player on turn plus call amount and raise bounds."""
        player = self.current_player
        if player is None or self.turn_manager is None:
            return [], 0, None, None
        tm = self.turn_manager
        legal = tm.valid_actions(player)
        call_amount = min(tm.call_amount(player), player.balance)
        if ActionType.RAISE not in legal:
            return legal, call_amount, None, None
        max_raise_to = tm.max_raise_to(player)
        min_raise_to = min(tm.min_raise_to(), max_raise_to)
        return legal, call_amount, min_raise_to, max_raise_to

    def is_match_over(self) -> bool:
        return sum(1 for player in self.players if player.balance > 0) <= 1

    # Hand lifecycle --------------------------------------------------

    def can_start_hand(self) -> bool:
        return not self.is_hand_active and sum(1 for player in self.players if player.balance > 0) >= 2

    def start_new_hand(self, seed: Optional[int] = None) -> ActionResult:
        if self.is_hand_active:
            return ActionResult.failed("Hand already in progress")
        funded = [player for player in self.players if player.balance > 0]
        if len(funded) < 2:
            return ActionResult.failed("Need at least 2 players with chips to start a hand")

        if seed is None:
            seed = random.SystemRandom().getrandbits(32)

        for player in self.players:
            player.reset_for_hand()
        if self.players[self.dealer_position].balance <= 0:
            self.dealer_position = self._next_funded_seat(self.dealer_position)
        dealer = self.players[self.dealer_position]

        hand_id = f"H-{time.strftime('%Y%m%d')}-{self.hand_counter:05d}"
        self.hand_counter += 1
        self.board.clear()
        self.last_result = None
        ctx = HandContext(
            hand_id=hand_id,
            seed=seed,
            dealer_index=funded.index(dealer),
            deck=build_deck(seed),
            players=funded,
        )
        self.hand = ctx
        self.phase = Phase.PREFLOP
        LOGGER.info("Hand %s started (seed=%s, dealer=%s, players=%d)", hand_id, seed, dealer.name, len(funded))

        self._deal_hole_cards(ctx)

        self.turn_manager = TurnManager(funded, ctx.dealer_index, self.config.big_blind)
        sb_posted, bb_posted = self.turn_manager.start_preflop(self.config.small_blind, self.config.big_blind)
        sb_index, bb_index = self.turn_manager.blind_positions()
        ctx.small_blind_id = funded[sb_index].player_id
        ctx.big_blind_id = funded[bb_index].player_id
        LOGGER.info(
            "Blinds posted: %s %s, %s %s", funded[sb_index].name, sb_posted, funded[bb_index].name, bb_posted
        )

        # Blinds can leave nobody able to act, e.g. everyone all-in.
        if self.turn_manager.is_round_complete():
            self._complete_round()
        return ActionResult.ok(f"Hand {hand_id} started")

    def _deal_hole_cards(self, ctx: HandContext) -> None:
        count = len(ctx.players)
        order = [ctx.players[(ctx.dealer_index + offset) % count] for offset in range(1, count + 1)]
        for _ in range(2):
            for player in order:
                player.add_hole_card(ctx.deck.deal())

    def _next_funded_seat(self, start: int) -> int:
        count = len(self.players)
        for step in range(1, count + 1):
            idx = (start + step) % count
            if self.players[idx].balance > 0:
                return idx
        raise RuntimeError("No funded seat available")

    # Action handling -------------------------------------------------

    def submit_action(self, action: ActionType, amount: int = 0) -> ActionResult:
        """Apply one action for whoever is on turn."""
        player = self.current_player
        if player is None:
            return ActionResult.failed("No active betting round", _coerce_action(action))
        return self._apply(player, action, amount)

    def act(self, player_id: int, action: ActionType, amount: int = 0) -> ActionResult:
        """Apply an action on behalf of a specific player, rejecting out-of-turn requests."""
        try:
            player = self.player(player_id)
        except KeyError:
            return ActionResult.failed(f"Player {player_id} not found", _coerce_action(action))
        if not self.is_hand_active:
            return ActionResult.failed("No active betting round", _coerce_action(action))
        return self._apply(player, action, amount)

    def _apply(self, player: Player, action: ActionType, amount: int) -> ActionResult:
        assert self.hand is not None and self.turn_manager is not None
        action_type = _coerce_action(action)
        if action_type is None:
            return ActionResult.failed(f"Unsupported action {action}")

        result = self.turn_manager.apply_action(player, action_type, amount)
        if result.is_cancelled:
            return result
        if not result.success:
            LOGGER.info("Rejected %s from %s: %s", action_type.value, player.name, result.message)
            return result

        LOGGER.info("%s %s: %s", self.hand.hand_id, player.name, result.message)
        if self.turn_manager.is_round_complete():
            self._complete_round()
        return result

    # Phase sequencing ------------------------------------------------

    def _complete_round(self) -> None:
        assert self.turn_manager is not None
        self.turn_manager.end_round()
        LOGGER.debug("%s betting complete; pots: %s", self.phase.value, [str(pot) for pot in self.pots()])

        while True:
            if self._should_end_hand() or self.phase == Phase.RIVER:
                self._finish_hand()
                return
            self._reveal_next_stage()
            self.turn_manager.start_postflop_round()
            if not self.turn_manager.is_round_complete():
                return
            self.turn_manager.end_round()

    def _should_end_hand(self) -> bool:
        assert self.hand is not None
        remaining = [player for player in self.hand.players if not player.folded]
        if len(remaining) <= 1:
            return True
        # Everyone all-in, or one player left with nobody to bet against.
        return sum(1 for player in remaining if player.can_act()) <= 1

    def _reveal_next_stage(self) -> None:
        assert self.hand is not None
        self.phase = _NEXT_PHASE[self.phase]
        burnt = self.board.deal_next(self.hand.deck)
        self.hand.burn_pile.append(burnt)
        LOGGER.info("%s: %s", self.phase.value, " ".join(self.board.labels()))

    def _finish_hand(self) -> None:
        assert self.hand is not None and self.turn_manager is not None
        ctx = self.hand
        self.turn_manager.end_round()

        pots = self.pots()
        remaining = [player for player in ctx.players if not player.folded]
        if len(remaining) == 1:
            winner = remaining[0]
            awards = [PotAward(pot.name, winner.player_id, pot.amount) for pot in pots]
            winner.add_funds(sum(pot.amount for pot in pots))
            result = ShowdownResult(pots=pots, awards=awards, uncontested=True)
            LOGGER.info("%s wins %s uncontested", winner.name, sum(pot.amount for pot in pots))
        else:
            while not self.board.is_complete:
                self._reveal_next_stage()
            hands = {player.player_id: evaluate_hand(player.hole_cards, self.board.cards) for player in remaining}
            for player in remaining:
                LOGGER.info("Showdown %s: %s", player.name, hands[player.player_id])
            awards = []
            for pot in pots:
                awards.extend(self._award_pot(pot, hands))
            result = ShowdownResult(pots=pots, awards=awards, hands=hands)

        for award in result.awards:
            LOGGER.info("%s: player %s wins %s", award.pot_name, award.player_id, award.amount)
        self.phase = Phase.FINISHED
        self.last_result = result
        self.dealer_position = (self.dealer_position + 1) % len(self.players)

    def _award_pot(self, pot: Pot, hands: Dict[int, HandResult]) -> List[PotAward]:
        contenders = [player_id for player_id in pot.eligible_player_ids if player_id in hands]
        if not contenders:
            # Only folded money reached this layer; it goes to the best hand still in.
            contenders = list(hands)
        best = max(hands[player_id].score for player_id in contenders)
        winners = self._seat_order([player_id for player_id in contenders if hands[player_id].score == best])

        # Odd chips go one at a time starting left of the dealer.
        share, remainder = divmod(pot.amount, len(winners))
        awards = []
        for idx, player_id in enumerate(winners):
            payout = share + (1 if idx < remainder else 0)
            self.player(player_id).add_funds(payout)
            awards.append(PotAward(pot.name, player_id, payout))
        return awards

    def _seat_order(self, player_ids: List[int]) -> List[int]:
        assert self.hand is not None
        seats = {player.player_id: idx for idx, player in enumerate(self.hand.players)}
        count = len(self.hand.players)
        dealer = self.hand.dealer_index
        return sorted(player_ids, key=lambda player_id: (seats[player_id] - dealer - 1) % count)

    # Snapshots -------------------------------------------------------

    def table_state(self, include_hole_cards: bool = True) -> Dict[str, object]:
        ctx = self.hand
        current = self.current_player
        in_hand = {player.player_id for player in ctx.players} if ctx else set()
        dealer = ctx.players[ctx.dealer_index] if ctx else self.players[self.dealer_position]
        state: Dict[str, object] = {
            "hand_id": ctx.hand_id if ctx else None,
            "seed": ctx.seed if ctx else None,
            "phase": self.phase.value,
            "dealer_id": dealer.player_id,
            "small_blind_id": ctx.small_blind_id if ctx else None,
            "big_blind_id": ctx.big_blind_id if ctx else None,
            "current_player_id": current.player_id if current else None,
            "current_bet": self.current_bet,
            "minimum_raise": self.minimum_raise,
            "board": self.board.labels(),
            "burned": len(ctx.burn_pile) if ctx else 0,
            "pot": self.total_pot,
            "pots": [
                {
                    "name": pot.name,
                    "amount": pot.amount,
                    "eligible": list(pot.eligible_player_ids),
                    "level": pot.contribution_level,
                }
                for pot in self.pots()
            ],
            "players": [
                {
                    "id": player.player_id,
                    "name": player.name,
                    "balance": player.balance,
                    "current_bet": player.current_bet,
                    "total_bet": player.total_bet,
                    "folded": player.folded,
                    "all_in": player.all_in,
                    "has_acted": player.has_acted,
                    "in_hand": player.player_id in in_hand,
                    "status": player.status() if player.player_id in in_hand else "SITTING_OUT",
                    "hole": cards_to_labels(player.hole_cards) if include_hole_cards else [],
                }
                for player in self.players
            ],
        }
        if current is not None:
            legal, call_amount, min_raise_to, max_raise_to = self.legal_actions()
            state["legal"] = [action.value for action in legal]
            state["call_amount"] = call_amount
            state["min_raise_to"] = min_raise_to
            state["max_raise_to"] = max_raise_to
        if self.last_result is not None:
            state["results"] = {
                "uncontested": self.last_result.uncontested,
                "awards": [
                    {"pot": award.pot_name, "player_id": award.player_id, "amount": award.amount}
                    for award in self.last_result.awards
                ],
                "hands": {
                    player_id: {"rank": hand.category.key, "score": hand.score, "cards": cards_to_labels(hand.cards)}
                    for player_id, hand in self.last_result.hands.items()
                },
            }
        return state


def _coerce_action(action: object) -> Optional[ActionType]:
    if isinstance(action, ActionType):
        return action
    try:
        return ActionType(action)
    except ValueError:
        return None
