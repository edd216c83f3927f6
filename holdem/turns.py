from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .models import ActionResult, ActionType, Player

LOGGER = logging.getLogger("holdem.turns")

# TurnManager owns one betting round: whose turn it is, the bet to match and
# when the round is over. GameManager decides what happens between rounds.


class TurnManager:
    def __init__(self, players: Sequence[Player], dealer_index: int, big_blind: int) -> None:
        if len(players) < 2:
            raise ValueError("Need at least 2 players")
        if not 0 <= dealer_index < len(players):
            raise ValueError("Invalid dealer position")

        self.players: List[Player] = list(players)
        self.dealer_index = dealer_index
        self.big_blind = big_blind
        self.current_index: Optional[int] = None
        self.current_bet = 0
        self.min_raise = big_blind
        self.last_raiser: Optional[Player] = None
        self.round_active = False

    # Read-only views -------------------------------------------------

    @property
    def current_player(self) -> Optional[Player]:
        if not self.round_active or self.current_index is None:
            return None
        return self.players[self.current_index]

    @property
    def players_remaining(self) -> int:
        return sum(1 for player in self.players if not player.folded)

    @property
    def players_can_act(self) -> int:
        return sum(1 for player in self.players if player.can_act())

    def active_players(self) -> List[Player]:
        return [player for player in self.players if not player.folded]

    def blind_positions(self) -> Tuple[int, int]:
        count = len(self.players)
        if count == 2:
            # Heads-up: the dealer posts the small blind and acts first preflop.
            return self.dealer_index, (self.dealer_index + 1) % count
        return (self.dealer_index + 1) % count, (self.dealer_index + 2) % count

    # Round lifecycle -------------------------------------------------

    def start_preflop(self, small_blind: int, big_blind: int) -> Tuple[int, int]:
        """Post blinds and open preflop betting. Returns the amounts actually posted."""
        self.big_blind = big_blind
        sb_index, bb_index = self.blind_positions()
        sb_posted = self.players[sb_index].commit(small_blind)
        bb_posted = self.players[bb_index].commit(big_blind)

        self.current_bet = big_blind
        self.min_raise = big_blind
        self.last_raiser = self.players[bb_index]
        self.round_active = True
        self.current_index = self._find_next(bb_index)
        if self.current_index is None:
            self.end_round()
        return sb_posted, bb_posted

    def start_postflop_round(self) -> None:
        for player in self.players:
            player.reset_for_round()
        self.current_bet = 0
        self.min_raise = self.big_blind
        self.last_raiser = None
        self.round_active = True
        self.current_index = self._find_next(self.dealer_index)
        if self.current_index is None:
            self.end_round()

    def end_round(self) -> None:
        self.round_active = False
        self.current_index = None

    def is_round_complete(self) -> bool:
        if not self.round_active:
            return True
        remaining = self.active_players()
        if len(remaining) <= 1:
            return True
        return all(
            (player.has_acted and player.current_bet == self.current_bet) or player.all_in
            for player in remaining
        )

    # Actions ---------------------------------------------------------

    def apply_action(self, player: Player, action: ActionType, amount: int = 0) -> ActionResult:
        if not self.round_active:
            return ActionResult.failed("No active betting round", action)
        if player is not self.current_player:
            return ActionResult.failed("Not your turn", action)

        if action == ActionType.CANCEL:
            return ActionResult.cancelled("Returned to action selection")

        to_call = self.call_amount(player)
        if action == ActionType.FOLD:
            player.folded = True
            result = ActionResult.ok("Folded", ActionType.FOLD)
        elif action == ActionType.CHECK:
            if to_call > 0:
                return ActionResult.failed("Cannot check when facing a bet", action)
            result = ActionResult.ok("Checked", ActionType.CHECK)
        elif action == ActionType.CALL:
            if to_call <= 0:
                return ActionResult.failed("Nothing to call", action)
            paid = player.commit(to_call)
            message = f"Called {paid} (all-in)" if player.all_in else f"Called {paid}"
            result = ActionResult.ok(message, ActionType.CALL, paid)
        elif action == ActionType.RAISE:
            rejection = self._validate_raise(player, amount)
            if rejection:
                return ActionResult.failed(rejection, action)
            paid = player.commit(amount - player.current_bet)
            self._register_raise(player)
            message = f"Raised to {player.current_bet} (all-in)" if player.all_in else f"Raised to {player.current_bet}"
            result = ActionResult.ok(message, ActionType.RAISE, paid)
        elif action == ActionType.ALL_IN:
            if player.balance <= 0:
                return ActionResult.failed("No funds available", action)
            paid = player.commit(player.balance)
            # A short all-in that does not exceed the bet to match never reopens betting.
            if player.current_bet > self.current_bet:
                self._register_raise(player)
            result = ActionResult.ok(f"All-in for {paid}", ActionType.ALL_IN, paid)
        else:
            return ActionResult.failed(f"Unsupported action {action}", action)

        player.has_acted = True
        self._advance()
        return result

    def _validate_raise(self, player: Player, amount: int) -> Optional[str]:
        if amount <= self.current_bet:
            return "Raise must exceed current bet"
        needed = amount - player.current_bet
        if needed > player.balance:
            return "Insufficient funds"
        if amount < self.min_raise_to() and needed < player.balance:
            return f"Raise below minimum (at least {self.min_raise_to()})"
        return None

    def _register_raise(self, raiser: Player) -> None:
        increment = raiser.current_bet - self.current_bet
        if increment >= self.min_raise:
            self.min_raise = increment
        self.current_bet = raiser.current_bet
        self.last_raiser = raiser
        reopened = []
        for player in self.players:
            if player is not raiser and player.can_act():
                player.has_acted = False
                reopened.append(player.name)
        LOGGER.debug("%s raised to %s; action reopened for %s", raiser.name, self.current_bet, reopened)

    def _advance(self) -> None:
        assert self.current_index is not None
        next_index = self._find_next(self.current_index)
        if next_index is None:
            self.end_round()
        else:
            self.current_index = next_index

    def _needs_action(self, player: Player) -> bool:
        return player.can_act() and (not player.has_acted or player.current_bet < self.current_bet)

    def _find_next(self, start: int) -> Optional[int]:
        count = len(self.players)
        for step in range(1, count + 1):
            idx = (start + step) % count
            if self._needs_action(self.players[idx]):
                return idx
        return None

    # Helpers for hosts and bots --------------------------------------

    def call_amount(self, player: Player) -> int:
        return max(0, self.current_bet - player.current_bet)

    def min_raise_to(self) -> int:
        return self.current_bet + self.min_raise

    def max_raise_to(self, player: Player) -> int:
        return player.current_bet + player.balance

    def valid_actions(self, player: Player) -> List[ActionType]:
        if player is not self.current_player or not player.can_act():
            return []
        legal = [ActionType.FOLD]
        if self.call_amount(player) == 0:
            legal.append(ActionType.CHECK)
        elif player.balance > 0:
            legal.append(ActionType.CALL)
        if self.max_raise_to(player) > self.current_bet:
            legal.append(ActionType.RAISE)
        if player.balance > 0:
            legal.append(ActionType.ALL_IN)
        return legal

    def __str__(self) -> str:
        player = self.current_player
        if player is None:
            return "Turn Manager: betting round not active"
        return (
            f"Turn Manager: {player.name}'s turn - Bet: {self.current_bet}, "
            f"Players remaining: {self.players_remaining}"
        )
