import pytest

from holdem.models import ActionStatus, ActionType, Player
from holdem.turns import TurnManager


def make_players(*balances):
    return [Player(idx, f"P{idx}", balance) for idx, balance in enumerate(balances)]


def preflop(*balances, dealer=0, sb=10, bb=20):
    players = make_players(*balances)
    manager = TurnManager(players, dealer, bb)
    manager.start_preflop(sb, bb)
    return manager, players


def postflop(*balances, dealer=0, bb=20):
    players = make_players(*balances)
    manager = TurnManager(players, dealer, bb)
    manager.start_postflop_round()
    return manager, players


def test_preflop_posts_blinds_left_of_dealer():
    players = make_players(1_000, 1_000, 1_000)
    manager = TurnManager(players, 0, 20)
    assert manager.start_preflop(10, 20) == (10, 20)
    assert [p.current_bet for p in players] == [0, 10, 20]
    assert manager.current_bet == 20
    assert manager.current_player is players[0]
    assert manager.last_raiser is players[2]


def test_heads_up_dealer_posts_small_blind_and_acts_first():
    manager, players = preflop(1_000, 1_000)
    assert manager.blind_positions() == (0, 1)
    assert players[0].current_bet == 10
    assert manager.current_player is players[0]

    manager.apply_action(players[0], ActionType.CALL)
    manager.apply_action(players[1], ActionType.CHECK)
    assert manager.is_round_complete()

    manager.start_postflop_round()
    assert manager.current_player is players[1]


def test_blind_larger_than_stack_posts_all_in():
    manager, players = preflop(5, 1_000)
    assert players[0].current_bet == 5
    assert players[0].all_in
    # Big blind still gets the option.
    assert manager.current_player is players[1]
    result = manager.apply_action(players[1], ActionType.CHECK)
    assert result.success
    assert manager.is_round_complete()


def test_raise_reopens_action_for_players_who_checked():
    manager, players = postflop(1_000, 1_000, 1_000)
    assert manager.current_player is players[1]
    assert manager.apply_action(players[1], ActionType.CHECK).success
    assert manager.apply_action(players[2], ActionType.CHECK).success
    result = manager.apply_action(players[0], ActionType.RAISE, 40)
    assert result.success
    assert result.amount == 40

    assert not manager.is_round_complete()
    assert manager.current_player is players[1]
    assert not players[1].has_acted
    assert not players[2].has_acted

    manager.apply_action(players[1], ActionType.CALL)
    assert not manager.is_round_complete()
    manager.apply_action(players[2], ActionType.CALL)
    assert manager.is_round_complete()
    assert manager.current_player is None


def test_out_of_turn_action_is_rejected_without_side_effects():
    manager, players = preflop(1_000, 1_000, 1_000)
    result = manager.apply_action(players[1], ActionType.FOLD)
    assert result.status == ActionStatus.FAILED
    assert result.message == "Not your turn"
    assert not players[1].folded
    assert manager.current_player is players[0]


def test_check_facing_bet_fails():
    manager, players = preflop(1_000, 1_000, 1_000)
    result = manager.apply_action(players[0], ActionType.CHECK)
    assert not result.success
    assert "facing a bet" in result.message
    assert not players[0].has_acted
    assert manager.current_player is players[0]


def test_call_with_nothing_to_call_fails():
    manager, players = postflop(1_000, 1_000)
    result = manager.apply_action(manager.current_player, ActionType.CALL)
    assert result.message == "Nothing to call"


def test_cancel_keeps_turn():
    manager, players = preflop(1_000, 1_000, 1_000)
    result = manager.apply_action(players[0], ActionType.CANCEL)
    assert result.status == ActionStatus.CANCELLED
    assert result.is_cancelled
    assert manager.current_player is players[0]
    assert players[0].balance == 1_000


def test_raise_validation():
    manager, players = preflop(1_000, 1_000, 1_000)
    assert manager.apply_action(players[0], ActionType.RAISE, 20).message == "Raise must exceed current bet"
    assert manager.apply_action(players[0], ActionType.RAISE, 30).message == "Raise below minimum (at least 40)"
    assert manager.apply_action(players[0], ActionType.RAISE, 5_000).message == "Insufficient funds"
    assert manager.apply_action(players[0], ActionType.RAISE, 40).success
    assert manager.min_raise_to() == 60


def test_short_all_in_raise_is_allowed_below_minimum():
    manager, players = preflop(35, 1_000, 1_000)
    result = manager.apply_action(players[0], ActionType.RAISE, 35)
    assert result.success
    assert players[0].all_in
    assert manager.current_bet == 35
    # Incomplete raise: the minimum raise size is unchanged.
    assert manager.min_raise == 20
    assert manager.min_raise_to() == 55


def test_short_all_in_call_does_not_reopen_betting():
    manager, players = postflop(1_000, 1_000, 50)
    manager.apply_action(players[1], ActionType.RAISE, 100)
    result = manager.apply_action(players[2], ActionType.ALL_IN)
    assert result.success
    assert result.amount == 50
    assert manager.current_bet == 100
    assert players[1].has_acted

    manager.apply_action(players[0], ActionType.CALL)
    assert manager.is_round_complete()


def test_all_in_above_current_bet_reopens_without_changing_min_raise():
    manager, players = preflop(1_000, 1_000, 50)
    manager.apply_action(players[0], ActionType.RAISE, 40)
    manager.apply_action(players[1], ActionType.CALL)
    manager.apply_action(players[2], ActionType.ALL_IN)

    assert manager.current_bet == 50
    assert manager.min_raise == 20
    assert not players[0].has_acted
    assert not players[1].has_acted
    assert manager.current_player is players[0]
    assert manager.call_amount(players[0]) == 10


def test_fold_to_one_player_completes_round():
    manager, players = preflop(1_000, 1_000, 1_000)
    manager.apply_action(players[0], ActionType.FOLD)
    manager.apply_action(players[1], ActionType.FOLD)
    assert manager.players_remaining == 1
    assert manager.players_can_act == 1
    assert manager.is_round_complete()


def test_valid_actions_and_raise_bounds():
    manager, players = preflop(1_000, 1_000, 1_000)
    assert manager.valid_actions(players[0]) == [
        ActionType.FOLD,
        ActionType.CALL,
        ActionType.RAISE,
        ActionType.ALL_IN,
    ]
    assert manager.valid_actions(players[1]) == []
    assert manager.max_raise_to(players[0]) == 1_000

    manager.apply_action(players[0], ActionType.CALL)
    manager.apply_action(players[1], ActionType.CALL)
    assert manager.valid_actions(players[2]) == [
        ActionType.FOLD,
        ActionType.CHECK,
        ActionType.RAISE,
        ActionType.ALL_IN,
    ]


def test_actions_outside_a_round_fail():
    players = make_players(1_000, 1_000)
    manager = TurnManager(players, 0, 20)
    result = manager.apply_action(players[0], ActionType.CHECK)
    assert result.message == "No active betting round"
    assert manager.is_round_complete()
    assert "not active" in str(manager)


def test_constructor_validates_arguments():
    with pytest.raises(ValueError):
        TurnManager(make_players(1_000), 0, 20)
    with pytest.raises(ValueError):
        TurnManager(make_players(1_000, 1_000), 2, 20)
