import random
import sys

from holdem.__main__ import main, run_match

from .helpers import create_game


def test_run_match_conserves_chips():
    game = create_game(players=4, starting_stack=1_500)
    played = run_match(game, 40, random.Random(21))
    assert played > 0
    assert sum(player.balance for player in game.players) == 6_000


def test_main_prints_summary(monkeypatch, capsys):
    monkeypatch.setattr(
        sys,
        "argv",
        ["holdem", "--players", "3", "--hands", "10", "--starting-stack", "500", "--seed", "7"],
    )
    main()
    out = capsys.readouterr().out
    assert "Hands played:" in out
    assert "Chips on table: 1500 (expected 1500)" in out
