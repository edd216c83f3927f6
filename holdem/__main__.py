import argparse
import logging
import random
import sys

from .bots import baseline_strategy
from .game import GameManager
from .models import ActionType, Player, TableConfig

LOGGER = logging.getLogger("holdem.sim")

# Hard stop for a hand that never finishes; only a rules bug can hit it.
MAX_ACTIONS_PER_HAND = 1_000


def run_match(game: GameManager, hands: int, rng: random.Random) -> int:
    """Play up to ``hands`` hands with baseline bots. Returns the number played."""
    played = 0
    for _ in range(hands):
        if game.is_match_over():
            break
        result = game.start_new_hand(seed=rng.getrandbits(32))
        if not result.success:
            LOGGER.warning("Could not start hand: %s", result.message)
            break
        for _ in range(MAX_ACTIONS_PER_HAND):
            if not game.is_hand_active:
                break
            action, amount = baseline_strategy(game, rng)
            outcome = game.submit_action(action, amount)
            if not outcome.success:
                LOGGER.warning("Bot action rejected (%s); folding", outcome.message)
                game.submit_action(ActionType.FOLD)
        if game.is_hand_active:
            raise RuntimeError(f"Hand {game.hand.hand_id if game.hand else '?'} did not finish")
        played += 1
    return played


def main() -> None:
    parser = argparse.ArgumentParser(description="Texas Hold'em self-play simulator")
    parser.add_argument("--players", type=int, default=4)
    parser.add_argument("--hands", type=int, default=100)
    parser.add_argument("--starting-stack", type=int, default=10_000)
    parser.add_argument("--sb", type=int, default=50)
    parser.add_argument("--bb", type=int, default=100)
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffles and bot decisions")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        config = TableConfig(small_blind=args.sb, big_blind=args.bb)
        players = [Player(idx, f"Bot{idx}", args.starting_stack) for idx in range(1, args.players + 1)]
        game = GameManager(players, config)
    except ValueError as exc:
        parser.error(str(exc))

    rng = random.Random(args.seed)
    played = run_match(game, args.hands, rng)

    expected = args.starting_stack * args.players
    total = sum(player.balance for player in game.players)
    print(f"Hands played: {played}")
    for player in sorted(game.players, key=lambda p: p.balance, reverse=True):
        print(f"  {player.name:<8} {player.balance:>10}")
    print(f"Chips on table: {total} (expected {expected})")
    if total != expected:
        LOGGER.error("Chip total drifted by %d", total - expected)
        sys.exit(1)


if __name__ == "__main__":
    main()
