from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Sequence

if TYPE_CHECKING:
    from .models import Player

MAIN_POT = "Main Pot"


@dataclass(frozen=True)
class PlayerContribution:
    player_id: int
    total_contributed: int
    folded: bool = False


@dataclass
class Pot:
    name: str
    amount: int
    eligible_player_ids: List[int] = field(default_factory=list)
    contribution_level: int = 0

    def __str__(self) -> str:
        ids = ", ".join(str(player_id) for player_id in self.eligible_player_ids)
        return f"{self.name}: {self.amount} (Eligible: [{ids}])"


@dataclass
class _Layer:
    player_id: int
    remaining: int
    folded: bool


def compute_pots(contributions: Iterable[PlayerContribution]) -> List[Pot]:
    """Split total contributions into a main pot and side pots.

    Each pass peels the smallest remaining contribution off every contributor.
    Folded players pay into the layers they reached but are never eligible.
    """
    working: List[_Layer] = []
    for contribution in contributions:
        if contribution.total_contributed < 0:
            raise ValueError(f"Negative contribution for player {contribution.player_id}")
        if contribution.total_contributed > 0:
            working.append(_Layer(contribution.player_id, contribution.total_contributed, contribution.folded))

    pots: List[Pot] = []
    while working:
        level = min(entry.remaining for entry in working)
        if level <= 0:
            working = [entry for entry in working if entry.remaining > 0]
            continue

        name = MAIN_POT if not pots else f"Side Pot {len(pots)}"
        pots.append(
            Pot(
                name=name,
                amount=level * len(working),
                eligible_player_ids=[entry.player_id for entry in working if not entry.folded],
                contribution_level=level,
            )
        )
        for entry in working:
            entry.remaining -= level
        working = [entry for entry in working if entry.remaining > 0]
    return pots


def contributions_from_players(players: Iterable["Player"]) -> List[PlayerContribution]:
    return [PlayerContribution(player.player_id, player.total_bet, player.folded) for player in players]


def total_contributed(contributions: Iterable[PlayerContribution]) -> int:
    return sum(contribution.total_contributed for contribution in contributions)


def verify_money_conservation(contributions: Sequence[PlayerContribution], pots: Sequence[Pot]) -> bool:
    return total_contributed(contributions) == sum(pot.amount for pot in pots)


def max_winnable(player_id: int, contributions: Sequence[PlayerContribution]) -> int:
    """Most a player can win: their own stake matched against every contributor."""
    own = next((c.total_contributed for c in contributions if c.player_id == player_id), 0)
    return sum(min(c.total_contributed, own) for c in contributions)


def verify_fairness(contributions: Sequence[PlayerContribution], pots: Sequence[Pot]) -> bool:
    for contribution in contributions:
        if contribution.folded or contribution.total_contributed == 0:
            continue
        eligible_total = sum(
            pot.amount for pot in pots if contribution.player_id in pot.eligible_player_ids
        )
        if eligible_total != max_winnable(contribution.player_id, contributions):
            return False
    return True
