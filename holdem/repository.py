from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .game import GameManager
from .models import Player, TableConfig

LOGGER = logging.getLogger("holdem.repository")


class GameRepository:
    """In-memory store of running tables keyed by game id.

    Nothing here locks; the host serializes access to each game.
    """

    def __init__(self) -> None:
        self._games: Dict[str, GameManager] = {}
        self._counter = 0
        self._closed = False

    def create(self, players: Sequence[Player], config: Optional[TableConfig] = None) -> str:
        if self._closed:
            raise RuntimeError("Repository is closed")
        game = GameManager(players, config)
        self._counter += 1
        game_id = f"G-{self._counter:04d}"
        self._games[game_id] = game
        LOGGER.info("Created game %s with %d players", game_id, len(game.players))
        return game_id

    def get(self, game_id: str) -> GameManager:
        try:
            return self._games[game_id]
        except KeyError:
            raise KeyError(f"Unknown game {game_id}") from None

    def remove(self, game_id: str) -> GameManager:
        game = self._games.pop(game_id, None)
        if game is None:
            raise KeyError(f"Unknown game {game_id}")
        LOGGER.info("Removed game %s", game_id)
        return game

    def list_ids(self) -> List[str]:
        return list(self._games)

    def close(self) -> None:
        LOGGER.info("Repository closed (%d games dropped)", len(self._games))
        self._games.clear()
        self._closed = True

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._games

    def __len__(self) -> int:
        return len(self._games)

    def __enter__(self) -> "GameRepository":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
