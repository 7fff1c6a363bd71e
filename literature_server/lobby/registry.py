"""Registry of lobbies keyed by lobby code."""

import logging
import random
import threading
from typing import Callable

from literature_server.config import Config
from literature_server.errors import LobbyNotFound
from literature_server.models.game_state import GameState

from .lobby import Lobby

logger = logging.getLogger(__name__)


class MatchRegistry:
    """Owns every lobby (and so every match) of one server process."""

    def __init__(
        self,
        config: Config | None = None,
        rng: random.Random | None = None,
        on_game_end: Callable[[str, GameState], None] | None = None,
    ):
        self.config = config or Config()
        self.rng = rng
        self.on_game_end = on_game_end
        self._lobbies: dict[str, Lobby] = {}
        self._lock = threading.Lock()

    def get_or_create(self, code: str) -> Lobby:
        """Get a lobby, creating it on first use."""
        with self._lock:
            lobby = self._lobbies.get(code)
            if lobby is None:
                lobby = Lobby(code, self.config, self.rng, self.on_game_end)
                self._lobbies[code] = lobby
                logger.info(f"Lobby {code} created")
            return lobby

    def get(self, code: str) -> Lobby:
        """Get an existing lobby.

        Raises:
            LobbyNotFound: If no lobby has this code
        """
        with self._lock:
            lobby = self._lobbies.get(code)
        if lobby is None:
            raise LobbyNotFound("Lobby not found")
        return lobby

    def remove(self, code: str) -> None:
        with self._lock:
            lobby = self._lobbies.pop(code, None)
        if lobby is not None:
            lobby.close()
            logger.info(f"Lobby {code} removed")

    def close(self) -> None:
        """Close every lobby."""
        with self._lock:
            lobbies = list(self._lobbies.values())
            self._lobbies.clear()
        for lobby in lobbies:
            lobby.close()

    def __len__(self) -> int:
        return len(self._lobbies)
