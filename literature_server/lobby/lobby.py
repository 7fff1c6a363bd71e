"""Lobby: admission, teams and match kickoff."""

from __future__ import annotations

import logging
import random
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, Field

from literature_server.config import Config
from literature_server.errors import (
    InvalidTarget,
    LobbyFull,
    MatchInProgress,
    MatchNotStarted,
    NotAuthorized,
    NotEnoughPlayers,
    UnbalancedTeams,
    UnknownPlayer,
)
from literature_server.game.engine import NUM_PLAYERS, TEAM_SIZE, GameEngine, Seat
from literature_server.logging import GameLogConfig, GameLogger
from literature_server.models.game_state import GameState
from literature_server.models.player import Team

logger = logging.getLogger(__name__)


class LobbySettings(BaseModel):
    """Settings the admin may change."""

    turn_time: int = Field(default=30, gt=0)  # Seconds, shown to players but not enforced


class LobbyPlayer(BaseModel):
    """Lobby member."""

    player_id: str
    name: str
    team: Team
    is_admin: bool = False
    connected: bool = True


def generate_log_filename(log_dir: str, code: str) -> str:
    """Generate log filename with timestamp and lobby code.

    Format: {ISO timestamp}_{code}.jsonl
    """
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    return str(Path(log_dir) / f"{timestamp}_{code}.jsonl")


class Lobby:
    """One lobby and, once started, its match.

    Player IDs are allocated here on first join and never change; a player
    who reconnects under the same name keeps the ID.
    """

    def __init__(
        self,
        code: str,
        config: Config | None = None,
        rng: random.Random | None = None,
        on_game_end: Callable[[str, GameState], None] | None = None,
    ):
        """Initialize lobby.

        Args:
            code: Lobby code
            config: Configuration (uses defaults if not provided)
            rng: Random source handed to each match engine
            on_game_end: Called with (code, final state) when a match ends
        """
        self.code = code
        self.config = config or Config()
        self.rng = rng
        self.on_game_end = on_game_end
        self.settings = LobbySettings(turn_time=self.config.lobby.turn_time)

        self.players: list[LobbyPlayer] = []
        self.admin_id: str | None = None
        self.engine: GameEngine | None = None
        self.game_logger: GameLogger | None = None

        self._lock = threading.Lock()

    @property
    def in_match(self) -> bool:
        """Check if a match is running and not over."""
        return self.engine is not None and not self.engine.is_over

    def roster(self) -> list[LobbyPlayer]:
        with self._lock:
            return [p.model_copy() for p in self.players]

    def find(self, player_id: str) -> LobbyPlayer | None:
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def find_by_name(self, name: str) -> LobbyPlayer | None:
        for p in self.players:
            if p.name == name:
                return p
        return None

    def join(self, name: str, is_admin: bool = False) -> tuple[LobbyPlayer, bool]:
        """Admit a player, or re-admit a returning one.

        Args:
            name: Display name, also used to recognise reconnects
            is_admin: Whether the player asks to administer the lobby

        Returns:
            Tuple of (player, reconnected)

        Raises:
            MatchInProgress: A new player tries to join a running match
            LobbyFull: The lobby already has six players
        """
        with self._lock:
            existing = self.find_by_name(name)
            if existing is not None:
                existing.connected = True
                logger.info(f"Player {name} reconnected to lobby {self.code}")
                return existing, True

            if self.in_match:
                raise MatchInProgress("The match has already started")
            if len(self.players) >= self.config.lobby.max_players:
                raise LobbyFull(f"Lobby {self.code} is full")

            player = LobbyPlayer(
                player_id=uuid.uuid4().hex[:8],
                name=name,
                team=Team.A if len(self.players) % 2 == 0 else Team.B,
            )
            if is_admin and self.admin_id is None:
                player.is_admin = True
                self.admin_id = player.player_id

            self.players.append(player)
            logger.info(f"Player {name} joined lobby {self.code}")
            return player, False

    def disconnect(self, player_id: str) -> str | None:
        """Mark a player as disconnected. The seat is kept for a reconnect.

        Returns:
            ID of the new admin if the admin left and someone took over
        """
        with self._lock:
            player = self.find(player_id)
            if player is None:
                return None
            player.connected = False
            logger.info(f"Player {player.name} disconnected from lobby {self.code}")

            if player_id != self.admin_id:
                return None

            for candidate in self.players:
                if candidate.connected:
                    player.is_admin = False
                    candidate.is_admin = True
                    self.admin_id = candidate.player_id
                    logger.info(f"{candidate.name} is now admin of lobby {self.code}")
                    return candidate.player_id
            return None

    def kick(self, requester_id: str, player_id: str) -> LobbyPlayer:
        """Remove a player from the lobby (admin only, not during a match)."""
        with self._lock:
            self._require_admin(requester_id)
            if player_id == requester_id:
                raise InvalidTarget("Cannot kick yourself")
            if self.in_match:
                raise MatchInProgress("Cannot kick during a match")
            player = self._require_player(player_id)
            self.players.remove(player)
            logger.info(f"Player {player.name} was kicked from lobby {self.code}")
            return player

    def toggle_team(self, requester_id: str, player_id: str) -> LobbyPlayer:
        """Move a player to the other team (admin only, not during a match)."""
        with self._lock:
            self._require_admin(requester_id)
            if self.in_match:
                raise MatchInProgress("Cannot change teams during a match")
            player = self._require_player(player_id)
            player.team = player.team.opponent
            return player

    def update_settings(self, requester_id: str, settings: dict[str, Any]) -> LobbySettings:
        """Merge new settings in (admin only)."""
        with self._lock:
            self._require_admin(requester_id)
            self.settings = LobbySettings(**{**self.settings.model_dump(), **settings})
            return self.settings

    def start_match(self, requester_id: str) -> GameEngine:
        """Start a match with the current roster (admin only).

        Raises:
            NotAuthorized: The requester is not the admin
            MatchInProgress: A match is already running
            NotEnoughPlayers: The lobby does not have exactly six players
            UnbalancedTeams: The teams are not three against three
        """
        with self._lock:
            self._require_admin(requester_id)
            if self.in_match:
                raise MatchInProgress("The match has already started")
            if len(self.players) != NUM_PLAYERS:
                raise NotEnoughPlayers(f"Need exactly {NUM_PLAYERS} players to start the game")
            for team in Team:
                if sum(1 for p in self.players if p.team == team) != TEAM_SIZE:
                    raise UnbalancedTeams(f"Each team needs exactly {TEAM_SIZE} players")

            self._close_game_logger()
            if self.config.game_log.enabled:
                log_path = generate_log_filename(self.config.game_log.output_path, self.code)
                self.game_logger = GameLogger(
                    GameLogConfig(enabled=True, output_path=log_path), match_id=self.code
                )
                self.game_logger.open()

            engine = GameEngine(self.config.rules, self.rng, self.game_logger)
            if self.on_game_end:
                hook = self.on_game_end
                engine.set_callbacks(on_game_end=lambda state: hook(self.code, state))
            engine.start_match(
                [Seat(player_id=p.player_id, name=p.name, team=p.team) for p in self.players]
            )
            self.engine = engine
            logger.info(
                f"Starting game in lobby {self.code} with players: "
                f"{[p.name for p in self.players]}"
            )
            return engine

    def require_engine(self) -> GameEngine:
        """Get the running (or finished) match engine."""
        engine = self.engine
        if engine is None:
            raise MatchNotStarted("Game has not started yet")
        return engine

    def play_again(self, requester_id: str) -> None:
        """Drop the current match so a new one can be started (admin only)."""
        with self._lock:
            self._require_admin(requester_id)
            self.engine = None
            self._close_game_logger()

    def close(self) -> None:
        with self._lock:
            self._close_game_logger()

    def _close_game_logger(self) -> None:
        if self.game_logger:
            self.game_logger.close()
            self.game_logger = None

    def _require_admin(self, requester_id: str) -> None:
        if requester_id != self.admin_id:
            raise NotAuthorized("Only the lobby admin can do that")

    def _require_player(self, player_id: str) -> LobbyPlayer:
        player = self.find(player_id)
        if player is None:
            raise UnknownPlayer(f"Unknown player: {player_id}")
        return player
