"""Game engine for one Literature match."""

from __future__ import annotations

import logging
import random
import threading
from typing import TYPE_CHECKING, Callable, Mapping, Sequence

from pydantic import BaseModel

from literature_server.config import RulesConfig
from literature_server.errors import MatchNotStarted, UnknownPlayer
from literature_server.models.card import SetKey, build_deck
from literature_server.models.game_state import GameState
from literature_server.models.player import Player, Team
from literature_server.models.view import GameView, build_view

from .ask import AskOutcome, AskResolver
from .dealer import deal
from .declare import DeclareOutcome, DeclareResolver
from .validator import DeclarationValidator

if TYPE_CHECKING:
    from literature_server.logging import GameLogger

logger = logging.getLogger(__name__)

NUM_PLAYERS = 6
TEAM_SIZE = 3


class Seat(BaseModel):
    """Player entry handed over by the lobby at match start."""

    player_id: str
    name: str
    team: Team


class GameEngine:
    """Owns the authoritative state of one match.

    Every operation runs to completion under the engine's lock, so requests
    for one match are applied one at a time in the order they arrive. The
    lock is released before the caller broadcasts anything.
    """

    def __init__(
        self,
        rules: RulesConfig | None = None,
        rng: random.Random | None = None,
        game_logger: GameLogger | None = None,
    ):
        """Initialize game engine.

        Args:
            rules: Rules configuration (uses defaults if not provided)
            rng: Random source for dealing and the first turn
            game_logger: GameLogger instance for detailed logging
        """
        self.rules = rules or RulesConfig()
        self.rng = rng or random.Random()
        self.game_logger = game_logger

        self.validator = DeclarationValidator()
        self.ask_resolver = AskResolver(self.rules)
        self.declare_resolver = DeclareResolver(self.rules, self.validator)

        self._state: GameState | None = None
        self._lock = threading.Lock()

        self._on_game_end: Callable[[GameState], None] | None = None

    def set_callbacks(
        self,
        on_game_end: Callable[[GameState], None] | None = None,
    ) -> None:
        """Set event callbacks.

        Args:
            on_game_end: Called once when the match ends, outside the lock
        """
        self._on_game_end = on_game_end

    @property
    def started(self) -> bool:
        return self._state is not None

    @property
    def is_over(self) -> bool:
        return self._state is not None and self._state.game_over

    def start_match(self, seats: Sequence[Seat]) -> GameState:
        """Deal the cards and pick the first player.

        Args:
            seats: Six players in seat order, three per team

        Returns:
            The new game state. Only the owning collaborator may hold it.

        Raises:
            ValueError: If the seating is not six players split three/three
        """
        if len(seats) != NUM_PLAYERS:
            raise ValueError(f"Need exactly {NUM_PLAYERS} players, got {len(seats)}")
        if len({s.player_id for s in seats}) != NUM_PLAYERS:
            raise ValueError("Duplicate player IDs")
        for team in Team:
            size = sum(1 for s in seats if s.team == team)
            if size != TEAM_SIZE:
                raise ValueError(f"Team {team.value} has {size} players, need {TEAM_SIZE}")

        with self._lock:
            player_ids = [s.player_id for s in seats]
            hands = deal(player_ids, build_deck(), self.rng, self.rules.deal_remainder)
            players = [
                Player(player_id=s.player_id, name=s.name, team=s.team, hand=hands[s.player_id])
                for s in seats
            ]
            first = self.rng.choice(players)
            self._state = GameState(players=players, current_turn=first.player_id)

            logger.info(f"Match started, first turn: {first.name}")
            if self.game_logger:
                self.game_logger.log_match_start(self._state)

            return self._state

    def submit_ask(self, asker_id: str, target_id: str, card_id: str) -> AskOutcome:
        """Process an ask from the player holding the turn.

        Raises:
            GameError: If the ask is rejected; the state is then unchanged
        """
        with self._lock:
            state = self._require_state()
            outcome = self.ask_resolver.resolve(state, asker_id, target_id, card_id)
            if self.game_logger:
                self.game_logger.log_ask(state, outcome)
        return outcome

    def submit_declare(
        self,
        declarer_id: str,
        set_key: SetKey | str,
        assignment: Mapping[str, Sequence[str]],
    ) -> DeclareOutcome:
        """Process a set declaration from the player holding the turn.

        Raises:
            GameError: If the declaration is rejected; the state is then unchanged
        """
        with self._lock:
            state = self._require_state()
            outcome = self.declare_resolver.resolve(state, declarer_id, set_key, assignment)
            if self.game_logger:
                self.game_logger.log_declare(state, outcome)
                if outcome.game_over:
                    self.game_logger.log_match_end(state)

        if outcome.game_over and self._on_game_end:
            self._on_game_end(state)
        return outcome

    def view_for(self, player_id: str) -> GameView:
        """Build the state as it may be shown to one player.

        Raises:
            UnknownPlayer: If the player is not seated in this match
        """
        with self._lock:
            state = self._require_state()
            if state.player(player_id) is None:
                raise UnknownPlayer(f"Unknown player: {player_id}")
            return build_view(state, player_id)

    def card_counts(self) -> dict[str, int]:
        with self._lock:
            return self._require_state().card_counts()

    def player_ids(self) -> list[str]:
        """Get player IDs in seat order."""
        with self._lock:
            return [p.player_id for p in self._require_state().players]

    def seats(self) -> list[Seat]:
        """Get the public seat info (no cards) in seat order."""
        with self._lock:
            return [
                Seat(player_id=p.player_id, name=p.name, team=p.team)
                for p in self._require_state().players
            ]

    def team_of(self, player_id: str) -> Team:
        with self._lock:
            player = self._require_state().player(player_id)
            if player is None:
                raise UnknownPlayer(f"Unknown player: {player_id}")
            return player.team

    def _require_state(self) -> GameState:
        if self._state is None:
            raise MatchNotStarted("The match has not started")
        return self._state
