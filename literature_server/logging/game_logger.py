"""Game logger for detailed match replay."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from pydantic import BaseModel

from literature_server.models.game_state import GameState

from .formatters import format_card, format_declared_set, format_hands

if TYPE_CHECKING:
    from literature_server.game.ask import AskOutcome
    from literature_server.game.declare import DeclareOutcome


class GameLogConfig(BaseModel):
    """Configuration for game logging."""

    enabled: bool = False
    output_path: str = "game_log.jsonl"


class GameLogger:
    """Logger for detailed match events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    Hands are logged in full, so the file is for replay and debugging only
    and must never be sent to players.
    """

    def __init__(self, config: GameLogConfig | None = None, match_id: str = ""):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
            match_id: Lobby code stamped on every event.
        """
        self.config = config or GameLogConfig()
        self.match_id = match_id
        self._file: TextIO | None = None
        self._lock = threading.Lock()

    def __enter__(self) -> GameLogger:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def open(self) -> None:
        if self._file is None and self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")

    def close(self) -> None:
        """Close the log file."""
        with self._lock:
            if self._file:
                self._file.close()
                self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        if self.match_id:
            event["match"] = self.match_id
        with self._lock:
            if self._file:
                self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
                self._file.flush()

    def log_match_start(self, state: GameState) -> None:
        """Log match start with seating and initial hands."""
        self._write({
            "type": "match_start",
            "timestamp": datetime.now().isoformat(),
            "players": [
                {"id": p.player_id, "name": p.name, "team": p.team.value}
                for p in state.players
            ],
            "hands": format_hands(state),
            "first_player": state.current_turn,
        })

    def log_ask(self, state: GameState, outcome: AskOutcome) -> None:
        """Log a processed ask.

        Args:
            state: Game state after the ask.
            outcome: Result of the ask.
        """
        self._write({
            "type": "ask",
            "turn": state.turn_number,
            "asker": outcome.asker_id,
            "target": outcome.target_id,
            "card": outcome.card_id,
            "result": outcome.result.value,
            "current_turn": outcome.current_turn,
            "received": format_card(outcome.card) if outcome.card else None,
            "counts": state.card_counts(),
        })

    def log_declare(self, state: GameState, outcome: DeclareOutcome) -> None:
        """Log a processed declaration."""
        self._write({
            "type": "declare",
            "turn": state.turn_number,
            "declarer": outcome.declarer_id,
            "set": outcome.set_key.value,
            "valid": outcome.is_valid,
            "team": outcome.awarded_team.value,
            "current_turn": outcome.current_turn,
            "hands": format_hands(state),
        })

    def log_match_end(self, state: GameState) -> None:
        """Log match end with the declared sets and winner."""
        self._write({
            "type": "match_end",
            "timestamp": datetime.now().isoformat(),
            "winning_team": state.winning_team.value if state.winning_team else None,
            "declared_sets": [format_declared_set(s) for s in state.declared_sets],
            "turns": state.turn_number,
        })
