"""Logging utilities and match display."""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from literature_server.models.game_state import GameState


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


class GameDisplay:
    """Display match results to stdout."""

    def __init__(self, show_hands: bool = False):
        """Initialize display.

        Args:
            show_hands: Whether to show player hands
        """
        self.show_hands = show_hands

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def print_hands(self, state: "GameState") -> None:
        """Print hands for all players (if show_hands is enabled)."""
        if not self.show_hands:
            return

        print("\nHands:")
        for player in state.players:
            print(f"  {player}: {player.hand}")

    def print_game_end(self, code: str, state: "GameState") -> None:
        """Print match results."""
        self.print_separator()
        winner = state.winning_team.value if state.winning_team else "?"
        print(f"Lobby {code}: team {winner} wins after {state.turn_number} turns")
        for declared in state.declared_sets:
            verdict = "correct" if declared.is_valid else "wrong"
            print(f"  {declared.set_key.value:<14} -> team {declared.team.value} ({verdict})")
        self.print_hands(state)
        self.print_separator()

    def print_startup(self, host: str, port: int) -> None:
        print("Literature server starting...")
        print(f"Listening on {host}:{port}")
        print()
