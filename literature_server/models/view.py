"""Per-player views of the game state.

A view is what may be sent to one connection: the viewer's own hand in full,
and only a card count for everybody else.
"""

from pydantic import BaseModel

from .card import Card
from .game_state import DeclaredSet, GameState
from .player import Team


class PlayerView(BaseModel):
    """Public seat info plus, for the viewer only, the hand."""

    player_id: str
    name: str
    team: Team
    card_count: int
    hand: list[Card] | None = None


class GameView(BaseModel):
    """Game state as seen by one player."""

    viewer: str
    players: list[PlayerView]
    current_turn: str
    declared_sets: list[DeclaredSet]
    game_over: bool
    winning_team: Team | None = None

    def player(self, player_id: str) -> PlayerView | None:
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def to_wire(self) -> dict:
        """Serialize for the transport."""
        return self.model_dump(mode="json")


def build_view(state: GameState, viewer_id: str) -> GameView:
    """Build the filtered view of a state for one player.

    Args:
        state: Authoritative game state.
        viewer_id: Player the view is built for.

    Returns:
        GameView where only the viewer's hand is present.
    """
    players = [
        PlayerView(
            player_id=p.player_id,
            name=p.name,
            team=p.team,
            card_count=p.card_count(),
            hand=p.hand.to_list() if p.player_id == viewer_id else None,
        )
        for p in state.players
    ]
    return GameView(
        viewer=viewer_id,
        players=players,
        current_turn=state.current_turn,
        declared_sets=list(state.declared_sets),
        game_over=state.game_over,
        winning_team=state.winning_team,
    )
