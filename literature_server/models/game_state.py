"""Game state models."""

from pydantic import BaseModel, ConfigDict, Field

from .card import Card, SetKey
from .player import Player, Team


class DeclaredSet(BaseModel, frozen=True):
    """A set that has left play and been awarded to a team."""

    set_key: SetKey
    team: Team  # Team awarded the set
    cards: tuple[Card, ...]
    declared_by: str
    is_valid: bool


class GameState(BaseModel):
    """Authoritative state of one match."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    players: list[Player]
    current_turn: str  # Player ID whose turn it is
    declared_sets: list[DeclaredSet] = Field(default_factory=list)
    game_over: bool = False
    winning_team: Team | None = None

    # Number of processed asks and declarations
    turn_number: int = 0

    def player(self, player_id: str) -> Player | None:
        """Find a player by id."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def team_players(self, team: Team) -> list[Player]:
        """Get a team's players in seat order."""
        return [p for p in self.players if p.team == team]

    def team_score(self, team: Team) -> int:
        """Count sets awarded to a team."""
        return sum(1 for s in self.declared_sets if s.team == team)

    def is_declared(self, set_key: SetKey) -> bool:
        return any(s.set_key == set_key for s in self.declared_sets)

    def card_counts(self) -> dict[str, int]:
        """Get card counts keyed by player id."""
        return {p.player_id: p.card_count() for p in self.players}

    def cards_in_play(self) -> int:
        """Count cards across all hands."""
        return sum(p.card_count() for p in self.players)

    def __str__(self) -> str:
        parts = [f"Turn {self.turn_number}"]
        parts.append(
            f"A:{self.team_score(Team.A)} B:{self.team_score(Team.B)}"
        )
        if self.game_over:
            winner = self.winning_team.value if self.winning_team else "?"
            parts.append(f"[OVER, team {winner} wins]")
        else:
            parts.append(f"{self.current_turn}'s turn")
        return " ".join(parts)
