"""Player model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .card import Hand


class Team(str, Enum):
    """One of the two three-player alliances."""

    A = "A"
    B = "B"

    @property
    def opponent(self) -> "Team":
        """Get the opposing team."""
        return Team.B if self is Team.A else Team.A


class Player(BaseModel):
    """Seated player in a match."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    player_id: str  # Stable for the engine's lifetime
    name: str = "Player"
    team: Team

    # Exclusively owned by this player while the match is active
    hand: Hand = Field(default_factory=Hand)

    def card_count(self) -> int:
        """Get number of cards in hand."""
        return self.hand.count()

    def has_cards(self) -> bool:
        return not self.hand.is_empty()

    def __str__(self) -> str:
        return f"{self.name}[{self.team.value}]"

    def __repr__(self) -> str:
        return (
            f"Player(id={self.player_id!r}, name={self.name!r}, "
            f"team={self.team.value}, cards={self.card_count()})"
        )
