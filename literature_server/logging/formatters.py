"""Formatters for game log output."""

from typing import Iterable

from literature_server.models.card import Card, Hand, Rank, Suit
from literature_server.models.game_state import DeclaredSet, GameState

# Suit codes for log output
SUIT_CODES: dict[Suit, str] = {
    Suit.HEARTS: "H",
    Suit.DIAMONDS: "D",
    Suit.CLUBS: "C",
    Suit.SPADES: "S",
    Suit.RED: "R",
    Suit.BLACK: "B",
}


def format_card(card: Card) -> str:
    """Format a single card to string.

    Args:
        card: Card to format.

    Returns:
        Formatted string (e.g., "H10" for the ten of hearts, "JoR" for the
        red joker).
    """
    if card.rank == Rank.JOKER:
        return f"Jo{SUIT_CODES[card.suit]}"
    return f"{SUIT_CODES[card.suit]}{card.rank.value}"


def format_cards(cards: Hand | Iterable[Card]) -> str:
    """Format cards to a comma-separated string, empty if there are none."""
    return ",".join(format_card(c) for c in cards)


def format_hands(state: GameState) -> dict[str, str]:
    """Format all players' hands keyed by player id."""
    return {p.player_id: format_cards(p.hand) for p in state.players}


def format_declared_set(declared: DeclaredSet) -> dict[str, object]:
    return {
        "set": declared.set_key.value,
        "team": declared.team.value,
        "by": declared.declared_by,
        "valid": declared.is_valid,
    }
