"""Game models."""

from .card import (
    Card,
    Hand,
    Rank,
    SetKey,
    SetKind,
    Suit,
    build_deck,
    card_by_id,
    cards_in_set,
)
from .game_state import DeclaredSet, GameState
from .player import Player, Team
from .view import GameView, PlayerView, build_view

__all__ = [
    "Card",
    "Hand",
    "Rank",
    "SetKey",
    "SetKind",
    "Suit",
    "build_deck",
    "card_by_id",
    "cards_in_set",
    "Player",
    "Team",
    "GameState",
    "DeclaredSet",
    "GameView",
    "PlayerView",
    "build_view",
]
