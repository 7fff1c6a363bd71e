"""Lobby management."""

from .lobby import Lobby, LobbyPlayer, LobbySettings, generate_log_filename
from .registry import MatchRegistry

__all__ = [
    "Lobby",
    "LobbyPlayer",
    "LobbySettings",
    "MatchRegistry",
    "generate_log_filename",
]
