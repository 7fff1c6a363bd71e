"""Game logic."""

from .ask import AskOutcome, AskResolver, AskResult
from .dealer import deal, shuffle_deck
from .declare import DeclareOutcome, DeclareResolver
from .engine import GameEngine, Seat
from .validator import DeclarationValidator, ValidationResult, validate_declaration

__all__ = [
    "AskOutcome",
    "AskResolver",
    "AskResult",
    "deal",
    "shuffle_deck",
    "DeclareOutcome",
    "DeclareResolver",
    "GameEngine",
    "Seat",
    "DeclarationValidator",
    "ValidationResult",
    "validate_declaration",
]
