"""Shared fixtures."""

import random
from typing import Callable

import pytest

from literature_server.game.engine import GameEngine, Seat
from literature_server.models.card import Hand, build_deck, card_by_id
from literature_server.models.game_state import GameState
from literature_server.models.player import Player, Team

PLAYER_IDS = ["p1", "p2", "p3", "p4", "p5", "p6"]


def team_for(index: int) -> Team:
    return Team.A if index % 2 == 0 else Team.B


def standard_hands() -> dict[str, list[str]]:
    """Deck dealt in order, nine cards each.

    p1 (A): all low hearts, 2-4 of diamonds
    p2 (B): 5-7 of diamonds, all low clubs
    p3 (A): all low spades, 9-J of hearts
    p4 (B): Q-A of hearts, all high diamonds
    p5 (A): all high clubs, 9-J of spades
    p6 (B): Q-A of spades, the 8s and both jokers
    """
    ids = [c.id for c in build_deck()]
    return {pid: ids[i * 9:(i + 1) * 9] for i, pid in enumerate(PLAYER_IDS)}


@pytest.fixture
def seats() -> list[Seat]:
    """Six seats alternating A, B, A, B, A, B."""
    return [
        Seat(player_id=pid, name=f"Player{i + 1}", team=team_for(i))
        for i, pid in enumerate(PLAYER_IDS)
    ]


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    """Factory for a game state with chosen hands."""

    def _make(
        hands: dict[str, list[str]] | None = None,
        current_turn: str = "p1",
    ) -> GameState:
        hands = standard_hands() if hands is None else hands
        players = [
            Player(
                player_id=pid,
                name=f"Player{i + 1}",
                team=team_for(i),
                hand=Hand(card_by_id(cid) for cid in hands.get(pid, [])),
            )
            for i, pid in enumerate(PLAYER_IDS)
        ]
        return GameState(players=players, current_turn=current_turn)

    return _make


@pytest.fixture
def engine(seats) -> GameEngine:
    """Started engine with a seeded random source."""
    eng = GameEngine(rng=random.Random(42))
    eng.start_match(seats)
    return eng


@pytest.fixture
def rigged_engine(seats) -> tuple[GameEngine, GameState]:
    """Started engine whose hands are replaced by the standard hands, p1 to play."""
    eng = GameEngine(rng=random.Random(0))
    state = eng.start_match(seats)
    hands = standard_hands()
    for player in state.players:
        player.hand = Hand(card_by_id(cid) for cid in hands[player.player_id])
    state.current_turn = "p1"
    return eng, state


class FakeConnection:
    """Connection that records what it was sent."""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        self.sent: list[dict] = []
        self.player_id: str | None = None

    def send_message(self, message: dict) -> None:
        if message["type"] == "joined":
            self.player_id = message["player_id"]
        self.sent.append(message)

    def types(self) -> list[str]:
        return [m["type"] for m in self.sent]

    def last(self, message_type: str) -> dict:
        for message in reversed(self.sent):
            if message["type"] == message_type:
                return message
        raise AssertionError(f"No {message_type} message in {self.types()}")


@pytest.fixture
def make_connection() -> Callable[[str], FakeConnection]:
    return FakeConnection
