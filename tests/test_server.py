"""End-to-end tests over real sockets."""

import random

import pytest

from literature_server.lobby import MatchRegistry
from literature_server.main import build_parser
from literature_server.network import GameConnection, GameServer, RequestDispatcher


@pytest.fixture
def server():
    dispatcher = RequestDispatcher(MatchRegistry(rng=random.Random(2)))
    game_server = GameServer(dispatcher, host="127.0.0.1", port=0)
    game_server.start()
    game_server.serve_in_background()
    yield game_server
    game_server.close()


@pytest.fixture
def clients(server):
    host, port = server.address
    conns = [GameConnection(host, port, timeout=5) for _ in range(6)]
    for conn in conns:
        conn.connect()
    yield conns
    for conn in conns:
        conn.close()


class TestGameServer:
    """Tests for GameServer with GameConnection clients."""

    def test_join_and_start(self, clients):
        ids = [conn.join("ROOM", f"Player{i + 1}", admin=(i == 0)) for i, conn in enumerate(clients)]
        assert len(set(ids)) == 6

        clients[0].send("start_game")
        for conn in clients:
            state = conn.receive_until("game_started")["state"]
            assert state["viewer"] == conn.player_id
            own = next(p for p in state["players"] if p["player_id"] == conn.player_id)
            assert len(own["hand"]) == 9

    def test_error_goes_to_sender(self, clients):
        clients[0].join("ROOM", "Alice", admin=True)
        clients[0].send("start_game")
        error = clients[0].receive_until("error")
        assert error["code"] == "not_enough_players"

    def test_malformed_line(self, clients):
        clients[0]._socket.sendall(b"this is not json\n")
        assert clients[0].receive()["code"] == "protocol_error"


class TestParser:
    """Tests for the command line."""

    def test_overrides(self):
        args = build_parser().parse_args(["-p", "4000", "--host", "127.0.0.1", "-v"])
        assert args.port == 4000
        assert args.host == "127.0.0.1"
        assert args.verbose

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.config is None
        assert args.port is None
        assert not args.show_hands
