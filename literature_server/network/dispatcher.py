"""Routes client requests to lobbies and match engines."""

import logging
from typing import Any

from pydantic import ValidationError

from literature_server.errors import GameError, LobbyNotFound, NotAuthorized, ProtocolError
from literature_server.lobby import Lobby, MatchRegistry

from .connections import Binding, Connection, ConnectionRegistry
from .notifier import Notifier, ask_deliveries, declare_deliveries, view_deliveries
from .protocol import (
    AskRequest,
    DeclareRequest,
    JoinGameRequest,
    JoinRequest,
    KickPlayerRequest,
    PlayAgainRequest,
    Request,
    StartGameRequest,
    ToggleTeamRequest,
    UpdateSettingsRequest,
    decode_request,
    error_message,
    make_message,
)

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """Handles requests from connections.

    Engine and lobby calls finish (and release their locks) before any
    message is sent out.
    """

    def __init__(
        self,
        registry: MatchRegistry,
        connections: ConnectionRegistry | None = None,
        notifier: Notifier | None = None,
    ):
        """Initialize dispatcher.

        Args:
            registry: Lobbies keyed by code
            connections: Connection bindings (creates one if not provided)
            notifier: Message delivery (creates one if not provided)
        """
        self.registry = registry
        self.connections = connections or ConnectionRegistry()
        self.notifier = notifier or Notifier(self.connections)

    def handle_line(self, conn: Connection, line: bytes | str) -> None:
        """Decode and handle one request line.

        Rejected requests are answered with an ``error`` message to the
        sender only.
        """
        try:
            self.dispatch(conn, decode_request(line))
        except GameError as e:
            logger.info(f"Rejected request from {conn.connection_id}: {e.code} ({e.message})")
            conn.send_message(error_message(e.code, e.message))
        except ValidationError as e:
            err = ProtocolError(f"Invalid values: {e.error_count()} error(s)")
            conn.send_message(error_message(err.code, err.message))

    def dispatch(self, conn: Connection, request: Request) -> None:
        """Handle a parsed request.

        Raises:
            GameError: If the request is rejected
        """
        if isinstance(request, JoinRequest):
            self._join(conn, request)
            return

        binding = self.connections.binding(conn)
        if binding is None:
            raise NotAuthorized("Join a lobby first")
        lobby = self.registry.get(binding.lobby_code)

        if isinstance(request, JoinGameRequest):
            engine = lobby.require_engine()
            view = engine.view_for(binding.player_id)
            conn.send_message(make_message("game_started", state=view.to_wire()))
        elif isinstance(request, StartGameRequest):
            engine = lobby.start_match(binding.player_id)
            self.notifier.deliver(lobby.code, view_deliveries(engine, "game_started"))
        elif isinstance(request, AskRequest):
            engine = lobby.require_engine()
            outcome = engine.submit_ask(binding.player_id, request.target, request.card)
            self.notifier.deliver(lobby.code, ask_deliveries(engine, outcome))
        elif isinstance(request, DeclareRequest):
            engine = lobby.require_engine()
            outcome = engine.submit_declare(binding.player_id, request.set_key, request.assignment)
            self.notifier.deliver(lobby.code, declare_deliveries(engine, outcome))
        elif isinstance(request, KickPlayerRequest):
            self._kick(lobby, binding, request.player)
        elif isinstance(request, ToggleTeamRequest):
            lobby.toggle_team(binding.player_id, request.player)
            self.notifier.broadcast(
                lobby.code, make_message("player_updated", players=self._roster(lobby))
            )
        elif isinstance(request, UpdateSettingsRequest):
            settings = lobby.update_settings(binding.player_id, request.settings)
            self.notifier.broadcast(
                lobby.code, make_message("settings_updated", settings=settings.model_dump())
            )
        elif isinstance(request, PlayAgainRequest):
            lobby.play_again(binding.player_id)
            self.notifier.broadcast(
                lobby.code,
                make_message(
                    "game_reset",
                    players=self._roster(lobby),
                    settings=lobby.settings.model_dump(),
                ),
            )

    def disconnect(self, conn: Connection) -> None:
        """Forget a closed connection and tell the lobby."""
        binding = self.connections.unbind(conn)
        if binding is None:
            return
        try:
            lobby = self.registry.get(binding.lobby_code)
        except LobbyNotFound:
            return

        player = lobby.find(binding.player_id)
        new_admin = lobby.disconnect(binding.player_id)
        self.notifier.broadcast(
            lobby.code,
            make_message(
                "player_disconnected",
                player_id=binding.player_id,
                name=player.name if player else None,
            ),
        )
        if new_admin is not None:
            self.notifier.send(lobby.code, new_admin, make_message("admin_assigned"))

    def _join(self, conn: Connection, request: JoinRequest) -> None:
        lobby = self.registry.get_or_create(request.lobby)
        player, reconnected = lobby.join(request.name, request.admin)
        self.connections.bind(conn, lobby.code, player.player_id)

        conn.send_message(
            make_message(
                "joined",
                lobby=lobby.code,
                player_id=player.player_id,
                is_admin=player.is_admin,
                reconnected=reconnected,
            )
        )
        self.notifier.broadcast(
            lobby.code,
            make_message(
                "player_joined",
                players=self._roster(lobby),
                settings=lobby.settings.model_dump(),
            ),
        )

    def _kick(self, lobby: Lobby, binding: Binding, player_id: str) -> None:
        kicked = lobby.kick(binding.player_id, player_id)

        kicked_conn = self.connections.connection_for(lobby.code, kicked.player_id)
        if kicked_conn is not None:
            self.connections.unbind(kicked_conn)
            try:
                kicked_conn.send_message(make_message("kicked"))
            except OSError as e:
                logger.warning(f"Failed to notify kicked player {kicked.player_id}: {e}")

        self.notifier.broadcast(
            lobby.code,
            make_message(
                "player_left",
                players=self._roster(lobby),
                settings=lobby.settings.model_dump(),
                kicked=kicked.name,
            ),
        )

    @staticmethod
    def _roster(lobby: Lobby) -> list[dict[str, Any]]:
        return [p.model_dump(mode="json") for p in lobby.roster()]
