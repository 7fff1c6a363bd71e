"""Mapping between live connections and stable player identities."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Anything messages can be pushed to."""

    connection_id: str

    def send_message(self, message: dict[str, Any]) -> None: ...


@dataclass(frozen=True)
class Binding:
    """Who a connection speaks for."""

    lobby_code: str
    player_id: str


class ConnectionRegistry:
    """Tracks which connection currently speaks for which player.

    Game state only stores player IDs. When a player reconnects, the new
    connection is bound to the same ID and the old one is forgotten.
    """

    def __init__(self) -> None:
        self._bindings: dict[str, Binding] = {}  # connection_id -> binding
        self._connections: dict[Binding, Connection] = {}
        self._lock = threading.Lock()

    def bind(self, connection: Connection, lobby_code: str, player_id: str) -> Connection | None:
        """Bind a connection to a player.

        Returns:
            The connection previously bound to this player, if any
        """
        binding = Binding(lobby_code, player_id)
        with self._lock:
            old_binding = self._bindings.pop(connection.connection_id, None)
            if old_binding is not None and old_binding != binding:
                self._connections.pop(old_binding, None)

            previous = self._connections.get(binding)
            if previous is not None and previous.connection_id != connection.connection_id:
                self._bindings.pop(previous.connection_id, None)
            else:
                previous = None

            self._bindings[connection.connection_id] = binding
            self._connections[binding] = connection

        if previous is not None:
            logger.info(f"Player {player_id} moved from connection {previous.connection_id} "
                        f"to {connection.connection_id}")
        return previous

    def unbind(self, connection: Connection) -> Binding | None:
        """Forget a connection.

        Returns:
            The binding it had, None if it was not bound
        """
        with self._lock:
            binding = self._bindings.pop(connection.connection_id, None)
            if binding is not None and self._connections.get(binding) is connection:
                del self._connections[binding]
            return binding

    def binding(self, connection: Connection) -> Binding | None:
        with self._lock:
            return self._bindings.get(connection.connection_id)

    def connection_for(self, lobby_code: str, player_id: str) -> Connection | None:
        with self._lock:
            return self._connections.get(Binding(lobby_code, player_id))

    def connections_in(self, lobby_code: str) -> dict[str, Connection]:
        """Get player_id -> connection for one lobby."""
        with self._lock:
            return {
                b.player_id: conn
                for b, conn in self._connections.items()
                if b.lobby_code == lobby_code
            }

    def __len__(self) -> int:
        return len(self._bindings)
