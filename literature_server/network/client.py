"""TCP client connection for Literature servers."""

import logging
import socket
from typing import Any, BinaryIO

from .protocol import MAX_LINE_BYTES, decode_message, encode_message

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3001


class GameConnection:
    """Manages a TCP connection to a Literature server."""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float | None = None,
    ):
        """Initialize connection parameters.

        Args:
            host: Server hostname or IP address
            port: Server port number
            timeout: Socket timeout in seconds (None blocks)
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self._socket: socket.socket | None = None
        self._rfile: BinaryIO | None = None
        self.player_id: str | None = None

    def connect(self) -> None:
        """Establish TCP connection to server."""
        if self._socket is not None:
            raise RuntimeError("Already connected")

        self._socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
        self._rfile = self._socket.makefile("rb")
        logger.info(f"Connected to {self.host}:{self.port}")

    def close(self) -> None:
        """Close the connection."""
        if self._rfile is not None:
            self._rfile.close()
            self._rfile = None
        if self._socket is not None:
            self._socket.close()
            self._socket = None
            logger.info("Connection closed")

    def send(self, type_: str, **payload: Any) -> None:
        """Send a request.

        Args:
            type_: Request type (e.g. "ask")
            **payload: Request fields
        """
        if self._socket is None:
            raise RuntimeError("Not connected")
        self._socket.sendall(encode_message({"type": type_, **payload}))
        logger.debug(f"Sent {type_}")

    def receive(self) -> dict[str, Any]:
        """Receive the next server message.

        Raises:
            ConnectionError: If the server closed the connection
        """
        if self._rfile is None:
            raise RuntimeError("Not connected")
        line = self._rfile.readline(MAX_LINE_BYTES + 1)
        if not line:
            raise ConnectionError("Connection closed")
        return decode_message(line)

    def receive_until(self, type_: str, max_messages: int = 100) -> dict[str, Any]:
        """Skip messages until one of the given type arrives."""
        for _ in range(max_messages):
            message = self.receive()
            if message["type"] == type_:
                return message
        raise RuntimeError(f"No {type_} message within {max_messages} messages")

    def join(self, lobby: str, name: str, admin: bool = False) -> str:
        """Join a lobby and return the assigned player ID."""
        self.send("join", lobby=lobby, name=name, admin=admin)
        reply = self.receive()
        while reply["type"] not in ("joined", "error"):
            reply = self.receive()
        if reply["type"] == "error":
            raise RuntimeError(f"Join failed: {reply['message']}")
        self.player_id = reply["player_id"]
        return self.player_id

    def __enter__(self) -> "GameConnection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
