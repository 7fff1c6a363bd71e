"""TCP server for Literature matches."""

import logging
import socketserver
import threading
import uuid
from typing import Any, BinaryIO

from .dispatcher import RequestDispatcher
from .protocol import MAX_LINE_BYTES, encode_message, error_message

logger = logging.getLogger(__name__)


class ClientConnection:
    """Write side of one client socket.

    Several handler threads may send to the same client, so writes are
    serialized.
    """

    def __init__(self, wfile: BinaryIO, address: Any):
        self.connection_id = f"{address[0]}:{address[1]}/{uuid.uuid4().hex[:6]}"
        self._wfile = wfile
        self._lock = threading.Lock()

    def send_message(self, message: dict[str, Any]) -> None:
        """Send one message line."""
        data = encode_message(message)
        with self._lock:
            self._wfile.write(data)
            self._wfile.flush()

    def __repr__(self) -> str:
        return f"ClientConnection({self.connection_id})"


class ConnectionHandler(socketserver.StreamRequestHandler):
    """Reads request lines from one client until it disconnects."""

    server: "_ThreadingServer"

    def handle(self) -> None:
        conn = ClientConnection(self.wfile, self.client_address)
        dispatcher = self.server.dispatcher
        logger.info(f"User connected: {conn.connection_id}")

        try:
            while True:
                line = self.rfile.readline(MAX_LINE_BYTES + 1)
                if not line:
                    break
                if len(line) > MAX_LINE_BYTES:
                    conn.send_message(error_message("protocol_error", "Message too long"))
                    break
                if not line.strip():
                    continue
                dispatcher.handle_line(conn, line)
        except OSError as e:
            logger.info(f"Connection {conn.connection_id} lost: {e}")
        except Exception as e:
            logger.exception(f"Error handling {conn.connection_id}: {e}")
        finally:
            dispatcher.disconnect(conn)
            logger.info(f"User disconnected: {conn.connection_id}")


class _ThreadingServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address: tuple[str, int], dispatcher: RequestDispatcher):
        self.dispatcher = dispatcher
        super().__init__(address, ConnectionHandler)


class GameServer:
    """Threaded TCP server, one thread per client connection."""

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        host: str = "0.0.0.0",
        port: int = 3001,
    ):
        """Initialize server.

        Args:
            dispatcher: Request dispatcher shared by all connections
            host: Host address to bind to
            port: Port number (0 picks a free port)
        """
        self.dispatcher = dispatcher
        self.host = host
        self.port = port

        self._server: _ThreadingServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def address(self) -> tuple[str, int]:
        """Get the bound (host, port)."""
        if self._server is None:
            raise RuntimeError("Server not started")
        host, port = self._server.server_address[:2]
        return str(host), int(port)

    def start(self) -> None:
        """Bind and listen for connections."""
        self._server = _ThreadingServer((self.host, self.port), self.dispatcher)
        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")

    def serve_forever(self) -> None:
        """Serve until shutdown (blocks)."""
        if self._server is None:
            raise RuntimeError("Server not started")
        self._server.serve_forever()

    def serve_in_background(self) -> None:
        """Serve from a daemon thread."""
        if self._server is None:
            raise RuntimeError("Server not started")
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Stop serving and close the listening socket."""
        if self._server is None:
            return
        if self._thread is not None:
            self._server.shutdown()
            self._thread.join()
            self._thread = None
        self._server.server_close()
        self._server = None
        logger.info("Server closed")

    def __enter__(self) -> "GameServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
