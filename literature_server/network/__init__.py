"""Network communication."""

from .client import GameConnection
from .connections import Binding, Connection, ConnectionRegistry
from .dispatcher import RequestDispatcher
from .notifier import Delivery, Notifier
from .server import GameServer

__all__ = [
    "GameConnection",
    "Binding",
    "Connection",
    "ConnectionRegistry",
    "RequestDispatcher",
    "Delivery",
    "Notifier",
    "GameServer",
]
