"""Turning engine outcomes into per-player messages.

Builders here are pure: they take an outcome and return the deliveries. The
Notifier then pushes them to whichever connection speaks for each player.
Card content only ever goes to the player who holds the card.
"""

import logging
from dataclasses import dataclass
from typing import Any

from literature_server.game.ask import AskOutcome
from literature_server.game.declare import DeclareOutcome
from literature_server.game.engine import GameEngine, Seat

from .connections import ConnectionRegistry
from .protocol import make_message

logger = logging.getLogger(__name__)


@dataclass
class Delivery:
    """One message for one player."""

    player_id: str
    message: dict[str, Any]


def _broadcast(player_ids: list[str], message: dict[str, Any]) -> list[Delivery]:
    return [Delivery(pid, message) for pid in player_ids]


def card_count_payload(seats: list[Seat], counts: dict[str, int]) -> list[dict[str, Any]]:
    return [
        {
            "player_id": s.player_id,
            "name": s.name,
            "team": s.team.value,
            "card_count": counts[s.player_id],
        }
        for s in seats
    ]


def view_deliveries(engine: GameEngine, message_type: str) -> list[Delivery]:
    """Send every player their own filtered view."""
    return [
        Delivery(pid, make_message(message_type, state=engine.view_for(pid).to_wire()))
        for pid in engine.player_ids()
    ]


def ask_deliveries(engine: GameEngine, outcome: AskOutcome) -> list[Delivery]:
    """Build the messages for an accepted ask.

    A miss tells everyone the turn moved. A hit republishes card counts to
    everyone, gives the card to the asker and tells the target who took it.
    """
    seats = engine.seats()
    names = {s.player_id: s.name for s in seats}
    everyone = [s.player_id for s in seats]

    if not outcome.success:
        return _broadcast(
            everyone,
            make_message(
                "turn_changed",
                current_turn=outcome.current_turn,
                asker=outcome.asker_id,
                target=outcome.target_id,
                from_player=names[outcome.asker_id],
                to_player=names[outcome.target_id],
                success=False,
            ),
        )

    deliveries = _broadcast(
        everyone,
        make_message(
            "card_counts_updated",
            players=card_count_payload(seats, outcome.card_counts),
        ),
    )
    deliveries.append(
        Delivery(
            outcome.asker_id,
            make_message(
                "card_received",
                card=outcome.card.model_dump(mode="json") if outcome.card else None,
                from_player=names[outcome.target_id],
            ),
        )
    )
    deliveries.append(
        Delivery(
            outcome.target_id,
            make_message(
                "card_given",
                card_id=outcome.card_id,
                to_player=names[outcome.asker_id],
            ),
        )
    )
    return deliveries


def declare_deliveries(engine: GameEngine, outcome: DeclareOutcome) -> list[Delivery]:
    """Build the messages for a processed declaration."""
    seats = engine.seats()
    everyone = [s.player_id for s in seats]
    declared = [s.model_dump(mode="json") for s in outcome.declared_sets]

    deliveries = _broadcast(
        everyone,
        make_message(
            "set_declared",
            set=outcome.set_key.value,
            declarer=outcome.declarer_id,
            is_valid=outcome.is_valid,
            team=outcome.awarded_team.value,
            declared_sets=declared,
            current_turn=outcome.current_turn,
            players=card_count_payload(seats, outcome.card_counts),
        ),
    )
    # Hands changed for everyone holding a card of the set
    deliveries += view_deliveries(engine, "game_state")

    if outcome.game_over:
        deliveries += _broadcast(
            everyone,
            make_message(
                "game_over",
                winning_team=outcome.winning_team.value if outcome.winning_team else None,
                declared_sets=declared,
            ),
        )
    return deliveries


class Notifier:
    """Delivers messages to the connections bound to players."""

    def __init__(self, connections: ConnectionRegistry):
        self.connections = connections

    def deliver(self, lobby_code: str, deliveries: list[Delivery]) -> int:
        """Send deliveries to connected players.

        Players without a live connection are skipped; they get the full
        view when they come back.

        Returns:
            Number of messages sent
        """
        connections = self.connections.connections_in(lobby_code)
        sent = 0
        for delivery in deliveries:
            conn = connections.get(delivery.player_id)
            if conn is None:
                logger.debug(f"Player {delivery.player_id} not connected, dropping "
                             f"{delivery.message['type']}")
                continue
            try:
                conn.send_message(delivery.message)
                sent += 1
            except OSError as e:
                logger.warning(f"Failed to send to player {delivery.player_id}: {e}")
        return sent

    def broadcast(self, lobby_code: str, message: dict[str, Any]) -> int:
        """Send the same message to everyone connected to a lobby."""
        connections = self.connections.connections_in(lobby_code)
        return self.deliver(lobby_code, _broadcast(list(connections), message))

    def send(self, lobby_code: str, player_id: str, message: dict[str, Any]) -> int:
        return self.deliver(lobby_code, [Delivery(player_id, message)])
