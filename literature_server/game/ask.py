"""Card request (ask) resolution."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from literature_server.config import RulesConfig
from literature_server.errors import (
    IllegalAsk,
    InvalidTarget,
    MatchAlreadyOver,
    NotYourTurn,
    SameTeamTarget,
    TargetHasNoCards,
    UnknownPlayer,
)
from literature_server.models.card import Card, card_by_id
from literature_server.models.game_state import GameState
from literature_server.models.player import Player

logger = logging.getLogger(__name__)


class AskResult(str, Enum):
    """How an accepted ask ended."""

    CARD_TRANSFERRED = "card_transferred"
    TURN_PASSED = "turn_passed"


@dataclass
class AskOutcome:
    """Result of an accepted ask. Rejected asks raise instead."""

    asker_id: str
    target_id: str
    card_id: str
    result: AskResult
    current_turn: str
    card: Card | None = None  # Only set when the card moved
    card_counts: dict[str, int] = field(default_factory=dict)  # Right after this ask

    @property
    def success(self) -> bool:
        return self.result == AskResult.CARD_TRANSFERRED


class AskResolver:
    """Applies an ask to a game state."""

    def __init__(self, rules: RulesConfig | None = None):
        """Initialize resolver.

        Args:
            rules: Rules configuration (uses defaults if not provided)
        """
        self.rules = rules or RulesConfig()

    def check(
        self,
        state: GameState,
        asker_id: str,
        target_id: str,
        card_id: str,
    ) -> tuple[Player, Player, Card]:
        """Check the preconditions of an ask without changing anything.

        Returns:
            Tuple of (asker, target, requested card)

        Raises:
            GameError: The matching subclass for the first broken precondition.
        """
        if state.game_over:
            raise MatchAlreadyOver("The match is over")

        asker = state.player(asker_id)
        if asker is None:
            raise UnknownPlayer(f"Unknown player: {asker_id}")
        target = state.player(target_id)
        if target is None:
            raise UnknownPlayer(f"Unknown player: {target_id}")

        if state.current_turn != asker_id:
            raise NotYourTurn("It's not your turn")
        if asker_id == target_id:
            raise InvalidTarget("Cannot ask yourself")
        if asker.team == target.team:
            raise SameTeamTarget("Cannot ask a teammate")
        if not target.has_cards():
            raise TargetHasNoCards(f"{target.name} has no cards")

        card = card_by_id(card_id)

        if self.rules.require_set_holding:
            if not asker.hand.has_set(card.set_key):
                raise IllegalAsk(f"You hold no card of {card.set_key}")
            if asker.hand.contains(card):
                raise IllegalAsk(f"You already hold {card.id}")

        return asker, target, card

    def resolve(
        self,
        state: GameState,
        asker_id: str,
        target_id: str,
        card_id: str,
    ) -> AskOutcome:
        """Resolve an ask.

        If the target holds the card it moves to the asker and the turn stays.
        Otherwise the turn passes to the target and no card moves.

        Args:
            state: Game state, updated in place
            asker_id: Player asking (must hold the turn)
            target_id: Opponent being asked
            card_id: Requested card

        Returns:
            AskOutcome
        """
        asker, target, card = self.check(state, asker_id, target_id, card_id)
        state.turn_number += 1

        taken = target.hand.remove(card)
        if taken is None:
            state.current_turn = target.player_id
            logger.info(
                f"{asker.name} asked {target.name} for {card.id}: miss, "
                f"turn passes to {target.name}"
            )
            return AskOutcome(
                asker_id=asker.player_id,
                target_id=target.player_id,
                card_id=card.id,
                result=AskResult.TURN_PASSED,
                current_turn=state.current_turn,
                card_counts=state.card_counts(),
            )

        asker.hand.add(taken)
        logger.info(f"{asker.name} took a card from {target.name}")
        logger.debug(f"Card moved: {taken.id} {target.player_id} -> {asker.player_id}")
        return AskOutcome(
            asker_id=asker.player_id,
            target_id=target.player_id,
            card_id=card.id,
            result=AskResult.CARD_TRANSFERRED,
            current_turn=state.current_turn,
            card=taken,
            card_counts=state.card_counts(),
        )
