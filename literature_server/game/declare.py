"""Set declaration resolution."""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from literature_server.config import RulesConfig
from literature_server.errors import (
    MatchAlreadyOver,
    NotYourTurn,
    SetAlreadyDeclared,
    UnknownPlayer,
)
from literature_server.models.card import SetKey, cards_in_set
from literature_server.models.game_state import DeclaredSet, GameState
from literature_server.models.player import Player, Team

from .validator import DeclarationValidator

logger = logging.getLogger(__name__)


@dataclass
class DeclareOutcome:
    """Result of a processed declaration."""

    declarer_id: str
    set_key: SetKey
    is_valid: bool
    awarded_team: Team
    current_turn: str
    game_over: bool = False
    winning_team: Team | None = None
    declared_sets: list[DeclaredSet] = field(default_factory=list)
    card_counts: dict[str, int] = field(default_factory=dict)


class DeclareResolver:
    """Applies a declaration to a game state."""

    def __init__(
        self,
        rules: RulesConfig | None = None,
        validator: DeclarationValidator | None = None,
    ):
        """Initialize resolver.

        Args:
            rules: Rules configuration (uses defaults if not provided)
            validator: DeclarationValidator instance (creates one if not provided)
        """
        self.rules = rules or RulesConfig()
        self.validator = validator or DeclarationValidator()

    def check(self, state: GameState, declarer_id: str, set_key: SetKey | str) -> tuple[Player, SetKey]:
        """Check the preconditions of a declaration.

        Raises:
            GameError: The matching subclass for the first broken precondition.
        """
        if state.game_over:
            raise MatchAlreadyOver("The match is over")

        declarer = state.player(declarer_id)
        if declarer is None:
            raise UnknownPlayer(f"Unknown player: {declarer_id}")
        if state.current_turn != declarer_id:
            raise NotYourTurn("It's not your turn")

        key = SetKey.parse(set_key)
        if state.is_declared(key):
            raise SetAlreadyDeclared(f"{key} has already been declared")

        return declarer, key

    def resolve(
        self,
        state: GameState,
        declarer_id: str,
        set_key: SetKey | str,
        assignment: Mapping[str, Sequence[str]],
    ) -> DeclareOutcome:
        """Resolve a declaration.

        The set leaves play whether or not the claim is right. A correct claim
        scores for the declarer's team, a wrong one for the opponents.

        Args:
            state: Game state, updated in place
            declarer_id: Player declaring (must hold the turn)
            set_key: Set being declared
            assignment: player_id -> card ids claimed to be in that hand

        Returns:
            DeclareOutcome
        """
        declarer, key = self.check(state, declarer_id, set_key)
        state.turn_number += 1

        hands = {p.player_id: p.hand for p in state.players}
        validation = self.validator.validate(key, assignment, hands)
        if not validation:
            logger.debug(f"Declaration of {key} rejected: {validation.error_message}")

        # Set leaves play either way
        for player in state.players:
            player.hand.remove_set(key)

        awarded = declarer.team if validation.is_valid else declarer.team.opponent
        state.declared_sets.append(
            DeclaredSet(
                set_key=key,
                team=awarded,
                cards=tuple(cards_in_set(key)),
                declared_by=declarer.player_id,
                is_valid=validation.is_valid,
            )
        )
        logger.info(
            f"{declarer.name} declared {key}: "
            f"{'correct' if validation.is_valid else 'wrong'}, set goes to team {awarded.value}"
        )

        self._check_game_over(state)
        if not state.game_over and not declarer.has_cards():
            self._pass_turn_from_empty_hand(state, declarer)

        return DeclareOutcome(
            declarer_id=declarer.player_id,
            set_key=key,
            is_valid=validation.is_valid,
            awarded_team=awarded,
            current_turn=state.current_turn,
            game_over=state.game_over,
            winning_team=state.winning_team,
            declared_sets=list(state.declared_sets),
            card_counts=state.card_counts(),
        )

    def _check_game_over(self, state: GameState) -> None:
        """End the match once a team reaches the winning number of sets."""
        for team in Team:
            if state.team_score(team) >= self.rules.winning_sets:
                state.game_over = True
                state.winning_team = team
                logger.info(f"Game over! Team {team.value} wins")
                return

    def _pass_turn_from_empty_hand(self, state: GameState, declarer: Player) -> None:
        """Hand the turn on when the declarer ran out of cards.

        The first opponent with cards gets the turn. If the opponents are all
        empty, the first teammate with cards gets it when
        ``pass_turn_to_teammates`` is on; otherwise the turn stays put.
        """
        candidates = state.team_players(declarer.team.opponent)
        if self.rules.pass_turn_to_teammates:
            candidates += state.team_players(declarer.team)

        for player in candidates:
            if player.has_cards():
                state.current_turn = player.player_id
                logger.info(
                    f"{declarer.name} has no cards left. Turn passes to {player.name}"
                )
                return

        logger.warning(f"{declarer.name} has no cards left and nobody can take the turn")
