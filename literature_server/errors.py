"""Request errors raised by the engine and the lobby.

Every error is local to the request that caused it: the game state is left
unchanged and only the requesting player is told about it.
"""


class GameError(Exception):
    """Base class for rejected requests."""

    code = "game_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class NotYourTurn(GameError):
    """The requesting player does not hold the turn."""

    code = "not_your_turn"


class InvalidTarget(GameError):
    """The ask target is the asker or otherwise not a legal target."""

    code = "invalid_target"


class SameTeamTarget(InvalidTarget):
    """The ask target is on the asker's own team."""

    code = "same_team_target"


class TargetHasNoCards(GameError):
    """The ask target holds no cards."""

    code = "target_has_no_cards"


class InvalidSetKey(GameError):
    """The set key matches none of the nine sets."""

    code = "invalid_set_key"


class MatchAlreadyOver(GameError):
    """The match has ended; no further actions are accepted."""

    code = "match_already_over"


class UnknownPlayer(GameError):
    """A player id does not belong to the match."""

    code = "unknown_player"


class UnknownCard(GameError):
    """A card id is not part of the deck."""

    code = "unknown_card"


class IllegalAsk(GameError):
    """The ask breaks the optional set-holding rule."""

    code = "illegal_ask"


class SetAlreadyDeclared(GameError):
    """The set has already been declared in this match."""

    code = "set_already_declared"


class LobbyError(GameError):
    """Base class for lobby failures."""

    code = "lobby_error"


class LobbyNotFound(LobbyError):
    code = "lobby_not_found"


class NotAuthorized(LobbyError):
    code = "not_authorized"


class LobbyFull(LobbyError):
    code = "lobby_full"


class NotEnoughPlayers(LobbyError):
    code = "not_enough_players"


class UnbalancedTeams(LobbyError):
    code = "unbalanced_teams"


class MatchNotStarted(LobbyError):
    code = "match_not_started"


class MatchInProgress(LobbyError):
    code = "match_in_progress"


class ProtocolError(GameError):
    """A wire message could not be parsed."""

    code = "protocol_error"
