"""Literature card game server.

Authoritative game engine for the six-player, two-team card game, plus the
lobby and TCP transport that drive it.
"""

__version__ = "0.1.0"
