"""Configuration management."""

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel


class RemainderPolicy(str, Enum):
    """What happens to cards left over after an even deal."""

    DROP = "drop"  # Left out of play
    ROUND_ROBIN = "round_robin"  # One each in seat order


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 3001


class RulesConfig(BaseModel):
    """Rules configuration."""

    # Sets needed to win (of 9)
    winning_sets: int = 5

    # Optional rules
    require_set_holding: bool = False
    pass_turn_to_teammates: bool = True
    deal_remainder: RemainderPolicy = RemainderPolicy.ROUND_ROBIN


class LobbyConfig(BaseModel):
    """Lobby configuration."""

    max_players: int = 6
    turn_time: int = 30  # Seconds, advisory only


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    show_hands: bool = False


class GameLogFileConfig(BaseModel):
    """Game log (JSONL replay) configuration."""

    enabled: bool = False
    output_path: str = "logs"


class Config(BaseModel):
    """Root configuration."""

    server: ServerConfig = ServerConfig()
    rules: RulesConfig = RulesConfig()
    lobby: LobbyConfig = LobbyConfig()
    logging: LoggingConfig = LoggingConfig()
    game_log: GameLogFileConfig = GameLogFileConfig()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses default config.

    Returns:
        Config object.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    return Config(**data) if data else Config()
