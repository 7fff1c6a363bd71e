"""Main entry point for the Literature server."""

import argparse
import logging
import sys
from pathlib import Path

from literature_server.config import load_config
from literature_server.lobby import MatchRegistry
from literature_server.network import ConnectionRegistry, GameServer, RequestDispatcher
from literature_server.utils.logger import GameDisplay, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Literature card game server"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "--host",
        help="Host address to bind to (overrides config)",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        help="Server port (overrides config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--show-hands",
        action="store_true",
        help="Show player hands in match summaries",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Directory for game log files (filename auto-generated)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = build_parser().parse_args(argv)

    # Load config
    config = load_config(args.config)

    # Apply command-line overrides
    if args.host:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.show_hands:
        config.logging.show_hands = True
    if args.game_log is not None:
        config.game_log.enabled = True
        config.game_log.output_path = str(args.game_log)

    setup_logging(config.logging.level)
    display = GameDisplay(show_hands=config.logging.show_hands)

    registry = MatchRegistry(config, on_game_end=display.print_game_end)
    dispatcher = RequestDispatcher(registry, ConnectionRegistry())

    try:
        with GameServer(dispatcher, config.server.host, config.server.port) as server:
            display.print_startup(*server.address)
            if config.game_log.enabled:
                print(f"Game log dir: {config.game_log.output_path}")
            server.serve_forever()
        return 0

    except KeyboardInterrupt:
        print("\nServer interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Server error: {e}")
        return 1
    finally:
        registry.close()


if __name__ == "__main__":
    sys.exit(main())
