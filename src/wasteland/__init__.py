"""Wasteland: a tile-based exploration and adventure game core."""

import sys

from .app import create_session, run
from .config import Config
from .logging import configure_logging, get_logger

__all__ = ["main", "create_session", "Config"]


def main() -> None:
    """Entry point for the wasteland application."""
    config = Config.from_env()

    configure_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        json_logs=config.json_logs,
    )

    logger = get_logger(__name__)
    logger.info(
        "application_starting",
        log_level=config.log_level,
        persist_locations=config.persist_locations,
    )

    session = create_session(config)
    run(session, sys.stdin, sys.stdout)
