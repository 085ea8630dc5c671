"""Terminal front end for Wasteland.

Each input line is one frame: whitespace-separated key names such as
``w``, ``up``, ``space``, ``escape``, ``enter``, ``i``, ``1`` or ``3``.
``quit`` ends the game and ``new`` starts over.
"""

from collections.abc import Iterable
from importlib import resources
from pathlib import Path
from typing import TextIO

from .config import Config
from .engine.loader import load_world
from .logging import get_logger
from .session import GameSession

logger = get_logger(__name__)

QUIT_WORDS = {"quit", "exit", "q"}


def _get_data_path() -> Path:
    """Locate world.toml via importlib.resources (works when installed in a venv)."""
    return resources.files("wasteland.data").joinpath("world.toml")


def create_session(config: Config | None = None) -> GameSession:
    """Load the world and start a new game session."""
    config = config or Config.from_env()
    data_path = config.data_file or _get_data_path()

    world = load_world(data_path)
    logger.info(
        "world_loaded",
        data_file=str(data_path),
        towns=len(world.towns),
        dungeons=len(world.dungeons),
        gates=len(world.gates),
    )
    return GameSession.new(world, persist_locations=config.persist_locations)


def run(session: GameSession, lines: Iterable[str], out: TextIO) -> int:
    """Play frames read from ``lines``, drawing the screen after each.

    Returns the number of frames played.
    """
    frames = 0
    print(session.screen(), file=out)
    for line in lines:
        keys = line.split()
        if keys and keys[0].lower() in QUIT_WORDS:
            break
        if keys and keys[0].lower() == "new":
            session.reset()
        else:
            session.press(keys)
            frames += 1
        print(session.screen(), file=out)
    logger.info("session_ended", frames=frames)
    return frames
