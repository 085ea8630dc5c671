"""Session layer bridging an input layer, the engine and a renderer."""

from collections.abc import Iterable

from .engine.commands import Command, step
from .engine.state import (
    Combat,
    Dialogue,
    GameState,
    Inventory,
    Playing,
    new_game_state,
)
from .engine.world import World
from .logging import get_logger
from .view import render_screen, status_line

logger = get_logger(__name__)

_MOVE_KEYS = {
    **dict.fromkeys(("w", "up"), Command.MOVE_UP),
    **dict.fromkeys(("s", "down"), Command.MOVE_DOWN),
    **dict.fromkeys(("a", "left"), Command.MOVE_LEFT),
    **dict.fromkeys(("d", "right"), Command.MOVE_RIGHT),
}

# Key bindings per mode. The same key means different things in different
# modes (Escape returns to the overworld while playing but closes panels).
KEYMAP: dict[type, dict[str, Command]] = {
    Playing: {
        **_MOVE_KEYS,
        "i": Command.OPEN_INVENTORY,
        "space": Command.ENTER_LOCATION,
        "escape": Command.RETURN_TO_OVERWORLD,
    },
    Inventory: {
        "i": Command.CLOSE_INVENTORY,
        "escape": Command.CANCEL,
    },
    Dialogue: {
        **dict.fromkeys(("w", "up"), Command.DIALOGUE_UP),
        **dict.fromkeys(("s", "down"), Command.DIALOGUE_DOWN),
        **dict.fromkeys(("space", "enter"), Command.DIALOGUE_CONFIRM),
        "escape": Command.CANCEL,
    },
    Combat: {
        "1": Command.COMBAT_ATTACK,
        "3": Command.COMBAT_FLEE,
    },
}


def commands_for_keys(state: GameState, keys: Iterable[str]) -> list[Command]:
    """Translate pressed key names into commands for the current mode."""
    bindings = KEYMAP[type(state.mode)]
    return [bindings[key] for key in (k.lower() for k in keys) if key in bindings]


class GameSession:
    """Wraps the World and one GameState."""

    def __init__(self, world: World, state: GameState):
        self.world = world
        self.state = state

    @classmethod
    def new(cls, world: World, persist_locations: bool = False) -> "GameSession":
        state = new_game_state(world, persist_locations=persist_locations)
        logger.info(
            "new_game_started",
            location=state.grid.name,
            position=state.player.position,
            persist_locations=persist_locations,
        )
        return cls(world, state)

    def run_frame(self, commands: Iterable[Command]) -> None:
        """Advance one frame with the given commands."""
        before_mode = type(self.state.mode).__name__
        before_location = self.state.location
        step(self.world, self.state, commands)

        after_mode = type(self.state.mode).__name__
        if after_mode != before_mode:
            logger.debug("mode_changed", old=before_mode, new=after_mode)
        if self.state.location != before_location:
            logger.debug("location_changed", status=status_line(self.state))

    def press(self, keys: Iterable[str]) -> None:
        """Advance one frame with the keys pressed during it."""
        self.run_frame(commands_for_keys(self.state, keys))

    def screen(self) -> str:
        return render_screen(self.state)

    def reset(self) -> None:
        """Start over with a fresh game."""
        self.state = new_game_state(
            self.world, persist_locations=self.state.persist_locations
        )
        logger.info("game_reset")
