"""Command dispatch and the per-frame step.

handle_command(world, state, command) -> bool routes one command to the
handler of the current mode and reports whether it was meaningful there.
step(world, state, commands) runs one frame's worth of commands. All
handlers mutate state in place.
"""

from collections.abc import Callable, Iterable
from enum import Enum

from . import combat, dialogue, travel
from .state import (
    CAMERA_HALF_HEIGHT,
    CAMERA_HALF_WIDTH,
    PLAYING,
    Combat,
    Dialogue,
    GameState,
    Inventory,
    Playing,
)
from .world import World


class Command(Enum):
    """Discrete, edge-triggered commands produced by the input layer."""

    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    OPEN_INVENTORY = "open_inventory"
    CLOSE_INVENTORY = "close_inventory"
    CANCEL = "cancel"
    ENTER_LOCATION = "enter_location"
    RETURN_TO_OVERWORLD = "return_to_overworld"
    DIALOGUE_UP = "dialogue_up"
    DIALOGUE_DOWN = "dialogue_down"
    DIALOGUE_CONFIRM = "dialogue_confirm"
    COMBAT_ATTACK = "combat_attack"
    COMBAT_FLEE = "combat_flee"


MOVE_DELTAS = {
    Command.MOVE_UP: (0, -1),
    Command.MOVE_DOWN: (0, 1),
    Command.MOVE_LEFT: (-1, 0),
    Command.MOVE_RIGHT: (1, 0),
}


def attempt_move(world: World, state: GameState, dx: int, dy: int) -> None:
    """Resolve a move intent into an encounter, a move, or nothing.

    An actor on the target cell always wins over terrain: the player stays
    put and either combat or dialogue starts. Otherwise the player moves if
    the target is walkable and picks up whatever lies there.
    """
    player = state.player
    x, y = player.x + dx, player.y + dy

    actor_id = state.roster.at(x, y)
    if actor_id is not None:
        actor = state.roster.get(actor_id)
        if actor.hostile:
            combat.start_combat(state, actor_id)
        else:
            dialogue.start_dialogue(state, actor_id)
        return

    if not state.grid.is_walkable(x, y):
        return

    player.x, player.y = x, y
    item = state.grid.take_item(x, y)
    if item is not None:
        player.inventory.append(item)
        state.messages.append(f"Picked up {item.name}")


def follow_camera(state: GameState) -> None:
    """Recenter the camera on the player."""
    state.camera = (
        state.player.x - CAMERA_HALF_WIDTH,
        state.player.y - CAMERA_HALF_HEIGHT,
    )


def _playing(world: World, state: GameState, mode: Playing, command: Command) -> bool:
    if command in MOVE_DELTAS:
        attempt_move(world, state, *MOVE_DELTAS[command])
        return True
    if command is Command.OPEN_INVENTORY:
        state.mode = Inventory()
        return True
    if command is Command.ENTER_LOCATION:
        travel.try_enter(world, state)
        return True
    if command is Command.RETURN_TO_OVERWORLD:
        travel.return_to_overworld(world, state)
        return True
    return False


def _inventory(
    world: World, state: GameState, mode: Inventory, command: Command
) -> bool:
    if command in (Command.CLOSE_INVENTORY, Command.CANCEL):
        state.mode = PLAYING
        return True
    return False


_DIALOGUE_ACTIONS: dict[Command, Callable[[GameState, Dialogue], None]] = {
    Command.DIALOGUE_UP: dialogue.select_previous,
    Command.DIALOGUE_DOWN: dialogue.select_next,
    Command.DIALOGUE_CONFIRM: dialogue.confirm,
    Command.CANCEL: dialogue.cancel,
}

_COMBAT_ACTIONS: dict[Command, Callable[[GameState, Combat], None]] = {
    Command.COMBAT_ATTACK: combat.attack,
    Command.COMBAT_FLEE: combat.flee,
}


def _dialogue(world: World, state: GameState, mode: Dialogue, command: Command) -> bool:
    action = _DIALOGUE_ACTIONS.get(command)
    if action is None:
        return False
    action(state, mode)
    return True


def _combat(world: World, state: GameState, mode: Combat, command: Command) -> bool:
    action = _COMBAT_ACTIONS.get(command)
    if action is None:
        return False
    action(state, mode)
    return True


_MODE_DISPATCH: dict[type, Callable] = {
    Playing: _playing,
    Inventory: _inventory,
    Dialogue: _dialogue,
    Combat: _combat,
}


def handle_command(world: World, state: GameState, command: Command) -> bool:
    """Apply one command in the current mode.

    Commands that mean nothing in the current mode are ignored and return
    False.
    """
    handler = _MODE_DISPATCH[type(state.mode)]
    return handler(world, state, state.mode, command)


def step(world: World, state: GameState, commands: Iterable[Command]) -> GameState:
    """Run one frame: dispatch commands, then let the camera follow.

    Commands are applied in order. Once one of them switches to another
    mode, the rest of the frame's commands are dropped, since they were
    issued for the mode that just ended.
    """
    for command in commands:
        mode_type = type(state.mode)
        handle_command(world, state, command)
        if type(state.mode) is not mode_type:
            break
    follow_camera(state)
    return state
