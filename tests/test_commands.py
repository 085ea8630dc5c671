"""Tests for command dispatch, movement and the frame step."""

from wasteland.engine.commands import Command, attempt_move, handle_command, step
from wasteland.engine.state import (
    Actor,
    Combat,
    Dialogue,
    GameState,
    Inventory,
    Playing,
)
from wasteland.engine.world import Item, Quest, World

UP, DOWN, LEFT, RIGHT = (
    Command.MOVE_UP,
    Command.MOVE_DOWN,
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
)


def _raider(x: int, y: int) -> Actor:
    return Actor(
        name="Raider", glyph="R", x=x, y=y, health=30, max_health=30, hostile=True
    )


def _frames(world: World, state: GameState, commands: list[Command]) -> None:
    """Run each command in its own frame."""
    for command in commands:
        step(world, state, [command])


def test_walk_on_grass(world: World, state: GameState):
    """Up three times and left twice from (40, 20) ends at (38, 17)."""
    _frames(world, state, [UP, UP, UP, LEFT, LEFT])
    assert state.player.position == (38, 17)
    assert isinstance(state.mode, Playing)


def test_camera_follows_player(world: World, state: GameState):
    _frames(world, state, [DOWN, RIGHT])
    assert state.camera == (41 - 20, 21 - 10)


def test_blocked_by_terrain(world: World, state: GameState):
    """Walking into a mountain is silently rejected."""
    state.player.x, state.player.y = 30, 7
    messages = list(state.messages)
    attempt_move(world, state, -1, 0)
    assert state.player.position == (30, 7)
    assert list(state.messages) == messages


def test_blocked_by_map_edge(world: World, state: GameState):
    state.player.x, state.player.y = 0, 0
    attempt_move(world, state, -1, 0)
    attempt_move(world, state, 0, -1)
    assert state.player.position == (0, 0)


def test_diagonal_moves_are_resolved(world: World, state: GameState):
    """The move rule does not assume axis-aligned intents."""
    attempt_move(world, state, 1, 1)
    assert state.player.position == (41, 21)


def test_friendly_actor_starts_dialogue(world: World, state: GameState):
    """Bumping the merchant starts a conversation without moving."""
    state.player.x, state.player.y = 36, 20
    attempt_move(world, state, -1, 0)
    assert state.player.position == (36, 20)
    assert isinstance(state.mode, Dialogue)
    assert state.mode.node == 0
    assert state.mode.selected == 0
    assert state.roster.get(state.mode.actor_id).name == "Traveling Merchant"


def test_hostile_actor_starts_combat(world: World, state: GameState):
    actor_id = state.roster.add(_raider(41, 20))
    attempt_move(world, state, 1, 0)
    assert state.player.position == (40, 20)
    assert state.mode == Combat(actor_id)
    assert state.messages.latest() == "Combat with Raider!"


def test_actor_blocks_even_on_walkable_terrain(world: World, state: GameState):
    """An actor on an item's cell keeps the item out of reach."""
    state.grid.items[(41, 20)] = Item(name="Map", glyph="?", kind=Quest())
    state.roster.add(_raider(41, 20))
    attempt_move(world, state, 1, 0)
    assert state.player.position == (40, 20)
    assert (41, 20) in state.grid.items
    assert state.player.inventory == []


def test_pick_up_item(world: World, state: GameState):
    """Stepping on an item moves it from the grid into the inventory."""
    item = Item(name="Map", glyph="?", kind=Quest())
    state.grid.items[(40, 19)] = item
    before = len(state.player.inventory)

    step(world, state, [UP])

    assert (40, 19) not in state.grid.items
    assert state.player.inventory.count(item) == 1
    assert len(state.player.inventory) == before + 1
    assert state.messages.latest() == "Picked up Map"


def test_inventory_mode(world: World, state: GameState):
    """Inventory opens from Playing and closes with either close command."""
    assert handle_command(world, state, Command.OPEN_INVENTORY)
    assert isinstance(state.mode, Inventory)
    assert handle_command(world, state, Command.CLOSE_INVENTORY)
    assert isinstance(state.mode, Playing)

    handle_command(world, state, Command.OPEN_INVENTORY)
    assert handle_command(world, state, Command.CANCEL)
    assert isinstance(state.mode, Playing)


def test_no_movement_in_inventory(world: World, state: GameState):
    handle_command(world, state, Command.OPEN_INVENTORY)
    assert not handle_command(world, state, UP)
    assert state.player.position == (40, 20)
    assert isinstance(state.mode, Inventory)


def test_invalid_commands_are_ignored(world: World, state: GameState):
    """Commands that mean nothing in the current mode change nothing."""
    for command in (
        Command.COMBAT_ATTACK,
        Command.COMBAT_FLEE,
        Command.DIALOGUE_CONFIRM,
        Command.DIALOGUE_DOWN,
        Command.CLOSE_INVENTORY,
        Command.CANCEL,
    ):
        assert not handle_command(world, state, command)
    assert isinstance(state.mode, Playing)
    assert state.player.position == (40, 20)


def test_combat_attack_ignored_in_dialogue(world: World, state: GameState):
    state.player.x, state.player.y = 36, 20
    attempt_move(world, state, -1, 0)
    mode = state.mode
    assert not handle_command(world, state, Command.COMBAT_ATTACK)
    assert state.mode == mode


def test_step_runs_commands_in_order(world: World, state: GameState):
    step(world, state, [UP, UP, LEFT])
    assert state.player.position == (39, 18)


def test_step_drops_commands_after_mode_change(world: World, state: GameState):
    """Commands after a mode switch belong to the old mode and are dropped."""
    step(world, state, [Command.OPEN_INVENTORY, Command.CLOSE_INVENTORY, UP])
    assert isinstance(state.mode, Inventory)
    assert state.player.position == (40, 20)


def test_step_stops_after_encounter(world: World, state: GameState):
    state.player.x, state.player.y = 36, 20
    step(world, state, [LEFT, DOWN])
    assert isinstance(state.mode, Dialogue)
    assert state.player.position == (36, 20)


def test_step_keeps_dialogue_cursor_moves(world: World, state: GameState):
    """Moving the dialogue highlight is not a mode switch."""
    state.player.x, state.player.y = 36, 20
    step(world, state, [LEFT])
    step(world, state, [Command.DIALOGUE_DOWN, Command.DIALOGUE_DOWN])
    assert state.mode.selected == 2
