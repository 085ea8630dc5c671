"""Plain-text rendering of the game state.

Everything here only reads the state; it is what a renderer would draw.
"""

from .engine.dialogue import current_node
from .engine.state import (
    CAMERA_HALF_HEIGHT,
    CAMERA_HALF_WIDTH,
    Combat,
    Dialogue,
    GameState,
    Inventory,
)

VIEW_WIDTH = CAMERA_HALF_WIDTH * 2
VIEW_HEIGHT = CAMERA_HALF_HEIGHT * 2
PLAYER_GLYPH = "@"


def status_line(state: GameState) -> str:
    player = state.player
    return (
        f"HP: {player.health}/{player.max_health} | "
        f"Pos: ({player.x},{player.y}) | "
        f"Items: {len(player.inventory)} | "
        f"Map: {state.grid.name}"
    )


def controls_hint(state: GameState) -> str:
    if state.on_overworld:
        return "WASD/Arrow: Move | Space: Enter Town/Dungeon | I: Inventory"
    return "WASD/Arrow: Move | ESC: Return to World | I: Inventory"


def render_viewport(
    state: GameState, width: int = VIEW_WIDTH, height: int = VIEW_HEIGHT
) -> list[str]:
    """Draw the part of the active grid under the camera, one string per row.

    Actors are drawn over items, and the player over everything.
    """
    grid = state.grid
    left, top = state.camera
    actors = {actor.position: actor.glyph for actor in state.roster}

    rows = []
    for y in range(top, top + height):
        row = []
        for x in range(left, left + width):
            if (x, y) == state.player.position:
                row.append(PLAYER_GLYPH)
            elif (x, y) in actors:
                row.append(actors[(x, y)])
            elif (x, y) in grid.items:
                row.append(grid.items[(x, y)].glyph)
            elif grid.in_bounds(x, y):
                row.append(grid.terrain_at(x, y).glyph)
            else:
                row.append(" ")
        rows.append("".join(row))
    return rows


def inventory_lines(state: GameState) -> list[str]:
    lines = ["INVENTORY"]
    if not state.player.inventory:
        lines.append("Empty")
    else:
        lines.extend(f"{item.glyph} - {item.name}" for item in state.player.inventory)
    lines.append("Press I to close")
    return lines


def dialogue_panel(state: GameState, mode: Dialogue) -> list[str]:
    actor = state.roster.get(mode.actor_id)
    node = current_node(state, mode)
    lines = [actor.name, node.text]
    for i, option in enumerate(node.options):
        prefix = "> " if i == mode.selected else "  "
        lines.append(f"{prefix}{option.text}")
    lines.append("Up/Down Select, Enter/Space Confirm, ESC Exit")
    return lines


def combat_panel(state: GameState, mode: Combat) -> list[str]:
    enemy = state.roster.get(mode.actor_id)
    player = state.player
    return [
        "COMBAT",
        f"Enemy: {enemy.name}",
        f"Enemy HP: {enemy.health}/{enemy.max_health}",
        f"Your HP: {player.health}/{player.max_health}",
        "1: Attack",
        "3: Run",
    ]


def overlay_lines(state: GameState) -> list[str]:
    """The panel drawn over the map for the current mode, if any."""
    mode = state.mode
    if isinstance(mode, Inventory):
        return inventory_lines(state)
    if isinstance(mode, Dialogue):
        return dialogue_panel(state, mode)
    if isinstance(mode, Combat):
        return combat_panel(state, mode)
    return []


def render_screen(state: GameState) -> str:
    """The full text screen: status, map, overlay, messages and controls."""
    parts = [status_line(state), *render_viewport(state)]
    overlay = overlay_lines(state)
    if overlay:
        parts.append("-" * VIEW_WIDTH)
        parts.extend(overlay)
    parts.append("-" * VIEW_WIDTH)
    parts.extend(state.messages)
    parts.append(controls_hint(state))
    return "\n".join(parts)
