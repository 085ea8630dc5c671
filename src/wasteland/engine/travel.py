"""Moving between the overworld and towns/dungeons.

Entering a location swaps in a fresh instance of its template (or, with
persist_locations, the instance the player left behind) and replaces the
whole roster. The overworld position is kept in a LocationMemory so that
returning puts the player back on the gate they came through.
"""

from ..logging import get_logger
from .state import OVERWORLD, GameState, LocationMemory, Roster, SavedLocation
from .world import LocationKey, MapKind, World

logger = get_logger(__name__)


def _stash_current(state: GameState) -> None:
    if state.persist_locations:
        state.saved_locations[state.location] = SavedLocation(state.grid, state.roster)


def _activate(world: World, state: GameState, key: LocationKey) -> None:
    """Make the given location the active grid and roster."""
    saved = state.saved_locations.pop(key, None) if state.persist_locations else None
    if saved is not None:
        state.grid, state.roster = saved.grid, saved.roster
    else:
        template = world.location(key)
        state.grid = template.new_grid()
        state.roster = Roster.from_specs(template.roster)
    state.location = key


def try_enter(world: World, state: GameState) -> bool:
    """Enter the town or dungeon whose gate the player is standing on."""
    if not state.on_overworld:
        return False
    player = state.player
    if not state.grid.terrain_at(player.x, player.y).enterable:
        return False
    gate = world.gate_at(player.x, player.y)
    if gate is None:
        # The loader guarantees a gate for every enterable cell.
        return False

    state.memory = LocationMemory(
        map_kind=MapKind.OVERWORLD, map_id=0, x=player.x, y=player.y
    )
    _stash_current(state)
    _activate(world, state, gate.target)
    player.x, player.y = gate.entry

    state.messages.append(f"Entered {state.grid.name}")
    logger.info(
        "location_entered",
        location=state.grid.name,
        kind=gate.target.kind.value,
        index=gate.target.index,
        gate=gate.position,
    )
    return True


def return_to_overworld(world: World, state: GameState) -> bool:
    """Go back to the overworld gate the player entered through."""
    if state.on_overworld or state.memory is None:
        return False

    memory = state.memory
    _stash_current(state)
    _activate(world, state, OVERWORLD)
    state.player.x, state.player.y = memory.x, memory.y
    state.memory = None

    state.messages.append("Returned to world map")
    logger.info("returned_to_overworld", position=(memory.x, memory.y))
    return True
