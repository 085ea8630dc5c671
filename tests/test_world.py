"""Tests for terrain and tile grids."""

import pytest

from wasteland.engine.world import LocationKey, MapKind, TerrainKind, World


@pytest.mark.parametrize(
    "kind",
    [
        TerrainKind.FLOOR,
        TerrainKind.DOOR,
        TerrainKind.GRASS,
        TerrainKind.FOREST,
        TerrainKind.TOWN_GATE,
        TerrainKind.DUNGEON_GATE,
    ],
)
def test_walkable_kinds(kind: TerrainKind):
    assert kind.walkable


@pytest.mark.parametrize(
    "kind", [TerrainKind.WALL, TerrainKind.WATER, TerrainKind.MOUNTAIN]
)
def test_blocking_kinds(kind: TerrainKind):
    assert not kind.walkable
    assert not kind.enterable


def test_only_gates_are_enterable():
    enterable = {kind for kind in TerrainKind if kind.enterable}
    assert enterable == {TerrainKind.TOWN_GATE, TerrainKind.DUNGEON_GATE}


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (80, 0), (0, 40), (-5, 99)])
def test_out_of_bounds_is_never_walkable(world: World, x: int, y: int):
    """Cells outside the grid are blocked whatever the terrain."""
    grid = world.overworld.new_grid()
    assert not grid.is_walkable(x, y)


def test_is_walkable_follows_terrain(world: World):
    grid = world.overworld.new_grid()
    assert grid.is_walkable(0, 0)
    assert grid.is_walkable(79, 39)
    assert not grid.is_walkable(25, 7)  # mountain
    assert not grid.is_walkable(45, 32)  # lake
    assert grid.is_walkable(15, 20)  # forest


def test_new_grid_is_independent(world: World):
    """Taking items from an instance leaves the template alone."""
    template = world.dungeons[0]
    grid = template.new_grid()
    assert grid.kind is MapKind.DUNGEON
    assert grid.name == "Dungeon #1"

    item = grid.take_item(5, 5)
    assert item is not None
    assert (5, 5) not in grid.items
    assert (5, 5) in template.items
    assert (5, 5) in template.new_grid().items


def test_take_item_from_empty_cell(world: World):
    grid = world.towns[0].new_grid()
    assert grid.take_item(1, 1) is None


def test_location_lookup(world: World):
    assert world.location(LocationKey(MapKind.OVERWORLD)) is world.overworld
    assert world.location(LocationKey(MapKind.DUNGEON, 1)) is world.dungeons[1]
    with pytest.raises(KeyError):
        world.location(LocationKey(MapKind.TOWN, 2))
