"""Immutable data structures for the game world.

These are loaded once from world.toml at startup. Gameplay never mutates
them: every location is played on a fresh instance built from its template.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

Coord = tuple[int, int]


class TerrainKind(Enum):
    """A terrain cell. Walkability is a property of the kind, never per-cell."""

    FLOOR = "floor"
    WALL = "wall"
    DOOR = "door"
    WATER = "water"
    GRASS = "grass"
    MOUNTAIN = "mountain"
    FOREST = "forest"
    TOWN_GATE = "town_gate"
    DUNGEON_GATE = "dungeon_gate"

    @property
    def walkable(self) -> bool:
        return self in _WALKABLE

    @property
    def enterable(self) -> bool:
        return self in _ENTERABLE

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_WALKABLE = frozenset(
    {
        TerrainKind.FLOOR,
        TerrainKind.DOOR,
        TerrainKind.GRASS,
        TerrainKind.FOREST,
        TerrainKind.TOWN_GATE,
        TerrainKind.DUNGEON_GATE,
    }
)
_ENTERABLE = frozenset({TerrainKind.TOWN_GATE, TerrainKind.DUNGEON_GATE})
_GLYPHS = {
    TerrainKind.FLOOR: ".",
    TerrainKind.WALL: "#",
    TerrainKind.DOOR: "+",
    TerrainKind.WATER: "~",
    TerrainKind.GRASS: '"',
    TerrainKind.MOUNTAIN: "^",
    TerrainKind.FOREST: "&",
    TerrainKind.TOWN_GATE: "※",
    TerrainKind.DUNGEON_GATE: "▼",
}


class MapKind(Enum):
    OVERWORLD = "overworld"
    TOWN = "town"
    DUNGEON = "dungeon"


# Gate terrain → the kind of location it leads to
GATE_TARGETS = {
    TerrainKind.TOWN_GATE: MapKind.TOWN,
    TerrainKind.DUNGEON_GATE: MapKind.DUNGEON,
}


@dataclass(frozen=True)
class Weapon:
    damage: int


@dataclass(frozen=True)
class Armor:
    defense: int


@dataclass(frozen=True)
class Consumable:
    heal: int


@dataclass(frozen=True)
class Quest:
    pass


ItemKind = Weapon | Armor | Consumable | Quest


@dataclass(frozen=True)
class Item:
    """Something that lies on the ground or sits in the player's inventory."""

    name: str
    glyph: str
    kind: ItemKind


@dataclass
class TileGrid:
    """A rectangular terrain grid plus the items lying on it.

    The terrain matrix is shared between copies (it never changes); the item
    mapping is owned by each grid.
    """

    kind: MapKind
    name: str
    width: int
    height: int
    terrain: tuple[tuple[TerrainKind, ...], ...]
    items: dict[Coord, Item] = field(default_factory=dict)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def terrain_at(self, x: int, y: int) -> TerrainKind:
        return self.terrain[y][x]

    def is_walkable(self, x: int, y: int) -> bool:
        """False outside the grid, otherwise the terrain's walkability."""
        if not self.in_bounds(x, y):
            return False
        return self.terrain[y][x].walkable

    def take_item(self, x: int, y: int) -> Item | None:
        """Remove and return the item at (x, y), if any."""
        return self.items.pop((x, y), None)


@dataclass(frozen=True)
class DialogueOption:
    text: str
    next_node: int | None = None  # None ends the conversation


@dataclass(frozen=True)
class DialogueNode:
    text: str
    options: tuple[DialogueOption, ...]


@dataclass(frozen=True)
class ActorSpec:
    """A non-player actor as authored in the catalog."""

    name: str
    glyph: str
    position: Coord
    max_health: int
    hostile: bool = False
    dialogue: tuple[DialogueNode, ...] = ()


@dataclass(frozen=True)
class LocationKey:
    """Identifies one catalog entry: its kind and index within that kind."""

    kind: MapKind
    index: int = 0


@dataclass(frozen=True)
class LocationTemplate:
    """A pristine location: layout, ground items, entry point and roster."""

    key: LocationKey
    name: str
    width: int
    height: int
    terrain: tuple[tuple[TerrainKind, ...], ...]
    items: Mapping[Coord, Item]
    entry: Coord
    roster: tuple[ActorSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", MappingProxyType(dict(self.items)))

    def new_grid(self) -> TileGrid:
        """Build a fresh, independently mutable grid from this template."""
        return TileGrid(
            kind=self.key.kind,
            name=self.name,
            width=self.width,
            height=self.height,
            terrain=self.terrain,
            items=dict(self.items),
        )


@dataclass(frozen=True)
class Gate:
    """An overworld cell that leads into a town or dungeon."""

    position: Coord
    target: LocationKey
    entry: Coord


@dataclass(frozen=True)
class Stats:
    strength: int = 5
    perception: int = 5
    endurance: int = 5
    charisma: int = 5
    intelligence: int = 5
    agility: int = 5
    luck: int = 5


@dataclass(frozen=True)
class PlayerSpec:
    start: Coord
    max_health: int
    stats: Stats = field(default_factory=Stats)


@dataclass(frozen=True)
class World:
    """The complete immutable game world, loaded from world.toml."""

    overworld: LocationTemplate
    towns: tuple[LocationTemplate, ...]
    dungeons: tuple[LocationTemplate, ...]
    gates: Mapping[Coord, Gate]
    player: PlayerSpec
    welcome: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "gates", MappingProxyType(dict(self.gates)))

    def location(self, key: LocationKey) -> LocationTemplate:
        """Look up a catalog entry. Raises KeyError for unknown keys."""
        if key.kind is MapKind.OVERWORLD:
            return self.overworld
        catalog = self.towns if key.kind is MapKind.TOWN else self.dungeons
        if not 0 <= key.index < len(catalog):
            raise KeyError(key)
        return catalog[key.index]

    def gate_at(self, x: int, y: int) -> Gate | None:
        return self.gates.get((x, y))
