"""Mutable per-game state.

Everything here is an instance: grids and rosters are copies built from the
World's templates, so gameplay can mutate them freely.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .world import (
    ActorSpec,
    Coord,
    DialogueNode,
    Item,
    LocationKey,
    MapKind,
    Stats,
    TileGrid,
    World,
)

# Number of status messages kept in the log
MESSAGE_LOG_CAPACITY = 5

# Camera offset from the player: half the viewport, in tiles
CAMERA_HALF_WIDTH = 20
CAMERA_HALF_HEIGHT = 10

OVERWORLD = LocationKey(MapKind.OVERWORLD, 0)


@dataclass
class Player:
    x: int
    y: int
    health: int
    max_health: int
    inventory: list[Item] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)

    @property
    def position(self) -> Coord:
        return (self.x, self.y)


@dataclass
class Actor:
    """A non-player actor on the active grid."""

    name: str
    glyph: str
    x: int
    y: int
    health: int
    max_health: int
    hostile: bool = False
    dialogue: tuple[DialogueNode, ...] = ()

    @classmethod
    def from_spec(cls, spec: ActorSpec) -> "Actor":
        x, y = spec.position
        return cls(
            name=spec.name,
            glyph=spec.glyph,
            x=x,
            y=y,
            health=spec.max_health,
            max_health=spec.max_health,
            hostile=spec.hostile,
            dialogue=spec.dialogue,
        )

    @property
    def position(self) -> Coord:
        return (self.x, self.y)


class Roster:
    """The actors on the active grid, addressed by stable integer handles.

    Handles are never reused within a roster, so removing one actor never
    changes which actor another handle refers to.
    """

    def __init__(self, actors: Iterable[Actor] = ()):
        self._actors: dict[int, Actor] = {}
        self._next_id = 0
        for actor in actors:
            self.add(actor)

    @classmethod
    def from_specs(cls, specs: Iterable[ActorSpec]) -> "Roster":
        return cls(Actor.from_spec(spec) for spec in specs)

    def add(self, actor: Actor) -> int:
        actor_id = self._next_id
        self._actors[actor_id] = actor
        self._next_id += 1
        return actor_id

    def get(self, actor_id: int) -> Actor | None:
        return self._actors.get(actor_id)

    def remove(self, actor_id: int) -> Actor:
        return self._actors.pop(actor_id)

    def at(self, x: int, y: int) -> int | None:
        """Return the handle of the first actor standing on (x, y)."""
        for actor_id, actor in self._actors.items():
            if actor.x == x and actor.y == y:
                return actor_id
        return None

    def __contains__(self, actor_id: object) -> bool:
        return actor_id in self._actors

    def __iter__(self) -> Iterator[Actor]:
        return iter(self._actors.values())

    def __len__(self) -> int:
        return len(self._actors)


class MessageLog:
    """Bounded FIFO of status messages; the oldest is dropped when full."""

    def __init__(self, capacity: int = MESSAGE_LOG_CAPACITY):
        self._messages: deque[str] = deque(maxlen=capacity)

    def append(self, text: str) -> None:
        self._messages.append(text)

    def latest(self) -> str | None:
        return self._messages[-1] if self._messages else None

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)


@dataclass(frozen=True)
class LocationMemory:
    """Where the player stood on the overworld before entering a location."""

    map_kind: MapKind
    map_id: int
    x: int
    y: int


# Game modes. Only one is active at a time; Dialogue and Combat carry the
# roster handle of the actor involved.


@dataclass(frozen=True)
class Playing:
    pass


@dataclass(frozen=True)
class Inventory:
    pass


@dataclass(frozen=True)
class Dialogue:
    actor_id: int
    node: int = 0
    selected: int = 0


@dataclass(frozen=True)
class Combat:
    actor_id: int


GameMode = Playing | Inventory | Dialogue | Combat

PLAYING = Playing()


@dataclass
class SavedLocation:
    """A location instance kept aside while the player is elsewhere."""

    grid: TileGrid
    roster: Roster


@dataclass
class GameState:
    """All mutable per-game state."""

    player: Player
    grid: TileGrid
    roster: Roster
    location: LocationKey = OVERWORLD
    mode: GameMode = PLAYING
    messages: MessageLog = field(default_factory=MessageLog)
    camera: Coord = (0, 0)
    memory: LocationMemory | None = None

    # When set, leaving a location stores its instance here and re-entering
    # resumes it instead of rebuilding it from the template.
    persist_locations: bool = False
    saved_locations: dict[LocationKey, SavedLocation] = field(default_factory=dict)

    @property
    def on_overworld(self) -> bool:
        return self.grid.kind is MapKind.OVERWORLD


def new_game_state(world: World, persist_locations: bool = False) -> GameState:
    """Create a fresh game on the overworld with the starting player."""
    spec = world.player
    x, y = spec.start
    player = Player(
        x=x,
        y=y,
        health=spec.max_health,
        max_health=spec.max_health,
        stats=spec.stats,
    )
    state = GameState(
        player=player,
        grid=world.overworld.new_grid(),
        roster=Roster.from_specs(world.overworld.roster),
        camera=(x - CAMERA_HALF_WIDTH, y - CAMERA_HALF_HEIGHT),
        persist_locations=persist_locations,
    )
    if world.welcome:
        state.messages.append(world.welcome)
    return state
