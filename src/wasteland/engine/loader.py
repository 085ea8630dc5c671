"""Build a World from the world.toml data file.

Layouts are described as a fill terrain, an optional border ring, half-open
rectangular areas and single cells, applied in that order. Every location
(the overworld, each town, each dungeon) names a layout and a roster.

All data errors are raised as WorldDataError while loading; a World that
loads is safe to play.
"""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .world import (
    GATE_TARGETS,
    ActorSpec,
    Armor,
    Consumable,
    Coord,
    DialogueNode,
    DialogueOption,
    Gate,
    Item,
    ItemKind,
    LocationKey,
    LocationTemplate,
    MapKind,
    PlayerSpec,
    Quest,
    Stats,
    TerrainKind,
    Weapon,
    World,
)


class WorldDataError(ValueError):
    """The world data is malformed."""


def _coord(value: Any, where: str) -> Coord:
    if (
        not isinstance(value, list)
        or len(value) != 2
        or not all(isinstance(v, int) for v in value)
    ):
        raise WorldDataError(f"{where}: expected [x, y], got {value!r}")
    return (value[0], value[1])


def _terrain(name: str, where: str) -> TerrainKind:
    try:
        return TerrainKind(name)
    except ValueError:
        raise WorldDataError(f"{where}: unknown terrain {name!r}") from None


def _range(value: Any, where: str) -> range:
    if (
        not isinstance(value, list)
        or len(value) != 2
        or not all(isinstance(v, int) for v in value)
    ):
        raise WorldDataError(f"{where}: expected [start, stop], got {value!r}")
    return range(value[0], value[1])


def _parse_item(key: str, data: Mapping[str, Any]) -> Item:
    """Items: a name, a glyph and one of the item kinds with its value."""
    where = f"items.{key}"
    kind_name = data.get("kind")
    kind: ItemKind
    if kind_name == "weapon":
        kind = Weapon(damage=int(data["damage"]))
    elif kind_name == "armor":
        kind = Armor(defense=int(data["defense"]))
    elif kind_name == "consumable":
        kind = Consumable(heal=int(data["heal"]))
    elif kind_name == "quest":
        kind = Quest()
    else:
        raise WorldDataError(f"{where}: unknown item kind {kind_name!r}")
    return Item(name=data["name"], glyph=data.get("glyph", "?"), kind=kind)


def _parse_dialogue(
    nodes: list[Mapping[str, Any]], where: str
) -> tuple[DialogueNode, ...]:
    """Dialogue graphs: node 0 is the entry, options point at node indices."""
    result = []
    for i, node in enumerate(nodes):
        options = []
        for opt in node.get("options", []):
            next_node = opt.get("next")
            if next_node is not None and (
                not isinstance(next_node, int) or isinstance(next_node, bool)
            ):
                raise WorldDataError(
                    f"{where}.dialogue[{i}]: next must be a node index, "
                    f"got {next_node!r}"
                )
            options.append(DialogueOption(text=opt["text"], next_node=next_node))
        if not options:
            raise WorldDataError(f"{where}.dialogue[{i}]: node has no options")
        result.append(DialogueNode(text=node["text"], options=tuple(options)))

    for i, node in enumerate(result):
        for opt in node.options:
            if opt.next_node is not None and not 0 <= opt.next_node < len(result):
                raise WorldDataError(
                    f"{where}.dialogue[{i}]: option {opt.text!r} "
                    f"points at missing node {opt.next_node}"
                )
    return tuple(result)


def _parse_actor(data: Mapping[str, Any], where: str) -> ActorSpec:
    health = int(data["health"])
    if health <= 0:
        raise WorldDataError(f"{where}: health must be positive")
    hostile = bool(data.get("hostile", False))
    dialogue = _parse_dialogue(data.get("dialogue", []), where)
    if not hostile and not dialogue:
        raise WorldDataError(f"{where}: friendly actors need a dialogue")
    return ActorSpec(
        name=data["name"],
        glyph=data.get("glyph", "?"),
        position=_coord(data.get("at"), f"{where}.at"),
        max_health=health,
        hostile=hostile,
        dialogue=dialogue,
    )


def _parse_layout(
    key: str, data: Mapping[str, Any], items: Mapping[str, Item]
) -> dict[str, Any]:
    """Carve a layout into a terrain matrix and collect its ground items."""
    where = f"layouts.{key}"
    width, height = int(data["width"]), int(data["height"])
    if width <= 0 or height <= 0:
        raise WorldDataError(f"{where}: dimensions must be positive")

    fill = _terrain(data.get("fill", "floor"), f"{where}.fill")
    rows = [[fill] * width for _ in range(height)]

    if "border" in data:
        border = _terrain(data["border"], f"{where}.border")
        for y in range(height):
            for x in range(width):
                if x in (0, width - 1) or y in (0, height - 1):
                    rows[y][x] = border

    for i, area in enumerate(data.get("areas", [])):
        area_where = f"{where}.areas[{i}]"
        terrain = _terrain(area["terrain"], area_where)
        xs = _range(area.get("x"), f"{area_where}.x")
        ys = _range(area.get("y"), f"{area_where}.y")
        for y in ys:
            for x in xs:
                if not (0 <= x < width and 0 <= y < height):
                    raise WorldDataError(f"{area_where}: ({x}, {y}) is off the map")
                rows[y][x] = terrain

    for i, cell in enumerate(data.get("cells", [])):
        cell_where = f"{where}.cells[{i}]"
        x, y = _coord(cell.get("at"), cell_where)
        if not (0 <= x < width and 0 <= y < height):
            raise WorldDataError(f"{cell_where}: ({x}, {y}) is off the map")
        rows[y][x] = _terrain(cell["terrain"], cell_where)

    ground: dict[Coord, Item] = {}
    for i, placed in enumerate(data.get("items", [])):
        item_where = f"{where}.items[{i}]"
        name = placed.get("item")
        if name not in items:
            raise WorldDataError(f"{item_where}: unknown item {name!r}")
        at = _coord(placed.get("at"), item_where)
        if at in ground:
            raise WorldDataError(f"{item_where}: two items at {at}")
        ground[at] = items[name]

    return {
        "name": data.get("name", key),
        "width": width,
        "height": height,
        "terrain": tuple(tuple(row) for row in rows),
        "items": ground,
        "entry": _coord(data["entry"], f"{where}.entry") if "entry" in data else None,
    }


def _build_location(
    key: LocationKey,
    data: Mapping[str, Any],
    layouts: Mapping[str, dict[str, Any]],
    rosters: Mapping[str, tuple[ActorSpec, ...]],
    default_entry: Coord | None = None,
) -> LocationTemplate:
    where = f"{key.kind.value}[{key.index}]"
    layout_name = data.get("layout")
    if layout_name not in layouts:
        raise WorldDataError(f"{where}: unknown layout {layout_name!r}")
    roster_name = data.get("roster")
    if roster_name is not None and roster_name not in rosters:
        raise WorldDataError(f"{where}: unknown roster {roster_name!r}")
    layout = layouts[layout_name]

    entry = layout["entry"] or default_entry
    if "entry" in data:
        entry = _coord(data["entry"], f"{where}.entry")
    if entry is None:
        raise WorldDataError(f"{where}: no entry point")

    name = data.get("name") or layout["name"].format(number=key.index + 1)
    return LocationTemplate(
        key=key,
        name=name,
        width=layout["width"],
        height=layout["height"],
        terrain=layout["terrain"],
        items=layout["items"],
        entry=entry,
        roster=rosters[roster_name] if roster_name is not None else (),
    )


def _walkable(location: LocationTemplate, at: Coord) -> bool:
    x, y = at
    return (
        0 <= x < location.width
        and 0 <= y < location.height
        and location.terrain[y][x].walkable
    )


def _check_entry(location: LocationTemplate, entry: Coord, where: str) -> None:
    """Entries must be walkable and free of items and actors."""
    if not _walkable(location, entry):
        raise WorldDataError(f"{where}: entry {entry} is not walkable")
    if entry in location.items or any(
        actor.position == entry for actor in location.roster
    ):
        raise WorldDataError(f"{where}: entry {entry} is occupied")


def _validate_location(location: LocationTemplate) -> None:
    """Check that everything placed on a location stands on walkable ground."""
    where = location.name
    for at, item in location.items.items():
        if not _walkable(location, at):
            raise WorldDataError(f"{where}: item {item.name!r} at {at} is unreachable")
    seen: set[Coord] = set()
    for actor in location.roster:
        if not _walkable(location, actor.position):
            raise WorldDataError(
                f"{where}: actor {actor.name!r} at {actor.position} "
                f"is not on walkable ground"
            )
        if actor.position in seen:
            raise WorldDataError(f"{where}: two actors at {actor.position}")
        seen.add(actor.position)
    _check_entry(location, location.entry, where)


def _build_gates(
    raw: list[Mapping[str, Any]],
    overworld: LocationTemplate,
    towns: tuple[LocationTemplate, ...],
    dungeons: tuple[LocationTemplate, ...],
) -> dict[Coord, Gate]:
    """Map every enterable overworld cell to the location it leads into."""
    catalogs = {MapKind.TOWN: towns, MapKind.DUNGEON: dungeons}
    gates: dict[Coord, Gate] = {}
    for i, data in enumerate(raw):
        where = f"gates[{i}]"
        x, y = _coord(data.get("at"), f"{where}.at")
        if not (0 <= x < overworld.width and 0 <= y < overworld.height):
            raise WorldDataError(f"{where}: ({x}, {y}) is off the overworld")
        if (x, y) in gates:
            raise WorldDataError(f"{where}: duplicate gate at ({x}, {y})")

        terrain = overworld.terrain[y][x]
        if not terrain.enterable:
            raise WorldDataError(f"{where}: ({x}, {y}) is {terrain.value}, not a gate")
        try:
            kind = MapKind(data.get("kind"))
        except ValueError:
            raise WorldDataError(
                f"{where}: unknown kind {data.get('kind')!r}"
            ) from None
        if GATE_TARGETS[terrain] is not kind:
            raise WorldDataError(
                f"{where}: {terrain.value} cell cannot lead to a {kind.value}"
            )

        index = int(data.get("index", 0))
        catalog = catalogs[kind]
        if not 0 <= index < len(catalog):
            raise WorldDataError(f"{where}: no {kind.value} with index {index}")
        target = catalog[index]

        entry = target.entry
        if "entry" in data:
            entry = _coord(data["entry"], f"{where}.entry")
            _check_entry(target, entry, where)

        gates[(x, y)] = Gate(position=(x, y), target=target.key, entry=entry)

    for y, row in enumerate(overworld.terrain):
        for x, terrain in enumerate(row):
            if terrain.enterable and (x, y) not in gates:
                raise WorldDataError(f"{terrain.value} at ({x}, {y}) has no gate entry")
    return gates


def _parse_player(data: Mapping[str, Any]) -> PlayerSpec:
    raw_stats = data.get("stats", {})
    unknown = set(raw_stats) - set(Stats.__dataclass_fields__)
    if unknown:
        raise WorldDataError(f"player.stats: unknown stats {sorted(unknown)}")
    stats = Stats(**{k: int(v) for k, v in raw_stats.items()})
    return PlayerSpec(
        start=_coord(data.get("start"), "player.start"),
        max_health=int(data.get("health", 100)),
        stats=stats,
    )


def parse_world(data: Mapping[str, Any]) -> World:
    """Build and validate a World from already-decoded TOML data."""
    try:
        items = {
            key: _parse_item(key, value) for key, value in data.get("items", {}).items()
        }
        layouts = {
            key: _parse_layout(key, value, items)
            for key, value in data.get("layouts", {}).items()
        }
        rosters = {
            key: tuple(
                _parse_actor(actor, f"rosters.{key}[{i}]")
                for i, actor in enumerate(actors)
            )
            for key, actors in data.get("rosters", {}).items()
        }
        player = _parse_player(data.get("player", {}))

        overworld = _build_location(
            LocationKey(MapKind.OVERWORLD, 0),
            data["overworld"],
            layouts,
            rosters,
            default_entry=player.start,
        )
        towns = tuple(
            _build_location(LocationKey(MapKind.TOWN, i), entry, layouts, rosters)
            for i, entry in enumerate(data.get("towns", []))
        )
        dungeons = tuple(
            _build_location(LocationKey(MapKind.DUNGEON, i), entry, layouts, rosters)
            for i, entry in enumerate(data.get("dungeons", []))
        )
    except KeyError as exc:
        raise WorldDataError(f"missing required field {exc}") from exc

    for location in (overworld, *towns, *dungeons):
        _validate_location(location)
    if player.max_health <= 0:
        raise WorldDataError("player.health must be positive")

    gates = _build_gates(data.get("gates", []), overworld, towns, dungeons)
    return World(
        overworld=overworld,
        towns=towns,
        dungeons=dungeons,
        gates=gates,
        player=player,
        welcome=data.get("welcome", ""),
    )


def load_world(data_path: Path) -> World:
    """Load world.toml (or any file in the same format)."""
    with open(data_path, "rb") as f:
        data = tomllib.load(f)
    return parse_world(data)
