"""Tests for game state."""

from wasteland.engine.state import (
    MESSAGE_LOG_CAPACITY,
    OVERWORLD,
    Actor,
    MessageLog,
    Playing,
    Roster,
    new_game_state,
)
from wasteland.engine.world import MapKind, World


def test_new_game_state(world: World):
    """A fresh game starts on the overworld at the starting position."""
    state = new_game_state(world)
    assert state.player.position == (40, 20)
    assert state.player.health == state.player.max_health == 100
    assert state.player.inventory == []
    assert state.player.stats.strength == 5
    assert state.grid.kind is MapKind.OVERWORLD
    assert state.location == OVERWORLD
    assert isinstance(state.mode, Playing)
    assert state.memory is None
    assert state.camera == (20, 10)
    assert list(state.messages) == [world.welcome]


def test_new_game_roster(world: World):
    """The overworld roster is built from its template."""
    state = new_game_state(world)
    assert [a.name for a in state.roster] == ["Traveling Merchant"]
    merchant = next(iter(state.roster))
    assert merchant.health == merchant.max_health == 50
    assert not merchant.hostile


def test_message_log_keeps_last_five():
    """Appending a sixth message drops the oldest and keeps order."""
    log = MessageLog()
    for i in range(5):
        log.append(f"m{i}")
    assert list(log) == ["m0", "m1", "m2", "m3", "m4"]

    log.append("m5")
    assert len(log) == MESSAGE_LOG_CAPACITY == 5
    assert list(log) == ["m1", "m2", "m3", "m4", "m5"]
    assert log.latest() == "m5"


def test_message_log_never_exceeds_capacity():
    log = MessageLog()
    for i in range(50):
        log.append("same")
        assert len(log) <= 5
    assert list(log) == ["same"] * 5


def test_empty_message_log():
    log = MessageLog()
    assert len(log) == 0
    assert log.latest() is None


def _actor(name: str, x: int, y: int) -> Actor:
    return Actor(name=name, glyph="x", x=x, y=y, health=10, max_health=10)


def test_roster_handles_are_stable():
    """Removing an actor does not change the handles of the others."""
    roster = Roster([_actor("a", 1, 1), _actor("b", 2, 2), _actor("c", 3, 3)])
    roster.remove(0)
    assert 0 not in roster
    assert roster.get(1).name == "b"
    assert roster.get(2).name == "c"
    assert roster.at(3, 3) == 2
    assert len(roster) == 2


def test_roster_handles_are_not_reused():
    roster = Roster([_actor("a", 1, 1)])
    roster.remove(0)
    assert roster.add(_actor("b", 1, 1)) == 1
    assert roster.get(0) is None


def test_roster_lookup_by_position():
    roster = Roster([_actor("a", 1, 1)])
    assert roster.at(1, 1) == 0
    assert roster.at(2, 2) is None
