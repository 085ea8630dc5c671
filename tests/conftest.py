"""Shared test fixtures for Wasteland."""

import copy
import tomllib

import pytest

from wasteland.app import _get_data_path
from wasteland.engine.loader import load_world
from wasteland.engine.state import GameState, new_game_state
from wasteland.engine.world import World


@pytest.fixture(scope="session")
def _raw_world_data() -> dict:
    with open(_get_data_path(), "rb") as f:
        return tomllib.load(f)


@pytest.fixture
def world_data(_raw_world_data: dict) -> dict:
    """A private, freely editable copy of the decoded world.toml."""
    return copy.deepcopy(_raw_world_data)


@pytest.fixture
def world() -> World:
    return load_world(_get_data_path())


@pytest.fixture
def state(world: World) -> GameState:
    return new_game_state(world)
