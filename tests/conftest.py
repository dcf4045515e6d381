"""Pytest configuration and fixtures for moderator tests."""
import os
import random

import pytest

# Set test environment before importing the package
os.environ["GAME_STORE_BACKEND"] = "memory"
os.environ["DEFAULT_LANGUAGE"] = "en"
os.environ["LOG_LEVEL"] = "DEBUG"

from werewolf_moderator.models.game import GameConfig, GameState, Player
from werewolf_moderator.models.roles import SHOOTER_ROLES, get_role
from werewolf_moderator.schemas.enums import GameMode, NightStep, RoleType
from werewolf_moderator.schemas.game import GameRules
from werewolf_moderator.services.game_engine import GameEngine
from werewolf_moderator.services.game_persistence import GameStorage
from werewolf_moderator.services.step_sequencer import night_steps
from werewolf_moderator.storage.memory import InMemoryBackend

W = RoleType.WEREWOLF
V = RoleType.VILLAGER

# Seat order is the list order (seat 1 first)
NINE_WITH_GUARD = [
    W, W, W,
    RoleType.SEER, RoleType.WITCH, RoleType.HUNTER, RoleType.GUARD,
    V, V,
]

CLASSIC_9_LAYOUT = [
    W, W, W,
    RoleType.SEER, RoleType.WITCH, RoleType.HUNTER,
    V, V, V,
]


def build_game(
    role_types: list[RoleType],
    rules: GameRules | None = None,
    language: str = "en",
    game_id: str = "test-game",
) -> GameState:
    """Build a game with a fixed seat layout, first night step already set."""
    roles = [get_role(r) for r in role_types]
    config = GameConfig(
        mode=GameMode.CUSTOM,
        player_count=len(roles),
        roles=roles,
        rules=rules or GameRules(),
    )
    players = [
        Player(
            seat_number=i + 1,
            name=f"Player {i + 1}",
            role=role,
            can_shoot=role.type in SHOOTER_ROLES,
        )
        for i, role in enumerate(roles)
    ]
    game = GameState(id=game_id, config=config, language=language, players=players)
    first: NightStep = night_steps(game)[0]
    game.current_step = first.value
    game.night_state.current_step = first
    return game


@pytest.fixture
def game_factory():
    return build_game


@pytest.fixture
def classic_game():
    """Classic nine: seats 1-3 wolves, 4 seer, 5 witch, 6 hunter, 7-9 villagers."""
    return build_game(CLASSIC_9_LAYOUT)


@pytest.fixture
def guard_game():
    """Nine with guard: 1-3 wolves, 4 seer, 5 witch, 6 hunter, 7 guard, 8-9 villagers."""
    return build_game(NINE_WITH_GUARD)


@pytest.fixture
def memory_storage():
    return GameStorage(backend=InMemoryBackend(), history_limit=20)


@pytest.fixture
def engine(memory_storage):
    return GameEngine(storage=memory_storage)


@pytest.fixture
def rng():
    return random.Random(1234)
