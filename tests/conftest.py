# ABOUTME: Shared pytest fixtures for all test modules (unit and integration).
# ABOUTME: Provides seeded random sources, rosters, settings, cue recorders and a ready-made controller.

import random
from datetime import UTC, datetime

import pytest

from scaffold.config.settings import Settings
from scaffold.models.player import Player
from scaffold.orchestration.cue_router import CueRouter
from scaffold.orchestration.session_controller import GameSessionController
from tests.helpers import CueRecorder


# --- Random Source Fixtures ---

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible draws"""
    return random.Random(1234)


# --- Roster Fixtures ---

@pytest.fixture
def two_players() -> list[Player]:
    """Minimum-size roster"""
    return [
        Player(id="p1", name="Ana"),
        Player(id="p2", name="Ben"),
    ]


@pytest.fixture
def three_players() -> list[Player]:
    """Three-player roster"""
    return [
        Player(id="a", name="Ana"),
        Player(id="b", name="Ben"),
        Player(id="c", name="Cai"),
    ]


# --- Settings Fixtures ---

@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the environment"""
    return Settings(
        game_mode="standard",
        knock_enabled=True,
        default_duration_minutes=10,
        easy_mode=False,
        easy_mode_bonus_seconds=10,
        sound_enabled=True,
        voice_enabled=True,
        min_players=2,
        max_players=6,
        log_level="INFO",
    )


# --- Controller Fixtures ---

@pytest.fixture
def cue_recorder() -> CueRecorder:
    """Recorder subscribed to the controller's router"""
    return CueRecorder()


@pytest.fixture
def cue_router(cue_recorder) -> CueRouter:
    """Router with the recorder attached"""
    router = CueRouter()
    router.subscribe(cue_recorder)
    return router


@pytest.fixture
def controller(settings, rng, cue_router) -> GameSessionController:
    """Controller in setup status with a seeded random source"""
    return GameSessionController(settings=settings, rng=rng, cue_router=cue_router)


@pytest.fixture
def playing_controller(controller, two_players) -> GameSessionController:
    """Controller with a five-minute, two-player game initialized"""
    controller.initialize_session(two_players, duration_minutes=5)
    return controller


@pytest.fixture
def fixed_timestamp() -> datetime:
    """Timezone-aware timestamp for model tests"""
    return datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
