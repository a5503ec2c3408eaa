import random

import pytest

from arcade_loop.clock import FrameClock
from arcade_loop.components import (
    Position, Velocity, RectShape, CircleShape, Falling,
    HAZARD, COLLECTIBLE, POWERUP_SHIELD, POWERUP_SLOW
)
from arcade_loop.persistence import MemoryBestScoreStore
from arcade_loop.player import InputState
from arcade_loop.session import GameSession
from arcade_loop.variants import (
    VariantConfig, PlayerConfig, SpawnClass, DifficultyCurve, STEPPED, LIVES
)

FRAME_MS = 16.0

# Classes that never spawn on their own; tests place them by hand
NEVER = 99


def make_config(**overrides) -> VariantConfig:
    """A quiet test game: nothing spawns unless a test places it."""
    options = dict(
        name='test',
        title='Test Game',
        width=480,
        height=640,
        player=PlayerConfig(width=40, height=20, bottom_offset=40,
                            acceleration=1.0, friction=0.9, max_speed=6),
        spawn_classes=(
            SpawnClass(kind='rock', variant=HAZARD, min_level=NEVER),
            SpawnClass(kind='gem', variant=COLLECTIBLE, min_level=NEVER,
                       reward=10, reward_per_level=5),
            SpawnClass(kind='bubble', variant=POWERUP_SHIELD, min_level=NEVER),
            SpawnClass(kind='hourglass', variant=POWERUP_SLOW, min_level=NEVER),
        ),
        difficulty=DifficultyCurve(mode=STEPPED, level_interval=10_000),
        damage_mode=LIVES,
        lives=3,
        max_lives=3,
    )
    options.update(overrides)
    return VariantConfig(**options)


class FixedRandom(random.Random):
    """random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


class Stepper:
    """Drives a session with evenly spaced timestamps (dt == 1.0)."""

    def __init__(self, session: GameSession):
        self.session = session
        self.now = 0.0

    def __call__(self, count: int = 1, inputs: InputState = InputState()):
        for _ in range(count):
            self.session.step(self.now, inputs)
            self.now += FRAME_MS
        return self.session


def make_session(config=None, store=None, seed=0) -> GameSession:
    return GameSession(
        config if config is not None else make_config(),
        store=store if store is not None else MemoryBestScoreStore(),
        rng=random.Random(seed),
        clock=FrameClock(nominal_ms=FRAME_MS, max_delay_ms=2 * FRAME_MS),
    )


def place(world, kind, variant, x, y, vy=0.0, width=20.0, height=20.0, radius=None):
    """Drop a falling entity at an exact spot."""
    entity_id = world.create_entity()
    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(0.0, vy))
    if radius is not None:
        world.add_component(entity_id, CircleShape(radius))
    else:
        world.add_component(entity_id, RectShape(width, height))
    world.add_component(entity_id, Falling(kind, variant))
    return entity_id


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def session(config):
    return make_session(config)


@pytest.fixture
def stepper(session):
    return Stepper(session)
