"""
Game Variant Tables
====================
Configuration for the three games built on the loop engine.

All durations are in simulation steps (1 step = one nominal 60 FPS
frame), all distances in playfield units.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .clock import TARGET_FPS
from .components import (
    HAZARD, COLLECTIBLE, POWERUP_SHIELD, POWERUP_SLOW, ENTITY_VARIANTS
)


def seconds(value: float) -> float:
    """Convert seconds to nominal steps."""
    return value * TARGET_FPS


# Damage modes
LIVES = 'lives'
MISSES = 'misses'

# Difficulty schemes
CONTINUOUS = 'continuous'
STEPPED = 'stepped'

# What happens when an entity leaves through the bottom edge
EXIT_NONE = None
EXIT_REWARD = 'reward'
EXIT_MISS = 'miss'


# =============================================================================
# CONFIG DATACLASSES
# =============================================================================

@dataclass(frozen=True)
class BonusSpawn:
    """Extra simultaneous spawn once speed passes a threshold."""
    threshold: float = 2.2
    chance: float = 0.35
    chance_per_speed: float = 0.0  # Added per unit of speed above threshold
    max_chance: float = 1.0

    def probability(self, speed: float) -> float:
        if speed <= self.threshold:
            return 0.0
        extra = (speed - self.threshold) * self.chance_per_speed
        return min(self.max_chance, self.chance + extra)


@dataclass(frozen=True)
class SpawnClass:
    """One independently-spawned entity class."""
    kind: str
    variant: str
    shape: str = 'rect'  # 'rect' or 'circle'
    width: Tuple[float, float] = (20.0, 20.0)
    height: Tuple[float, float] = (20.0, 20.0)
    radius: Tuple[float, float] = (10.0, 10.0)
    vy: Tuple[float, float] = (2.0, 3.0)
    base_interval: float = seconds(1.0)
    interval_slope: float = 0.0  # Steps removed per unit of speed above 1
    min_interval: float = seconds(0.25)
    spawn_chance: float = 1.0  # Roll made each time the cooldown expires
    min_level: int = 1
    bonus: Optional[BonusSpawn] = None
    reward: int = 0
    reward_per_level: int = 0
    on_exit: Optional[str] = EXIT_NONE
    exit_reward: int = 0

    def __post_init__(self):
        if self.variant not in ENTITY_VARIANTS:
            raise ValueError(f'unknown entity variant: {self.variant!r}')
        if self.shape not in ('rect', 'circle'):
            raise ValueError(f'unknown shape: {self.shape!r}')
        if self.on_exit not in (EXIT_NONE, EXIT_REWARD, EXIT_MISS):
            raise ValueError(f'unknown exit rule: {self.on_exit!r}')
        if self.min_interval <= 0 or self.min_interval > self.base_interval:
            raise ValueError(
                f'{self.kind}: min_interval must be in (0, base_interval]'
            )
        if self.interval_slope < 0:
            raise ValueError(f'{self.kind}: interval_slope must be >= 0')
        for lo, hi in (self.width, self.height, self.radius, self.vy):
            if lo > hi:
                raise ValueError(f'{self.kind}: empty range ({lo}, {hi})')

    def interval(self, speed: float) -> float:
        """Cooldown after a spawn; shrinks with speed down to min_interval."""
        raw = self.base_interval - (speed - 1.0) * self.interval_slope
        return max(self.min_interval, min(self.base_interval, raw))

    def collect_reward(self, level: int) -> int:
        return self.reward + self.reward_per_level * (level - 1)


@dataclass(frozen=True)
class DifficultyCurve:
    """
    Difficulty progression.

    continuous: speed = 1 + min(cap, elapsed / ramp), level stays 1.
    stepped:    level = 1 + elapsed // level_interval (capped at
                max_level), speed = 1 + (level - 1) * speed_per_level.
    """
    mode: str = CONTINUOUS
    ramp: float = seconds(25)
    cap: float = 2.5
    level_interval: float = seconds(15)
    max_level: Optional[int] = None
    speed_per_level: float = 0.2

    def __post_init__(self):
        if self.mode not in (CONTINUOUS, STEPPED):
            raise ValueError(f'unknown difficulty mode: {self.mode!r}')
        if self.ramp <= 0 or self.level_interval <= 0:
            raise ValueError('difficulty intervals must be positive')

    def level_at(self, elapsed: float) -> int:
        if self.mode == CONTINUOUS:
            return 1
        level = 1 + int(elapsed // self.level_interval)
        if self.max_level is not None:
            level = min(level, self.max_level)
        return level

    def speed_at(self, elapsed: float) -> float:
        if self.mode == CONTINUOUS:
            return 1.0 + min(self.cap, elapsed / self.ramp)
        return 1.0 + (self.level_at(elapsed) - 1) * self.speed_per_level


@dataclass(frozen=True)
class PlayerConfig:
    """Player paddle/ship geometry and handling."""
    width: float = 56.0
    height: float = 16.0
    bottom_offset: float = 48.0  # Distance from the floor to the player's top
    acceleration: float = 0.9
    friction: float = 0.92
    max_speed: float = 6.0
    direct: bool = False
    dash_multiplier: Optional[float] = None  # None = no dash
    dash_duration: float = 10.0
    dash_cooldown: float = 45.0
    invulnerable_steps: float = 0.0


@dataclass(frozen=True)
class VariantConfig:
    """Everything that distinguishes one game from another."""
    name: str
    title: str
    width: float = 480.0
    height: float = 640.0
    player: PlayerConfig = field(default_factory=PlayerConfig)
    spawn_classes: Tuple[SpawnClass, ...] = ()
    difficulty: DifficultyCurve = field(default_factory=DifficultyCurve)
    damage_mode: str = LIVES
    lives: int = 1
    max_lives: int = 1
    miss_limit: int = 3
    extra_life_every: int = 0  # 0 = never
    trickle_per_step: float = 0.0
    slow_factor: float = 0.5
    slow_duration: float = seconds(5)
    exit_margin: float = 4.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError('playfield must have positive size')
        if self.player.width > self.width:
            raise ValueError('player is wider than the playfield')
        if self.damage_mode not in (LIVES, MISSES):
            raise ValueError(f'unknown damage mode: {self.damage_mode!r}')
        if self.damage_mode == LIVES and not 1 <= self.lives <= self.max_lives:
            raise ValueError('lives must be in [1, max_lives]')
        if self.damage_mode == MISSES and self.miss_limit < 1:
            raise ValueError('miss_limit must be >= 1')
        if not 0 < self.slow_factor <= 1:
            raise ValueError('slow_factor must be in (0, 1]')
        kinds = [sc.kind for sc in self.spawn_classes]
        if len(kinds) != len(set(kinds)):
            raise ValueError('spawn class kinds must be unique')

    def spawn_class(self, kind: str) -> SpawnClass:
        for spawn_class in self.spawn_classes:
            if spawn_class.kind == kind:
                return spawn_class
        raise KeyError(kind)


# =============================================================================
# VARIANT TABLE
# =============================================================================

DODGE = VariantConfig(
    name='dodge',
    title='Dodge the Blocks',
    player=PlayerConfig(
        width=56, height=16, bottom_offset=48,
        acceleration=0.9, friction=0.92, max_speed=6,
    ),
    spawn_classes=(
        SpawnClass(
            kind='block', variant=HAZARD, shape='rect',
            width=(60, 160), height=(14, 20), vy=(2.0, 3.2),
            base_interval=seconds(0.9),
            interval_slope=seconds(0.18),
            min_interval=seconds(0.25),
            bonus=BonusSpawn(threshold=2.2, chance=0.35),
            on_exit=EXIT_REWARD, exit_reward=5,
        ),
    ),
    difficulty=DifficultyCurve(mode=CONTINUOUS, ramp=seconds(25), cap=2.5),
    damage_mode=LIVES,
    lives=1,
    max_lives=1,
    trickle_per_step=1.0,
)

DASH = VariantConfig(
    name='dash',
    title='Meteor Dash',
    player=PlayerConfig(
        width=40, height=24, bottom_offset=56,
        acceleration=0.8, friction=0.9, max_speed=5.5,
        dash_multiplier=2.2, dash_duration=10, dash_cooldown=45,
        invulnerable_steps=90,
    ),
    spawn_classes=(
        SpawnClass(
            kind='meteor', variant=HAZARD, shape='circle',
            radius=(10, 22), vy=(2.2, 3.6),
            base_interval=40, interval_slope=6, min_interval=14,
            bonus=BonusSpawn(threshold=1.6, chance=0.15,
                             chance_per_speed=0.2, max_chance=0.6),
        ),
        SpawnClass(
            kind='orb', variant=COLLECTIBLE, shape='circle',
            radius=(8, 8), vy=(2.0, 2.8),
            base_interval=70, interval_slope=5, min_interval=40,
            reward=10, reward_per_level=5,
        ),
        SpawnClass(
            kind='shield', variant=POWERUP_SHIELD, shape='rect',
            width=(18, 18), height=(18, 18), vy=(1.8, 2.2),
            base_interval=seconds(10), min_interval=seconds(10),
            spawn_chance=0.5, min_level=2,
        ),
        SpawnClass(
            kind='hourglass', variant=POWERUP_SLOW, shape='rect',
            width=(18, 18), height=(18, 18), vy=(1.8, 2.2),
            base_interval=seconds(12), min_interval=seconds(12),
            spawn_chance=0.4, min_level=3,
        ),
    ),
    difficulty=DifficultyCurve(
        mode=STEPPED, level_interval=seconds(15),
        max_level=10, speed_per_level=0.2,
    ),
    damage_mode=LIVES,
    lives=3,
    max_lives=5,
    extra_life_every=500,
    trickle_per_step=1.0,
    slow_factor=0.5,
    slow_duration=seconds(5),
)

CATCH = VariantConfig(
    name='catch',
    title='Fruit Catch',
    player=PlayerConfig(
        width=72, height=14, bottom_offset=40,
        max_speed=7, direct=True,
    ),
    spawn_classes=(
        SpawnClass(
            kind='fruit', variant=COLLECTIBLE, shape='rect',
            width=(22, 22), height=(22, 22), vy=(1.6, 2.4),
            base_interval=60, interval_slope=10, min_interval=24,
            bonus=BonusSpawn(threshold=1.8, chance=0.2,
                             chance_per_speed=0.1, max_chance=0.5),
            reward=10, reward_per_level=5,
            on_exit=EXIT_MISS,
        ),
        SpawnClass(
            kind='bomb', variant=HAZARD, shape='circle',
            radius=(11, 11), vy=(1.8, 2.6),
            base_interval=150, interval_slope=20, min_interval=60,
            min_level=2,
        ),
    ),
    difficulty=DifficultyCurve(
        mode=STEPPED, level_interval=seconds(20),
        max_level=12, speed_per_level=0.15,
    ),
    damage_mode=MISSES,
    lives=1,
    max_lives=1,
    miss_limit=3,
    extra_life_every=250,
)

VARIANTS: Dict[str, VariantConfig] = {
    variant.name: variant for variant in (DODGE, DASH, CATCH)
}


def get_variant(name: str) -> VariantConfig:
    """Look up a variant by name. Raises KeyError for unknown names."""
    return VARIANTS[name.lower()]
