"""
Entity Spawner
===============
Cooldown-driven procedural spawning of falling entities.

Each spawn class ticks its own cooldown. When it runs out, one entity
is created (plus an occasional bonus entity at high speed) and the
cooldown is reset to an interval that shrinks with difficulty.
"""

import random
from typing import Dict, List

from .ecs import World
from .components import Position, Velocity, RectShape, CircleShape, Falling
from .variants import SpawnClass, VariantConfig


def spawn_entity(
    world: World,
    spawn_class: SpawnClass,
    field_width: float,
    speed: float,
    rng: random.Random,
) -> int:
    """
    Create one entity of spawn_class just above the top edge.

    Horizontal position is uniform over the span that keeps the whole
    shape inside the playfield; vertical speed is uniform in the class
    range scaled by the current speed multiplier.
    """
    entity_id = world.create_entity()

    if spawn_class.shape == 'circle':
        radius = rng.uniform(*spawn_class.radius)
        x = rng.uniform(radius, max(radius, field_width - radius))
        y = -radius
        world.add_component(entity_id, CircleShape(radius))
    else:
        width = rng.uniform(*spawn_class.width)
        height = rng.uniform(*spawn_class.height)
        x = rng.uniform(0.0, max(0.0, field_width - width))
        y = -height
        world.add_component(entity_id, RectShape(width, height))

    vy = rng.uniform(*spawn_class.vy) * speed

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(0.0, vy))
    world.add_component(entity_id, Falling(spawn_class.kind, spawn_class.variant))
    return entity_id


def spawn_system(
    world: World,
    config: VariantConfig,
    cooldowns: Dict[str, float],
    speed: float,
    level: int,
    dt: float,
    rng: random.Random,
) -> List[int]:
    """
    Tick every spawn class cooldown and spawn what is due.

    Classes gated behind a higher level keep their cooldown frozen.
    Returns the IDs of all entities created this step.
    """
    spawned = []

    for spawn_class in config.spawn_classes:
        if level < spawn_class.min_level:
            continue

        kind = spawn_class.kind
        cooldowns[kind] = cooldowns.get(kind, 0.0) - dt
        if cooldowns[kind] > 0:
            continue

        cooldowns[kind] = spawn_class.interval(speed)

        if spawn_class.spawn_chance < 1.0 and rng.random() >= spawn_class.spawn_chance:
            continue

        spawned.append(spawn_entity(world, spawn_class, config.width, speed, rng))

        # Extra simultaneous entity at higher speeds
        if spawn_class.bonus is not None:
            chance = spawn_class.bonus.probability(speed)
            if chance > 0 and rng.random() < chance:
                spawned.append(
                    spawn_entity(world, spawn_class, config.width, speed, rng)
                )

    return spawned
