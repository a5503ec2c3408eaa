"""
Physics Systems
================
Functions that operate on entities with matching components.
Each system queries the World for entities with required components
and updates them.
"""

from typing import List, Tuple

from .ecs import World
from .components import (
    Position, Velocity, Friction, MaxSpeed, RectShape, CircleShape,
    PlayerControlled, PlayerTag, DashState, Invulnerable, Falling
)
from .player import InputState


# =============================================================================
# PLAYER SYSTEMS
# =============================================================================

def player_input_system(world: World, inputs: InputState):
    """
    Translate left/right/action input into player velocity.

    Acceleration-controlled players gain velocity and lose it through
    friction in movement_system; direct-controlled players have their
    velocity set outright. A held direction plus action starts a dash
    when the dash cooldown has run out.
    """
    direction = inputs.direction

    for entity_id, vel, ctrl in world.query(Velocity, PlayerControlled):
        max_speed = world.get_component(entity_id, MaxSpeed)
        top_speed = max_speed.value if max_speed else 0.0
        dash = world.get_component(entity_id, DashState)

        if dash and dash.frames_remaining > 0:
            # Dash overrides steering
            continue

        if (dash and inputs.action and direction != 0
                and dash.cooldown_remaining <= 0):
            dash.frames_remaining = dash.duration
            dash.cooldown_remaining = dash.cooldown
            vel.x = direction * top_speed * dash.multiplier
            continue

        if ctrl.direct:
            vel.x = direction * top_speed
        else:
            vel.x += direction * ctrl.acceleration


def dash_system(world: World, dt: float = 1.0):
    """Tick dash duration and cooldown timers."""
    for entity_id, dash in world.query(DashState):
        if dash.frames_remaining > 0:
            dash.frames_remaining = max(0.0, dash.frames_remaining - dt)
        if dash.cooldown_remaining > 0:
            dash.cooldown_remaining = max(0.0, dash.cooldown_remaining - dt)


def invulnerability_system(world: World, dt: float = 1.0):
    """Tick post-hit invulnerability."""
    for entity_id, invuln in world.query(Invulnerable):
        if invuln.frames_remaining > 0:
            invuln.frames_remaining = max(0.0, invuln.frames_remaining - dt)


def movement_system(world: World, dt: float = 1.0):
    """
    Integrate player positions.

    Applies friction and the max-speed clamp (raised while dashing),
    then moves by velocity * dt. Only horizontal motion exists.
    """
    for entity_id, pos, vel, _ in world.query(Position, Velocity, PlayerTag):
        dash = world.get_component(entity_id, DashState)
        dashing = dash is not None and dash.frames_remaining > 0

        friction = world.get_component(entity_id, Friction)
        if friction and not dashing:
            vel.x *= friction.value

        max_speed = world.get_component(entity_id, MaxSpeed)
        if max_speed:
            limit = max_speed.value
            if dashing:
                limit *= dash.multiplier
            vel.x = max(-limit, min(limit, vel.x))

        pos.x += vel.x * dt

        # Kill negligible velocity to prevent drift
        if abs(vel.x) < 0.005:
            vel.x = 0.0


def boundary_system(world: World, width: float):
    """Keep the whole player box inside the horizontal bounds."""
    for entity_id, pos, vel, box, _ in world.query(
        Position, Velocity, RectShape, PlayerTag
    ):
        right_limit = max(0.0, width - box.width)
        if pos.x < 0.0:
            pos.x = 0.0
            vel.x = 0.0
        elif pos.x > right_limit:
            pos.x = right_limit
            vel.x = 0.0


# =============================================================================
# FALLING ENTITY SYSTEMS
# =============================================================================

def fall_system(world: World, dt: float = 1.0, time_scale: float = 1.0):
    """Move falling entities straight down."""
    step = dt * time_scale
    for entity_id, pos, vel, _ in world.query(Position, Velocity, Falling):
        pos.y += vel.y * step


def leading_edge(world: World, entity_id: int, pos: Position) -> float:
    """Bottom edge of a falling entity."""
    circle = world.get_component(entity_id, CircleShape)
    if circle is not None:
        return pos.y + circle.radius
    box = world.get_component(entity_id, RectShape)
    return pos.y + (box.height if box else 0.0)


def exit_system(world: World, height: float, margin: float = 0.0) -> List[Tuple[int, Falling]]:
    """
    Destroy entities whose leading edge has passed the floor.

    Returns (entity_id, Falling) for each removed entity, newest first.
    Destroyed entities are skipped by later queries this step, so they
    can never also register a collision.
    """
    exited = []
    for entity_id, pos, falling in world.query_reversed(Position, Falling):
        if leading_edge(world, entity_id, pos) > height + margin:
            world.destroy_entity(entity_id)
            exited.append((entity_id, falling))
    return exited
