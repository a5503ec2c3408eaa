"""
Collision Resolver
===================
Overlap tests between the player box and falling entities, and the
score/lives/power-up outcome of each contact.
"""

from typing import List, Tuple

from .ecs import World
from .components import (
    Position, RectShape, CircleShape, Falling, Invulnerable,
    HAZARD, COLLECTIBLE, POWERUP_SHIELD, POWERUP_SLOW
)
from .state import SessionState
from .variants import VariantConfig, LIVES, EXIT_REWARD, EXIT_MISS


# =============================================================================
# GEOMETRY
# =============================================================================

def rects_intersect(ax: float, ay: float, aw: float, ah: float,
                    bx: float, by: float, bw: float, bh: float) -> bool:
    """AABB overlap. Touching edges do not count."""
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def circle_hits_rect(cx: float, cy: float, radius: float,
                     rx: float, ry: float, rw: float, rh: float) -> bool:
    """True when the rect point closest to the centre lies within radius."""
    nearest_x = max(rx, min(cx, rx + rw))
    nearest_y = max(ry, min(cy, ry + rh))
    dx = cx - nearest_x
    dy = cy - nearest_y
    return dx * dx + dy * dy <= radius * radius


def overlaps_player(world: World, entity_id: int, pos: Position,
                    player_pos: Position, player_box: RectShape) -> bool:
    """Test one entity against the player box using its own shape."""
    circle = world.get_component(entity_id, CircleShape)
    if circle is not None:
        return circle_hits_rect(
            pos.x, pos.y, circle.radius,
            player_pos.x, player_pos.y, player_box.width, player_box.height
        )
    box = world.get_component(entity_id, RectShape)
    if box is None:
        return False
    return rects_intersect(
        player_pos.x, player_pos.y, player_box.width, player_box.height,
        pos.x, pos.y, box.width, box.height
    )


def collision_system(world: World, player_id: int) -> List[Tuple[int, Falling, Position]]:
    """
    Find every live falling entity touching the player, newest first.

    Entities already destroyed this step (e.g. by exit_system) are
    skipped by the query.
    """
    player_pos = world.get_component(player_id, Position)
    player_box = world.get_component(player_id, RectShape)
    if player_pos is None or player_box is None:
        return []

    hits = []
    for entity_id, pos, falling in world.query_reversed(Position, Falling):
        if overlaps_player(world, entity_id, pos, player_pos, player_box):
            hits.append((entity_id, falling, pos))
    return hits


# =============================================================================
# OUTCOMES
# =============================================================================

def is_fatal(state: SessionState, config: VariantConfig) -> bool:
    """Has the run used up its lives or misses?"""
    if config.damage_mode == LIVES:
        return state.lives <= 0
    return state.misses >= config.miss_limit


def _take_damage(state: SessionState, config: VariantConfig):
    if config.damage_mode == LIVES:
        state.lives = max(0, state.lives - 1)
    else:
        state.misses += 1


def resolve_collisions(
    world: World,
    player_id: int,
    state: SessionState,
    config: VariantConfig,
) -> List[dict]:
    """
    Apply the outcome of every player contact this step.

    Stops at the first contact that ends the run. Returns event dicts
    for the front-end.
    """
    events = []
    invuln = world.get_component(player_id, Invulnerable)

    for entity_id, falling, pos in collision_system(world, player_id):
        event = {'kind': falling.kind, 'x': pos.x, 'y': pos.y}

        if falling.variant == HAZARD:
            if invuln is not None and invuln.frames_remaining > 0:
                continue
            world.destroy_entity(entity_id)

            if state.shield_charges > 0:
                state.shield_charges -= 1
                state.stats.shields_used += 1
                events.append(dict(event, type='shield_used'))
                continue

            _take_damage(state, config)
            state.stats.hits += 1
            events.append(dict(event, type='hit'))

            if is_fatal(state, config):
                break
            if invuln is not None and config.player.invulnerable_steps > 0:
                invuln.frames_remaining = config.player.invulnerable_steps

        elif falling.variant == COLLECTIBLE:
            world.destroy_entity(entity_id)
            reward = config.spawn_class(falling.kind).collect_reward(state.level)
            state.score += reward
            state.stats.collected += 1
            events.append(dict(event, type='collected', points=reward))

        elif falling.variant == POWERUP_SHIELD:
            world.destroy_entity(entity_id)
            state.shield_charges = 1
            state.stats.powerups += 1
            events.append(dict(event, type='shield_gained'))

        elif falling.variant == POWERUP_SLOW:
            world.destroy_entity(entity_id)
            state.slow_remaining = config.slow_duration
            state.stats.powerups += 1
            events.append(dict(event, type='slow_started'))

    return events


def resolve_exits(
    exited: List[Tuple[int, Falling]],
    state: SessionState,
    config: VariantConfig,
) -> List[dict]:
    """Apply the exit rule of every entity that left through the floor."""
    events = []
    for entity_id, falling in exited:
        spawn_class = config.spawn_class(falling.kind)

        if spawn_class.on_exit == EXIT_REWARD:
            state.score += spawn_class.exit_reward
            state.stats.dodged += 1
            events.append({'type': 'dodged', 'kind': falling.kind,
                           'points': spawn_class.exit_reward})
        elif spawn_class.on_exit == EXIT_MISS:
            _take_damage(state, config)
            state.stats.missed += 1
            events.append({'type': 'missed', 'kind': falling.kind})
            if is_fatal(state, config):
                break
        elif falling.variant == HAZARD:
            state.stats.dodged += 1
    return events
