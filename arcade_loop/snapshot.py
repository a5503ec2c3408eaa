"""
Render Snapshot
================
Read-only view of a session handed to render sinks after each step.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .ecs import World
from .components import (
    Position, Velocity, RectShape, CircleShape, Falling, DashState, Invulnerable
)
from .state import SessionState, RunStats


@dataclass(frozen=True)
class EntityView:
    kind: str
    variant: str
    shape: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    radius: float = 0.0


@dataclass(frozen=True)
class PlayerView:
    x: float
    y: float
    width: float
    height: float
    vx: float = 0.0
    dashing: bool = False
    invulnerable: bool = False


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer needs for one frame."""
    title: str
    phase: str
    width: float
    height: float
    player: Optional[PlayerView]
    entities: Tuple[EntityView, ...]
    score: int
    best: int
    lives: int
    misses: int
    damage_mode: str
    miss_limit: int
    level: int
    speed: float
    shield_charges: int
    slow_remaining: float
    stats: RunStats


def entity_views(world: World) -> Tuple[EntityView, ...]:
    """Views of all live falling entities in creation order."""
    views = []
    for entity_id, pos, falling in world.query(Position, Falling):
        circle = world.get_component(entity_id, CircleShape)
        if circle is not None:
            views.append(EntityView(
                falling.kind, falling.variant, 'circle', pos.x, pos.y,
                width=circle.radius * 2, height=circle.radius * 2,
                radius=circle.radius,
            ))
            continue
        box = world.get_component(entity_id, RectShape)
        views.append(EntityView(
            falling.kind, falling.variant, 'rect', pos.x, pos.y,
            width=box.width if box else 0.0,
            height=box.height if box else 0.0,
        ))
    return tuple(views)


def player_view(world: World, player_id: Optional[int]) -> Optional[PlayerView]:
    if player_id is None or not world.is_alive(player_id):
        return None
    pos = world.get_component(player_id, Position)
    box = world.get_component(player_id, RectShape)
    vel = world.get_component(player_id, Velocity)
    dash = world.get_component(player_id, DashState)
    invuln = world.get_component(player_id, Invulnerable)
    return PlayerView(
        pos.x, pos.y, box.width, box.height,
        vx=vel.x if vel else 0.0,
        dashing=bool(dash and dash.frames_remaining > 0),
        invulnerable=bool(invuln and invuln.frames_remaining > 0),
    )


def build_snapshot(world: World, player_id: Optional[int], state: SessionState,
                   config, best: int) -> Snapshot:
    return Snapshot(
        title=config.title,
        phase=state.phase,
        width=config.width,
        height=config.height,
        player=player_view(world, player_id),
        entities=entity_views(world),
        score=state.score,
        best=best,
        lives=state.lives,
        misses=state.misses,
        damage_mode=config.damage_mode,
        miss_limit=config.miss_limit,
        level=state.level,
        speed=state.speed,
        shield_charges=state.shield_charges,
        slow_remaining=state.slow_remaining,
        stats=replace(state.stats),
    )
