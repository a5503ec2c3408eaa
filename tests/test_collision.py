from arcade_loop.collision import (
    rects_intersect, circle_hits_rect, collision_system,
    resolve_collisions, resolve_exits, is_fatal
)
from arcade_loop.components import (
    Position, Invulnerable, HAZARD, COLLECTIBLE, POWERUP_SHIELD, POWERUP_SLOW
)
from arcade_loop.ecs import World
from arcade_loop.player import create_player
from arcade_loop.state import SessionState
from arcade_loop.systems import exit_system
from arcade_loop.variants import MISSES, PlayerConfig, SpawnClass, EXIT_MISS, EXIT_REWARD

from conftest import make_config, place


def setup(config):
    world = World()
    pid = create_player(world, config)
    pos = world.get_component(pid, Position)
    state = SessionState(lives=config.lives)
    return world, pid, pos, state


def types(events):
    return [event['type'] for event in events]


# =============================================================================
# GEOMETRY
# =============================================================================

def test_rects_overlap():
    assert rects_intersect(0, 0, 10, 10, 5, 5, 10, 10)
    assert rects_intersect(0, 0, 10, 10, 2, 2, 2, 2)


def test_touching_rects_do_not_overlap():
    assert not rects_intersect(0, 0, 10, 10, 10, 0, 10, 10)
    assert not rects_intersect(0, 0, 10, 10, 0, 10, 10, 10)
    assert not rects_intersect(0, 0, 10, 10, 30, 30, 5, 5)


def test_circle_centre_inside_rect():
    assert circle_hits_rect(5, 5, 1, 0, 0, 10, 10)


def test_circle_near_edge():
    assert circle_hits_rect(-3, 5, 3, 0, 0, 10, 10)
    assert not circle_hits_rect(-3.01, 5, 3, 0, 0, 10, 10)


def test_circle_near_corner_uses_distance():
    # Corner at (0, 0); centre at (-3, -4) is exactly 5 away
    assert circle_hits_rect(-3, -4, 5, 0, 0, 10, 10)
    assert not circle_hits_rect(-3, -4, 4.9, 0, 0, 10, 10)
    # Inside the bounding box of the circle but outside the circle itself
    assert not circle_hits_rect(-4, -4, 5, 0, 0, 10, 10)


# =============================================================================
# OUTCOMES
# =============================================================================

def test_hazard_costs_a_life(config):
    world, pid, pos, state = setup(config)
    rock = place(world, 'rock', HAZARD, pos.x, pos.y)
    events = resolve_collisions(world, pid, state, config)
    assert types(events) == ['hit']
    assert state.lives == config.lives - 1
    assert not world.is_alive(rock)


def test_shield_absorbs_exactly_one_hit(config):
    world, pid, pos, state = setup(config)
    state.shield_charges = 1
    place(world, 'rock', HAZARD, pos.x, pos.y)
    place(world, 'rock', HAZARD, pos.x + 5, pos.y)

    events = resolve_collisions(world, pid, state, config)

    assert types(events) == ['shield_used', 'hit']
    assert state.shield_charges == 0
    assert state.lives == config.lives - 1
    assert state.stats.shields_used == 1


def test_invulnerable_player_ignores_hazards():
    config = make_config(player=PlayerConfig(width=40, height=20, invulnerable_steps=30))
    world, pid, pos, state = setup(config)
    place(world, 'rock', HAZARD, pos.x, pos.y)
    resolve_collisions(world, pid, state, config)
    assert world.get_component(pid, Invulnerable).frames_remaining == 30

    second = place(world, 'rock', HAZARD, pos.x, pos.y)
    world.process_dead_entities()
    assert resolve_collisions(world, pid, state, config) == []
    assert state.lives == config.lives - 1
    assert world.is_alive(second)


def test_last_life_is_fatal_and_stops_processing():
    config = make_config(lives=1, max_lives=1)
    world, pid, pos, state = setup(config)
    gem = place(world, 'gem', COLLECTIBLE, pos.x, pos.y)
    place(world, 'rock', HAZARD, pos.x, pos.y)
    events = resolve_collisions(world, pid, state, config)
    assert types(events) == ['hit']
    assert is_fatal(state, config)
    assert state.score == 0
    assert world.is_alive(gem)


def test_collectible_reward_scales_with_level(config):
    world, pid, pos, state = setup(config)
    state.level = 3
    gem = place(world, 'gem', COLLECTIBLE, pos.x, pos.y)
    events = resolve_collisions(world, pid, state, config)
    assert state.score == 10 + 5 * 2
    assert events[0]['points'] == 20
    assert not world.is_alive(gem)


def test_shield_pickup_sets_single_charge(config):
    world, pid, pos, state = setup(config)
    place(world, 'bubble', POWERUP_SHIELD, pos.x, pos.y)
    place(world, 'bubble', POWERUP_SHIELD, pos.x + 5, pos.y)
    resolve_collisions(world, pid, state, config)
    assert state.shield_charges == 1


def test_slow_pickup_starts_timer(config):
    world, pid, pos, state = setup(config)
    place(world, 'hourglass', POWERUP_SLOW, pos.x, pos.y)
    assert types(resolve_collisions(world, pid, state, config)) == ['slow_started']
    assert state.slow_remaining == config.slow_duration


def test_circle_entities_collide(config):
    world, pid, pos, state = setup(config)
    place(world, 'rock', HAZARD, pos.x - 4, pos.y - 4, radius=6)
    assert len(collision_system(world, pid)) == 1


def test_far_entities_do_not_collide(config):
    world, pid, pos, state = setup(config)
    place(world, 'rock', HAZARD, 0, 0)
    assert resolve_collisions(world, pid, state, config) == []
    assert state.lives == config.lives


def test_newest_entity_resolved_first(config):
    world, pid, pos, state = setup(config)
    first = place(world, 'gem', COLLECTIBLE, pos.x, pos.y)
    second = place(world, 'gem', COLLECTIBLE, pos.x, pos.y)
    assert [eid for eid, _, _ in collision_system(world, pid)] == [second, first]


def test_exit_and_collision_are_exclusive():
    # Player flush with the floor so a tall block can touch it while exiting
    config = make_config(player=PlayerConfig(width=40, height=20, bottom_offset=20),
                         exit_margin=0)
    world, pid, pos, state = setup(config)
    rock = place(world, 'rock', HAZARD, pos.x, 630, height=30)

    exited = exit_system(world, config.height, config.exit_margin)
    resolve_exits(exited, state, config)
    events = resolve_collisions(world, pid, state, config)

    assert [eid for eid, _ in exited] == [rock]
    assert events == []
    assert state.lives == config.lives
    assert state.stats.hits == 0
    assert state.stats.dodged == 1


def test_exit_reward():
    config = make_config(spawn_classes=(
        SpawnClass(kind='rock', variant=HAZARD, on_exit=EXIT_REWARD, exit_reward=5),
    ))
    world, pid, pos, state = setup(config)
    place(world, 'rock', HAZARD, 0, 700)
    events = resolve_exits(exit_system(world, config.height, 4), state, config)
    assert state.score == 5
    assert types(events) == ['dodged']


def test_missed_collectible_counts_toward_limit():
    config = make_config(
        damage_mode=MISSES, miss_limit=2,
        spawn_classes=(SpawnClass(kind='gem', variant=COLLECTIBLE, on_exit=EXIT_MISS),),
    )
    world, pid, pos, state = setup(config)
    place(world, 'gem', COLLECTIBLE, 0, 700)
    resolve_exits(exit_system(world, config.height, 4), state, config)
    assert state.misses == 1
    assert not is_fatal(state, config)

    world.process_dead_entities()
    place(world, 'gem', COLLECTIBLE, 0, 700)
    events = resolve_exits(exit_system(world, config.height, 4), state, config)
    assert types(events) == ['missed']
    assert is_fatal(state, config)


def test_hazard_adds_miss_in_miss_mode():
    config = make_config(damage_mode=MISSES, miss_limit=3)
    world, pid, pos, state = setup(config)
    place(world, 'rock', HAZARD, pos.x, pos.y)
    resolve_collisions(world, pid, state, config)
    assert state.misses == 1
    assert state.lives == config.lives
