from arcade_loop.components import Position, Velocity
from arcade_loop.ecs import World


def test_query_in_creation_order():
    world = World()
    ids = [world.create_entity() for _ in range(4)]
    for eid in ids:
        world.add_component(eid, Position(eid, 0))
        world.add_component(eid, Velocity())
    assert [eid for eid, _, _ in world.query(Position, Velocity)] == ids
    assert [eid for eid, _ in world.query_reversed(Position)] == ids[::-1]


def test_query_requires_all_components():
    world = World()
    a = world.create_entity()
    b = world.create_entity()
    world.add_component(a, Position())
    world.add_component(b, Position())
    world.add_component(b, Velocity())
    assert [eid for eid, *_ in world.query(Position, Velocity)] == [b]
    assert list(world.query()) == []


def test_destroy_during_iteration_is_deferred():
    world = World()
    ids = [world.create_entity() for _ in range(3)]
    for eid in ids:
        world.add_component(eid, Position())

    seen = []
    for eid, _ in world.query_reversed(Position):
        seen.append(eid)
        world.destroy_entity(ids[0])
    # The oldest entity was marked dead before the query reached it
    assert seen == [ids[2], ids[1]]
    assert world.entity_count() == 2

    world.process_dead_entities()
    assert world.get_component(ids[0], Position) is None
    assert world.count(Position) == 2


def test_clear_drops_everything():
    world = World()
    eid = world.create_entity()
    world.add_component(eid, Position())
    world.clear()
    assert world.entity_count() == 0
    assert not world.is_alive(eid)
    assert world.create_entity() > eid


def test_remove_component():
    world = World()
    eid = world.create_entity()
    world.add_component(eid, Position())
    world.remove_component(eid, Position)
    world.remove_component(eid, Velocity)
    assert not world.has_component(eid, Position)
