"""
Entity-Component-System Core
=============================
Integer entity IDs and per-type component dictionaries.

Component stores are plain dicts, so queries come back in creation
order. Destruction is deferred to the end of the step, which makes it
safe to destroy entities while iterating a query.
"""

from typing import Dict, Type, TypeVar, Optional, Iterator, Tuple, Any, Set


# Type variable for component types
C = TypeVar('C')


class World:
    """
    The ECS World manages all entities and their components.

    Entities are integer IDs. Components are stored in dictionaries
    keyed by entity ID, with one dict per component type.
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Dict[int, None] = {}  # ordered set
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Set[int] = set()  # Marked for removal

    def create_entity(self) -> int:
        """Create a new entity and return its ID."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities[entity_id] = None
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for destruction (processed at end of step)."""
        if entity_id in self._entities:
            self._dead_entities.add(entity_id)

    def process_dead_entities(self) -> None:
        """Remove all entities marked for destruction."""
        for entity_id in self._dead_entities:
            if entity_id in self._entities:
                del self._entities[entity_id]
                for component_store in self._components.values():
                    component_store.pop(entity_id, None)
        self._dead_entities.clear()

    def clear(self) -> None:
        """Drop every entity. IDs keep counting up."""
        self._entities.clear()
        self._components.clear()
        self._dead_entities.clear()

    def add_component(self, entity_id: int, component: Any) -> None:
        """Add a component to an entity."""
        self._components.setdefault(type(component), {})[entity_id] = component

    def remove_component(self, entity_id: int, component_type: Type[C]) -> None:
        """Remove a component from an entity."""
        if component_type in self._components:
            self._components[component_type].pop(entity_id, None)

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        if component_type in self._components:
            return self._components[component_type].get(entity_id)
        return None

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        """Check if an entity has a specific component."""
        if component_type in self._components:
            return entity_id in self._components[component_type]
        return False

    def _matching(self, component_types: Tuple[Type, ...]) -> list:
        """Live entity IDs (creation order) holding every component type."""
        if not component_types:
            return []
        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if not store:
                return []
            stores.append(store)

        first, rest = stores[0], stores[1:]
        return [
            entity_id for entity_id in first
            if entity_id not in self._dead_entities
            and all(entity_id in store for store in rest)
        ]

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Query for all entities that have ALL specified component types.

        Yields tuples of (entity_id, component1, component2, ...) in
        creation order. Entities destroyed mid-iteration are skipped.
        """
        for entity_id in self._matching(component_types):
            if entity_id in self._dead_entities:
                continue
            yield (entity_id,) + tuple(
                self._components[ct][entity_id] for ct in component_types
            )

    def query_reversed(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """Same as query(), newest entity first."""
        for entity_id in reversed(self._matching(component_types)):
            if entity_id in self._dead_entities:
                continue
            yield (entity_id,) + tuple(
                self._components[ct][entity_id] for ct in component_types
            )

    def count(self, *component_types: Type) -> int:
        """Number of live entities holding every component type."""
        return len(self._matching(component_types))

    def entity_count(self) -> int:
        """Return the number of active entities."""
        return len(self._entities) - len(self._dead_entities)

    def is_alive(self, entity_id: int) -> bool:
        """Check if an entity is alive (exists and not marked for death)."""
        return entity_id in self._entities and entity_id not in self._dead_entities
