"""Registry of the entity types resources may reference."""

from __future__ import annotations

from skyapi.models.base import EntityType


class EntityTypeRegistry:
    """Name-addressed collection of entity types."""

    def __init__(self) -> None:
        self._types: dict[str, EntityType] = {}

    def register(self, entity_type: EntityType) -> EntityType:
        if not isinstance(entity_type, EntityType):
            raise TypeError(f"Expected EntityType, got {type(entity_type).__name__}")
        existing = self._types.get(entity_type.name)
        if existing is not None and existing is not entity_type:
            raise ValueError(f"Entity type `{entity_type.name}` is already registered")
        self._types[entity_type.name] = entity_type
        return entity_type

    def is_entity_type(self, name: str | EntityType) -> bool:
        if isinstance(name, EntityType):
            return self._types.get(name.name) is name
        return isinstance(name, str) and name in self._types

    def get(self, name: str | EntityType) -> EntityType:
        if not self.is_entity_type(name):
            raise KeyError(name)
        if isinstance(name, EntityType):
            return name
        return self._types[name]

    def names(self) -> list[str]:
        return sorted(self._types)


entity_types = EntityTypeRegistry()


def register_entity_type(entity_type: EntityType) -> EntityType:
    return entity_types.register(entity_type)


def is_entity_type(name: str | EntityType) -> bool:
    return entity_types.is_entity_type(name)


def get_entity_type(name: str | EntityType) -> EntityType:
    return entity_types.get(name)
