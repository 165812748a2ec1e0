"""Entity layer imports for reference resolution."""

from skyapi.models.base import ConversionKind
from skyapi.models.base import EntityType
from skyapi.models.errors import EntityError
from skyapi.models.errors import EntityNotFoundError
from skyapi.models.errors import InvalidReferenceError
from skyapi.models.registry import EntityTypeRegistry
from skyapi.models.registry import entity_types
from skyapi.models.registry import get_entity_type
from skyapi.models.registry import is_entity_type
from skyapi.models.registry import register_entity_type

__all__ = [
    "ConversionKind",
    "EntityError",
    "EntityNotFoundError",
    "EntityType",
    "EntityTypeRegistry",
    "InvalidReferenceError",
    "entity_types",
    "get_entity_type",
    "is_entity_type",
    "register_entity_type",
]
