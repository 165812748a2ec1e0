"""Tagged forms of a loosely-typed entity reference."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Union

from skyapi.models.errors import InvalidReferenceError


@dataclass(frozen=True)
class RawId:
    """Internal numeric identifier."""

    value: int


@dataclass(frozen=True)
class ExternalId:
    """Public identifier handed out to API clients."""

    value: str


@dataclass(frozen=True)
class LoadedEntity:
    """An entity instance that is already in memory."""

    entity: Any


Reference = Union[RawId, ExternalId, LoadedEntity]


def classify_reference(value: Any, entity_class: type | None = None) -> Reference:
    """Tag ``value`` as an id, an external id or a loaded entity.

    Digit-only strings are treated as ids, as that is how ids arrive in
    query strings and form posts. Booleans are never ids.
    """
    if isinstance(value, (RawId, ExternalId, LoadedEntity)):
        return value
    if entity_class is not None and isinstance(value, entity_class):
        return LoadedEntity(value)
    if isinstance(value, bool):
        raise InvalidReferenceError("Boolean values are not entity references")
    if isinstance(value, int):
        return _raw_id(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise InvalidReferenceError("Empty string is not an entity reference")
        if stripped.isdigit():
            return _raw_id(int(stripped))
        return ExternalId(stripped)
    raise InvalidReferenceError(f"Unsupported reference type {type(value).__name__}")


def _raw_id(value: int) -> RawId:
    if value <= 0:
        raise InvalidReferenceError("Entity ids must be positive")
    return RawId(value)
