"""Entity types backed by SQLAlchemy declarative models."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from skyapi.db.base import get_session_factory
from skyapi.models.base import EntityType
from skyapi.models.errors import EntityNotFoundError
from skyapi.models.errors import InvalidReferenceError


class OrmEntityType(EntityType):
    """Resolve references against rows of a mapped class.

    The mapped class must have a single integer primary key. Loaded entities
    are returned detached, with their column attributes populated.
    """

    def __init__(
        self,
        model: type,
        *,
        name: str | None = None,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        primary_key = inspect(model).primary_key
        if len(primary_key) != 1:
            raise ValueError(f"{model.__name__} must have a single-column primary key")
        self.entity_class = model
        self.name = name or model.__name__
        self._id_attribute = primary_key[0].key
        self._session_factory = session_factory

    def _session(self) -> Session:
        factory = self._session_factory or get_session_factory()
        return factory()

    def identify(self, entity: Any) -> int:
        if not isinstance(entity, self.entity_class):
            raise InvalidReferenceError(f"Expected {self.name} instance")
        entity_id = getattr(entity, self._id_attribute)
        if entity_id is None:
            raise InvalidReferenceError(f"{self.name} instance has not been persisted")
        return entity_id

    def load(self, entity_id: int) -> Any:
        with self._session() as session:
            entity = session.get(self.entity_class, entity_id)
            if entity is None:
                raise EntityNotFoundError(f"{self.name} {entity_id} not found")
            session.expunge(entity)
        return entity
