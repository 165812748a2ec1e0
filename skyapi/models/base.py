"""Entity type contract used by resources to resolve references."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any

from skyapi.models.errors import InvalidReferenceError
from skyapi.models.ide import decode_ide
from skyapi.models.ide import encode_ide
from skyapi.models.reference import ExternalId
from skyapi.models.reference import LoadedEntity
from skyapi.models.reference import classify_reference


class ConversionKind(str, Enum):
    """Canonical forms a reference can be converted to."""

    ID = "ID"
    IDE = "IDE"
    OBJECT = "Object"


class EntityType(ABC):
    """A domain entity type that can convert between its reference forms.

    Every conversion accepts an id (``int`` or digit-only ``str``), an
    external id, or a loaded entity, and either returns the requested form
    or raises.
    """

    name: str
    entity_class: type

    @abstractmethod
    def load(self, entity_id: int) -> Any:
        """Return the entity with ``entity_id`` or raise ``EntityNotFoundError``."""

    def identify(self, entity: Any) -> int:
        entity_id = getattr(entity, "id", None)
        if isinstance(entity_id, bool) or not isinstance(entity_id, int):
            raise InvalidReferenceError(f"{self.name} instance has no id")
        return entity_id

    def convert_to_id(self, value: Any) -> int:
        reference = classify_reference(value, self.entity_class)
        if isinstance(reference, LoadedEntity):
            return self.identify(reference.entity)
        if isinstance(reference, ExternalId):
            return decode_ide(self.name, reference.value)
        return reference.value

    def convert_to_ide(self, value: Any) -> str:
        reference = classify_reference(value, self.entity_class)
        if isinstance(reference, ExternalId):
            decode_ide(self.name, reference.value)
            return reference.value
        return encode_ide(self.name, self.convert_to_id(reference))

    def convert_to_object(self, value: Any) -> Any:
        reference = classify_reference(value, self.entity_class)
        if isinstance(reference, LoadedEntity):
            return reference.entity
        return self.load(self.convert_to_id(reference))

    def converter(self, kind: ConversionKind) -> Callable[[Any], Any]:
        """Return the bound conversion method for ``kind``."""
        if kind is ConversionKind.ID:
            return self.convert_to_id
        if kind is ConversionKind.IDE:
            return self.convert_to_ide
        return self.convert_to_object

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
