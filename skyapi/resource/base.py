"""Abstract base class for REST-exposed resources."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from collections.abc import Sequence
import inspect
import logging
from types import MappingProxyType
from typing import Any
from typing import ClassVar
from typing import NoReturn
from typing import get_origin

from skyapi.core.errors import AccessDeniedException
from skyapi.core.errors import ActionNotFoundError
from skyapi.core.errors import InvalidConversionError
from skyapi.core.errors import InvalidEntityTypeError
from skyapi.core.errors import InvalidErrorCodeError
from skyapi.core.errors import NotFoundException
from skyapi.core.errors import UnknownFieldError
from skyapi.core.errors import ValidationException
from skyapi.models.base import ConversionKind
from skyapi.models.base import EntityType
from skyapi.models.registry import EntityTypeRegistry
from skyapi.models.registry import entity_types
from skyapi.resource.actions import ActionDescriptor
from skyapi.resource.actions import freeze_actions
from skyapi.resource.error import Error
from skyapi.resource.identity import Identity
from skyapi.resource.response import Response

logger = logging.getLogger(__name__)

_REGISTRY_NAMES = frozenset({"api_actions", "possible_errors", "entity_registry", "public_fields"})


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _freeze_errors(possible_errors: Mapping[str, Any]) -> Mapping[str, Any]:
    if not isinstance(possible_errors, Mapping):
        raise TypeError("possible_errors must be a mapping of error code to attributes")
    return MappingProxyType(
        {
            code: MappingProxyType(dict(attributes)) if isinstance(attributes, Mapping) else attributes
            for code, attributes in possible_errors.items()
        }
    )


class Resource(ABC):
    """Contract every REST-exposed resource implements.

    Subclasses declare two class-level registries:

    ``api_actions``
        action name -> :class:`ActionDescriptor` (or a dict of its fields),
        listing the methods the router may invoke::

            api_actions = {
                "my-action": {
                    "method": "myMethod",        # defaults to camel-cased action
                    "http_response_code": 201,   # defaults to 200
                    "response_key": "",          # defaults to action; "" = no wrapper
                },
            }

    ``possible_errors``
        error code -> default attributes of that error::

            possible_errors = {
                "my_error_code": {
                    "message": "The value for my_input_field is not valid.",
                    "fields": ["my_input_field"],
                    "type": "invalid",
                },
            }

    Both are frozen when the subclass is created. Public state that the
    actions expose is declared as class annotations; see :meth:`set`.
    """

    api_actions: ClassVar[Mapping[str, ActionDescriptor]] = MappingProxyType({})
    possible_errors: ClassVar[Mapping[str, Mapping[str, Any]]] = MappingProxyType({})
    entity_registry: ClassVar[EntityTypeRegistry] = entity_types
    public_fields: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "api_actions" in cls.__dict__:
            cls.api_actions = freeze_actions(cls.__dict__["api_actions"])
        if "possible_errors" in cls.__dict__:
            cls.possible_errors = _freeze_errors(cls.__dict__["possible_errors"])
        cls.public_fields = cls._collect_public_fields()

    @classmethod
    def _collect_public_fields(cls) -> tuple[str, ...]:
        names: dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            if klass is object or klass is Resource or not issubclass(klass, Resource):
                continue
            for name, annotation in inspect.get_annotations(klass).items():
                if name in _REGISTRY_NAMES or name.startswith("_") or _is_class_var(annotation):
                    continue
                names[name] = None
        return tuple(names)

    @abstractmethod
    def __init__(self, params: Mapping[str, Any], identity: Identity | None = None) -> None:
        """Authorize ``identity`` and load the requested record.

        Implementations call ``super().__init__(params, identity)`` first,
        then either populate every public field or raise through
        :meth:`access_denied`, :meth:`not_found` or :meth:`error`.
        ``identity`` is only ``None`` when a developer constructs the
        resource directly rather than through the REST API.
        """
        self.identity = identity
        self.errors: list[Error] = []
        self._response: Response | None = None

    @property
    def response(self) -> Response | None:
        return self._response

    def set(self, values: Mapping[str, Any]) -> Resource:
        """Assign each value to the public field of the same name."""
        if not isinstance(values, Mapping):
            raise TypeError("set() expects a mapping of field name to value")
        unknown = [name for name in values if name not in self.public_fields]
        if unknown:
            raise UnknownFieldError(f"{type(self).__name__} has no public field(s): {', '.join(map(str, unknown))}")
        for name, value in values.items():
            setattr(self, name, value)
        return self

    def public_state(self) -> dict[str, Any]:
        """Return the current value of every public field."""
        return {name: getattr(self, name, None) for name in self.public_fields}

    def output(self, value: Any) -> Response:
        """Record ``value`` as this invocation's payload. The last call wins."""
        if self._response is None:
            self._response = Response()
        return self._response.set_output(value)

    @staticmethod
    def arrayify(args: Any, key: str) -> Mapping[str, Any]:
        """Allow ``params`` to be passed as a bare value, e.g. ``5`` for ``{"id": 5}``."""
        if isinstance(args, Mapping):
            return args
        return {key: args}

    @classmethod
    def get_action(cls, action_name: str) -> ActionDescriptor:
        try:
            return cls.api_actions[action_name]
        except (KeyError, TypeError):
            raise ActionNotFoundError(cls.__name__, action_name) from None

    @classmethod
    def get_error(cls, error_code: str, params: Mapping[str, Any] | None = None) -> Error:
        """Build the :class:`Error` for ``error_code``, with ``params`` overriding its defaults."""
        defaults = cls.possible_errors.get(error_code) if isinstance(error_code, str) else None
        if not isinstance(defaults, Mapping):
            raise InvalidErrorCodeError(f"[{error_code!r}] is not a valid error code for {cls.__name__}")
        return Error(error_code, {**defaults, **(params or {})})

    def add_error(self, error_code: str, params: Mapping[str, Any] | None = None) -> None:
        """Stage an error to be raised later with the others, see :meth:`raise_errors`."""
        self.errors.append(self.get_error(error_code, params))

    def raise_errors(self) -> None:
        """Raise every staged error at once, if any were staged."""
        if self.errors:
            self.error(self.errors)

    @classmethod
    def error(cls, error: str | Error | Sequence[Error], params: Mapping[str, Any] | None = None) -> NoReturn:
        """Stop execution with a :class:`ValidationException`.

        ``error`` is an error code (resolved with ``params``), an
        :class:`Error`, or a sequence of errors.
        """
        if isinstance(error, str):
            errors = [cls.get_error(error, params)]
        elif isinstance(error, Error):
            errors = [error]
        elif isinstance(error, Sequence):
            errors = list(error)
        else:
            raise TypeError(f"Cannot raise validation errors from {type(error).__name__}")
        raise ValidationException(errors)

    @staticmethod
    def access_denied(message: str | None = None) -> NoReturn:
        raise AccessDeniedException(message)

    @staticmethod
    def not_found(message: str | None = None) -> NoReturn:
        raise NotFoundException(message)

    @classmethod
    def convert_to_object(cls, entity_type: str | EntityType, value: Any, error_code: str) -> Any:
        """Return the loaded entity referenced by ``value`` (id, IDE or entity)."""
        return cls.model_convert_to(ConversionKind.OBJECT, entity_type, value, error_code)

    @classmethod
    def convert_to_id(cls, entity_type: str | EntityType, value: Any, error_code: str) -> int:
        """Return the id referenced by ``value`` (id, IDE or entity)."""
        return cls.model_convert_to(ConversionKind.ID, entity_type, value, error_code)

    @classmethod
    def convert_to_ide(cls, entity_type: str | EntityType, value: Any, error_code: str) -> str:
        """Return the IDE referenced by ``value`` (id, IDE or entity)."""
        return cls.model_convert_to(ConversionKind.IDE, entity_type, value, error_code)

    @classmethod
    def model_convert_to(
        cls,
        kind: ConversionKind | str,
        entity_type: str | EntityType,
        value: Any,
        error_code: str,
    ) -> Any:
        """Delegate a reference conversion to the entity type.

        Unknown entity types and conversion kinds are programming errors.
        Any failure of the conversion itself becomes a validation error
        built from ``error_code``.
        """
        if not cls.entity_registry.is_entity_type(entity_type):
            raise InvalidEntityTypeError(f"[{entity_type}] is not a valid entity type")
        try:
            kind = ConversionKind(kind)
        except ValueError:
            raise InvalidConversionError(f"[convertTo{kind}] is not a valid conversion") from None

        converter = cls.entity_registry.get(entity_type).converter(kind)
        try:
            return converter(value)
        except Exception:
            logger.debug(
                "Reference conversion to %s failed for entity_type=%s error_code=%s",
                kind.value,
                entity_type,
                error_code,
                exc_info=True,
            )
        cls.error(error_code)
