"""Action metadata declared by resources and consumed by the router."""

from __future__ import annotations

from collections.abc import Mapping
import re
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

DEFAULT_HTTP_RESPONSE_CODE = 200

_WORD_SEPARATORS = re.compile(r"[-_\s]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def camel_case(action_name: str) -> str:
    """Convert an action name such as ``my-action`` to ``myAction``."""
    words = [word for word in _WORD_SEPARATORS.split(action_name) if word]
    if not words:
        raise ValueError("action_name must contain at least one word character")
    head, *tail = words
    return head + "".join(word[:1].upper() + word[1:] for word in tail)


def snake_case(method_name: str) -> str:
    """Convert a camel-cased method name such as ``myAction`` to ``my_action``."""
    return _CAMEL_BOUNDARY.sub("_", method_name).lower()


class ResolvedAction(BaseModel):
    """Action metadata with every default applied."""

    model_config = ConfigDict(frozen=True)

    name: str
    method: str
    http_response_code: int
    response_key: str

    @property
    def wraps_output(self) -> bool:
        return bool(self.response_key)


class ActionDescriptor(BaseModel):
    """Declared metadata for one externally invocable action.

    Unset fields are filled in by :meth:`resolve`: the method defaults to the
    camel-cased action name, the status to 200 and the response key to the
    action name. An empty response key means the output is not wrapped.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: str | None = None
    http_response_code: int | None = Field(default=None, ge=100, le=599)
    response_key: str | None = None

    def resolve(self, action_name: str) -> ResolvedAction:
        return ResolvedAction(
            name=action_name,
            method=self.method or camel_case(action_name),
            http_response_code=self.http_response_code or DEFAULT_HTTP_RESPONSE_CODE,
            response_key=action_name if self.response_key is None else self.response_key,
        )


def freeze_actions(actions: Mapping[str, Any]) -> Mapping[str, ActionDescriptor]:
    """Coerce declared actions to descriptors behind a read-only mapping."""
    if not isinstance(actions, Mapping):
        raise TypeError("api_actions must be a mapping of action name to descriptor")
    frozen: dict[str, ActionDescriptor] = {}
    for name, declared in actions.items():
        if not isinstance(name, str) or not name:
            raise TypeError("Action names must be non-empty strings")
        if declared is None:
            frozen[name] = ActionDescriptor()
        elif isinstance(declared, ActionDescriptor):
            frozen[name] = declared
        else:
            frozen[name] = ActionDescriptor.model_validate(declared)
    return MappingProxyType(frozen)
