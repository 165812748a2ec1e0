"""Structured validation error values."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class Error:
    """One code-addressable validation failure.

    ``params`` holds the merged attributes of the error: usually a
    ``message``, optionally the ``fields`` it concerns and a ``type``
    classifier, plus whatever keys a resource finds useful for its clients.
    """

    code: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.code, str) or not self.code:
            raise TypeError("Error code must be a non-empty string")
        if not isinstance(self.params, Mapping):
            raise TypeError("Error params must be a mapping")
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @property
    def message(self) -> str | None:
        return self.params.get("message")

    @property
    def fields(self) -> tuple[str, ...]:
        raw = self.params.get("fields")
        if raw is None:
            return ()
        if isinstance(raw, str) or not isinstance(raw, Iterable):
            return (raw,)
        return tuple(raw)

    @property
    def type(self) -> str | None:
        return self.params.get("type")

    def get(self, key: str, default: Any = None) -> Any:
        return self.params.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.params[key]

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dict suitable for serialization."""
        data = dict(self.params)
        if "fields" in data:
            data["fields"] = list(self.fields)
        data["code"] = self.code
        return data
