"""Caller identity supplied to resources."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field


@dataclass(frozen=True)
class Identity:
    """The app, and optionally the person, making an API call."""

    app_key: str
    person_id: int | None = None
    scopes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.app_key:
            raise ValueError("app_key is required")
        object.__setattr__(self, "scopes", frozenset(self.scopes))

    @property
    def is_person(self) -> bool:
        return self.person_id is not None

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes
