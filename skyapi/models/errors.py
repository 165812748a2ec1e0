"""Failures raised by the entity layer."""

from __future__ import annotations


class EntityError(Exception):
    """Base error raised by entity type conversions."""


class InvalidReferenceError(EntityError):
    """The value cannot be interpreted as a reference to this entity type."""


class EntityNotFoundError(EntityError):
    """The referenced entity does not exist."""
