"""Error envelope schemas shared across API handlers."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict


class ErrorDetail(BaseModel):
    """Single validation issue, keyed by its error code.

    Resources may attach arbitrary extra keys to an error; they are kept and
    rendered next to the standard ones.
    """

    model_config = ConfigDict(extra="allow")

    code: str
    message: str | None = None
    fields: list[str] | None = None
    type: str | None = None


class ErrorObject(BaseModel):
    """Canonical error payload object."""

    code: str
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    error: ErrorObject
