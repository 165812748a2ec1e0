"""Output accumulator for a single resource invocation."""

from __future__ import annotations

from typing import Any


class Response:
    """Holds the payload a resource action produced."""

    def __init__(self) -> None:
        self._output: Any = None
        self._has_output = False

    @property
    def output(self) -> Any:
        return self._output

    @property
    def has_output(self) -> bool:
        return self._has_output

    def set_output(self, value: Any) -> Response:
        """Replace the payload; the last value set is the one serialized."""
        self._output = value
        self._has_output = True
        return self
