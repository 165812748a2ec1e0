"""Invoke a resource action from its registered metadata."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any

from skyapi.core.errors import InvalidActionMethodError
from skyapi.core.errors import ResourceDefinitionError
from skyapi.resource.actions import ResolvedAction
from skyapi.resource.actions import snake_case
from skyapi.resource.base import Resource
from skyapi.resource.identity import Identity
from skyapi.resource.response import Response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """Status and body the router should serialize for a successful action."""

    action: ResolvedAction
    status_code: int
    body: Any


def _bind_method(resource: Resource, method_name: str) -> Callable[..., Any]:
    for candidate in (method_name, snake_case(method_name)):
        if candidate.startswith("_"):
            continue
        method = getattr(resource, candidate, None)
        if callable(method):
            return method
    raise InvalidActionMethodError(f"{type(resource).__name__} has no action method `{method_name}`")


def _payload(resource: Resource, returned: Any) -> Any:
    if isinstance(returned, Response):
        return returned.output
    if returned is not None:
        return returned
    if resource.response is not None and resource.response.has_output:
        return resource.response.output
    return resource.public_state()


def invoke_action(
    resource_cls: type[Resource],
    action_name: str,
    params: Mapping[str, Any] | None = None,
    identity: Identity | None = None,
) -> ActionResult:
    """Construct ``resource_cls`` and run the method mapped to ``action_name``.

    The method receives the request params. Its payload is the value it
    returns; when it returns ``None`` (or a :class:`Response`) the resource's
    own output is used, falling back to its public state. The payload is
    wrapped under the action's response key unless that key is empty.

    ``ActionNotFoundError`` and the resource exceptions propagate unchanged.
    """
    action = resource_cls.get_action(action_name).resolve(action_name)
    params = params or {}
    logger.info("Invoking action=%s on resource=%s", action.name, resource_cls.__name__)

    try:
        resource = resource_cls(params, identity)
        method = _bind_method(resource, action.method)
        returned = method(params)
    except ResourceDefinitionError:
        logger.exception("Action %s on %s is misconfigured", action.name, resource_cls.__name__)
        raise

    payload = _payload(resource, returned)
    body = {action.response_key: payload} if action.wraps_output else payload
    logger.info(
        "Completed action=%s on resource=%s with status=%s",
        action.name,
        resource_cls.__name__,
        action.http_response_code,
    )
    return ActionResult(action=action, status_code=action.http_response_code, body=body)
