"""Resource exceptions and API error envelope handler registration."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from skyapi.resource.error import Error
from skyapi.schemas.error import ErrorDetail
from skyapi.schemas.error import ErrorObject
from skyapi.schemas.error import ErrorResponse


def _error_detail(error: Error) -> ErrorDetail:
    data = error.to_dict()
    for key in ("message", "type"):
        if data.get(key) is not None:
            data[key] = str(data[key])
    if "fields" in data:
        data["fields"] = [str(name) for name in data["fields"]]
    return ErrorDetail(**data)


class ResourceException(Exception):
    """Base exception for failures a resource reports to its caller."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "bad_request"
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def details(self) -> list[ErrorDetail] | None:
        return None


class ValidationException(ResourceException):
    """Aggregate of one or more validation errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Request validation failed"

    def __init__(self, errors: Iterable[Error]) -> None:
        errors = tuple(errors)
        if not errors:
            raise ValueError("ValidationException requires at least one error")
        for error in errors:
            if not isinstance(error, Error):
                raise TypeError(f"Expected Error, got {type(error).__name__}")
        self.errors = errors
        super().__init__()

    def details(self) -> list[ErrorDetail]:
        return [_error_detail(error) for error in self.errors]

    def __str__(self) -> str:
        codes = ", ".join(error.code for error in self.errors)
        return f"{self.message}: {codes}"


class AccessDeniedException(ResourceException):
    """The identity is not allowed to access the requested record or action."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Access denied"


class NotFoundException(ResourceException):
    """The requested record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class ActionNotFoundError(LookupError):
    """No action with the requested name is registered on a resource."""

    def __init__(self, resource: str, action_name: str) -> None:
        super().__init__(f"[{action_name}] is not a valid action for {resource}")
        self.resource = resource
        self.action_name = action_name


class ResourceDefinitionError(RuntimeError):
    """A resource type is misconfigured or misused by its own code.

    These are defects, never feedback for API clients.
    """


class InvalidErrorCodeError(ResourceDefinitionError):
    """The error code is not registered in the resource's possible errors."""


class InvalidEntityTypeError(ResourceDefinitionError):
    """The entity type named in a reference conversion is not registered."""


class InvalidConversionError(ResourceDefinitionError):
    """The requested reference conversion kind does not exist."""


class UnknownFieldError(ResourceDefinitionError):
    """A bulk assignment named a field the resource does not declare."""


class InvalidActionMethodError(ResourceDefinitionError):
    """An action points at a method the resource does not implement."""


def _build_error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: Sequence[ErrorDetail] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(error=ErrorObject(code=code, message=message, details=list(details) if details else None))
    return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json", exclude_none=True))


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "not_found"
    if status_code == status.HTTP_400_BAD_REQUEST:
        return "validation_error"
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return "unauthorized"
    if status_code == status.HTTP_403_FORBIDDEN:
        return "forbidden"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "method_not_allowed"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal_error"
    return "bad_request"


def _validation_details(exc: RequestValidationError) -> list[ErrorDetail]:
    details: list[ErrorDetail] = []
    for issue in exc.errors():
        field = _format_location(issue.get("loc", ()))
        details.append(
            ErrorDetail(
                code=str(issue.get("type", "invalid")),
                message=str(issue.get("msg", "Invalid value")),
                fields=[field],
            )
        )
    return details


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI validation errors to the shared error envelope."""

    return _build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message="Request validation failed",
        details=_validation_details(exc),
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize HTTP exceptions to the shared error envelope."""

    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    return _build_error_response(
        status_code=exc.status_code,
        code=_http_error_code(exc.status_code),
        message=message,
    )


async def resource_exception_handler(_: Request, exc: ResourceException) -> JSONResponse:
    """Render validation, access-denied and not-found failures."""

    return _build_error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details(),
    )


async def action_not_found_handler(_: Request, exc: ActionNotFoundError) -> JSONResponse:
    """Treat unknown actions as a routing miss."""

    return _build_error_response(
        status_code=status.HTTP_404_NOT_FOUND,
        code="not_found",
        message=f"Unknown action `{exc.action_name}`",
    )


async def unhandled_exception_handler(_: Request, __: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""

    return _build_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="internal_error",
        message="Internal server error",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all resource error handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ResourceException, resource_exception_handler)
    app.add_exception_handler(ActionNotFoundError, action_not_found_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
