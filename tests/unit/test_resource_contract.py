"""Unit tests for resource construction, state assignment and output."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from typing import ClassVar

import pytest

from skyapi.core.errors import AccessDeniedException
from skyapi.core.errors import NotFoundException
from skyapi.core.errors import UnknownFieldError
from skyapi.core.errors import ValidationException
from skyapi.resource.base import Resource
from skyapi.resource.identity import Identity
from skyapi.resource.response import Response

RECORDS = {7: {"title": "Quarterly report", "owner": "app-1"}}


class DocumentResource(Resource):
    max_title_length: ClassVar[int] = 80

    id: int | None = None
    title: str | None = None
    owner: str | None = None
    _cache: dict[str, Any] | None = None

    def __init__(self, params: Mapping[str, Any], identity: Identity | None = None) -> None:
        super().__init__(params, identity)
        params = self.arrayify(params, "id")
        record = RECORDS.get(params.get("id"))
        if record is None:
            self.not_found("Document not found")
        if identity is not None and identity.app_key != record["owner"]:
            self.access_denied()
        self.set({"id": params["id"], **record})


class SharedDocumentResource(DocumentResource):
    shared_with: list[str] | None = None


def test_resource_cannot_be_instantiated_without_constructor() -> None:
    with pytest.raises(TypeError):
        Resource({})  # type: ignore[abstract]


def test_constructor_populates_public_state() -> None:
    resource = DocumentResource({"id": 7}, Identity(app_key="app-1"))

    assert resource.public_state() == {"id": 7, "title": "Quarterly report", "owner": "app-1"}
    assert resource.identity == Identity(app_key="app-1")
    assert resource.errors == []
    assert resource.response is None


def test_developer_construction_without_identity() -> None:
    resource = DocumentResource(7)  # type: ignore[arg-type]

    assert resource.id == 7
    assert resource.identity is None


def test_access_denied_for_other_identity() -> None:
    with pytest.raises(AccessDeniedException) as exc_info:
        DocumentResource({"id": 7}, Identity(app_key="app-2"))

    assert exc_info.value.message == "Access denied"
    assert exc_info.value.status_code == 403


def test_not_found_carries_message() -> None:
    with pytest.raises(NotFoundException) as exc_info:
        DocumentResource({"id": 99})

    assert exc_info.value.message == "Document not found"
    assert exc_info.value.status_code == 404
    assert not isinstance(exc_info.value, ValidationException)


def test_set_assigns_only_named_fields() -> None:
    resource = DocumentResource({"id": 7})

    returned = resource.set({"title": "Draft", "owner": "app-9"})

    assert returned is resource
    assert resource.public_state() == {"id": 7, "title": "Draft", "owner": "app-9"}


def test_set_rejects_unknown_and_private_fields() -> None:
    resource = DocumentResource({"id": 7})

    with pytest.raises(UnknownFieldError):
        resource.set({"title": "Draft", "pages": 3})
    with pytest.raises(UnknownFieldError):
        resource.set({"_cache": {}})
    with pytest.raises(UnknownFieldError):
        resource.set({"max_title_length": 10})

    assert resource.title == "Quarterly report"


def test_set_requires_a_mapping() -> None:
    resource = DocumentResource({"id": 7})

    with pytest.raises(TypeError):
        resource.set([("title", "Draft")])  # type: ignore[arg-type]


def test_public_fields_include_inherited_declarations() -> None:
    assert DocumentResource.public_fields == ("id", "title", "owner")
    assert SharedDocumentResource.public_fields == ("id", "title", "owner", "shared_with")


def test_output_creates_one_response_and_last_value_wins() -> None:
    resource = DocumentResource({"id": 7})

    first = resource.output({"version": 1})
    second = resource.output({"version": 2})

    assert first is second
    assert isinstance(second, Response)
    assert resource.response is second
    assert second.output == {"version": 2}


def test_instances_do_not_share_errors_or_response() -> None:
    first = DocumentResource({"id": 7})
    second = DocumentResource({"id": 7})

    first.output("mine")

    assert first.errors is not second.errors
    assert second.response is None


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        (5, {"id": 5}),
        ("abc", {"id": "abc"}),
        ({"id": 5, "expand": True}, {"id": 5, "expand": True}),
    ],
)
def test_arrayify(args: Any, expected: dict[str, Any]) -> None:
    assert Resource.arrayify(args, "id") == expected


def test_identity_scopes() -> None:
    identity = Identity(app_key="app-1", person_id=3, scopes={"documents:read"})

    assert identity.is_person
    assert identity.has_scope("documents:read")
    assert not identity.has_scope("documents:write")

    with pytest.raises(ValueError):
        Identity(app_key="")


def test_annotated_registries_are_not_public_fields() -> None:
    class TaggedDocumentResource(DocumentResource):
        possible_errors: dict[str, Any] = {"bad_tag": {"message": "Unknown tag"}}
        api_actions: dict[str, Any] = {"general": {}}
        tags: list[str] | None = None

    resource = TaggedDocumentResource({"id": 7})

    assert TaggedDocumentResource.public_fields == ("id", "title", "owner", "tags")
    assert "possible_errors" not in resource.public_state()
    with pytest.raises(UnknownFieldError):
        resource.set({"possible_errors": {}})
    assert TaggedDocumentResource.get_error("bad_tag").message == "Unknown tag"
