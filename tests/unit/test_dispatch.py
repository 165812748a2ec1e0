"""Unit tests for invoking resource actions from their metadata."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

import pytest

from skyapi.api.dispatch import invoke_action
from skyapi.core.errors import AccessDeniedException
from skyapi.core.errors import ActionNotFoundError
from skyapi.core.errors import InvalidActionMethodError
from skyapi.core.errors import ValidationException
from skyapi.resource.base import Resource
from skyapi.resource.identity import Identity
from skyapi.resource.response import Response


class PlaylistResource(Resource):
    api_actions = {
        "general": {},
        "add-track": {"http_response_code": 201, "response_key": ""},
        "tracks": {"method": "listTracks", "response_key": "items"},
        "share": {"method": "share_with"},
        "rename": {},
        "shuffle": {"method": "_shuffle"},
        "delete": {},
    }
    possible_errors = {
        "missing_track": {"message": "A track is required", "fields": ["track"]},
    }

    id: int | None = None
    title: str | None = None

    def __init__(self, params: Mapping[str, Any], identity: Identity | None = None) -> None:
        super().__init__(params, identity)
        if identity is None or not identity.has_scope("playlists"):
            self.access_denied("Playlists scope required")
        self.set({"id": 5, "title": "Road trip"})

    def general(self, params: Mapping[str, Any]) -> None:
        return None

    def addTrack(self, params: Mapping[str, Any]) -> Response:
        if not params.get("track"):
            self.error("missing_track")
        return self.output({"added": params["track"]})

    def listTracks(self, params: Mapping[str, Any]) -> list[str]:
        return ["Intro", "Outro"]

    def share_with(self, params: Mapping[str, Any]) -> None:
        self.output({"shared": True})
        self.output({"shared": params.get("with", [])})

    def _shuffle(self, params: Mapping[str, Any]) -> None:
        return None


IDENTITY = Identity(app_key="app-1", scopes={"playlists"})


def test_default_action_wraps_public_state_under_action_name() -> None:
    result = invoke_action(PlaylistResource, "general", {}, IDENTITY)

    assert result.status_code == 200
    assert result.body == {"general": {"id": 5, "title": "Road trip"}}
    assert result.action.method == "general"


def test_declared_status_and_empty_wrapper() -> None:
    result = invoke_action(PlaylistResource, "add-track", {"track": "Intro"}, IDENTITY)

    assert result.status_code == 201
    assert result.body == {"added": "Intro"}


def test_returned_value_is_wrapped_under_response_key() -> None:
    result = invoke_action(PlaylistResource, "tracks", None, IDENTITY)

    assert result.body == {"items": ["Intro", "Outro"]}


def test_last_output_is_serialized() -> None:
    result = invoke_action(PlaylistResource, "share", {"with": ["sam"]}, IDENTITY)

    assert result.body == {"share": {"shared": ["sam"]}}


def test_unknown_action_propagates_lookup_failure() -> None:
    with pytest.raises(ActionNotFoundError):
        invoke_action(PlaylistResource, "export", {}, IDENTITY)


def test_construction_failures_propagate() -> None:
    with pytest.raises(AccessDeniedException) as exc_info:
        invoke_action(PlaylistResource, "general", {}, Identity(app_key="app-1"))

    assert exc_info.value.message == "Playlists scope required"


def test_validation_failures_propagate() -> None:
    with pytest.raises(ValidationException) as exc_info:
        invoke_action(PlaylistResource, "add-track", {}, IDENTITY)

    assert exc_info.value.errors[0].code == "missing_track"


@pytest.mark.parametrize("action_name", ["rename", "shuffle", "delete"])
def test_missing_or_private_method_is_an_internal_error(
    action_name: str,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.ERROR, logger="skyapi.api.dispatch"):
        with pytest.raises(InvalidActionMethodError):
            invoke_action(PlaylistResource, action_name, {}, IDENTITY)

    assert f"Action {action_name} on PlaylistResource is misconfigured" in caplog.text


def test_invocations_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="skyapi.api.dispatch"):
        invoke_action(PlaylistResource, "tracks", {}, IDENTITY)

    assert "Invoking action=tracks on resource=PlaylistResource" in caplog.text
    assert "Completed action=tracks on resource=PlaylistResource with status=200" in caplog.text
