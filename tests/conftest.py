"""Shared pytest fixtures for the Sky API test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide an API test client for the application entrypoint."""
    from skyapi.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch, None, None]:
    """Reload settings from the patched environment and restore the cache afterwards."""
    from skyapi.core.config import get_api_settings

    get_api_settings.cache_clear()
    yield monkeypatch
    get_api_settings.cache_clear()
