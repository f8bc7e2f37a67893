"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and to
run the API in-process.
"""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from taskpad.models import ServerConfig
from taskpad.server.app import create_app
from taskpad.services.api import APIClient
from taskpad.services.local_storage import LocalStorage

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point every platformdirs lookup at *tmp_path* and reset singletons."""
    import taskpad.utils.logger as logger_mod
    from taskpad.services.config_service import get_config_service
    from taskpad.services.local_storage import get_local_storage

    tmpdir = str(tmp_path)
    logger_mod._logger = None
    get_config_service.cache_clear()
    get_local_storage.cache_clear()
    with (
        patch("taskpad.utils.logger.user_log_dir", return_value=tmpdir),
        patch("taskpad.services.config_service.user_config_dir", return_value=tmpdir),
        patch("taskpad.services.local_storage.user_data_dir", return_value=tmpdir),
    ):
        yield tmp_path
    import logging

    logging.getLogger("taskpad").handlers.clear()
    logger_mod._logger = None
    get_config_service.cache_clear()
    get_local_storage.cache_clear()


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings() -> ServerConfig:
    """Fast bcrypt and a fixed secret."""
    return ServerConfig(jwt_secret=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def http(app):
    """Synchronous test client for the REST API."""
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def signup(http):
    """Register a user through the API; returns the response body."""

    def _signup(email="alice@example.com", password="pw123456", name="Alice") -> dict:
        response = http.post(
            "/api/auth/signup", json={"email": email, "password": password, "name": name}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _signup


@pytest.fixture()
def auth_headers(signup):
    """Headers for a freshly registered alice@example.com."""
    token = signup()["token"]
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


@pytest.fixture()
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage.json")


@pytest_asyncio.fixture()
async def api_client(app, storage):
    """APIClient wired to the in-process app through an ASGI transport."""
    client = APIClient(
        storage,
        base_url="http://testserver/api",
        timeout=5,
        transport=httpx.ASGITransport(app=app),
    )
    yield client
    await client.close()
