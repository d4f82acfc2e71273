"""Tests for the application factory."""

import logging
import uuid

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from userhub.api import create_app
from userhub.api.middleware.request_id import resolve_request_id


@pytest.fixture
def app():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield create_app()
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_routes_mounted(app):
    paths = app.openapi()["paths"]
    assert set(paths["/resources/v1/users"]) == {"get", "post"}
    assert set(paths["/resources/v1/users/{user_id}"]) == {"get", "put", "delete"}
    assert "get" in paths["/health"]


async def test_health(app):
    # ASGITransport does not run the lifespan, so no database is touched
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert "X-Request-ID" in resp.headers


class TestResolveRequestId:
    def test_keeps_uuid(self):
        rid = "0b7c1a52-6f1e-4a8e-9a4c-2f7f0a1b2c3d"
        assert resolve_request_id(rid) == rid

    def test_normalizes_case(self):
        rid = "0B7C1A52-6F1E-4A8E-9A4C-2F7F0A1B2C3D"
        assert resolve_request_id(rid) == rid.lower()

    @pytest.mark.parametrize("raw", [None, "", "abc", "12345"])
    def test_mints_new(self, raw):
        minted = resolve_request_id(raw)
        assert minted != raw
        assert uuid.UUID(minted).version == 4
