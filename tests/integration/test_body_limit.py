"""Regression tests for RequestBodyLimitMiddleware."""

from __future__ import annotations

import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from protoforge.api.app import create_app
from protoforge.api.deps import init_container, reset_container
from protoforge.service.container import ServiceContainer
from protoforge.settings import Settings


@pytest.fixture
def app():
    settings = Settings(_env_file=None, max_body_bytes_content=2048, max_body_bytes_default=256)
    application = create_app(settings=settings)
    init_container(ServiceContainer.in_memory(settings))
    yield application
    reset_container()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestInvalidContentLength:
    """Non-integer Content-Length must not cause a 500."""

    async def test_non_integer_content_length(self, client: AsyncClient) -> None:
        response = await client.post(
            "/health",
            content=b"small body",
            headers={"content-length": "not-a-number"},
        )
        assert response.status_code != 500


class TestLimits:
    async def test_content_endpoint_allows_larger_body(self, client: AsyncClient) -> None:
        response = await client.post(
            "/artifacts", json={"prompt": "p", "content": "x" * 1000}
        )
        assert response.status_code == 201

    async def test_content_endpoint_limit(self, client: AsyncClient) -> None:
        response = await client.post(
            "/artifacts", json={"prompt": "p", "content": "x" * 4096}
        )
        assert response.status_code == 413
        assert "too large" in response.json()["detail"]

    async def test_default_limit(self, client: AsyncClient) -> None:
        response = await client.post(
            "/projects",
            json={"team_id": "t", "name": "n" * 500, "created_by": "alice"},
        )
        assert response.status_code == 413

    async def test_project_link_uses_default_limit(self, client: AsyncClient) -> None:
        response = await client.post(
            f"/projects/{uuid.uuid4()}/artifacts",
            json={"artifact_id": str(uuid.uuid4()), "added_by": "a" * 400},
        )
        assert response.status_code == 413
        assert "max 256 bytes" in response.json()["detail"]

    async def test_version_endpoint_allows_larger_body(self, client: AsyncClient) -> None:
        response = await client.post(
            f"/artifacts/{uuid.uuid4()}/versions", json={"content": "x" * 1000}
        )
        assert response.status_code == 404

    async def test_chunked_body_over_limit(self, client: AsyncClient) -> None:
        async def body():
            yield b"x" * 200
            yield b"x" * 200

        response = await client.post(
            "/projects",
            content=body(),
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 413
