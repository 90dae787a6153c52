"""End-to-end tests for the REST surface through the ASGI app.

Authentication is disabled in the test settings, so every request runs as
the anonymous system administrator.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from kinderhub.api.app import create_app
from kinderhub.model import new_id


@pytest_asyncio.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    api = create_app()
    api.state.kinderhub = app
    async with AsyncClient(transport=ASGITransport(app=api), base_url="http://test") as ac:
        yield ac


class TestSchoolsApi:
    """Test the school routes."""

    async def test_create_and_get(self, client: AsyncClient) -> None:
        created = await client.post("/api/v4/schools", json={"name": "sunflower"})

        assert created.status_code == 201
        school_id = created.json()["id"]

        fetched = await client.get(f"/api/v4/schools/{school_id}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "sunflower"

    async def test_put_with_mismatched_id(self, client: AsyncClient) -> None:
        """Body id must match the path id."""
        created = (await client.post("/api/v4/schools", json={"name": "sunflower"})).json()
        created["id"] = new_id()

        response = await client.put(f"/api/v4/schools/{new_id()}", json=created)

        assert response.status_code == 400
        message = response.json()["messages"][0]
        assert message["code"] == "api.context.invalid_body_param.app_error"

    async def test_invalid_body(self, client: AsyncClient) -> None:
        response = await client.post("/api/v4/schools", json=[])

        assert response.status_code == 400
        assert response.json()["messages"][0]["messageType"] == "Error"

    async def test_invalid_name(self, client: AsyncClient) -> None:
        response = await client.post("/api/v4/schools", json={"name": "Not A Name"})
        assert response.status_code == 400


class TestKidsApi:
    """Test the kid routes."""

    async def test_missing_kid(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v4/kids/{new_id()}")

        assert response.status_code == 404
        message = response.json()["messages"][0]
        assert message["code"] == "store.kid.get.missing.app_error"
        assert message["messageType"] == "Error"

    async def test_create_kid_in_class(self, client: AsyncClient) -> None:
        school = (await client.post("/api/v4/schools", json={"name": "sunflower"})).json()
        school_class = await client.post(
            f"/api/v4/schools/{school['id']}/classes", json={"name": "Rabbits"}
        )
        assert school_class.status_code == 201
        class_id = school_class.json()["id"]

        kid = await client.post(
            "/api/v4/kids",
            json={"first_name": "An", "last_name": "Nguyen", "class_id": class_id},
        )
        assert kid.status_code == 201

        kids = await client.get(f"/api/v4/classes/{class_id}/kids")
        assert [k["id"] for k in kids.json()] == [kid.json()["id"]]

    async def test_vaccine_book(self, client: AsyncClient) -> None:
        response = await client.get("/api/v4/vaccine_book")

        assert response.status_code == 200
        assert len(response.json()) == 18


class TestSystemApi:
    """Test health probes and system routes."""

    async def test_live(self, client: AsyncClient) -> None:
        response = await client.get("/health/live")
        assert response.json() == {"status": "ok"}

    async def test_ready(self, client: AsyncClient) -> None:
        response = await client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["components"][0]["name"] == "database"

    async def test_ping(self, client: AsyncClient) -> None:
        response = await client.get("/api/v4/system/ping")
        assert response.json()["status"] == "OK"

    async def test_invalidate_caches(self, client: AsyncClient, app) -> None:
        await client.get("/api/v4/roles/name/school_admin")
        assert len(app.cache_layer.role_cache) > 0

        response = await client.post("/api/v4/caches/invalidate")

        assert response.status_code == 200
        assert len(app.cache_layer.role_cache) == 0

    async def test_request_id_header(self, client: AsyncClient) -> None:
        """Incoming x-request-id is echoed back; otherwise one is generated."""
        echoed = await client.get("/api/v4/system/ping", headers={"x-request-id": "req-1"})
        generated = await client.get("/api/v4/system/ping")

        assert echoed.headers["x-request-id"] == "req-1"
        assert generated.headers["x-request-id"]
