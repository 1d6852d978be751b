"""Request ID and CORS behaviour of the API middleware stack."""

import uuid

from httpx import AsyncClient


class TestRequestId:
    async def test_generated_id_is_a_uuid(self, client: AsyncClient) -> None:
        res = await client.get("/health")
        uuid.UUID(res.headers["x-request-id"])

    async def test_caller_id_is_echoed(self, client: AsyncClient) -> None:
        res = await client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert res.headers["x-request-id"] == "abc-123"

    async def test_ids_differ_per_request(self, client: AsyncClient) -> None:
        r1 = await client.get("/health")
        r2 = await client.get("/health")
        assert r1.headers["x-request-id"] != r2.headers["x-request-id"]

    async def test_present_on_404(self, client: AsyncClient) -> None:
        res = await client.get("/commands/424242")
        assert res.status_code == 404
        assert "x-request-id" in res.headers


class TestCors:
    async def test_preflight(self, client: AsyncClient) -> None:
        res = await client.options(
            "/detection",
            headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
        )
        assert res.headers.get("access-control-allow-origin") is not None
