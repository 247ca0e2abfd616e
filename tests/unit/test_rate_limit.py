"""Unit tests for the Redis fixed-window rate limiter."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.fx_gateway.middleware import rate_limit
from src.fx_gateway.middleware.rate_limit import RateLimitMiddleware


class FakeRedis:
    """Just enough of redis.asyncio.Redis for INCR/EXPIRE/TTL."""

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}
        self.expiry: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.expiry[key] = seconds
        return True

    async def ttl(self, key: str) -> int:
        return self.expiry.get(key, -1)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def limited_client(monkeypatch: pytest.MonkeyPatch, fake_redis: FakeRedis):
    monkeypatch.setattr(rate_limit.settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(rate_limit.settings, "RATE_LIMIT_WRITE_PER_MINUTE", 2)
    monkeypatch.setattr(rate_limit.settings, "RATE_LIMIT_READ_PER_MINUTE", 3)

    async def factory() -> FakeRedis:
        return fake_redis

    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, redis_factory=factory)

    @app.post("/api/v1/orders")
    async def create() -> dict[str, str]:
        return {"ok": "yes"}

    @app.get("/api/v1/orders")
    async def list_() -> dict[str, str]:
        return {"ok": "yes"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestRateLimitMiddleware:
    async def test_write_limit_returns_429(self, limited_client, fake_redis) -> None:
        async with limited_client as client:
            assert (await client.post("/api/v1/orders")).status_code == 200
            assert (await client.post("/api/v1/orders")).status_code == 200
            resp = await client.post("/api/v1/orders")

        assert resp.status_code == 429
        assert resp.json()["code"] == 9001
        assert resp.headers["Retry-After"] == "60"

    async def test_read_and_write_counted_separately(self, limited_client, fake_redis) -> None:
        async with limited_client as client:
            await client.post("/api/v1/orders")
            await client.post("/api/v1/orders")
            resp = await client.get("/api/v1/orders")

        assert resp.status_code == 200
        assert set(fake_redis.counts) == {
            "ratelimit:127.0.0.1:write",
            "ratelimit:127.0.0.1:read",
        }

    async def test_unlimited_paths_skip_redis(self, limited_client, fake_redis) -> None:
        async with limited_client as client:
            for _ in range(5):
                assert (await client.get("/health")).status_code == 200
        assert fake_redis.counts == {}

    async def test_forwarded_for_keys_by_first_hop(self, limited_client, fake_redis) -> None:
        async with limited_client as client:
            await client.get("/api/v1/orders", headers={"X-Forwarded-For": "10.0.0.7, 10.0.0.1"})
        assert "ratelimit:10.0.0.7:read" in fake_redis.counts

    async def test_disabled(self, limited_client, fake_redis, monkeypatch) -> None:
        monkeypatch.setattr(rate_limit.settings, "RATE_LIMIT_ENABLED", False)
        async with limited_client as client:
            for _ in range(5):
                assert (await client.post("/api/v1/orders")).status_code == 200
        assert fake_redis.counts == {}
