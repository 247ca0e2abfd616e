"""Fixed-window rate limiting backed by Redis.

Rules (per client IP, per minute):
  - write: POST/PATCH/DELETE under /api/v1/orders (includes match lookups,
           which hit the database hardest)
  - read:  GET under /api/v1/orders

Key pattern: "ratelimit:{client_ip}:{group}". The first INCR in a window sets
a 60 s EXPIRE, so the counter resets on its own.
"""

import logging
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.fx_common.errors import RateLimitError
from src.fx_common.redis_client import get_redis
from src.fx_common.response import error_response

logger = logging.getLogger("fx.ratelimit")

_WINDOW_SECONDS = 60
_LIMITED_PREFIX = "/api/v1/orders"
_WRITE_METHODS = frozenset({"POST", "PATCH", "PUT", "DELETE"})


def _client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _limit_group(request: Request) -> tuple[str, int] | None:
    if not request.url.path.startswith(_LIMITED_PREFIX):
        return None
    if request.method in _WRITE_METHODS:
        return "write", settings.RATE_LIMIT_WRITE_PER_MINUTE
    return "read", settings.RATE_LIMIT_READ_PER_MINUTE


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        super().__init__(app)
        self._redis_factory = redis_factory

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not settings.RATE_LIMIT_ENABLED:
            return await call_next(request)
        group = _limit_group(request)
        if group is None:
            return await call_next(request)

        name, limit = group
        key = f"ratelimit:{_client_ip(request)}:{name}"
        redis = await self._redis_factory()
        count = await redis.incr(key)
        if count == 1:
            await redis.expire(key, _WINDOW_SECONDS)
        if count > limit:
            ttl = await redis.ttl(key)
            logger.warning("Rate limit hit: key=%s count=%d limit=%d", key, count, limit)
            err = RateLimitError()
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(err.code, err.message).model_dump(),
                headers={"Retry-After": str(ttl if ttl > 0 else _WINDOW_SECONDS)},
            )
        return await call_next(request)
