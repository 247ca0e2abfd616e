"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across the
entire test session.

Users are provisioned by the external identity service in production; here
they are inserted straight into the users table and handed a locally minted
access token.
"""

import uuid
from collections.abc import Awaitable, Callable

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.fx_common.database import async_session_factory
from src.fx_gateway.auth.jwt_handler import create_access_token
from src.main import app

_INSERT_USER_SQL = text("""
    INSERT INTO users (id, name, email, role)
    VALUES (:id, :name, :email, :role)
""")

UserFactory = Callable[..., Awaitable[tuple[str, dict[str, str]]]]


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client; keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def make_user() -> UserFactory:
    """Insert a fresh user; returns (user_id, auth headers)."""

    async def _make(role: str = "user") -> tuple[str, dict[str, str]]:
        user_id = str(uuid.uuid4())
        tag = user_id[:8]
        async with async_session_factory() as session:
            await session.execute(
                _INSERT_USER_SQL,
                {
                    "id": user_id,
                    "name": f"swap_{tag}",
                    "email": f"swap_{tag}@example.com",
                    "role": role,
                },
            )
            await session.commit()
        token = create_access_token(user_id)
        return user_id, {"Authorization": f"Bearer {token}"}

    return _make


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def _clean_previous_runs() -> None:
    """Drop orders left by earlier runs so stale offers never win a match."""
    async with async_session_factory() as session:
        await session.execute(
            text("""
                DELETE FROM orders
                WHERE user_id IN (
                    SELECT CAST(id AS TEXT) FROM users WHERE email LIKE 'swap\\_%'
                )
            """)
        )
        await session.commit()
