# src/fx_order/domain/repository.py
"""OrderRepository Protocol: interface contract for persistence layer.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""
from collections.abc import AsyncGenerator
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.fx_order.domain.models import CandidateFilter, Order


class OrderRepositoryProtocol(Protocol):
    async def save(self, order: Order, db: AsyncSession) -> Order: ...

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None: ...

    def find(
        self, criteria: CandidateFilter, db: AsyncSession
    ) -> AsyncGenerator[Order, None]:
        """Lazily yield candidate orders, earliest-created first."""
        ...

    async def owner_exists(self, user_id: str, db: AsyncSession) -> bool:
        """True when ``user_id`` names an active account in the users table."""
        ...

    async def list_by_user(self, user_id: str, db: AsyncSession) -> list[Order]: ...

    async def update(
        self, order: Order, expected_version: int, db: AsyncSession
    ) -> Order | None:
        """Conditional write: only applies while the stored row is PENDING at
        ``expected_version``. Returns None when that condition does not hold."""
        ...

    async def delete(self, order_id: str, db: AsyncSession) -> bool: ...
