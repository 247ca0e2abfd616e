# src/fx_order/infrastructure/persistence.py
"""OrderRepository: raw SQL persistence implementation.

Transaction ownership: the CALLER (application service) commits or rolls back.
Every status-changing write is a single conditional UPDATE, so two writers
racing on the same PENDING order can never both succeed.
"""
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.fx_common.errors import InternalError
from src.fx_order.domain.models import CandidateFilter, Order, OrderDetails, OwnerContact

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_RETURNING_COLUMNS = """
    id, user_id, have_currency, have_amount, want_currency, want_amount,
    status, details_accepted, counterparty_user_id, counterparty_order_id,
    rejects, version, created_at, updated_at
"""

_INSERT_ORDER_SQL = text(f"""
    INSERT INTO orders (id, user_id, have_currency, have_amount,
        want_currency, want_amount, status,
        details_accepted, counterparty_user_id, counterparty_order_id, rejects)
    VALUES (:id, :user_id, :have_currency, :have_amount,
        :want_currency, :want_amount, :status,
        :details_accepted, :counterparty_user_id, :counterparty_order_id, :rejects)
    RETURNING {_RETURNING_COLUMNS}
""")

# Compare-and-set: the row must still be PENDING at the version the caller read
_UPDATE_ORDER_SQL = text(f"""
    UPDATE orders
    SET have_amount = :have_amount, want_amount = :want_amount,
        status = :status,
        details_accepted = :details_accepted,
        counterparty_user_id = :counterparty_user_id,
        counterparty_order_id = :counterparty_order_id,
        rejects = :rejects,
        version = version + 1, updated_at = NOW()
    WHERE id = :id AND version = :expected_version AND status = 'PENDING'
    RETURNING {_RETURNING_COLUMNS}
""")

_DELETE_ORDER_SQL = text("DELETE FROM orders WHERE id = :id RETURNING id")

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_RETURNING_COLUMNS}
    FROM orders WHERE id = :id
""")

_LIST_BY_USER_SQL = text(f"""
    SELECT {_RETURNING_COLUMNS}
    FROM orders
    WHERE user_id = :user_id
    ORDER BY created_at DESC, id DESC
""")

_OWNER_EXISTS_SQL = text("""
    SELECT 1 FROM users WHERE CAST(id AS TEXT) = :user_id AND is_active
""")

_FIND_CANDIDATES_SQL = text("""
    SELECT o.id, o.user_id, o.have_currency, o.have_amount,
           o.want_currency, o.want_amount, o.status,
           o.details_accepted, o.counterparty_user_id, o.counterparty_order_id,
           o.rejects, o.version, o.created_at, o.updated_at,
           u.name AS owner_name, u.email AS owner_email
    FROM orders o
    LEFT JOIN users u ON CAST(u.id AS TEXT) = o.user_id
    WHERE o.user_id <> :exclude_user_id
      AND o.have_currency = :have_currency
      AND o.want_currency = :want_currency
      AND o.have_amount BETWEEN :min_have_amount AND :max_have_amount
      AND (o.status = 'PENDING'
           OR (o.status = 'RESOLVED' AND o.counterparty_order_id = :source_order_id))
      AND NOT (o.id = ANY(CAST(:exclude_order_ids AS VARCHAR[])))
      AND NOT (CAST(:source_order_id AS VARCHAR) = ANY(o.rejects))
    ORDER BY o.created_at ASC, o.id ASC
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    details = None
    if row.details_accepted is not None:
        details = OrderDetails(
            accepted=row.details_accepted,
            counterparty_user_id=row.counterparty_user_id,
            counterparty_order_id=row.counterparty_order_id,
        )
    return Order(
        id=row.id,
        user_id=row.user_id,
        have_currency=row.have_currency,
        have_amount=row.have_amount,
        want_currency=row.want_currency,
        want_amount=row.want_amount,
        status=row.status,
        details=details,
        rejects=list(row.rejects or []),
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _order_params(order: Order) -> dict[str, Any]:
    details = order.details
    return {
        "id": order.id,
        "user_id": order.user_id,
        "have_currency": order.have_currency,
        "have_amount": order.have_amount,
        "want_currency": order.want_currency,
        "want_amount": order.want_amount,
        "status": order.status,
        "details_accepted": details.accepted if details else None,
        "counterparty_user_id": details.counterparty_user_id if details else None,
        "counterparty_order_id": details.counterparty_order_id if details else None,
        "rejects": list(order.rejects),
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, order: Order, db: AsyncSession) -> Order:
        result = await db.execute(_INSERT_ORDER_SQL, _order_params(order))
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Order insert returned no row for {order.id}")
        return _row_to_order(row)

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def find(
        self, criteria: CandidateFilter, db: AsyncSession
    ) -> AsyncGenerator[Order, None]:
        result = await db.stream(
            _FIND_CANDIDATES_SQL,
            {
                "source_order_id": criteria.source_order_id,
                "exclude_user_id": criteria.exclude_user_id,
                "have_currency": criteria.have_currency,
                "want_currency": criteria.want_currency,
                "min_have_amount": criteria.min_have_amount,
                "max_have_amount": criteria.max_have_amount,
                "exclude_order_ids": list(criteria.exclude_order_ids),
            },
        )
        try:
            async for row in result:
                order = _row_to_order(row)
                if row.owner_name is not None:
                    order.owner = OwnerContact(
                        user_id=row.user_id, name=row.owner_name, email=row.owner_email
                    )
                yield order
        finally:
            await result.close()

    async def owner_exists(self, user_id: str, db: AsyncSession) -> bool:
        result = await db.execute(_OWNER_EXISTS_SQL, {"user_id": user_id})
        return result.fetchone() is not None

    async def list_by_user(self, user_id: str, db: AsyncSession) -> list[Order]:
        result = await db.execute(_LIST_BY_USER_SQL, {"user_id": user_id})
        return [_row_to_order(row) for row in result.fetchall()]

    async def update(
        self, order: Order, expected_version: int, db: AsyncSession
    ) -> Order | None:
        params = _order_params(order)
        params["expected_version"] = expected_version
        result = await db.execute(_UPDATE_ORDER_SQL, params)
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def delete(self, order_id: str, db: AsyncSession) -> bool:
        result = await db.execute(_DELETE_ORDER_SQL, {"id": order_id})
        return result.fetchone() is not None
