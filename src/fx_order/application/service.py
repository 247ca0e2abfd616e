# src/fx_order/application/service.py
"""OrderApplicationService: create / get / list / update / delete.

Every write follows the same shape: load, authorize, compute the new record
with the pure domain rules, persist once, commit. Any exception rolls the
transaction back, so a failed update leaves the stored order untouched.
"""
import logging
from typing import NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from src.fx_common.errors import (
    InvalidStateTransitionError,
    OrderAccessDeniedError,
    OrderNotFoundError,
    OrderValidationError,
    OrderVersionConflictError,
)
from src.fx_common.id_generator import generate_order_id
from src.fx_matching.domain.transitions import apply_patch, merge_rejects
from src.fx_order.application.schemas import (
    CreateOrderRequest,
    DeleteOrderResponse,
    OrderResponse,
    UpdateOrderRequest,
    UserOrdersResponse,
)
from src.fx_order.domain.models import Actor, Order, OrderDetails
from src.fx_order.domain.repository import OrderRepositoryProtocol
from src.fx_order.domain.validation import validate_order
from src.fx_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


async def load_accessible_order(
    repo: OrderRepositoryProtocol, db: AsyncSession, actor: Actor, order_id: str
) -> Order:
    """Fetch an order the actor may act on: 404 first, then 403."""
    order = await repo.get_by_id(order_id, db)
    if order is None:
        raise OrderNotFoundError(order_id)
    if not actor.can_access(order.user_id):
        raise OrderAccessDeniedError(actor.user_id, f"order {order_id}")
    return order


class OrderApplicationService:
    def __init__(self, repo: OrderRepositoryProtocol | None = None) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()

    async def create_order(
        self, db: AsyncSession, actor: Actor, req: CreateOrderRequest
    ) -> OrderResponse:
        owner_id = req.user_id if actor.is_admin and req.user_id else actor.user_id
        order = Order(
            id=generate_order_id(),
            user_id=owner_id,
            have_currency=req.have_currency,
            have_amount=req.have_amount,
            want_currency=req.want_currency,
            want_amount=req.want_amount,
            status=req.status,
            details=req.details.to_domain() if req.details else None,
            rejects=merge_rejects([], tuple(req.rejects)),
        )
        validate_order(order)
        try:
            if owner_id != actor.user_id and not await self._repo.owner_exists(owner_id, db):
                raise OrderValidationError("user_id", f"unknown user {owner_id!r}")
            if order.details is not None:
                await self._check_counterparty(db, order.details)
            saved = await self._repo.save(order, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Order created: id=%s user=%s %d %s -> %d %s",
            saved.id,
            saved.user_id,
            saved.have_amount,
            saved.have_currency,
            saved.want_amount,
            saved.want_currency,
        )
        return OrderResponse.from_domain(saved)

    async def get_order(self, db: AsyncSession, actor: Actor, order_id: str) -> OrderResponse:
        order = await load_accessible_order(self._repo, db, actor, order_id)
        return OrderResponse.from_domain(order)

    async def list_orders_for_user(
        self, db: AsyncSession, actor: Actor, user_id: str
    ) -> UserOrdersResponse:
        if not actor.can_access(user_id):
            raise OrderAccessDeniedError(actor.user_id, f"orders of user {user_id}")
        orders = await self._repo.list_by_user(user_id, db)
        return UserOrdersResponse.from_orders(user_id, orders)

    async def update_order(
        self, db: AsyncSession, actor: Actor, order_id: str, req: UpdateOrderRequest
    ) -> OrderResponse:
        patch = req.to_patch()
        try:
            order = await load_accessible_order(self._repo, db, actor, order_id)
            updated = apply_patch(order, patch)
            if updated.details is not None:
                await self._check_counterparty(db, updated.details)
            expected = (
                patch.expected_version if patch.expected_version is not None else order.version
            )
            saved = await self._repo.update(updated, expected, db)
            if saved is None:
                await self._raise_write_conflict(db, order_id, expected)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if saved.status != order.status:
            logger.info(
                "Order %s: %s -> %s (by %s)", saved.id, order.status, saved.status, actor.user_id
            )
        if len(saved.rejects) != len(order.rejects):
            logger.info("Order %s rejects now %s", saved.id, saved.rejects)
        return OrderResponse.from_domain(saved)

    async def delete_order(
        self, db: AsyncSession, actor: Actor, order_id: str
    ) -> DeleteOrderResponse:
        try:
            await load_accessible_order(self._repo, db, actor, order_id)
            if not await self._repo.delete(order_id, db):
                raise OrderNotFoundError(order_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Order deleted: id=%s by=%s", order_id, actor.user_id)
        return DeleteOrderResponse(order_id=order_id)

    async def _check_counterparty(self, db: AsyncSession, details: OrderDetails) -> None:
        """Resolved details must point at a real order owned by the named user."""
        counterpart = await self._repo.get_by_id(details.counterparty_order_id, db)
        if counterpart is None:
            raise OrderNotFoundError(details.counterparty_order_id)
        if counterpart.user_id != details.counterparty_user_id:
            raise OrderValidationError(
                "details.counterparty_user_id", "does not own the counterparty order"
            )

    async def _raise_write_conflict(
        self, db: AsyncSession, order_id: str, expected_version: int
    ) -> NoReturn:
        """The conditional UPDATE matched no row; report why."""
        current = await self._repo.get_by_id(order_id, db)
        if current is None:
            raise OrderNotFoundError(order_id)
        if current.is_terminal:
            raise InvalidStateTransitionError(order_id, current.status)
        raise OrderVersionConflictError(order_id, expected_version)
