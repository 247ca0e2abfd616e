# src/fx_order/application/schemas.py
"""Pydantic request/response schemas for fx_order.

Request bodies forbid unknown keys: ``user_id``, ``have_currency`` and
``want_currency`` are immutable after creation, so an update that names them
is refused outright instead of being silently ignored.
"""
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.fx_common.enums import OrderStatus
from src.fx_order.domain.models import Order, OrderDetails, OrderPatch, OwnerContact
from src.fx_order.domain.validation import MAX_AMOUNT, MAX_ORDER_ID_LENGTH, MAX_USER_ID_LENGTH

Amount = Annotated[int, Field(gt=0, le=MAX_AMOUNT)]
OrderId = Annotated[str, Field(min_length=1, max_length=MAX_ORDER_ID_LENGTH)]
UserId = Annotated[str, Field(min_length=1, max_length=MAX_USER_ID_LENGTH)]


class OrderDetailsIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    accepted: bool
    counterparty_user_id: UserId
    counterparty_order_id: OrderId

    def to_domain(self) -> OrderDetails:
        return OrderDetails(
            accepted=self.accepted,
            counterparty_user_id=self.counterparty_user_id,
            counterparty_order_id=self.counterparty_order_id,
        )


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    have_currency: str
    have_amount: Amount
    want_currency: str
    want_amount: Amount
    status: str = OrderStatus.PENDING.value
    details: OrderDetailsIn | None = None
    rejects: list[OrderId] = Field(default_factory=list)
    # Admins may create on behalf of another user; ignored otherwise
    user_id: UserId | None = None


class UpdateOrderRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    have_amount: Amount | None = None
    want_amount: Amount | None = None
    status: str | None = None
    details: OrderDetailsIn | None = None
    rejects: list[OrderId] = Field(default_factory=list)
    expected_version: int | None = None

    @model_validator(mode="after")
    def at_least_one_change(self) -> "UpdateOrderRequest":
        if (
            self.have_amount is None
            and self.want_amount is None
            and self.status is None
            and self.details is None
            and not self.rejects
        ):
            raise ValueError("update must change at least one field")
        return self

    def to_patch(self) -> OrderPatch:
        return OrderPatch(
            have_amount=self.have_amount,
            want_amount=self.want_amount,
            status=self.status,
            details=self.details.to_domain() if self.details else None,
            rejects=tuple(self.rejects),
            expected_version=self.expected_version,
        )


class OrderDetailsOut(BaseModel):
    accepted: bool
    counterparty_user_id: str
    counterparty_order_id: str


class OwnerOut(BaseModel):
    user_id: str
    name: str
    email: str

    @classmethod
    def from_domain(cls, owner: OwnerContact) -> "OwnerOut":
        return cls(user_id=owner.user_id, name=owner.name, email=owner.email)


class OrderResponse(BaseModel):
    id: str
    user_id: str
    have_currency: str
    have_amount: int
    want_currency: str
    want_amount: int
    status: str
    details: OrderDetailsOut | None = None
    rejects: list[str]
    version: int
    owner: OwnerOut | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        details = None
        if order.details is not None:
            details = OrderDetailsOut(
                accepted=order.details.accepted,
                counterparty_user_id=order.details.counterparty_user_id,
                counterparty_order_id=order.details.counterparty_order_id,
            )
        return cls(
            id=order.id,
            user_id=order.user_id,
            have_currency=order.have_currency,
            have_amount=order.have_amount,
            want_currency=order.want_currency,
            want_amount=order.want_amount,
            status=order.status,
            details=details,
            rejects=list(order.rejects),
            version=order.version,
            owner=OwnerOut.from_domain(order.owner) if order.owner else None,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class UserOrdersResponse(BaseModel):
    """A user's orders partitioned by status, newest first within each list."""

    user_id: str
    pending: list[OrderResponse]
    cancelled: list[OrderResponse]
    resolved: list[OrderResponse]

    @classmethod
    def from_orders(cls, user_id: str, orders: list[Order]) -> "UserOrdersResponse":
        buckets: dict[str, list[OrderResponse]] = {s.value: [] for s in OrderStatus}
        for order in orders:
            buckets[order.status].append(OrderResponse.from_domain(order))
        return cls(
            user_id=user_id,
            pending=buckets[OrderStatus.PENDING.value],
            cancelled=buckets[OrderStatus.CANCELLED.value],
            resolved=buckets[OrderStatus.RESOLVED.value],
        )


class DeleteOrderResponse(BaseModel):
    order_id: str
    deleted: bool = True
