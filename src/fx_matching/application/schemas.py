"""Pydantic schemas for match lookups."""
from pydantic import BaseModel

from src.fx_order.application.schemas import OrderResponse, OwnerOut
from src.fx_order.domain.models import Order


class MatchedOrderOut(BaseModel):
    """The counterpart as shown to the other side.

    Only the offer itself and its owner's contact; the counterpart's rejects,
    details and version stay private to its owner. ``status`` is RESOLVED when
    the counterpart has already accepted the requesting order.
    """

    id: str
    user_id: str
    have_currency: str
    have_amount: int
    want_currency: str
    want_amount: int
    status: str
    owner: OwnerOut | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "MatchedOrderOut":
        return cls(
            id=order.id,
            user_id=order.user_id,
            have_currency=order.have_currency,
            have_amount=order.have_amount,
            want_currency=order.want_currency,
            want_amount=order.want_amount,
            status=order.status,
            owner=OwnerOut.from_domain(order.owner) if order.owner else None,
        )


class MatchResponse(BaseModel):
    """``matched_order`` is null when nothing compatible exists yet; that is not an error."""

    order: OrderResponse
    matched_order: MatchedOrderOut | None
    rejects: list[str]
