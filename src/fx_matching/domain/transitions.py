"""Order state machine: amount edits, reject-append, cancel, accept/decline.

    PENDING ──cancel──▶ CANCELLED   (no details)
    PENDING ──resolve─▶ RESOLVED    (details: accepted + counterpart refs)

Both targets are terminal. ``apply_patch`` never mutates its input; it
returns the order as it should be persisted, or raises before anything is
written.
"""
from dataclasses import replace

from src.fx_common.errors import InvalidStateTransitionError, OrderValidationError
from src.fx_order.domain.models import Order, OrderPatch
from src.fx_order.domain.validation import check_reject_capacity, validate_order


def merge_rejects(existing: list[str], new_ids: tuple[str, ...]) -> list[str]:
    """Append ``new_ids`` keeping order, skipping ids already present."""
    merged = list(existing)
    for order_id in new_ids:
        if order_id not in merged:
            merged.append(order_id)
    return merged


def ensure_pending(order: Order) -> None:
    if order.is_terminal:
        raise InvalidStateTransitionError(order.id, order.status)


def apply_patch(order: Order, patch: OrderPatch) -> Order:
    ensure_pending(order)

    # Rejects go first so a reject + resolve in one request still records the reject
    rejects = merge_rejects(order.rejects, patch.rejects)
    check_reject_capacity(rejects)
    if order.id in rejects:
        raise OrderValidationError("rejects", "an order cannot reject itself")

    status = patch.status if patch.status is not None else order.status
    updated = replace(
        order,
        have_amount=patch.have_amount if patch.have_amount is not None else order.have_amount,
        want_amount=patch.want_amount if patch.want_amount is not None else order.want_amount,
        status=status,
        details=patch.details,
        rejects=rejects,
        owner=None,
    )
    validate_order(updated)
    return updated
