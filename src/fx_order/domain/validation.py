"""Field-level invariants checked on every order write.

``validate_order`` raises on the first violation, naming the offending field.
Checks run in field order so the same bad input always reports the same field.
Size limits mirror the orders table columns (alembic/versions/002).
"""
from src.fx_common.enums import CURRENCY_CODES, OrderStatus
from src.fx_common.errors import (
    OrderValidationError,
    RejectLimitExceededError,
    UnknownCurrencyError,
)
from src.fx_order.domain.models import Order

MAX_REJECTS = 3
# BIGINT
MAX_AMOUNT = 2**63 - 1
MAX_ORDER_ID_LENGTH = 32
MAX_USER_ID_LENGTH = 64

_STATUSES = frozenset(s.value for s in OrderStatus)


def validate_order(order: Order) -> None:
    if not order.user_id:
        raise OrderValidationError("user_id", "owner is required")
    _check_length("user_id", order.user_id, MAX_USER_ID_LENGTH)
    _check_currency("have_currency", order.have_currency)
    _check_amount("have_amount", order.have_amount)
    _check_currency("want_currency", order.want_currency)
    _check_amount("want_amount", order.want_amount)
    if order.status not in _STATUSES:
        raise OrderValidationError("status", f"unknown status {order.status!r}")
    _check_details(order)
    check_reject_capacity(order.rejects)
    _check_reject_ids(order.rejects)


def check_reject_capacity(rejects: list[str]) -> None:
    if len(rejects) > MAX_REJECTS:
        raise RejectLimitExceededError(MAX_REJECTS, len(rejects))


def _check_reject_ids(rejects: list[str]) -> None:
    for order_id in rejects:
        if not order_id:
            raise OrderValidationError("rejects", "order ids must not be empty")
        _check_length("rejects", order_id, MAX_ORDER_ID_LENGTH)


def _check_currency(field: str, code: str) -> None:
    if code not in CURRENCY_CODES:
        raise UnknownCurrencyError(field, code)


def _check_amount(field: str, amount: int) -> None:
    # bool is an int subclass; True must not pass as an amount of 1
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise OrderValidationError(field, "must be a positive integer")
    if amount > MAX_AMOUNT:
        raise OrderValidationError(field, f"must not exceed {MAX_AMOUNT}")


def _check_length(field: str, value: str, limit: int) -> None:
    if len(value) > limit:
        raise OrderValidationError(field, f"longer than {limit} characters")


def _check_details(order: Order) -> None:
    resolved = order.status == OrderStatus.RESOLVED.value
    if resolved and order.details is None:
        raise OrderValidationError("details", "required when status is RESOLVED")
    if not resolved and order.details is not None:
        raise OrderValidationError("details", "only allowed when status is RESOLVED")
    if order.details is None:
        return
    if not order.details.counterparty_user_id:
        raise OrderValidationError("details.counterparty_user_id", "is required")
    _check_length(
        "details.counterparty_user_id", order.details.counterparty_user_id, MAX_USER_ID_LENGTH
    )
    if order.details.counterparty_user_id == order.user_id:
        raise OrderValidationError("details.counterparty_user_id", "cannot be the order owner")
    if not order.details.counterparty_order_id:
        raise OrderValidationError("details.counterparty_order_id", "is required")
    _check_length(
        "details.counterparty_order_id", order.details.counterparty_order_id, MAX_ORDER_ID_LENGTH
    )
    if order.details.counterparty_order_id == order.id:
        raise OrderValidationError("details.counterparty_order_id", "cannot reference itself")
