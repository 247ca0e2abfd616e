"""Counter-order compatibility rules.

A candidate C is compatible with a source order O when:
  1. different owners (no self-matching)
  2. currencies cross exactly: C.have == O.want and C.want == O.have
  3. C.have_amount lies in [O.want_amount * 0.8, O.want_amount * 1.2], inclusive.
     The band is anchored on what O wants to receive, never on C's own want.
  4. C is PENDING, or C is RESOLVED with details pointing at O itself
     (C has pre-accepted O and waits for O's confirmation)
  5. neither side has rejected the other

Everything here is pure: two loaded records in, a bool out.
"""
import math
from decimal import Decimal

from src.fx_common.enums import OrderStatus
from src.fx_order.domain.models import CandidateFilter, Order

MATCH_TOLERANCE = Decimal("0.2")


def amount_band(want_amount: int) -> tuple[int, int]:
    """Inclusive integer bounds for a candidate's have_amount.

    Decimal keeps 0.8/1.2 exact, so a candidate sitting exactly on the band
    edge is never lost to float rounding.
    """
    want = Decimal(want_amount)
    low = want * (1 - MATCH_TOLERANCE)
    high = want * (1 + MATCH_TOLERANCE)
    return math.ceil(low), math.floor(high)


def has_rejected(order: Order, other: Order) -> bool:
    return other.id in order.rejects


def rejected_either_way(a: Order, b: Order) -> bool:
    return has_rejected(a, b) or has_rejected(b, a)


def is_status_eligible(source: Order, candidate: Order) -> bool:
    if candidate.status == OrderStatus.PENDING.value:
        return True
    return (
        candidate.status == OrderStatus.RESOLVED.value
        and candidate.details is not None
        and candidate.details.counterparty_order_id == source.id
    )


def is_compatible(source: Order, candidate: Order) -> bool:
    if candidate.id == source.id or candidate.user_id == source.user_id:
        return False
    if (
        candidate.have_currency != source.want_currency
        or candidate.want_currency != source.have_currency
    ):
        return False
    low, high = amount_band(source.want_amount)
    if not low <= candidate.have_amount <= high:
        return False
    if not is_status_eligible(source, candidate):
        return False
    return not rejected_either_way(source, candidate)


def build_candidate_filter(source: Order) -> CandidateFilter:
    """Translate rules 1-5 into the store query that pre-selects candidates."""
    low, high = amount_band(source.want_amount)
    return CandidateFilter(
        source_order_id=source.id,
        exclude_user_id=source.user_id,
        have_currency=source.want_currency,
        want_currency=source.have_currency,
        min_have_amount=low,
        max_have_amount=high,
        exclude_order_ids=tuple(source.rejects),
    )
