"""Order domain model: pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass, field
from datetime import datetime

from src.fx_common.enums import TERMINAL_STATUSES, OrderStatus


@dataclass(frozen=True)
class OrderDetails:
    """Counterpart references, present only on RESOLVED orders."""
    accepted: bool
    counterparty_user_id: str
    counterparty_order_id: str


@dataclass(frozen=True)
class OwnerContact:
    """Public-facing identity of an order owner, resolved on match lookups."""
    user_id: str
    name: str
    email: str


@dataclass
class Order:
    id: str
    user_id: str
    have_currency: str
    have_amount: int
    want_currency: str
    want_amount: int
    status: str = OrderStatus.PENDING.value
    details: OrderDetails | None = None
    rejects: list[str] = field(default_factory=list)
    # Optimistic concurrency token, bumped by the store on every update
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    owner: OwnerContact | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass(frozen=True)
class OrderPatch:
    """Caller-supplied changes for one update.

    ``rejects`` is append-only: its ids are added to the order's list, never
    replace it. ``expected_version`` pins the update to a previously read
    version; when omitted the version loaded at the start of the update is used.
    """
    have_amount: int | None = None
    want_amount: int | None = None
    status: str | None = None
    details: OrderDetails | None = None
    rejects: tuple[str, ...] = ()
    expected_version: int | None = None


@dataclass(frozen=True)
class CandidateFilter:
    """Store-level query for counter-orders of one source order."""
    source_order_id: str
    exclude_user_id: str
    have_currency: str
    want_currency: str
    min_have_amount: int
    max_have_amount: int
    exclude_order_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as seen by the order core."""
    user_id: str
    is_admin: bool = False

    def can_access(self, owner_id: str) -> bool:
        """Owners may act on their own orders; admins on anyone's."""
        return self.is_admin or self.user_id == owner_id
