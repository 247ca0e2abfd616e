"""Global enums: values must match DB CHECK constraints exactly.

See alembic/versions/002_create_orders.py and 001_create_users.py.
"""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"
    RESOLVED = "RESOLVED"


TERMINAL_STATUSES: frozenset[str] = frozenset(
    {OrderStatus.CANCELLED.value, OrderStatus.RESOLVED.value}
)


class Currency(str, Enum):
    """Tradable currencies. Codes are lowercase ISO 4217."""
    AUD = "aud"
    CAD = "cad"
    CHF = "chf"
    CNY = "cny"
    EUR = "eur"
    GBP = "gbp"
    HKD = "hkd"
    INR = "inr"
    JPY = "jpy"
    NZD = "nzd"
    SGD = "sgd"
    USD = "usd"


CURRENCY_CODES: frozenset[str] = frozenset(c.value for c in Currency)


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
