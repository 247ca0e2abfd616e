"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  4xxx: Order
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired credentials", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class OrderAccessDeniedError(AppError):
    """Acting user is neither the order owner nor an admin."""

    def __init__(self, user_id: str, resource: str) -> None:
        super().__init__(1006, f"User {user_id} is not allowed to access {resource}", 403)


# --- 4xxx: Order ---

class OrderValidationError(AppError):
    """An order write would violate a field-level invariant.

    ``field`` names the offending field so callers can point at it.
    """

    def __init__(self, field: str, detail: str, code: int = 4001) -> None:
        self.field = field
        super().__init__(code, f"Order validation failed: {field}: {detail}", 422)


class RejectLimitExceededError(OrderValidationError):
    def __init__(self, limit: int, attempted: int) -> None:
        super().__init__(
            "rejects",
            f"{attempted} rejections exceed the maximum of {limit} for an order",
            code=4002,
        )


class UnknownCurrencyError(OrderValidationError):
    def __init__(self, field: str, currency: str) -> None:
        super().__init__(field, f"unknown currency code {currency!r}", code=4003)


class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Order not found: {order_id}", 404)


class InvalidStateTransitionError(AppError):
    def __init__(self, order_id: str, status: str) -> None:
        self.status = status
        super().__init__(
            4006, f"Order {order_id} in status {status} can no longer be updated", 409
        )


class OrderVersionConflictError(AppError):
    def __init__(self, order_id: str, expected_version: int) -> None:
        super().__init__(
            4007,
            f"Order {order_id} was modified concurrently (expected version {expected_version})",
            409,
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
