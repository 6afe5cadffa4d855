"""Error Hierarchy — typed, categorized exceptions for every ledger failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Four families under MarketplaceError: Authorization, Validation, State, FundMovement
    - Every error aborts the operation with no partial state change; none are retried
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with MarketplaceError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Family base classes carry the category and HTTP status; leaves only add
      message, code and the structured fields callers need (sent/required, ids)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    STATE = "state"
    FUND_MOVEMENT = "fund_movement"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    caller: str | None = None
    item_id: int | None = None
    order_id: int | None = None
    debug_info: dict[str, Any] | None = None


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "caller": self.context.caller,
                    "item_id": self.context.item_id,
                    "order_id": self.context.order_id,
                    **(self.context.debug_info or {}),
                },
            }
        }


# ─── Families ───────────────────────────────────────────────────

class AuthorizationError(MarketplaceError):
    """Caller is not allowed to perform the operation."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ValidationError(MarketplaceError):
    """An input is malformed or references nothing."""
    def __init__(
        self, message: str, code: str, context: ErrorContext | None = None,
        http_status: int = 400,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, http_status,
        )


class StateError(MarketplaceError):
    """Operation is not valid for the current item/order state."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.STATE,
            ErrorSeverity.ERROR, context, 409,
        )


class FundMovementError(MarketplaceError):
    """Payout or refund transfer failed; the operation was rolled back."""
    def __init__(
        self, message: str, recipient: str | None = None, amount: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "FUND_MOVEMENT_FAILED", ErrorCategory.FUND_MOVEMENT,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.recipient = recipient
        self.amount = amount


# ─── Authorization ──────────────────────────────────────────────

class NotAdmin(AuthorizationError):
    def __init__(self, caller: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{caller}' is not an admin", "NOT_ADMIN", context,
        )


class UnauthorizedSeller(AuthorizationError):
    def __init__(self, caller: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{caller}' is not the seller of this order",
            "UNAUTHORIZED_SELLER", context,
        )


class UnauthorizedBuyer(AuthorizationError):
    def __init__(self, caller: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{caller}' is not the buyer of this order",
            "UNAUTHORIZED_BUYER", context,
        )


class UnauthorizedDispute(AuthorizationError):
    """Only the buyer or the seller of an order may dispute it."""
    def __init__(self, caller: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{caller}' is neither buyer nor seller of this order",
            "UNAUTHORIZED_DISPUTE", context,
        )


# ─── Validation ─────────────────────────────────────────────────

class InvalidItemId(ValidationError):
    def __init__(self, item_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid item ID: {item_id}", "INVALID_ITEM_ID", context, 404,
        )
        self.item_id = item_id


class InvalidOrderId(ValidationError):
    def __init__(self, order_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid order ID: {order_id}", "INVALID_ORDER_ID", context, 404,
        )
        self.order_id = order_id


class InvalidName(ValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Item name cannot be empty", "INVALID_NAME", context)


class InvalidDescription(ValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Item description cannot be empty", "INVALID_DESCRIPTION", context,
        )


class PriceTooLow(ValidationError):
    def __init__(self, price: int, context: ErrorContext | None = None):
        super().__init__(
            f"Price must be a positive integer, got {price}", "PRICE_TOO_LOW", context,
        )
        self.price = price


class InvalidAdmin(ValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot add zero address as admin", "INVALID_ADMIN", context,
        )


class InvalidAmount(ValidationError):
    def __init__(self, amount: int, context: ErrorContext | None = None):
        super().__init__(
            f"Amount must be a positive integer, got {amount}", "INVALID_AMOUNT", context,
        )
        self.amount = amount


# ─── State ──────────────────────────────────────────────────────

class ItemNotAvailable(StateError):
    def __init__(self, item_id: int, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Item {item_id} is not available (status: {status})",
            "ITEM_NOT_AVAILABLE", context,
        )


class SelfPurchase(StateError):
    def __init__(self, item_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Sellers cannot purchase their own item ({item_id})",
            "SELF_PURCHASE", context,
        )


class IncorrectPayment(StateError):
    """Payment must match the price exactly — no overpay, no underpay."""
    def __init__(self, sent: int, required: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.debug_info = {**(ctx.debug_info or {}), "sent": sent, "required": required}
        super().__init__(
            f"Incorrect payment: sent {sent}, required {required}",
            "INCORRECT_PAYMENT", ctx,
        )
        self.sent = sent
        self.required = required


class OrderNotPending(StateError):
    def __init__(self, order_id: int, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Order {order_id} is not pending (status: {status})",
            "ORDER_NOT_PENDING", context,
        )


class ItemNotShipped(StateError):
    def __init__(self, order_id: int, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Order {order_id} has not been shipped (status: {status})",
            "ITEM_NOT_SHIPPED", context,
        )


class OrderNotInDispute(StateError):
    def __init__(self, order_id: int, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Order {order_id} is not in dispute (status: {status})",
            "ORDER_NOT_IN_DISPUTE", context,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(MarketplaceError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
