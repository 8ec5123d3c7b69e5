"""
Domain exceptions for parstock.

Each class names the HTTP status and recovery hint the API reports for it,
so handlers never need a type-to-status table. Scope-lock conflicts and PO
mismatches are outcomes, not errors, and are returned as values by the
services that produce them.
"""

from typing import Any, ClassVar


class ParstockError(Exception):
    """Base exception for all parstock errors."""

    http_status: ClassVar[int] = 500
    hint: ClassVar[str] = "An internal error occurred. Check server logs."

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "details": self.details}


class StorageError(ParstockError):
    hint = "A storage operation failed. Check server logs."


class DatabaseError(StorageError):
    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class NotFoundError(StorageError):
    """A record of this venue disappeared or never existed."""

    http_status = 404
    hint = "The requested record does not exist for this venue. Verify the ID."

    def __init__(self, kind: str, key: str, record_id: str, code: str):
        super().__init__(
            f"{kind} not found: {record_id}",
            code=code,
            details={key: record_id},
        )


class OrderNotFoundError(NotFoundError):
    hint = "Check the order ID; only orders of this venue can be gated."

    def __init__(self, order_id: str):
        super().__init__("Order", "order_id", order_id, "ORDER_NOT_FOUND")


class ProductNotFoundError(NotFoundError):
    hint = "Check the product ID against the venue catalog."

    def __init__(self, product_id: str):
        super().__init__("Product", "product_id", product_id, "PRODUCT_NOT_FOUND")


class SupplierNotFoundError(NotFoundError):
    hint = "Create the supplier first or assign 'unassigned'."

    def __init__(self, supplier_id: str):
        super().__init__("Supplier", "supplier_id", supplier_id, "SUPPLIER_NOT_FOUND")


class ItemNotFoundError(NotFoundError):
    hint = "Check the area item ID; it may have been removed from the count."

    def __init__(self, item_id: str):
        super().__init__("Area item", "item_id", item_id, "ITEM_NOT_FOUND")


class ReconciliationError(ParstockError):
    http_status = 502
    hint = "Invoice reconciliation failed upstream. Retry later."


class RemoteReconciliationError(ReconciliationError):
    """The remote reconciliation service failed or refused the request."""

    hint = (
        "The reconciliation service is unreachable or refused the invoice. "
        "Retry or switch RECON_MODE to local."
    )

    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(
            f"Remote reconciliation failed: {reason}",
            code="REMOTE_RECONCILIATION_FAILED",
            details={"reason": reason, "status_code": status_code},
        )


class ValidationError(ParstockError):
    """Input that parses but makes no sense for the operation."""

    http_status = 400
    hint = "Check the request body against the API schema."

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ConfigurationError(ParstockError):
    hint = "Check the environment settings and restart."
