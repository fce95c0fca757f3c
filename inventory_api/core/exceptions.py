# =========================================================
# INVENTORY ERRORS
#
# Raised by the engine and query functions, mapped to HTTP
# responses by a single handler registered in main.py.
# Every error carries a machine-readable code.
# =========================================================


class InventoryError(Exception):
    """Base class for every error raised by the inventory core."""

    code: str = "INVENTORY_ERROR"
    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(InventoryError):
    code = "NOT_FOUND"
    status_code = 404

    @classmethod
    def product(cls, product_id):
        return cls(f"Product not found: {product_id}")


class InvalidArgument(InventoryError):
    code = "INVALID_ARGUMENT"
    status_code = 400


class InsufficientStock(InventoryError):
    """The requested delta would drive stock below zero."""

    code = "INSUFFICIENT_STOCK"
    status_code = 400

    def __init__(self, product_id: int, stock: int, delta: int):
        self.product_id = product_id
        self.stock = stock
        self.delta = delta
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"have {stock}, requested change {delta}"
        )


class ConcurrentUpdateError(InventoryError):
    """Optimistic retries were exhausted while other writers kept winning."""

    code = "CONCURRENT_UPDATE"
    status_code = 409


class ImmutabilityViolation(InventoryError):
    code = "IMMUTABLE_RECORD"
    status_code = 409

    def __init__(self, entity_type: str, entity_id, operation: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.operation = operation
        super().__init__(
            f"{entity_type} {entity_id} is append-only and cannot be {operation}"
        )


class DeliveryError(InventoryError):
    """Notification channel failure. Never surfaced to API callers."""

    code = "DELIVERY_FAILED"
    status_code = 502
