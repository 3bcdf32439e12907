"""
Domain exceptions for the ordering backend

Services raise these; the HTTP layer maps them to status codes in
app.core.errors. Anything else that escapes a service is an internal error.
"""
from typing import Optional


class OrderingError(Exception):
    """Base class for expected business outcomes"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(OrderingError):
    """Customer, product or order does not exist"""

    status_code = 404


class ConflictError(OrderingError):
    """Request is valid but conflicts with current state"""

    status_code = 409


class InsufficientStockError(ConflictError):
    """Requested quantity exceeds the product's available stock"""

    def __init__(self, sku: str, requested: int, available: Optional[int] = None):
        message = f"Insufficient stock for SKU {sku}"
        if available is not None:
            message += f" (requested {requested}, available {available})"
        super().__init__(message)
        self.sku = sku
        self.requested = requested
        self.available = available


class InvalidArgumentError(OrderingError):
    """Argument outside the accepted domain (e.g. unknown status value)"""

    status_code = 400


class InternalError(Exception):
    """Unexpected storage or transaction failure; detail is for logs only"""

    status_code = 500
