"""
Client-facing error taxonomy.

Services raise these; the request boundary turns them into a structured
``{"error": {"kind": ..., "message": ...}}`` body with the matching status.
"""
from decimal import Decimal
from typing import Any, Iterable


class ServiceError(Exception):
    kind = "ServiceError"
    status_code = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, **self.extra}


class NotFound(ServiceError):
    kind = "NotFound"
    status_code = 404


class InsufficientStock(ServiceError):
    kind = "InsufficientStock"

    def __init__(self, product_id: int, product_name: str, available: int):
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}",
            product_id=product_id,
            product_name=product_name,
            available=available,
        )
        self.product_id = product_id


class EmptyCart(ServiceError):
    kind = "EmptyCart"

    def __init__(self, seller_scoped: bool = False):
        super().__init__("No items from this shop in cart" if seller_scoped else "Cart is empty")


class AmountMismatch(ServiceError):
    kind = "AmountMismatch"

    def __init__(self, expected: Decimal, actual: Decimal):
        super().__init__(
            "amount does not match cart total",
            expected=str(expected),
            actual=str(actual),
        )


class Forbidden(ServiceError):
    kind = "Forbidden"
    status_code = 403


class InvalidStatus(ServiceError):
    kind = "InvalidStatus"

    def __init__(self, status: Any, allowed: Iterable[str]):
        allowed = list(allowed)
        super().__init__(
            "Invalid status. Use: " + ", ".join(allowed),
            status=status,
            allowed=allowed,
        )
