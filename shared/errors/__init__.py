from .exceptions import (
    ServiceError,
    NotFound,
    InsufficientStock,
    EmptyCart,
    AmountMismatch,
    Forbidden,
    InvalidStatus,
)
from .handlers import register_exception_handlers

__all__ = [
    "ServiceError",
    "NotFound",
    "InsufficientStock",
    "EmptyCart",
    "AmountMismatch",
    "Forbidden",
    "InvalidStatus",
    "register_exception_handlers",
]
