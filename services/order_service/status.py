"""Order status vocabulary and the per-seller to order-wide roll-up."""
from typing import Iterable

PENDING = "pending"
PROCESSING = "processing"
SHIPPED = "shipped"
DELIVERED = "delivered"
CANCELLED = "cancelled"

ORDER_STATUSES = (PENDING, PROCESSING, SHIPPED, DELIVERED, CANCELLED)

# Forward progression; cancelled sits outside it
PROGRESSION = (PENDING, PROCESSING, SHIPPED, DELIVERED)


def is_valid_status(status) -> bool:
    return status in ORDER_STATUSES


def aggregate_status(statuses: Iterable[str]) -> str:
    """
    Order-wide status derived from each seller's fulfillment status.

    Cancelled portions are ignored unless every portion is cancelled; the
    order is then only as far along as its least advanced live portion.
    """
    statuses = list(statuses)
    if not statuses:
        return PENDING
    live = [s for s in statuses if s != CANCELLED]
    if not live:
        return CANCELLED
    return min(live, key=PROGRESSION.index)
