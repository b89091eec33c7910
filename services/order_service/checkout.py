"""
Checkout: turns a buyer's cart into an order in one database transaction.

The cart read locks the product rows, the stock decrement is conditional on
the row still holding enough units, and any failure rolls back the order,
its items, the stock changes and the cart deletion together.
"""
from dataclasses import dataclass
from decimal import Decimal

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.cart_service.repository import CartRepository
from services.product_service.repository import ProductRepository
from shared.config.settings import PAYMENT_AMOUNT_TOLERANCE
from shared.errors import AmountMismatch, EmptyCart, InsufficientStock
from shared.observability import (
    ecomm_checkout_duration_seconds,
    ecomm_checkout_total,
    ecomm_stock_conflicts_total,
)
from .models import Order, OrderFulfillment, OrderItem
from .repository import OrderRepository
from .status import PENDING

logger = structlog.get_logger(__name__)


@dataclass
class CheckoutResult:
    order: Order
    replayed: bool = False


class CheckoutEngine:

    @staticmethod
    async def checkout(
        db: AsyncSession,
        buyer_id: int,
        provider_id: int | None = None,
        *,
        payment_ref: str | None = None,
        expected_amount: Decimal | None = None,
        idempotency_key: str | None = None,
        mode: str = "direct",
    ) -> CheckoutResult:
        """
        Creates one order from the buyer's cart lines, optionally only those
        sold by `provider_id`.

        `expected_amount` is the total the client believes it is paying; it
        must be within PAYMENT_AMOUNT_TOLERANCE of the computed total.
        A repeated `idempotency_key` returns the order it first created.
        """
        log = logger.bind(buyer_id=buyer_id, provider_id=provider_id, mode=mode)

        if idempotency_key:
            existing = await OrderRepository.get_by_idempotency_key(db, buyer_id, idempotency_key)
            if existing:
                log.info("checkout_replayed", order_id=existing.id)
                ecomm_checkout_total.labels(status="replayed", mode=mode).inc()
                return CheckoutResult(existing, replayed=True)

        with ecomm_checkout_duration_seconds.time():
            try:
                order = await CheckoutEngine._place_order(
                    db, buyer_id, provider_id, payment_ref, expected_amount, idempotency_key
                )
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                if idempotency_key:
                    # A concurrent request with the same key committed first
                    existing = await OrderRepository.get_by_idempotency_key(db, buyer_id, idempotency_key)
                    if existing:
                        log.info("checkout_replayed", order_id=existing.id)
                        ecomm_checkout_total.labels(status="replayed", mode=mode).inc()
                        return CheckoutResult(existing, replayed=True)
                ecomm_checkout_total.labels(status="failed", mode=mode).inc()
                log.warning("checkout_failed", error=str(exc.orig), kind="IntegrityError")
                raise
            except Exception as exc:
                await db.rollback()
                ecomm_checkout_total.labels(status="failed", mode=mode).inc()
                log.warning("checkout_failed", error=str(exc), kind=getattr(exc, "kind", type(exc).__name__))
                raise

        ecomm_checkout_total.labels(status="success", mode=mode).inc()
        log.info("checkout_completed", order_id=order.id, total=str(order.total), items=len(order.items))
        return CheckoutResult(order)

    @staticmethod
    async def _place_order(
        db: AsyncSession,
        buyer_id: int,
        provider_id: int | None,
        payment_ref: str | None,
        expected_amount: Decimal | None,
        idempotency_key: str | None,
    ) -> Order:
        lines = await CartRepository.lines_for_checkout(db, buyer_id, provider_id)
        if not lines:
            raise EmptyCart(seller_scoped=provider_id is not None)

        for line, product in lines:
            if line.qty > product.quantity:
                raise InsufficientStock(product.id, product.name, product.quantity)

        total = sum((Decimal(product.price) * line.qty for line, product in lines), Decimal("0"))

        if expected_amount is not None and abs(Decimal(expected_amount) - total) > PAYMENT_AMOUNT_TOLERANCE:
            raise AmountMismatch(expected=total, actual=Decimal(expected_amount))

        order = Order(
            user_id=buyer_id,
            total=total,
            status=PENDING,
            payment_ref=payment_ref,
            idempotency_key=idempotency_key,
        )
        order.items = [
            OrderItem(
                product=product,
                provider_id=product.provider_id,
                qty=line.qty,
                price=product.price,
            )
            for line, product in lines
        ]
        sellers = dict.fromkeys(product.provider_id for _, product in lines)
        order.fulfillments = [OrderFulfillment(provider_id=seller, status=PENDING) for seller in sellers]
        db.add(order)
        await db.flush()

        for line, product in lines:
            if not await ProductRepository.decrement_stock(db, product.id, line.qty):
                # Another checkout took the units between our read and this write
                ecomm_stock_conflicts_total.inc()
                available = await ProductRepository.get_available_quantity(db, product.id)
                raise InsufficientStock(product.id, product.name, available)

        await CartRepository.delete_lines(db, [line.id for line, _ in lines])
        return order
