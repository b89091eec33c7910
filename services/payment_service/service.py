import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.order_service.checkout import CheckoutEngine
from services.order_service.repository import OrderRepository
from services.order_service.schemas import OrderResponse
from services.order_service.service import OrderService
from shared.config.settings import PAYMENT_REF_PREFIX
from shared.errors import NotFound
from shared.observability import ecomm_payment_references_total, ecomm_payment_verifications_total
from .gateway import gateway
from .reference import generate_payment_ref
from .repository import PaymentRepository
from .schemas import PaymentInitialize, PaymentSessionResponse

logger = structlog.get_logger(__name__)

# Reference collisions are practically impossible; the unique index is the backstop
MAX_REFERENCE_ATTEMPTS = 3


class PaymentService:

    @staticmethod
    async def initialize(
        db: AsyncSession, buyer_id: int, data: PaymentInitialize, idempotency_key: str | None = None
    ) -> tuple[PaymentSessionResponse, bool]:
        """
        Checks out the cart and attaches a fresh gateway reference to the new
        order in the same transaction, so no reference exists without an order.
        """
        reference = generate_payment_ref(PAYMENT_REF_PREFIX)
        result = await CheckoutEngine.checkout(
            db,
            buyer_id,
            data.provider_id,
            payment_ref=reference,
            expected_amount=data.amount,
            idempotency_key=idempotency_key,
            mode="gateway",
        )
        order = result.order
        if result.replayed:
            if not order.payment_ref:
                order = await PaymentService._remint(db, order, kind="initialize")
            reference = order.payment_ref
        else:
            ecomm_payment_references_total.labels(kind="initialize").inc()

        logger.info("payment_initialized", order_id=order.id, buyer_id=buyer_id, reference=reference)
        session = PaymentSessionResponse(
            authorization_url=gateway.authorization_url(reference),
            reference=reference,
            order=OrderResponse.model_validate(order),
        )
        return session, result.replayed

    @staticmethod
    async def verify(db: AsyncSession, buyer_id: int, reference: str):
        """
        Applies a gateway confirmation. A pending order moves to processing;
        any other state is returned unchanged, so repeats are harmless.
        """
        order = await OrderRepository.get_by_payment_ref(db, buyer_id, reference)
        if not order:
            await db.rollback()
            ecomm_payment_verifications_total.labels(outcome="not_found").inc()
            raise NotFound("Order not found for this reference", reference=reference)

        if OrderService.confirm_payment(order):
            await db.commit()
            ecomm_payment_verifications_total.labels(outcome="advanced").inc()
            logger.info("payment_verified", order_id=order.id, reference=reference, status=order.status)
        else:
            # Nothing changed; commit only releases the row lock
            await db.commit()
            ecomm_payment_verifications_total.labels(outcome="noop").inc()
            logger.info("payment_verify_noop", order_id=order.id, reference=reference, status=order.status)
        return order

    @staticmethod
    async def reinitialize(db: AsyncSession, buyer_id: int, order_id: int) -> PaymentSessionResponse:
        """Replaces the order's reference. Items, total and stock stay as committed."""
        order = await OrderRepository.get_buyer_order(db, buyer_id, order_id, for_update=True)
        if not order:
            await db.rollback()
            raise NotFound("Order not found", order_id=order_id)

        order = await PaymentService._remint(db, order, kind="reinitialize")
        logger.info("payment_reinitialized", order_id=order.id, buyer_id=buyer_id, reference=order.payment_ref)
        return PaymentSessionResponse(
            authorization_url=gateway.authorization_url(order.payment_ref, reinitialized=True),
            reference=order.payment_ref,
            order=OrderResponse.model_validate(order),
        )

    @staticmethod
    async def _remint(db: AsyncSession, order, kind: str):
        order_id = order.id
        for attempt in range(1, MAX_REFERENCE_ATTEMPTS + 1):
            try:
                order = await PaymentRepository.attach_reference(db, order, generate_payment_ref(PAYMENT_REF_PREFIX))
            except IntegrityError:
                await db.rollback()
                logger.warning("payment_reference_collision", order_id=order_id, attempt=attempt)
                if attempt == MAX_REFERENCE_ATTEMPTS:
                    raise
                order = await OrderRepository.get_order(db, order_id, for_update=True)
                continue
            ecomm_payment_references_total.labels(kind=kind).inc()
            return order
