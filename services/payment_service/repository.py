from sqlalchemy.ext.asyncio import AsyncSession

from services.order_service.models import Order


class PaymentRepository:
    @staticmethod
    async def attach_reference(db: AsyncSession, order: Order, reference: str):
        order.payment_ref = reference
        await db.commit()
        return order
