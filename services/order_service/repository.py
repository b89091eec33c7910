from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Order, OrderItem


class OrderRepository:

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int, for_update: bool = False):
        stmt = select(Order).where(Order.id == order_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def get_buyer_order(db: AsyncSession, user_id: int, order_id: int, for_update: bool = False):
        stmt = select(Order).where(Order.id == order_id, Order.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def get_by_payment_ref(db: AsyncSession, user_id: int, reference: str):
        result = await db.execute(
            select(Order)
            .where(Order.payment_ref == reference, Order.user_id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def get_by_idempotency_key(db: AsyncSession, user_id: int, key: str):
        result = await db.execute(
            select(Order).where(Order.user_id == user_id, Order.idempotency_key == key)
        )
        return result.scalars().first()

    @staticmethod
    async def list_buyer_orders(db: AsyncSession, user_id: int):
        result = await db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_seller_orders(db: AsyncSession, provider_id: int):
        seller_order_ids = (
            select(OrderItem.order_id)
            .where(OrderItem.provider_id == provider_id)
            .distinct()
        )
        result = await db.execute(
            select(Order)
            .where(Order.id.in_(seller_order_ids))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return result.scalars().all()
