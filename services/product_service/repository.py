from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from .models import Product


class ProductRepository:

    @staticmethod
    async def create_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def get_all_products(db: AsyncSession, provider_id: int | None = None):
        stmt = select(Product).order_by(Product.id)
        if provider_id is not None:
            stmt = stmt.where(Product.provider_id == provider_id)
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int):
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    # Every stock mutation is a single conditional UPDATE so concurrent
    # writers are serialized by the row itself. The caller owns the transaction.

    @staticmethod
    async def decrement_stock(db: AsyncSession, product_id: int, quantity: int) -> bool:
        """Compare-and-decrement. False when the row no longer has `quantity` available."""
        result = await db.execute(
            update(Product)
            .where(Product.id == product_id, Product.quantity >= quantity)
            .values(quantity=Product.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    async def increment_stock(db: AsyncSession, product_id: int, quantity: int) -> bool:
        result = await db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(quantity=Product.quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    async def get_available_quantity(db: AsyncSession, product_id: int) -> int:
        result = await db.execute(select(Product.quantity).where(Product.id == product_id))
        return result.scalar_one_or_none() or 0
