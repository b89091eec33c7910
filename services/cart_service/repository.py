from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from services.account_service.models import Provider, User
from services.account_service.repository import AccountRepository
from services.product_service.models import Product
from .models import CartLine


class CartRepository:

    @staticmethod
    async def get_line(db: AsyncSession, user_id: int, line_id: int):
        result = await db.execute(
            select(CartLine).where(CartLine.id == line_id, CartLine.user_id == user_id)
        )
        return result.scalars().first()

    @staticmethod
    async def get_line_for_product(db: AsyncSession, user_id: int, product_id: int):
        result = await db.execute(
            select(CartLine).where(CartLine.user_id == user_id, CartLine.product_id == product_id)
        )
        return result.scalars().first()

    @staticmethod
    async def save(db: AsyncSession, line: CartLine):
        db.add(line)
        await db.commit()
        await db.refresh(line)
        return line

    @staticmethod
    async def list_view(db: AsyncSession, user_id: int):
        stmt = (
            select(
                CartLine.id,
                CartLine.qty,
                CartLine.product_id,
                Product.name,
                Product.price,
                Product.image_url,
                Product.quantity.label("stock"),
                Product.company,
                Product.description,
                Product.provider_id,
                AccountRepository.seller_display_name().label("shop_name"),
            )
            .join(Product, CartLine.product_id == Product.id)
            .outerjoin(Provider, Product.provider_id == Provider.id)
            .outerjoin(User, Provider.user_id == User.id)
            .where(CartLine.user_id == user_id)
            .order_by(CartLine.id)
        )
        result = await db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def lines_for_checkout(db: AsyncSession, user_id: int, provider_id: int | None = None):
        """
        Cart lines with their products, read for checkout.

        Product rows are locked FOR UPDATE in id order so concurrent checkouts
        queue on the same rows instead of deadlocking. populate_existing makes
        sure the identity map never hands back a stale stock figure.
        """
        stmt = (
            select(CartLine, Product)
            .join(Product, CartLine.product_id == Product.id)
            .where(CartLine.user_id == user_id)
            .order_by(Product.id)
            .with_for_update(of=Product)
            .execution_options(populate_existing=True)
        )
        if provider_id is not None:
            stmt = stmt.where(Product.provider_id == provider_id)
        result = await db.execute(stmt)
        return result.all()

    @staticmethod
    async def delete_lines(db: AsyncSession, line_ids: list[int]):
        """Deletes the given rows without committing; checkout owns the transaction."""
        if line_ids:
            await db.execute(delete(CartLine).where(CartLine.id.in_(line_ids)))

    @staticmethod
    async def remove_line(db: AsyncSession, user_id: int, line_id: int):
        stmt = delete(CartLine).where(CartLine.id == line_id, CartLine.user_id == user_id)
        await db.execute(stmt)
        await db.commit()

    @staticmethod
    async def clear_cart(db: AsyncSession, user_id: int):
        """Deletes all items for the buyer and forces a commit."""
        stmt = delete(CartLine).where(CartLine.user_id == user_id)
        await db.execute(stmt)
        await db.commit()
