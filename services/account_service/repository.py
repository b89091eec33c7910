from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Provider, User


class AccountRepository:

    @staticmethod
    async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalars().first()

    @staticmethod
    async def get_users(db: AsyncSession, user_ids: set[int]) -> dict[int, User]:
        if not user_ids:
            return {}
        result = await db.execute(select(User).where(User.id.in_(user_ids)))
        return {user.id: user for user in result.scalars().all()}

    @staticmethod
    async def get_provider_for_user(db: AsyncSession, user_id: int) -> Optional[Provider]:
        result = await db.execute(
            select(Provider).where(Provider.user_id == user_id).order_by(Provider.id)
        )
        return result.scalars().first()

    @staticmethod
    def seller_display_name():
        """Column expression for the name shown to buyers next to a seller's products."""
        return func.coalesce(Provider.shop_name, User.name, Provider.name)
