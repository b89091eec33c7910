from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .models import Provider
from .repository import AccountRepository
from .schemas import BuyerContact


class AccountService:
    """Read-only lookups the checkout core needs from the accounts collaborator."""

    @staticmethod
    async def get_buyer_contact(db: AsyncSession, user_id: int) -> Optional[BuyerContact]:
        user = await AccountRepository.get_user(db, user_id)
        if not user:
            return None
        return BuyerContact.model_validate(user)

    @staticmethod
    async def get_buyer_contacts(db: AsyncSession, user_ids: set[int]) -> dict[int, BuyerContact]:
        users = await AccountRepository.get_users(db, user_ids)
        return {uid: BuyerContact.model_validate(user) for uid, user in users.items()}

    @staticmethod
    async def get_seller_provider(db: AsyncSession, user_id: int) -> Optional[Provider]:
        return await AccountRepository.get_provider_for_user(db, user_id)
