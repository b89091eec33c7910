from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security.dependencies import AuthenticatedUser, get_current_user

from .schemas import CartDeleted, CartItemAdd, CartItemUpdate, CartItemView, CartLineResponse
from .service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=list[CartItemView])
async def get_cart(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CartService.list_cart(db, user.id)


@router.post("/add", response_model=CartLineResponse, status_code=status.HTTP_201_CREATED)
async def add_item(
    item: CartItemAdd,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CartService.add_item(db, user.id, item)


@router.put("/{line_id}", response_model=CartLineResponse)
async def update_item(
    line_id: int,
    item: CartItemUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CartService.update_item(db, user.id, line_id, item)


@router.delete("/{line_id}", response_model=CartDeleted)
async def remove_item(
    line_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CartService.remove_item(db, user.id, line_id)
    return CartDeleted()


@router.delete("", response_model=CartDeleted)
async def clear_cart(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Deletes all items in the buyer's cart."""
    await CartService.clear_cart(db, user.id)
    return CartDeleted()
