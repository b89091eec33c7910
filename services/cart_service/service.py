import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.product_service.repository import ProductRepository
from shared.errors import InsufficientStock, NotFound
from .models import CartLine
from .repository import CartRepository
from .schemas import CartItemAdd, CartItemUpdate

logger = structlog.get_logger(__name__)


class CartService:
    """
    Buyer cart operations.

    Stock checks here are advisory: another buyer may take the stock before
    this cart is checked out. Checkout re-validates under a row lock.
    """

    @staticmethod
    async def list_cart(db: AsyncSession, user_id: int):
        return await CartRepository.list_view(db, user_id)

    @staticmethod
    async def add_item(db: AsyncSession, user_id: int, data: CartItemAdd) -> CartLine:
        try:
            return await CartService._upsert(db, user_id, data)
        except IntegrityError:
            # A parallel add for the same product won the insert; retry as an increment
            await db.rollback()
            return await CartService._upsert(db, user_id, data)

    @staticmethod
    async def _upsert(db: AsyncSession, user_id: int, data: CartItemAdd) -> CartLine:
        product = await ProductRepository.get_product_by_id(db, data.product_id)
        if not product:
            raise NotFound("Product not found", product_id=data.product_id)

        line = await CartRepository.get_line_for_product(db, user_id, data.product_id)
        existing_qty = line.qty if line else 0
        if existing_qty + data.qty > product.quantity:
            raise InsufficientStock(product.id, product.name, product.quantity)

        if line:
            line.qty = existing_qty + data.qty
        else:
            line = CartLine(user_id=user_id, product_id=product.id, qty=data.qty)
        line = await CartRepository.save(db, line)
        logger.info("cart_item_added", buyer_id=user_id, product_id=product.id, qty=line.qty)
        return line

    @staticmethod
    async def update_item(db: AsyncSession, user_id: int, line_id: int, data: CartItemUpdate) -> CartLine:
        line = await CartRepository.get_line(db, user_id, line_id)
        if not line:
            raise NotFound("Cart item not found", cart_item_id=line_id)

        product = await ProductRepository.get_product_by_id(db, line.product_id)
        if not product:
            raise NotFound("Product not found", product_id=line.product_id)
        if data.qty > product.quantity:
            raise InsufficientStock(product.id, product.name, product.quantity)

        line.qty = data.qty
        return await CartRepository.save(db, line)

    @staticmethod
    async def remove_item(db: AsyncSession, user_id: int, line_id: int) -> None:
        await CartRepository.remove_line(db, user_id, line_id)

    @staticmethod
    async def clear_cart(db: AsyncSession, user_id: int) -> None:
        await CartRepository.clear_cart(db, user_id)
