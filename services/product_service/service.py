import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFound
from .models import Product
from .repository import ProductRepository
from .schemas import ProductCreate

logger = structlog.get_logger(__name__)


class ProductService:

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate):
        product = Product(
            provider_id=data.provider_id,
            name=data.name,
            price=data.price,
            quantity=data.quantity,
            company=data.company,
            description=data.description,
            image_url=data.image_url,
        )
        product = await ProductRepository.create_product(db, product)
        logger.info("product_created", product_id=product.id, provider_id=product.provider_id)
        return product

    @staticmethod
    async def list_products(db: AsyncSession, provider_id: int | None = None):
        return await ProductRepository.get_all_products(db, provider_id)

    @staticmethod
    async def get_product(db: AsyncSession, product_id: int):
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFound("Product not found", product_id=product_id)
        return product

    @staticmethod
    async def restock(db: AsyncSession, product_id: int, quantity: int):
        if not await ProductRepository.increment_stock(db, product_id, quantity):
            await db.rollback()
            raise NotFound("Product not found", product_id=product_id)
        await db.commit()
        logger.info("product_restocked", product_id=product_id, quantity=quantity)
        product = await ProductRepository.get_product_by_id(db, product_id)
        return product
