from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security.dependencies import verify_internal_api_key
from .schemas import ProductCreate, ProductResponse, StockUpdate
from .service import ProductService

# Catalog management is owned by another team; writes need the internal key
router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(verify_internal_api_key)])
public_router = APIRouter(prefix="/products", tags=["Products"])


@public_router.get("", response_model=list[ProductResponse])
async def list_products(
    provider_id: int | None = Query(default=None),
    db: AsyncSession = Depends(get_db)
):
    return await ProductService.list_products(db, provider_id)


@public_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await ProductService.get_product(db, product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(product: ProductCreate, db: AsyncSession = Depends(get_db)):
    return await ProductService.create_product(db, product)


@router.post("/{product_id}/restock", response_model=ProductResponse)
async def restock(product_id: int, payload: StockUpdate, db: AsyncSession = Depends(get_db)):
    return await ProductService.restock(db, product_id, payload.quantity)
