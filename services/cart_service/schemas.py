from decimal import Decimal

from pydantic import BaseModel, Field


class CartItemAdd(BaseModel):
    product_id: int
    qty: int = Field(default=1, gt=0)


class CartItemUpdate(BaseModel):
    qty: int = Field(gt=0)


class CartLineResponse(BaseModel):
    id: int
    product_id: int
    qty: int

    class Config:
        from_attributes = True


class CartItemView(BaseModel):
    """One cart row joined with the product and seller it points at."""
    id: int
    qty: int
    product_id: int
    name: str
    price: Decimal
    image_url: str | None = None
    stock: int
    company: str | None = None
    description: str | None = None
    provider_id: int | None = None
    shop_name: str | None = None


class CartDeleted(BaseModel):
    deleted: bool = True
