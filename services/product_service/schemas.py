from decimal import Decimal

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    provider_id: int
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    quantity: int = Field(default=0, ge=0)
    company: str | None = None
    description: str | None = None
    image_url: str | None = None


class StockUpdate(BaseModel):
    quantity: int = Field(gt=0)


class ProductResponse(BaseModel):
    id: int
    provider_id: int | None
    name: str
    price: Decimal
    quantity: int
    company: str | None = None
    description: str | None = None
    image_url: str | None = None

    class Config:
        from_attributes = True
