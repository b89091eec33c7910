from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from services.account_service.schemas import BuyerContact


class CheckoutRequest(BaseModel):
    provider_id: int | None = None # checkout only this agrovet's lines


class StatusUpdate(BaseModel):
    status: str | None = None


class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    provider_id: int | None
    qty: int
    price: Decimal
    name: str | None = None
    image_url: str | None = None
    company: str | None = None

    class Config:
        from_attributes = True


class FulfillmentResponse(BaseModel):
    provider_id: int | None
    status: str

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    user_id: int
    total: Decimal
    status: str
    payment_ref: str | None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = []
    fulfillments: list[FulfillmentResponse] = []

    class Config:
        from_attributes = True


class SellerOrderResponse(BaseModel):
    """An order as one seller sees it: only that seller's lines and portion status."""
    id: int
    user_id: int
    total: Decimal
    status: str
    fulfillment_status: str
    payment_ref: str | None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = []
    buyer: BuyerContact | None = None
