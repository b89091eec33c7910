from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field

from services.order_service.schemas import OrderResponse


class PaymentInitialize(BaseModel):
    amount: Decimal | None = None # client-side total; checked against the cart
    email: EmailStr
    provider_id: int | None = None


class PaymentVerify(BaseModel):
    reference: str = Field(min_length=1)


class PaymentReinitialize(BaseModel):
    order_id: int


class PaymentSessionResponse(BaseModel):
    authorization_url: str
    reference: str
    order: OrderResponse
