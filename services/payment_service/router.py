from fastapi import APIRouter, Depends, Header, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.order_service.schemas import OrderResponse
from shared.config.database import get_db
from shared.config.settings import CHECKOUT_RATE_LIMIT
from shared.security import AuthenticatedUser, get_current_user, limiter

from .schemas import PaymentInitialize, PaymentReinitialize, PaymentSessionResponse, PaymentVerify
from .service import PaymentService

router = APIRouter(prefix="/orders/paystack", tags=["Payments"])


@router.post("/initialize", response_model=PaymentSessionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(CHECKOUT_RATE_LIMIT)
async def initialize_payment(
    request: Request,
    response: Response,
    payload: PaymentInitialize,
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session, replayed = await PaymentService.initialize(db, user.id, payload, idempotency_key)
    if replayed:
        response.status_code = status.HTTP_200_OK
    return session


@router.post("/verify", response_model=OrderResponse)
async def verify_payment(
    payload: PaymentVerify,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await PaymentService.verify(db, user.id, payload.reference)


@router.post("/reinitialize", response_model=PaymentSessionResponse)
async def reinitialize_payment(
    payload: PaymentReinitialize,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await PaymentService.reinitialize(db, user.id, payload.order_id)
