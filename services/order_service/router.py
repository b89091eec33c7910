from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.config.settings import CHECKOUT_RATE_LIMIT
from shared.notifications import SmsSender, get_sms_sender
from shared.security import AuthenticatedUser, get_current_user, limiter, require_seller

from .checkout import CheckoutEngine
from .notifications import notify_buyer_of_status
from .schemas import CheckoutRequest, OrderResponse, SellerOrderResponse, StatusUpdate
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.list_orders(db, user.id)


@router.post("/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(CHECKOUT_RATE_LIMIT)
async def checkout(
    request: Request,                          # REQUIRED: slowapi needs this to check IP/Headers
    response: Response,
    payload: CheckoutRequest | None = None,
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Direct checkout: no gateway, no payment reference."""
    provider_id = payload.provider_id if payload else None
    result = await CheckoutEngine.checkout(
        db, user.id, provider_id, idempotency_key=idempotency_key, mode="direct"
    )
    if result.replayed:
        response.status_code = status.HTTP_200_OK
    return result.order


# --- Seller fulfillment view (declared before /{order_id}) ---

@router.get("/seller", response_model=list[SellerOrderResponse])
async def list_seller_orders(
    user: AuthenticatedUser = Depends(require_seller),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.list_seller_orders(db, user)


@router.get("/seller/{order_id}", response_model=SellerOrderResponse)
async def get_seller_order(
    order_id: int,
    user: AuthenticatedUser = Depends(require_seller),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.get_seller_order(db, user, order_id)


@router.patch("/seller/{order_id}/status", response_model=SellerOrderResponse)
async def update_seller_status(
    order_id: int,
    payload: StatusUpdate,
    background_tasks: BackgroundTasks,
    user: AuthenticatedUser = Depends(require_seller),
    db: AsyncSession = Depends(get_db),
    sms: SmsSender = Depends(get_sms_sender),
):
    view = await OrderService.update_seller_status(db, user, order_id, payload.status)
    # Buyer notification is best effort and runs after the response is built
    background_tasks.add_task(
        notify_buyer_of_status,
        sms,
        view.buyer.phone if view.buyer else None,
        view.id,
        payload.status,
    )
    return view


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.get_order(db, user.id, order_id)
