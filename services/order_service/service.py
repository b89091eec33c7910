import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from services.account_service.schemas import BuyerContact
from services.account_service.service import AccountService
from shared.errors import Forbidden, InvalidStatus, NotFound
from shared.observability import ecomm_status_updates_total
from shared.security import AuthenticatedUser
from .models import Order
from .repository import OrderRepository
from .schemas import OrderItemResponse, SellerOrderResponse
from .status import ORDER_STATUSES, PENDING, PROCESSING, aggregate_status, is_valid_status

logger = structlog.get_logger(__name__)


class OrderService:

    # --- Buyer reads ---

    @staticmethod
    async def list_orders(db: AsyncSession, buyer_id: int):
        return await OrderRepository.list_buyer_orders(db, buyer_id)

    @staticmethod
    async def get_order(db: AsyncSession, buyer_id: int, order_id: int) -> Order:
        order = await OrderRepository.get_buyer_order(db, buyer_id, order_id)
        if not order:
            raise NotFound("Order not found", order_id=order_id)
        return order

    # --- Status transitions ---

    @staticmethod
    def confirm_payment(order: Order) -> bool:
        """
        Moves every pending seller portion to processing after the gateway
        confirms payment. Returns False when there was nothing to advance.
        """
        if order.status != PENDING:
            return False
        for fulfillment in order.fulfillments:
            if fulfillment.status == PENDING:
                fulfillment.status = PROCESSING
        order.status = aggregate_status(f.status for f in order.fulfillments)
        return True

    # --- Seller fulfillment view ---

    @staticmethod
    async def list_seller_orders(db: AsyncSession, user: AuthenticatedUser) -> list[SellerOrderResponse]:
        provider = await AccountService.get_seller_provider(db, user.id)
        if not provider:
            return []
        orders = await OrderRepository.list_seller_orders(db, provider.id)
        buyers = await AccountService.get_buyer_contacts(db, {order.user_id for order in orders})
        return [OrderService._seller_view(order, provider.id, buyers.get(order.user_id)) for order in orders]

    @staticmethod
    async def get_seller_order(db: AsyncSession, user: AuthenticatedUser, order_id: int) -> SellerOrderResponse:
        provider = await AccountService.get_seller_provider(db, user.id)
        order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFound("Order not found", order_id=order_id)
        OrderService._ensure_seller_share(order, provider)
        buyer = await AccountService.get_buyer_contact(db, order.user_id)
        return OrderService._seller_view(order, provider.id, buyer)

    @staticmethod
    async def update_seller_status(
        db: AsyncSession, user: AuthenticatedUser, order_id: int, new_status
    ) -> SellerOrderResponse:
        """
        Sets the caller's portion of the order to `new_status` and re-derives
        the order-wide status. Only membership in ORDER_STATUSES is checked;
        the sequence of transitions is not enforced.
        """
        provider = await AccountService.get_seller_provider(db, user.id)
        if not provider:
            raise Forbidden("Provider not found for this account")
        if not is_valid_status(new_status):
            raise InvalidStatus(new_status, ORDER_STATUSES)

        order = await OrderRepository.get_order(db, order_id, for_update=True)
        if not order:
            raise NotFound("Order not found", order_id=order_id)
        try:
            OrderService._ensure_seller_share(order, provider)
        except Forbidden:
            await db.rollback()
            raise

        fulfillment = OrderService._fulfillment_for(order, provider.id)
        previous = fulfillment.status
        fulfillment.status = new_status
        order.status = aggregate_status(f.status for f in order.fulfillments)
        await db.commit()

        ecomm_status_updates_total.labels(status=new_status).inc()
        logger.info(
            "fulfillment_status_updated",
            order_id=order.id,
            provider_id=provider.id,
            previous=previous,
            status=new_status,
            order_status=order.status,
        )
        buyer = await AccountService.get_buyer_contact(db, order.user_id)
        return OrderService._seller_view(order, provider.id, buyer)

    @staticmethod
    def _ensure_seller_share(order: Order, provider) -> None:
        if provider is None or not any(item.provider_id == provider.id for item in order.items):
            raise Forbidden("Order does not contain your products", order_id=order.id)

    @staticmethod
    def _fulfillment_for(order: Order, provider_id: int):
        for fulfillment in order.fulfillments:
            if fulfillment.provider_id == provider_id:
                return fulfillment
        raise NotFound("Fulfillment not found", order_id=order.id, provider_id=provider_id)

    @staticmethod
    def _seller_view(order: Order, provider_id: int, buyer: BuyerContact | None) -> SellerOrderResponse:
        items = [item for item in order.items if item.provider_id == provider_id]
        fulfillment = next((f for f in order.fulfillments if f.provider_id == provider_id), None)
        return SellerOrderResponse(
            id=order.id,
            user_id=order.user_id,
            total=order.total,
            status=order.status,
            fulfillment_status=fulfillment.status if fulfillment else order.status,
            payment_ref=order.payment_ref,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderItemResponse.model_validate(item) for item in items],
            buyer=buyer,
        )
