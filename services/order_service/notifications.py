import httpx
import structlog

from shared.notifications import SmsDeliveryError, SmsSender, order_status_message
from shared.observability import ecomm_notification_failures_total

logger = structlog.get_logger(__name__)


async def notify_buyer_of_status(sender: SmsSender, phone: str | None, order_id: int, status: str) -> bool:
    """
    Texts the buyer about a status change. Runs after the update has been
    committed; a failed send is logged and never reaches the caller.
    """
    if not phone:
        logger.info("status_notification_skipped", order_id=order_id, reason="no_phone")
        return False
    if not sender.enabled:
        logger.info("status_notification_skipped", order_id=order_id, reason="sms_disabled")
        return False
    try:
        await sender.send(phone, order_status_message(order_id, status))
    except (httpx.HTTPError, SmsDeliveryError) as exc:
        ecomm_notification_failures_total.labels(channel="sms").inc()
        logger.error("status_notification_failed", order_id=order_id, error=str(exc))
        return False
    logger.info("status_notification_sent", order_id=order_id, status=status)
    return True
