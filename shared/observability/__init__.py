from .setup import setup_observability, configure_logging
from .metrics import (
    ecomm_checkout_total,
    ecomm_checkout_duration_seconds,
    ecomm_stock_conflicts_total,
    ecomm_payment_references_total,
    ecomm_payment_verifications_total,
    ecomm_status_updates_total,
    ecomm_notification_failures_total,
)
