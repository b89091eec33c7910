from prometheus_client import Counter, Histogram

# Business Metrics
ecomm_checkout_total = Counter(
    "ecomm_checkout_total",
    "Total checkouts processed",
    ["status", "mode"] # status: 'success', 'failed', 'replayed'; mode: 'direct', 'gateway'
)

ecomm_checkout_duration_seconds = Histogram(
    "ecomm_checkout_duration_seconds",
    "Checkout duration in seconds"
)

ecomm_stock_conflicts_total = Counter(
    "ecomm_stock_conflicts_total",
    "Conditional stock decrements that matched no row"
)

ecomm_payment_references_total = Counter(
    "ecomm_payment_references_total",
    "Payment references minted",
    ["kind"] # 'initialize', 'reinitialize'
)

ecomm_payment_verifications_total = Counter(
    "ecomm_payment_verifications_total",
    "Gateway confirmations processed",
    ["outcome"] # 'advanced', 'noop', 'not_found'
)

ecomm_status_updates_total = Counter(
    "ecomm_status_updates_total",
    "Seller fulfillment status updates",
    ["status"]
)

ecomm_notification_failures_total = Counter(
    "ecomm_notification_failures_total",
    "Best-effort buyer notifications that failed",
    ["channel"]
)
