from shared.config.settings import NOTIFICATION_BRAND


def order_status_message(order_id: int, status: str) -> str:
    return (
        f'{NOTIFICATION_BRAND}: Your order #{order_id} status is now "{status}". '
        "Thank you for your business."
    )
