from .sms import SmsDeliveryError, SmsSender, get_sms_sender, normalize_phone, sms_sender
from .templates import order_status_message

__all__ = [
    "SmsDeliveryError",
    "SmsSender",
    "get_sms_sender",
    "normalize_phone",
    "sms_sender",
    "order_status_message",
]
