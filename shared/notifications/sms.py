"""
Outbound SMS through one of two HTTP gateways.

Blessed Texts takes JSON, Umesikia takes a form post. Numbers are normalized
to the 2547XXXXXXXX / 2541XXXXXXXX form both gateways expect.
"""
import re

import httpx
import structlog

from shared.config import settings

logger = structlog.get_logger(__name__)

BLESSED_TEXTS = "blessed_texts"
UMESIKIA = "umesikia"

_LOCAL_NINE_DIGITS = re.compile(r"^[17]\d{8}$")


class SmsDeliveryError(Exception):
    pass


def normalize_phone(phone: str) -> str | None:
    p = re.sub(r"[^\d+]", "", phone or "")

    if p.startswith("+254"):
        return p[1:]
    if p.startswith("254"):
        return p
    if p.startswith("0"):
        return "254" + p[1:]
    if _LOCAL_NINE_DIGITS.match(p):
        return "254" + p
    return None


class SmsSender:

    def __init__(
        self,
        primary: str = settings.SMS_PRIMARY_PROVIDER,
        failover: bool = settings.SMS_ENABLE_FAILOVER,
        timeout: float = settings.SMS_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.primary = primary
        self.failover = failover
        self.timeout = timeout
        self.transport = transport

    @property
    def secondary(self) -> str:
        return UMESIKIA if self.primary == BLESSED_TEXTS else BLESSED_TEXTS

    @staticmethod
    def is_configured(provider: str) -> bool:
        endpoint = settings.BLESSED_ENDPOINT if provider == BLESSED_TEXTS else settings.UMESIKIA_ENDPOINT
        return bool(endpoint)

    @property
    def enabled(self) -> bool:
        return self.is_configured(self.primary) or (self.failover and self.is_configured(self.secondary))

    async def send(self, recipients: str | list[str], message: str) -> httpx.Response:
        if isinstance(recipients, str):
            recipients = [recipients]
        phones = [p for p in (normalize_phone(r) for r in recipients) if p]
        if not phones:
            raise SmsDeliveryError("No valid phone numbers")

        logger.info("sms_sending", recipients=len(phones), provider=self.primary)
        try:
            return await self._send_with(self.primary, phones, message)
        except (httpx.HTTPError, SmsDeliveryError) as exc:
            logger.warning("sms_primary_failed", provider=self.primary, error=str(exc))
            if not self.failover:
                raise
            logger.info("sms_failover", provider=self.secondary)
            return await self._send_with(self.secondary, phones, message)

    async def _send_with(self, provider: str, phones: list[str], message: str) -> httpx.Response:
        if not self.is_configured(provider):
            raise SmsDeliveryError(f"SMS provider '{provider}' is not configured")

        if provider == BLESSED_TEXTS:
            endpoint = settings.BLESSED_ENDPOINT
            body = {
                "json": {
                    "api_key": settings.BLESSED_API_KEY,
                    "sender_id": settings.BLESSED_SENDER_ID,
                    "message": message,
                    "phone": ",".join(phones),
                }
            }
        else:
            endpoint = settings.UMESIKIA_ENDPOINT
            body = {
                "data": {
                    "api_key": settings.UMESIKIA_API_KEY,
                    "app_id": settings.UMESIKIA_APP_ID,
                    "sender_id": settings.UMESIKIA_SENDER_ID,
                    "message": message,
                    "phone": ",".join(phones),
                }
            }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(endpoint, **body)
            except (httpx.InvalidURL, ValueError) as exc:
                # A malformed endpoint fails while httpx parses the URL
                raise SmsDeliveryError(f"SMS provider '{provider}' endpoint is invalid: {exc}") from exc
        response.raise_for_status()
        return response


sms_sender = SmsSender()


def get_sms_sender() -> SmsSender:
    return sms_sender
