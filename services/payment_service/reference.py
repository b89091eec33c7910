import secrets
import string
import time

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_payment_ref(prefix: str) -> str:
    """`<prefix>-<epoch ms>-<base36 random>`, e.g. PSK-1739436000123-9x0ak2."""
    ts = time.time_ns() // 1_000_000
    return f"{prefix}-{ts}-{_to_base36(secrets.randbelow(10**9))}"
