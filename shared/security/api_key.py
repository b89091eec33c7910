"""
Shared key for catalog management calls (product creation, restocking).

The catalog is maintained by a back-office tool rather than by end users, so
those routes sit behind a static key instead of a bearer token. A missing key
falls back to an insecure default with a loud warning.
"""
import secrets
import warnings

from shared.config import settings

CATALOG_KEY_HEADER = "X-Internal-API-Key"

if not settings.INTERNAL_API_KEY:
    warnings.warn(
        "INTERNAL_API_KEY is not set. Catalog writes accept an insecure default key. "
        "Set this env var in production!",
        stacklevel=2,
    )

CATALOG_API_KEY: str = settings.INTERNAL_API_KEY or "insecure-default-change-me"


def is_catalog_key(provided_key: str | None) -> bool:
    """Constant-time comparison against the configured catalog key."""
    if not provided_key:
        return False
    return secrets.compare_digest(str(provided_key), CATALOG_API_KEY)
