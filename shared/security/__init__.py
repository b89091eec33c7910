from .jwt_handler import AuthenticatedUser, decode_access_token, issue_access_token
from .api_key import is_catalog_key
from .dependencies import get_current_user, require_seller, verify_internal_api_key
from .rate_limiter import limiter, user_id_or_ip

__all__ = [
    "AuthenticatedUser",
    "decode_access_token",
    "issue_access_token",
    "is_catalog_key",
    "get_current_user",
    "require_seller",
    "verify_internal_api_key",
    "limiter",
    "user_id_or_ip"
]
