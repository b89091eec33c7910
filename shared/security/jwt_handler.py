"""
Bearer tokens for buyers and sellers.

Tokens are issued by the accounts platform; this service only needs the
subject (the user id) and the role claim that separates farmers from
agrovet sellers. `issue_access_token` exists for tooling and tests.
"""
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from shared.config.settings import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM

SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not SECRET_KEY:
    raise ValueError("FATAL ERROR: JWT_SECRET_KEY is not set in the environment!")

DEFAULT_ROLE = "farmer"
SELLER_ROLES = ("agrovet", "admin")


@dataclass(frozen=True)
class AuthenticatedUser:
    id: int
    role: str

    @property
    def is_seller(self) -> bool:
        return self.role in SELLER_ROLES


def issue_access_token(user_id: int, role: str = DEFAULT_ROLE, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(claims, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> AuthenticatedUser | None:
    """Returns the caller behind a valid token; None for bad, expired or subject-less tokens."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    return AuthenticatedUser(id=user_id, role=payload.get("role") or DEFAULT_ROLE)
