from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader, OAuth2PasswordBearer

from shared.errors import Forbidden
from .api_key import CATALOG_KEY_HEADER, is_catalog_key
from .jwt_handler import AuthenticatedUser, decode_access_token

# Tokens are minted by the accounts platform; tokenUrl only feeds the OpenAPI docs
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

api_key_header = APIKeyHeader(name=CATALOG_KEY_HEADER, auto_error=False)


async def get_current_user(request: Request, token: str = Depends(oauth2_scheme)) -> AuthenticatedUser:
    """Dependency to validate the bearer token and return the caller's id and role."""
    user = decode_access_token(token) if token else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Lets the rate limiter key on the buyer without decoding again
    request.state.user_id = user.id
    return user


async def require_seller(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    """Dependency for the seller fulfillment surface: agrovets and admins only."""
    if not user.is_seller:
        raise Forbidden("agrovets only")
    return user


async def verify_internal_api_key(api_key: str = Depends(api_key_header)) -> bool:
    """Dependency guarding catalog management routes."""
    if not is_catalog_key(api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Invalid or missing {CATALOG_KEY_HEADER} header",
        )
    return True
