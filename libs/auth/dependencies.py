from typing import Annotated, Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from libs.auth.models import AuthUser
from libs.auth.roles import UserRole
from libs.auth.tokens import SERVICE_ROLE, TokenError, create_service_token, decode_token
from libs.common.config import get_settings

security = HTTPBearer(auto_error=False)

# Session cookie set by the web app after login.
SESSION_COOKIE = "token"


def _service_role_jwt(calling_service: str) -> str:
    """Short-lived token for service-to-service calls."""
    return create_service_token(calling_service)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE)


def _decode_principal(token: str) -> AuthUser:
    """Accept user session tokens and service-role tokens."""
    settings = get_settings()
    try:
        payload = decode_token(token)
    except TokenError:
        # Service tokens are signed with their own secret.
        try:
            payload = decode_token(token, secret=settings.SERVICE_ROLE_SECRET)
        except TokenError:
            raise _credentials_exception()
        if payload.get("role") != SERVICE_ROLE:
            raise _credentials_exception()
    if payload.get("scope"):
        # Share capabilities are not sessions.
        raise _credentials_exception()
    try:
        return AuthUser(**payload)
    except ValidationError:
        raise _credentials_exception()


async def get_current_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Validate the bearer token (or session cookie) and return the caller.
    """
    token = _extract_token(request, credentials)
    if not token:
        raise _credentials_exception()
    user = _decode_principal(token)
    request.state.user = user
    return user


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory: the caller must hold one of ``roles``."""

    async def _require(
        current_user: Annotated[AuthUser, Depends(get_current_user)],
    ) -> AuthUser:
        if not current_user.has_role(*roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions for this action",
            )
        return current_user

    return _require


require_admin = require_roles(UserRole.ADMIN)


async def require_service_role(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """
    Only other services (service-role token) may call internal endpoints.
    """
    if current_user.role != SERVICE_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Service role required",
        )
    return current_user
