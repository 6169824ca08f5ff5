"""Signed JWTs: session tokens, service-role tokens and share capabilities."""

from datetime import timedelta
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now

SHARE_ACCESS_SCOPE = "share_access"
SERVICE_ROLE = "service_role"


class TokenError(Exception):
    """Raised when a token is malformed, badly signed or expired."""

    def __init__(self, message: str, expired: bool = False) -> None:
        super().__init__(message)
        self.expired = expired


def issue_token(
    claims: dict[str, Any], expires_in: timedelta, secret: Optional[str] = None
) -> str:
    """Sign ``claims`` with ``iat``/``exp`` set relative to now."""
    settings = get_settings()
    issued_at = utc_now()
    payload = {
        **claims,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_in).timestamp()),
    }
    return jwt.encode(
        payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str, secret: Optional[str] = None) -> dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            secret or settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError as exc:
        raise TokenError("Token has expired", expired=True) from exc
    except JWTError as exc:
        raise TokenError("Invalid token") from exc


def create_session_token(
    user_id: str, email: str, role: str, name: Optional[str] = None
) -> str:
    settings = get_settings()
    claims = {"sub": user_id, "email": email, "role": role}
    if name:
        claims["name"] = name
    return issue_token(
        claims,
        timedelta(days=settings.SESSION_TOKEN_TTL_DAYS),
    )


def create_share_capability(
    share_token: str, album_id: str, share_id: str, password_version: str
) -> str:
    """Capability proving the holder verified the password of one share.

    ``password_version`` identifies the password that was checked, so the
    capability stops working once the share's password changes.
    """
    settings = get_settings()
    return issue_token(
        {
            "share_token": share_token,
            "album_id": album_id,
            "share_id": share_id,
            "pwv": password_version,
            "scope": SHARE_ACCESS_SCOPE,
        },
        timedelta(seconds=settings.SHARE_CAPABILITY_TTL_SECONDS),
    )


def create_service_token(calling_service: str, expires_in: int = 300) -> str:
    settings = get_settings()
    return issue_token(
        {"sub": f"service:{calling_service}", "role": SERVICE_ROLE},
        timedelta(seconds=expires_in),
        secret=settings.SERVICE_ROLE_SECRET,
    )
