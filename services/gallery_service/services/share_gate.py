"""Share access gate.

Every public route under ``/shared/{token}`` goes through :func:`authorize_view`:
the token must name an active, unexpired share, and a password-protected
share additionally needs a capability obtained from :func:`verify_password`.
A capability is a short-lived JWT scoped to exactly one share token and to
the password that was checked; changing or removing the password voids it.
"""

import asyncio
import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional

from libs.auth.passwords import verify_password as check_password
from libs.auth.tokens import (
    SHARE_ACCESS_SCOPE,
    TokenError,
    create_share_capability,
    decode_token,
)
from libs.common.datetime_utils import is_past, utc_now
from libs.common.logging import get_logger
from services.gallery_service.exceptions import (
    InvalidPasswordError,
    PasswordRequiredError,
    ShareExpiredError,
    ShareNotFoundError,
)
from services.gallery_service.models import Album, AlbumShare
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

# Cookie set by the verify route; the header is for non-browser clients.
CAPABILITY_COOKIE = "share_access_token"
CAPABILITY_HEADER = "X-Share-Access-Token"


@dataclass
class ShareAccess:
    share: AlbumShare
    permissions: dict[str, bool]


async def resolve_share(db: AsyncSession, token: str) -> AlbumShare:
    """Return the active share for ``token``.

    Raises ShareNotFoundError for unknown or revoked tokens and
    ShareExpiredError once ``expires_at`` has passed.
    """
    if not token:
        raise ShareNotFoundError()
    result = await db.execute(
        select(AlbumShare).where(
            AlbumShare.access_token == token, AlbumShare.is_active.is_(True)
        )
    )
    share = result.scalar_one_or_none()
    if share is None:
        raise ShareNotFoundError()
    if is_past(share.expires_at):
        raise ShareExpiredError()
    return share


def requires_password(share: AlbumShare) -> bool:
    return share.password_hash is not None


def password_version(share: AlbumShare) -> str:
    """Short digest of the stored hash. Every re-hash yields a new salt."""
    return hashlib.sha256(share.password_hash.encode()).hexdigest()[:16]


async def verify_password(share: AlbumShare, supplied_password: str) -> Optional[str]:
    """Check ``supplied_password`` and return a capability for the share.

    Shares without a password verify trivially and return None.
    """
    if not requires_password(share):
        return None

    # bcrypt blocks; run it off the event loop.
    valid = await asyncio.to_thread(
        check_password, supplied_password or "", share.password_hash
    )
    if not valid:
        logger.info("Rejected share password for share %s", share.id)
        raise InvalidPasswordError()

    return create_share_capability(
        share_token=share.access_token,
        album_id=str(share.album_id),
        share_id=str(share.id),
        password_version=password_version(share),
    )


def _capability_grants(capability: Optional[str], share: AlbumShare) -> bool:
    if not capability:
        return False
    try:
        claims = decode_token(capability)
    except TokenError:
        return False
    if claims.get("scope") != SHARE_ACCESS_SCOPE:
        return False
    if claims.get("share_token") != share.access_token:
        return False
    return hmac.compare_digest(str(claims.get("pwv", "")), password_version(share))


async def authorize_view(
    db: AsyncSession, token: str, capability: Optional[str] = None
) -> ShareAccess:
    """Resolve ``token`` and enforce its password, returning the permissions."""
    share = await resolve_share(db, token)
    if requires_password(share) and not _capability_grants(capability, share):
        raise PasswordRequiredError()
    return ShareAccess(share=share, permissions=share.permissions)


async def record_view(db: AsyncSession, share: AlbumShare) -> None:
    """Count one view on the share and on its album. Not idempotent."""
    now = utc_now()
    try:
        await db.execute(
            update(AlbumShare)
            .where(AlbumShare.id == share.id)
            .values(views=AlbumShare.views + 1, last_viewed_at=now)
        )
        await db.execute(
            update(Album)
            .where(Album.id == share.album_id)
            .values(total_views=Album.total_views + 1)
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
