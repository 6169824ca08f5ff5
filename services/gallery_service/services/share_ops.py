"""Share management for album owners: create, list, update and revoke."""

import asyncio
import secrets
import uuid
from datetime import datetime
from typing import Any, Optional

from libs.auth.passwords import hash_password
from libs.common.config import get_settings
from libs.common.datetime_utils import is_past, utc_now
from libs.common.emails.sharing import send_share_invitation_email
from libs.common.logging import get_logger
from services.gallery_service.exceptions import (
    InvalidShareRequestError,
    ShareNotFoundError,
)
from services.gallery_service.models import (
    PUBLIC_SHARE_EMAIL,
    Album,
    AlbumShare,
    ShareType,
)
from services.gallery_service.schemas import (
    SharePermissions,
    ShareRecipient,
    ShareResponse,
)
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

PUBLIC_SHARE_NAME = "Public Link"


def generate_access_token() -> str:
    """64 hex chars of randomness."""
    return secrets.token_hex(32)


def share_url(token: Optional[str]) -> str:
    settings = get_settings()
    return f"{settings.APP_URL.rstrip('/')}/shared/{token}"


def to_share_response(share: AlbumShare) -> ShareResponse:
    return ShareResponse(
        id=share.id,
        album_id=share.album_id,
        share_type=share.share_type,
        shared_with_email=share.shared_with_email,
        shared_with_name=share.shared_with_name,
        access_token=share.access_token,
        share_url=share_url(share.access_token),
        permissions=SharePermissions(**share.permissions),
        expires_at=share.expires_at,
        is_expired=is_past(share.expires_at),
        has_password=share.password_hash is not None,
        views=share.views,
        last_viewed_at=share.last_viewed_at,
        is_active=share.is_active,
        created_at=share.created_at,
    )


def _apply_permissions(share: AlbumShare, permissions: dict[str, Any]) -> None:
    for flag, value in permissions.items():
        if value is not None:
            setattr(share, flag, value)


async def _hash(password: str) -> str:
    return await asyncio.to_thread(hash_password, password)


async def _find_active_share(
    db: AsyncSession, album_id: uuid.UUID, share_type: ShareType, email: str
) -> Optional[AlbumShare]:
    result = await db.execute(
        select(AlbumShare).where(
            AlbumShare.album_id == album_id,
            AlbumShare.share_type == share_type,
            AlbumShare.shared_with_email == email,
            AlbumShare.is_active.is_(True),
        )
    )
    return result.scalars().first()


def _new_share(
    album: Album,
    *,
    share_type: ShareType,
    email: str,
    name: Optional[str],
    expires_at: Optional[datetime],
) -> AlbumShare:
    defaults = SharePermissions()
    return AlbumShare(
        album_id=album.id,
        photographer_id=album.photographer_id,
        shared_with_email=email,
        shared_with_name=name,
        share_type=share_type,
        access_token=generate_access_token(),
        expires_at=expires_at,
        is_active=True,
        views=0,
        **defaults.model_dump(),
    )


async def create_shares(
    db: AsyncSession,
    album: Album,
    *,
    share_type: ShareType,
    recipients: Optional[list[ShareRecipient]] = None,
    permissions: Optional[dict[str, Any]] = None,
    expires_at: Optional[datetime] = None,
    password: Optional[str] = None,
) -> list[AlbumShare]:
    """Create (or refresh) shares of ``album``.

    A ``link`` share reuses the album's active public link if there is one.
    ``email`` shares are one per recipient; new recipients are emailed an
    invitation after the commit.
    """
    permissions = permissions or {}
    password_hash = await _hash(password) if password else None
    shares: list[AlbumShare] = []
    invitations: list[tuple[AlbumShare, Optional[str]]] = []

    try:
        if ShareType(share_type) == ShareType.LINK:
            share = await _find_active_share(
                db, album.id, ShareType.LINK, PUBLIC_SHARE_EMAIL
            )
            if share is None:
                share = _new_share(
                    album,
                    share_type=ShareType.LINK,
                    email=PUBLIC_SHARE_EMAIL,
                    name=PUBLIC_SHARE_NAME,
                    expires_at=expires_at,
                )
                db.add(share)
            elif expires_at is not None:
                share.expires_at = expires_at
            _apply_permissions(share, permissions)
            if password_hash:
                share.password_hash = password_hash
            shares.append(share)
        else:
            if not recipients:
                raise InvalidShareRequestError(
                    "Recipients are required for email sharing"
                )
            for recipient in recipients:
                email = recipient.email.lower()
                share = await _find_active_share(db, album.id, ShareType.EMAIL, email)
                if share is None:
                    share = _new_share(
                        album,
                        share_type=ShareType.EMAIL,
                        email=email,
                        name=recipient.name,
                        expires_at=expires_at,
                    )
                    db.add(share)
                    invitations.append((share, recipient.name))
                else:
                    if expires_at is not None:
                        share.expires_at = expires_at
                    if recipient.name:
                        share.shared_with_name = recipient.name
                _apply_permissions(share, permissions)
                if password_hash:
                    share.password_hash = password_hash
                shares.append(share)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Album %s shared (%s) with %d recipient(s)", album.id, share_type, len(shares)
    )

    for share, name in invitations:
        await _send_invitation(album, share, name)
    return shares


async def _send_invitation(album: Album, share: AlbumShare, name: Optional[str]) -> None:
    """Email the share link. Delivery problems never fail the share itself."""
    try:
        sent = await send_share_invitation_email(
            share.shared_with_email,
            album_title=album.title,
            photographer_name=album.photographer_name,
            share_url=share_url(share.access_token),
            recipient_name=name,
            expires_at=share.expires_at,
            has_password=share.password_hash is not None,
        )
    except Exception:
        logger.exception("Share invitation to %s failed", share.shared_with_email)
        return
    if not sent:
        logger.warning("Share invitation to %s was not sent", share.shared_with_email)


async def list_shares(db: AsyncSession, album: Album) -> list[AlbumShare]:
    """Active shares of ``album``, newest first."""
    result = await db.execute(
        select(AlbumShare)
        .where(AlbumShare.album_id == album.id, AlbumShare.is_active.is_(True))
        .order_by(AlbumShare.created_at.desc())
    )
    return list(result.scalars().all())


async def _get_album_share(
    db: AsyncSession, album: Album, share_id: uuid.UUID
) -> AlbumShare:
    result = await db.execute(
        select(AlbumShare).where(
            AlbumShare.id == share_id, AlbumShare.album_id == album.id
        )
    )
    share = result.scalar_one_or_none()
    if share is None:
        raise ShareNotFoundError("Share not found")
    return share


async def get_share(db: AsyncSession, album: Album, share_id: uuid.UUID) -> AlbumShare:
    return await _get_album_share(db, album, share_id)


_UNSET: Any = object()


async def update_share(
    db: AsyncSession,
    album: Album,
    share_id: uuid.UUID,
    *,
    permissions: Optional[dict[str, Any]] = None,
    expires_at: Any = _UNSET,
    password: Any = _UNSET,
) -> AlbumShare:
    """Merge ``permissions`` into the share.

    ``expires_at``/``password`` are left alone unless passed; passing None
    clears them.
    """
    share = await _get_album_share(db, album, share_id)
    try:
        if permissions:
            _apply_permissions(share, permissions)
        if expires_at is not _UNSET:
            share.expires_at = expires_at
        if password is not _UNSET:
            share.password_hash = await _hash(password) if password else None
        share.updated_at = utc_now()
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return share


async def revoke_share(db: AsyncSession, album: Album, share_id: uuid.UUID) -> AlbumShare:
    share = await _get_album_share(db, album, share_id)
    try:
        share.is_active = False
        share.updated_at = utc_now()
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Revoked share %s of album %s", share.id, album.id)
    return share


async def revoke_all(db: AsyncSession, album: Album) -> int:
    """Deactivate every active share of ``album``. Returns how many."""
    try:
        result = await db.execute(
            update(AlbumShare)
            .where(AlbumShare.album_id == album.id, AlbumShare.is_active.is_(True))
            .values(is_active=False, updated_at=utc_now())
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Revoked %d shares of album %s", result.rowcount, album.id)
    return result.rowcount
