"""Album operations: paid creation, listing, ownership checks, edits and photos."""

import math
import uuid
from typing import Optional

from libs.auth.models import AuthUser
from libs.auth.roles import UserRole
from libs.common import service_client
from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.gallery_service.exceptions import (
    AlbumAccessDeniedError,
    AlbumNotFoundError,
    PhotoNotFoundError,
)
from services.gallery_service.models import (
    Album,
    AlbumShare,
    AlbumShareClient,
    AlbumShareInteraction,
    AlbumStatus,
    Event,
    Photo,
    PhotoStatus,
)
from services.gallery_service.schemas import AlbumCreate, AlbumUpdate, PhotoCreate
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

CALLING_SERVICE = "gallery"


async def create_album(db: AsyncSession, *, user: AuthUser, payload: AlbumCreate) -> Album:
    """Create an album, paying ``ALBUM_CREATION_COST`` credits for it.

    The debit happens first; the album row is committed only after it
    succeeds. If that commit fails the debit is refunded.
    """
    settings = get_settings()
    cost = settings.ALBUM_CREATION_COST
    album_id = uuid.uuid4()

    if cost > 0:
        # Raises UpstreamServiceError (e.g. 402 INSUFFICIENT_CREDITS).
        await service_client.debit_credits(
            user.user_id,
            amount=cost,
            category="album_creation",
            description=f"Album creation: {payload.title}"[:500],
            metadata={"album_id": str(album_id), "album_title": payload.title},
            calling_service=CALLING_SERVICE,
        )

    album = Album(
        id=album_id,
        photographer_id=user.user_id,
        photographer_name=user.name or (user.email or "").split("@")[0],
        photographer_email=user.email or "",
        status=AlbumStatus.DRAFT,
        **payload.model_dump(),
    )
    db.add(album)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Album %s could not be saved after charging", album_id)
        if cost > 0:
            await _refund_album_creation(user.user_id, album_id, payload.title, cost)
        raise

    logger.info(
        "Album %s created by %s (charged %d credits)", album.id, user.user_id, cost
    )
    return album


async def _refund_album_creation(
    user_id: str, album_id: uuid.UUID, title: str, amount: int
) -> None:
    try:
        await service_client.credit_credits(
            user_id,
            amount=amount,
            category="refund",
            description=f"Refund for failed album creation: {title}"[:500],
            metadata={"album_id": str(album_id), "album_title": title},
            calling_service=CALLING_SERVICE,
        )
    except Exception:
        # Needs manual reconciliation; the caller re-raises the original error.
        logger.exception(
            "Refund of %d credits to %s for album %s failed", amount, user_id, album_id
        )


async def list_albums(
    db: AsyncSession,
    *,
    photographer_id: str,
    status: Optional[AlbumStatus] = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Album], int]:
    """Return ``(albums, total)`` of a photographer, newest first."""
    filters = [Album.photographer_id == photographer_id]
    if status is not None:
        filters.append(Album.status == status)

    total = (
        await db.execute(select(func.count()).select_from(Album).where(*filters))
    ).scalar_one()
    result = await db.execute(
        select(Album)
        .where(*filters)
        .order_by(Album.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


async def get_album(
    db: AsyncSession, album_id: uuid.UUID, user: AuthUser, *, allow_admin: bool = True
) -> Album:
    """Load an album the caller owns (or, with ``allow_admin``, administers)."""
    album = await db.get(Album, album_id)
    if album is None:
        raise AlbumNotFoundError()
    if album.photographer_id == user.user_id:
        return album
    if allow_admin and user.has_role(UserRole.ADMIN):
        return album
    raise AlbumAccessDeniedError()


# Optional columns an update may clear by sending null.
_CLEARABLE_ALBUM_FIELDS = {"description", "shoot_date", "location", "cover_photo"}


async def update_album(db: AsyncSession, album: Album, payload: AlbumUpdate) -> Album:
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in _CLEARABLE_ALBUM_FIELDS
    }
    for field, value in changes.items():
        setattr(album, field, value)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(album)
    logger.info("Album %s updated: %s", album.id, sorted(changes))
    return album


async def delete_album(db: AsyncSession, album: Album) -> None:
    """Delete ``album`` with its photos, shares and share activity.

    Bookings that pointed at the album keep existing without it. Credits
    paid for the album are not refunded.
    """
    album_id = album.id
    try:
        await db.execute(
            delete(AlbumShareInteraction).where(
                AlbumShareInteraction.album_id == album_id
            )
        )
        await db.execute(
            delete(AlbumShareClient).where(AlbumShareClient.album_id == album_id)
        )
        await db.execute(delete(AlbumShare).where(AlbumShare.album_id == album_id))
        await db.execute(delete(Photo).where(Photo.album_id == album_id))
        await db.execute(
            update(Event).where(Event.album_id == album_id).values(album_id=None)
        )
        await db.delete(album)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Album %s deleted", album_id)


async def list_photos(
    db: AsyncSession, album_id: uuid.UUID, *, ready_only: bool = False
) -> list[Photo]:
    query = select(Photo).where(Photo.album_id == album_id)
    if ready_only:
        query = query.where(Photo.status == PhotoStatus.READY)
    result = await db.execute(query.order_by(Photo.order, Photo.created_at))
    return list(result.scalars().all())


async def add_photos(
    db: AsyncSession, album: Album, photos: list[PhotoCreate]
) -> list[Photo]:
    """Register uploaded photos on ``album`` after its current last photo."""
    last_order = (
        await db.execute(
            select(func.max(Photo.order)).where(Photo.album_id == album.id)
        )
    ).scalar_one_or_none()
    next_order = 0 if last_order is None else last_order + 1

    created = []
    for offset, data in enumerate(photos):
        photo = Photo(
            album_id=album.id,
            photographer_id=album.photographer_id,
            order=next_order + offset,
            status=PhotoStatus.READY,
            **data.model_dump(),
        )
        db.add(photo)
        created.append(photo)

    album.total_photos += len(created)
    if not album.cover_photo and created:
        album.cover_photo = created[0].thumbnail_url or created[0].file_url

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Added %d photos to album %s", len(created), album.id)
    return created


async def list_photos_page(
    db: AsyncSession, album_id: uuid.UUID, *, page: int = 1, limit: int = 50
) -> tuple[list[Photo], int]:
    """Return ``(photos, total)`` of an album in display order."""
    total = (
        await db.execute(
            select(func.count()).select_from(Photo).where(Photo.album_id == album_id)
        )
    ).scalar_one()
    result = await db.execute(
        select(Photo)
        .where(Photo.album_id == album_id)
        .order_by(Photo.order, Photo.created_at)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def delete_photos(
    db: AsyncSession, album: Album, photo_ids: list[uuid.UUID]
) -> int:
    """Delete the listed photos of ``album``; ids from other albums are ignored.

    Raises PhotoNotFoundError when none of the ids belong to the album.
    """
    result = await db.execute(
        select(Photo).where(Photo.album_id == album.id, Photo.id.in_(photo_ids))
    )
    photos = list(result.scalars().all())
    if not photos:
        raise PhotoNotFoundError("No photos found")

    removed_urls = set()
    for photo in photos:
        removed_urls.update(url for url in (photo.file_url, photo.thumbnail_url) if url)

    album_id = album.id
    try:
        await db.execute(delete(Photo).where(Photo.id.in_([p.id for p in photos])))
        album.total_photos = max(album.total_photos - len(photos), 0)
        if album.cover_photo in removed_urls:
            album.cover_photo = None
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(album)
    logger.info("Deleted %d photos from album %s", len(photos), album_id)
    return len(photos)
