"""What visitors do on a share: identity, favorites, comments, downloads."""

import uuid
from collections import Counter
from dataclasses import dataclass
from typing import Any, Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.gallery_service.exceptions import (
    AlbumNotFoundError,
    InvalidShareRequestError,
    PhotoNotFoundError,
    SharePermissionError,
)
from services.gallery_service.models import (
    Album,
    AlbumShare,
    AlbumShareClient,
    AlbumShareInteraction,
    InteractionEvent,
    Photo,
)
from sqlalchemy import case, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

ANONYMOUS = "Anonymous"

_FAVORITE_EVENTS = (InteractionEvent.PHOTO_FAVORITE, InteractionEvent.PHOTO_UNFAVORITE)

# Recorded by their own operations, which also move the counters.
_UNTRACKABLE_EVENTS = (
    InteractionEvent.IDENTITY_ENTERED,
    InteractionEvent.PHOTO_DOWNLOAD,
)


@dataclass
class RequestMeta:
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass
class FavoriteResult:
    is_favorite: bool
    favorites_count: int
    was_already_in_state: bool


def _interaction(
    share: AlbumShare,
    event: InteractionEvent,
    meta: RequestMeta,
    *,
    client_id: Optional[uuid.UUID] = None,
    photo_id: Optional[uuid.UUID] = None,
    comment: Optional[str] = None,
    extra: Optional[dict[str, Any]] = None,
) -> AlbumShareInteraction:
    return AlbumShareInteraction(
        share_id=share.id,
        album_id=share.album_id,
        photographer_id=share.photographer_id,
        client_id=client_id,
        event=event,
        photo_id=photo_id,
        comment=comment,
        meta=extra,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )


def _decrement_floor_zero(column):
    return case((column > 0, column - 1), else_=0)


async def _album_photo(db: AsyncSession, share: AlbumShare, photo_id: uuid.UUID) -> Photo:
    result = await db.execute(
        select(Photo).where(Photo.id == photo_id, Photo.album_id == share.album_id)
    )
    photo = result.scalar_one_or_none()
    if photo is None:
        raise PhotoNotFoundError()
    return photo


async def _album_client(
    db: AsyncSession, share: AlbumShare, client_id: Optional[uuid.UUID]
) -> Optional[AlbumShareClient]:
    """The album's client with ``client_id``; unknown ids count as anonymous."""
    if client_id is None:
        return None
    result = await db.execute(
        select(AlbumShareClient).where(
            AlbumShareClient.id == client_id,
            AlbumShareClient.album_id == share.album_id,
        )
    )
    client = result.scalar_one_or_none()
    if client is None:
        logger.debug("Unknown client %s on share %s", client_id, share.id)
    return client


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


async def save_client_identity(
    db: AsyncSession,
    share: AlbumShare,
    *,
    name: str,
    client_identifier: str,
    email: Optional[str] = None,
    meta: Optional[RequestMeta] = None,
) -> tuple[AlbumShareClient, bool]:
    """Upsert the visitor keyed by ``(album, client_identifier)``.

    Returns ``(client, is_returning_client)``.
    """
    meta = meta or RequestMeta()
    identifier = client_identifier.strip()
    # A rollback expires ``share``; keep plain copies of what the retry needs.
    album_id = share.album_id
    values = {
        "share_id": share.id,
        "name": name.strip(),
        "email": email.strip().lower() if email else None,
        "ip_address": meta.ip_address,
        "user_agent": meta.user_agent,
        "last_accessed_at": utc_now(),
    }

    async def _existing() -> Optional[AlbumShareClient]:
        result = await db.execute(
            select(AlbumShareClient).where(
                AlbumShareClient.album_id == album_id,
                AlbumShareClient.client_identifier == identifier,
            )
        )
        return result.scalar_one_or_none()

    client = await _existing()
    is_returning = client is not None
    try:
        if client is None:
            client = AlbumShareClient(
                album_id=album_id, client_identifier=identifier, **values
            )
            db.add(client)
        else:
            for field, value in values.items():
                setattr(client, field, value)
        await db.commit()
    except IntegrityError:
        # Same browser registered concurrently; update the winner's row.
        await db.rollback()
        client = await _existing()
        if client is None:
            raise
        is_returning = True
        try:
            for field, value in values.items():
                setattr(client, field, value)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
    except Exception:
        await db.rollback()
        raise

    if not is_returning:
        recorded = await _record_quietly(
            db,
            _interaction(
                share, InteractionEvent.IDENTITY_ENTERED, meta, client_id=client.id
            ),
        )
        if not recorded:
            await db.refresh(client)
    return client, is_returning


async def _record_quietly(db: AsyncSession, interaction: AlbumShareInteraction) -> bool:
    """Append an analytics row; failures are logged, never raised."""
    try:
        db.add(interaction)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception(
            "Could not record %s on share %s", interaction.event, interaction.share_id
        )
        return False
    return True


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------


async def toggle_favorite(
    db: AsyncSession,
    share: AlbumShare,
    *,
    photo_id: uuid.UUID,
    is_favorite: bool,
    client_id: Optional[uuid.UUID] = None,
    meta: Optional[RequestMeta] = None,
) -> FavoriteResult:
    """Set the favorite state of a photo for one client.

    Only an actual change of state touches the counters and appends an
    interaction; repeating the current state is reported back as such.
    """
    if not share.can_favorite:
        raise SharePermissionError("Favorites are not enabled for this album")
    photo = await _album_photo(db, share, photo_id)
    client = await _album_client(db, share, client_id)
    client_key = client.id if client else None

    latest = (
        await db.execute(
            select(AlbumShareInteraction.event)
            .where(
                AlbumShareInteraction.photo_id == photo.id,
                AlbumShareInteraction.event.in_(_FAVORITE_EVENTS),
                (
                    AlbumShareInteraction.client_id == client_key
                    if client_key
                    else AlbumShareInteraction.client_id.is_(None)
                ),
            )
            .order_by(AlbumShareInteraction.created_at.desc())
            .limit(1)
        )
    ).scalar_one_or_none()
    currently_favorited = latest == InteractionEvent.PHOTO_FAVORITE

    if currently_favorited == is_favorite:
        return FavoriteResult(
            is_favorite=is_favorite,
            favorites_count=photo.favorites_count,
            was_already_in_state=True,
        )

    try:
        await db.execute(
            update(Photo)
            .where(Photo.id == photo.id)
            .values(
                favorites_count=(
                    Photo.favorites_count + 1
                    if is_favorite
                    else _decrement_floor_zero(Photo.favorites_count)
                )
            )
        )
        if client is not None:
            await db.execute(
                update(AlbumShareClient)
                .where(AlbumShareClient.id == client.id)
                .values(
                    favorites=(
                        AlbumShareClient.favorites + 1
                        if is_favorite
                        else _decrement_floor_zero(AlbumShareClient.favorites)
                    )
                )
            )
        db.add(
            _interaction(
                share,
                (
                    InteractionEvent.PHOTO_FAVORITE
                    if is_favorite
                    else InteractionEvent.PHOTO_UNFAVORITE
                ),
                meta or RequestMeta(),
                client_id=client_key,
                photo_id=photo.id,
            )
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(photo)
    return FavoriteResult(
        is_favorite=is_favorite,
        favorites_count=photo.favorites_count,
        was_already_in_state=False,
    )


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


async def add_comment(
    db: AsyncSession,
    share: AlbumShare,
    *,
    photo_id: uuid.UUID,
    comment: str,
    client_id: Optional[uuid.UUID] = None,
    meta: Optional[RequestMeta] = None,
) -> dict[str, Any]:
    if not share.can_comment:
        raise SharePermissionError("Comments are not enabled for this album")
    text = comment.strip()
    if not text:
        raise InvalidShareRequestError("Comment cannot be empty")
    photo = await _album_photo(db, share, photo_id)
    client = await _album_client(db, share, client_id)

    interaction = _interaction(
        share,
        InteractionEvent.COMMENT_ADD,
        meta or RequestMeta(),
        client_id=client.id if client else None,
        photo_id=photo.id,
        comment=text,
    )
    try:
        db.add(interaction)
        if client is not None:
            await db.execute(
                update(AlbumShareClient)
                .where(AlbumShareClient.id == client.id)
                .values(comments=AlbumShareClient.comments + 1)
            )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return {
        "id": interaction.id,
        "comment": interaction.comment,
        "photo_id": photo.id,
        "photo_name": photo.original_name,
        "client_name": client.name if client else ANONYMOUS,
        "client_email": client.email if client else None,
        "created_at": interaction.created_at,
    }


async def list_comments(
    db: AsyncSession, share: AlbumShare, *, photo_id: Optional[uuid.UUID] = None
) -> list[dict[str, Any]]:
    """Comments on the share, newest first."""
    query = (
        select(
            AlbumShareInteraction,
            AlbumShareClient.name,
            AlbumShareClient.email,
            Photo.original_name,
        )
        .outerjoin(
            AlbumShareClient, AlbumShareClient.id == AlbumShareInteraction.client_id
        )
        .outerjoin(Photo, Photo.id == AlbumShareInteraction.photo_id)
        .where(
            AlbumShareInteraction.share_id == share.id,
            AlbumShareInteraction.event == InteractionEvent.COMMENT_ADD,
        )
        .order_by(AlbumShareInteraction.created_at.desc())
    )
    if photo_id is not None:
        query = query.where(AlbumShareInteraction.photo_id == photo_id)

    rows = (await db.execute(query)).all()
    return [
        {
            "id": interaction.id,
            "comment": interaction.comment,
            "photo_id": interaction.photo_id,
            "photo_name": photo_name,
            "client_name": client_name or ANONYMOUS,
            "client_email": client_email,
            "created_at": interaction.created_at,
        }
        for interaction, client_name, client_email, photo_name in rows
    ]


# ---------------------------------------------------------------------------
# Downloads
# ---------------------------------------------------------------------------


async def record_download(
    db: AsyncSession,
    share: AlbumShare,
    *,
    photo_id: uuid.UUID,
    client_id: Optional[uuid.UUID] = None,
    meta: Optional[RequestMeta] = None,
) -> Photo:
    """Count one download of a photo and return it for its file URL.

    Needs both the share's ``can_download`` and the album's
    ``allow_downloads``.
    """
    if not share.can_download:
        raise SharePermissionError("Downloads are not enabled for this album")
    album = await db.get(Album, share.album_id)
    if album is None:
        raise AlbumNotFoundError()
    if not album.allow_downloads:
        raise SharePermissionError("Downloads are not enabled for this album")
    photo = await _album_photo(db, share, photo_id)
    client = await _album_client(db, share, client_id)

    try:
        await db.execute(
            update(Photo)
            .where(Photo.id == photo.id)
            .values(downloads=Photo.downloads + 1)
        )
        await db.execute(
            update(Album)
            .where(Album.id == album.id)
            .values(total_downloads=Album.total_downloads + 1)
        )
        if client is not None:
            await db.execute(
                update(AlbumShareClient)
                .where(AlbumShareClient.id == client.id)
                .values(downloads=AlbumShareClient.downloads + 1)
            )
        db.add(
            _interaction(
                share,
                InteractionEvent.PHOTO_DOWNLOAD,
                meta or RequestMeta(),
                client_id=client.id if client else None,
                photo_id=photo.id,
            )
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(photo)
    return photo


# ---------------------------------------------------------------------------
# Tracking / analytics
# ---------------------------------------------------------------------------


async def track_interaction(
    db: AsyncSession,
    share: AlbumShare,
    *,
    event: InteractionEvent,
    client_id: Optional[uuid.UUID] = None,
    photo_id: Optional[uuid.UUID] = None,
    comment: Optional[str] = None,
    extra: Optional[dict[str, Any]] = None,
    meta: Optional[RequestMeta] = None,
) -> AlbumShareInteraction:
    event = InteractionEvent(event)
    if event in _UNTRACKABLE_EVENTS:
        raise InvalidShareRequestError("Invalid event type")
    if photo_id is not None:
        photo_id = (await _album_photo(db, share, photo_id)).id
    client = await _album_client(db, share, client_id)

    interaction = _interaction(
        share,
        event,
        meta or RequestMeta(),
        client_id=client.id if client else None,
        photo_id=photo_id,
        comment=comment,
        extra=extra,
    )
    try:
        db.add(interaction)
        if client is not None and event == InteractionEvent.PHOTO_VIEW:
            await db.execute(
                update(AlbumShareClient)
                .where(AlbumShareClient.id == client.id)
                .values(photo_views=AlbumShareClient.photo_views + 1)
            )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return interaction


_PHOTO_STAT_FIELDS = {
    InteractionEvent.PHOTO_VIEW: "views",
    InteractionEvent.PHOTO_FAVORITE: "favorites",
    InteractionEvent.COMMENT_ADD: "comments",
    InteractionEvent.PHOTO_SELECT: "selections",
    InteractionEvent.PHOTO_DOWNLOAD: "downloads",
}


async def share_analytics(db: AsyncSession, share: AlbumShare) -> dict[str, Any]:
    """Everything visitors did on ``share``, with per-event and per-photo totals."""
    rows = (
        await db.execute(
            select(AlbumShareInteraction, AlbumShareClient.name)
            .outerjoin(
                AlbumShareClient,
                AlbumShareClient.id == AlbumShareInteraction.client_id,
            )
            .where(AlbumShareInteraction.share_id == share.id)
            .order_by(AlbumShareInteraction.created_at.desc())
        )
    ).all()

    event_counts: Counter = Counter()
    clients = set()
    photo_stats: dict[uuid.UUID, dict[str, Any]] = {}
    interactions = []
    for interaction, client_name in rows:
        event_counts[interaction.event.value] += 1
        if interaction.client_id is not None:
            clients.add(interaction.client_id)
        field = _PHOTO_STAT_FIELDS.get(interaction.event)
        if field and interaction.photo_id is not None:
            stats = photo_stats.setdefault(
                interaction.photo_id, {"photo_id": interaction.photo_id}
            )
            stats[field] = stats.get(field, 0) + 1
        interactions.append(
            {
                "id": interaction.id,
                "event": interaction.event,
                "client_id": interaction.client_id,
                "client_name": client_name,
                "photo_id": interaction.photo_id,
                "comment": interaction.comment,
                "meta": interaction.meta,
                "created_at": interaction.created_at,
            }
        )

    return {
        "share_id": share.id,
        "interactions": interactions,
        "unique_clients": len(clients),
        "event_counts": dict(event_counts),
        "photo_stats": list(photo_stats.values()),
    }
