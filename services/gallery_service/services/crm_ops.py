"""Photographer CRM: clients, their bookings, and links to albums."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import as_utc
from libs.common.logging import get_logger
from services.gallery_service.exceptions import (
    AlbumNotFoundError,
    ClientNotFoundError,
    DuplicateClientError,
    EventNotFoundError,
    InvalidEventError,
)
from services.gallery_service.models import Album, Client, Event, EventStatus, EventType
from services.gallery_service.schemas import (
    ClientCreate,
    ClientUpdate,
    EventCreate,
    EventUpdate,
)
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


async def _email_taken(
    db: AsyncSession,
    photographer_id: str,
    email: str,
    exclude_id: Optional[uuid.UUID] = None,
) -> bool:
    query = select(Client.id).where(
        Client.photographer_id == photographer_id, Client.email == email
    )
    if exclude_id is not None:
        query = query.where(Client.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def list_clients(
    db: AsyncSession,
    *,
    photographer_id: str,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[Client], int]:
    """Return ``(clients, total)``, newest first, optionally name/email filtered."""
    filters = [Client.photographer_id == photographer_id]
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        filters.append(
            or_(
                func.lower(Client.first_name).like(pattern),
                func.lower(Client.last_name).like(pattern),
                Client.email.like(pattern),
            )
        )

    total = (
        await db.execute(select(func.count()).select_from(Client).where(*filters))
    ).scalar_one()
    result = await db.execute(
        select(Client)
        .where(*filters)
        .order_by(Client.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def create_client(
    db: AsyncSession, *, photographer_id: str, payload: ClientCreate
) -> Client:
    data = payload.model_dump()
    data["email"] = data["email"].strip().lower()
    if await _email_taken(db, photographer_id, data["email"]):
        raise DuplicateClientError()

    client = Client(photographer_id=photographer_id, **data)
    db.add(client)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateClientError() from exc
    except Exception:
        await db.rollback()
        raise
    logger.info("Client %s added by %s", client.id, photographer_id)
    return client


async def get_client(
    db: AsyncSession, photographer_id: str, client_id: uuid.UUID
) -> Client:
    result = await db.execute(
        select(Client).where(
            Client.id == client_id, Client.photographer_id == photographer_id
        )
    )
    client = result.scalar_one_or_none()
    if client is None:
        raise ClientNotFoundError()
    return client


async def update_client(
    db: AsyncSession, client: Client, payload: ClientUpdate
) -> Client:
    changes = payload.model_dump(exclude_unset=True)
    # Names and email are required on the record.
    for field in ("first_name", "last_name", "email"):
        if changes.get(field, "") is None:
            changes.pop(field)
    if "email" in changes:
        changes["email"] = changes["email"].strip().lower()
        if await _email_taken(db, client.photographer_id, changes["email"], client.id):
            raise DuplicateClientError()

    for field, value in changes.items():
        setattr(client, field, value)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateClientError() from exc
    except Exception:
        await db.rollback()
        raise
    await db.refresh(client)
    return client


async def delete_client(db: AsyncSession, client: Client) -> None:
    """Delete ``client``; its albums and bookings stay, unlinked."""
    client_id = client.id
    photographer_id = client.photographer_id
    try:
        await db.execute(
            update(Album)
            .where(
                Album.photographer_id == photographer_id,
                Album.client_id == str(client_id),
            )
            .values(client_id=None)
        )
        await db.execute(
            update(Event).where(Event.client_id == client_id).values(client_id=None)
        )
        await db.delete(client)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Client %s deleted by %s", client_id, photographer_id)


# ---------------------------------------------------------------------------
# Client <-> album links
# ---------------------------------------------------------------------------


async def _owned_album(
    db: AsyncSession, photographer_id: str, album_id: uuid.UUID
) -> Album:
    result = await db.execute(
        select(Album).where(
            Album.id == album_id, Album.photographer_id == photographer_id
        )
    )
    album = result.scalar_one_or_none()
    if album is None:
        raise AlbumNotFoundError()
    return album


async def list_client_albums(db: AsyncSession, client: Client) -> list[Album]:
    result = await db.execute(
        select(Album)
        .where(
            Album.photographer_id == client.photographer_id,
            Album.client_id == str(client.id),
        )
        .order_by(Album.created_at.desc())
    )
    return list(result.scalars().all())


async def link_album(db: AsyncSession, client: Client, album_id: uuid.UUID) -> Album:
    """Make ``client`` the album's client, replacing any previous one."""
    album = await _owned_album(db, client.photographer_id, album_id)
    album.client_id = str(client.id)
    await _commit(db)
    await db.refresh(album)
    return album


async def unlink_album(db: AsyncSession, client: Client, album_id: uuid.UUID) -> Album:
    album = await _owned_album(db, client.photographer_id, album_id)
    if album.client_id == str(client.id):
        album.client_id = None
        await _commit(db)
        await db.refresh(album)
    return album


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def _check_dates(start: datetime, end: datetime) -> None:
    if as_utc(end) < as_utc(start):
        raise InvalidEventError()


async def list_events(
    db: AsyncSession,
    *,
    photographer_id: str,
    client_id: Optional[uuid.UUID] = None,
    start_from: Optional[datetime] = None,
    start_to: Optional[datetime] = None,
    event_type: Optional[EventType] = None,
    status: Optional[EventStatus] = None,
) -> list[Event]:
    """Bookings in chronological order, filtered by start date range and kind."""
    query = select(Event).where(Event.photographer_id == photographer_id)
    if client_id is not None:
        query = query.where(Event.client_id == client_id)
    if start_from is not None:
        query = query.where(Event.start_date >= as_utc(start_from))
    if start_to is not None:
        query = query.where(Event.start_date <= as_utc(start_to))
    if event_type is not None:
        query = query.where(Event.type == event_type)
    if status is not None:
        query = query.where(Event.status == status)
    result = await db.execute(query.order_by(Event.start_date))
    return list(result.scalars().all())


async def list_client_events(db: AsyncSession, client: Client) -> list[Event]:
    """A client's bookings, most recent first."""
    result = await db.execute(
        select(Event)
        .where(
            Event.photographer_id == client.photographer_id,
            Event.client_id == client.id,
        )
        .order_by(Event.start_date.desc())
    )
    return list(result.scalars().all())


async def create_event(
    db: AsyncSession, *, photographer_id: str, payload: EventCreate
) -> Event:
    _check_dates(payload.start_date, payload.end_date)
    await get_client(db, photographer_id, payload.client_id)
    if payload.album_id is not None:
        await _owned_album(db, photographer_id, payload.album_id)

    data = payload.model_dump()
    data["start_date"] = as_utc(data["start_date"])
    data["end_date"] = as_utc(data["end_date"])
    event = Event(photographer_id=photographer_id, **data)
    db.add(event)
    await _commit(db)
    logger.info("Event %s booked by %s", event.id, photographer_id)
    return event


async def get_event(
    db: AsyncSession, photographer_id: str, event_id: uuid.UUID
) -> Event:
    result = await db.execute(
        select(Event).where(
            Event.id == event_id, Event.photographer_id == photographer_id
        )
    )
    event = result.scalar_one_or_none()
    if event is None:
        raise EventNotFoundError()
    return event


# Columns an update may clear by sending null.
_CLEARABLE_EVENT_FIELDS = {"album_id", "description", "location", "notes"}


async def update_event(db: AsyncSession, event: Event, payload: EventUpdate) -> Event:
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in _CLEARABLE_EVENT_FIELDS
    }
    for field in ("start_date", "end_date"):
        if field in changes:
            changes[field] = as_utc(changes[field])
    _check_dates(
        changes.get("start_date", event.start_date),
        changes.get("end_date", event.end_date),
    )
    if "client_id" in changes:
        await get_client(db, event.photographer_id, changes["client_id"])
    if changes.get("album_id") is not None:
        await _owned_album(db, event.photographer_id, changes["album_id"])

    for field, value in changes.items():
        setattr(event, field, value)
    await _commit(db)
    await db.refresh(event)
    return event


async def delete_event(db: AsyncSession, event: Event) -> None:
    try:
        await db.delete(event)
        await db.commit()
    except Exception:
        await db.rollback()
        raise


async def link_event(db: AsyncSession, client: Client, event_id: uuid.UUID) -> Event:
    event = await get_event(db, client.photographer_id, event_id)
    event.client_id = client.id
    await _commit(db)
    await db.refresh(event)
    return event


async def unlink_event(db: AsyncSession, client: Client, event_id: uuid.UUID) -> Event:
    event = await get_event(db, client.photographer_id, event_id)
    if event.client_id == client.id:
        event.client_id = None
        await _commit(db)
        await db.refresh(event)
    return event
