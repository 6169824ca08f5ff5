"""Photographer CRM: client records and what is linked to them."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_roles
from libs.auth.models import AuthUser
from libs.auth.roles import UserRole
from libs.db.session import get_async_db
from services.gallery_service.schemas import (
    AlbumResponse,
    ClientCreate,
    ClientListResponse,
    ClientResponse,
    ClientUpdate,
    EventResponse,
)
from services.gallery_service.services import crm_ops
from services.gallery_service.services.album_ops import page_count
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/clients", tags=["clients"])

require_photographer = require_roles(UserRole.PHOTOGRAPHER, UserRole.ADMIN)


@router.get("", response_model=ClientListResponse)
async def list_clients(
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's clients, newest first. ``search`` matches name or email."""
    clients, total = await crm_ops.list_clients(
        db,
        photographer_id=current_user.user_id,
        search=search,
        page=page,
        limit=limit,
    )
    return ClientListResponse(
        clients=[ClientResponse.model_validate(c) for c in clients],
        total=total,
        page=page,
        limit=limit,
        pages=page_count(total, limit),
    )


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    return await crm_ops.create_client(
        db, photographer_id=current_user.user_id, payload=payload
    )


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    return await crm_ops.get_client(db, current_user.user_id, client_id)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: uuid.UUID,
    payload: ClientUpdate,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    client = await crm_ops.get_client(db, current_user.user_id, client_id)
    return await crm_ops.update_client(db, client, payload)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a client. Linked albums and bookings are kept, unlinked."""
    client = await crm_ops.get_client(db, current_user.user_id, client_id)
    await crm_ops.delete_client(db, client)


# ---------------------------------------------------------------------------
# Linked albums
# ---------------------------------------------------------------------------


@router.get("/{client_id}/albums", response_model=list[AlbumResponse])
async def list_client_albums(
    client_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    client = await crm_ops.get_client(db, current_user.user_id, client_id)
    return await crm_ops.list_client_albums(db, client)


@router.post("/{client_id}/albums/{album_id}", response_model=AlbumResponse)
async def link_client_album(
    client_id: uuid.UUID,
    album_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    client = await crm_ops.get_client(db, current_user.user_id, client_id)
    return await crm_ops.link_album(db, client, album_id)


@router.delete("/{client_id}/albums/{album_id}", response_model=AlbumResponse)
async def unlink_client_album(
    client_id: uuid.UUID,
    album_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    client = await crm_ops.get_client(db, current_user.user_id, client_id)
    return await crm_ops.unlink_album(db, client, album_id)


# ---------------------------------------------------------------------------
# Linked events
# ---------------------------------------------------------------------------


@router.get("/{client_id}/events", response_model=list[EventResponse])
async def list_client_events(
    client_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    client = await crm_ops.get_client(db, current_user.user_id, client_id)
    return await crm_ops.list_client_events(db, client)


@router.post("/{client_id}/events/{event_id}", response_model=EventResponse)
async def link_client_event(
    client_id: uuid.UUID,
    event_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    client = await crm_ops.get_client(db, current_user.user_id, client_id)
    return await crm_ops.link_event(db, client, event_id)


@router.delete("/{client_id}/events/{event_id}", response_model=EventResponse)
async def unlink_client_event(
    client_id: uuid.UUID,
    event_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    client = await crm_ops.get_client(db, current_user.user_id, client_id)
    return await crm_ops.unlink_event(db, client, event_id)
