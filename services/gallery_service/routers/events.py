"""Photographer bookings (shoots scheduled with a client)."""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_roles
from libs.auth.models import AuthUser
from libs.auth.roles import UserRole
from libs.db.session import get_async_db
from services.gallery_service.models import EventStatus, EventType
from services.gallery_service.schemas import (
    EventCreate,
    EventListResponse,
    EventResponse,
    EventUpdate,
)
from services.gallery_service.services import crm_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/events", tags=["events"])

require_photographer = require_roles(UserRole.PHOTOGRAPHER, UserRole.ADMIN)


@router.get("", response_model=EventListResponse)
async def list_events(
    client_id: Optional[uuid.UUID] = None,
    start_date: Optional[datetime] = Query(None, description="Starting on or after"),
    end_date: Optional[datetime] = Query(None, description="Starting on or before"),
    event_type: Optional[EventType] = Query(None, alias="type"),
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """List bookings in chronological order."""
    events = await crm_ops.list_events(
        db,
        photographer_id=current_user.user_id,
        client_id=client_id,
        start_from=start_date,
        start_to=end_date,
        event_type=event_type,
        status=status_filter,
    )
    return EventListResponse(
        events=[EventResponse.model_validate(e) for e in events], total=len(events)
    )


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    return await crm_ops.create_event(
        db, photographer_id=current_user.user_id, payload=payload
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    return await crm_ops.get_event(db, current_user.user_id, event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: uuid.UUID,
    payload: EventUpdate,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    event = await crm_ops.get_event(db, current_user.user_id, event_id)
    return await crm_ops.update_event(db, event, payload)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    event = await crm_ops.get_event(db, current_user.user_id, event_id)
    await crm_ops.delete_event(db, event)
