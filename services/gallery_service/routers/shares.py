"""Share management endpoints for album owners."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_roles
from libs.auth.models import AuthUser
from libs.auth.roles import UserRole
from libs.db.session import get_async_db
from services.gallery_service.exceptions import InvalidShareRequestError
from services.gallery_service.models import ShareType
from services.gallery_service.schemas import (
    RevokeSharesResponse,
    ShareAnalyticsResponse,
    ShareCreateRequest,
    ShareCreateResponse,
    ShareListResponse,
    ShareResponse,
    ShareUpdateRequest,
)
from services.gallery_service.services import share_ops
from services.gallery_service.services.album_ops import get_album
from services.gallery_service.services.client_ops import share_analytics
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/albums/{album_id}/shares", tags=["shares"])

require_photographer = require_roles(UserRole.PHOTOGRAPHER, UserRole.ADMIN)


async def _owned_album(db: AsyncSession, album_id: uuid.UUID, user: AuthUser):
    # Only the owner manages shares, admins included.
    return await get_album(db, album_id, user, allow_admin=False)


@router.post(
    "", response_model=ShareCreateResponse, status_code=status.HTTP_201_CREATED
)
async def create_shares_endpoint(
    album_id: uuid.UUID,
    body: ShareCreateRequest,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Generate the public link, or share privately with a list of emails."""
    album = await _owned_album(db, album_id, current_user)
    share_type = ShareType(body.share_type)
    shares = await share_ops.create_shares(
        db,
        album,
        share_type=share_type,
        recipients=body.recipients,
        permissions=(
            body.permissions.model_dump(exclude_none=True) if body.permissions else None
        ),
        expires_at=body.expires_at,
        password=body.password,
    )
    message = (
        "Public share link generated successfully"
        if share_type == ShareType.LINK
        else f"Album shared with {len(shares)} user(s) successfully"
    )
    return ShareCreateResponse(
        message=message,
        share_type=share_type,
        shares=[share_ops.to_share_response(s) for s in shares],
    )


@router.get("", response_model=ShareListResponse)
async def list_shares_endpoint(
    album_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    album = await _owned_album(db, album_id, current_user)
    shares = [
        share_ops.to_share_response(s)
        for s in await share_ops.list_shares(db, album)
    ]
    public = next((s for s in shares if s.share_type == ShareType.LINK), None)
    return ShareListResponse(
        shares=shares,
        public_share=public,
        private_shares=[s for s in shares if s.share_type == ShareType.EMAIL],
        total_shares=len(shares),
    )


@router.patch("/{share_id}", response_model=ShareResponse)
async def update_share_endpoint(
    album_id: uuid.UUID,
    share_id: uuid.UUID,
    body: ShareUpdateRequest,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Update permissions, expiry or password; explicit nulls clear the latter two."""
    album = await _owned_album(db, album_id, current_user)
    changes = {
        field: getattr(body, field)
        for field in ("expires_at", "password")
        if field in body.model_fields_set
    }
    share = await share_ops.update_share(
        db,
        album,
        share_id,
        permissions=(
            body.permissions.model_dump(exclude_none=True) if body.permissions else None
        ),
        **changes,
    )
    return share_ops.to_share_response(share)


@router.delete("/{share_id}", response_model=ShareResponse)
async def revoke_share_endpoint(
    album_id: uuid.UUID,
    share_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    album = await _owned_album(db, album_id, current_user)
    share = await share_ops.revoke_share(db, album, share_id)
    return share_ops.to_share_response(share)


@router.delete("", response_model=RevokeSharesResponse)
async def revoke_all_shares_endpoint(
    album_id: uuid.UUID,
    all_shares: Optional[bool] = Query(None, alias="all"),
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Revoke every share of the album (requires ``?all=true``)."""
    if not all_shares:
        raise InvalidShareRequestError("Set all=true to revoke all shares")
    album = await _owned_album(db, album_id, current_user)
    count = await share_ops.revoke_all(db, album)
    return RevokeSharesResponse(
        message="All shares revoked successfully", revoked_count=count
    )


@router.get("/{share_id}/analytics", response_model=ShareAnalyticsResponse)
async def share_analytics_endpoint(
    album_id: uuid.UUID,
    share_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Visitor activity on one share."""
    album = await _owned_album(db, album_id, current_user)
    share = await share_ops.get_share(db, album, share_id)
    return await share_analytics(db, share)
