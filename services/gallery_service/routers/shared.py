"""Public endpoints for visitors of a shared album link.

Every content route depends on ``get_share_access``, which enforces the
share's expiry and password.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from libs.common.config import get_settings
from libs.common.rate_limit import share_password_limit
from libs.db.session import get_async_db
from services.gallery_service.exceptions import AlbumNotFoundError, SharePermissionError
from services.gallery_service.models import Album
from services.gallery_service.routers._helpers import _request_meta, get_share_access
from services.gallery_service.schemas import (
    ClientIdentityRequest,
    ClientIdentityResponse,
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    DownloadRequest,
    DownloadResponse,
    FavoriteRequest,
    FavoriteResponse,
    InteractionRequest,
    InteractionResponse,
    SharedAlbumInfo,
    SharedAlbumResponse,
    SharedPhoto,
    SharePermissions,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)
from services.gallery_service.services import client_ops
from services.gallery_service.services.album_ops import list_photos
from services.gallery_service.services.share_gate import (
    CAPABILITY_COOKIE,
    ShareAccess,
    record_view,
    resolve_share,
    verify_password,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/shared/{token}", tags=["shared"])


@router.get("", response_model=SharedAlbumResponse)
async def get_shared_album(
    access: ShareAccess = Depends(get_share_access),
    db: AsyncSession = Depends(get_async_db),
):
    """Album and ready photos behind a share link. Counts one view."""
    share = access.share
    if not access.permissions["can_view"]:
        raise SharePermissionError("Viewing is not enabled for this share")
    album = await db.get(Album, share.album_id)
    if album is None:
        raise AlbumNotFoundError()
    photos = await list_photos(db, album.id, ready_only=True)

    response = SharedAlbumResponse(
        album=SharedAlbumInfo.model_validate(album),
        photos=[
            SharedPhoto(
                id=photo.id,
                filename=photo.filename,
                original_name=photo.original_name,
                url=photo.file_url,
                thumbnail_url=photo.thumbnail_url or photo.file_url,
                width=photo.width,
                height=photo.height,
                file_size=photo.file_size,
                mime_type=photo.mime_type,
                order=photo.order,
                views=photo.views,
                downloads=photo.downloads,
                favorites_count=photo.favorites_count,
            )
            for photo in photos
        ],
        permissions=SharePermissions(**access.permissions),
        requires_password=share.password_hash is not None,
        share_type=share.share_type,
        expires_at=share.expires_at,
    )
    await record_view(db, share)
    return response


@router.post("/verify", response_model=VerifyPasswordResponse)
@share_password_limit
async def verify_share_password(
    request: Request,
    response: Response,
    token: str,
    body: VerifyPasswordRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Exchange the share password for a one-hour access capability."""
    settings = get_settings()
    share = await resolve_share(db, token)
    capability = await verify_password(share, body.password)
    if capability is None:
        return VerifyPasswordResponse(verified=True)

    response.set_cookie(
        CAPABILITY_COOKIE,
        capability,
        max_age=settings.SHARE_CAPABILITY_TTL_SECONDS,
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="lax",
    )
    return VerifyPasswordResponse(
        verified=True,
        access_token=capability,
        expires_in=settings.SHARE_CAPABILITY_TTL_SECONDS,
    )


@router.post("/client", response_model=ClientIdentityResponse)
async def save_client_identity(
    request: Request,
    body: ClientIdentityRequest,
    access: ShareAccess = Depends(get_share_access),
    db: AsyncSession = Depends(get_async_db),
):
    """Remember who is looking at the album (name, optional email)."""
    client, is_returning = await client_ops.save_client_identity(
        db,
        access.share,
        name=body.name,
        email=body.email,
        client_identifier=body.client_identifier,
        meta=_request_meta(request),
    )
    return ClientIdentityResponse(client_id=client.id, is_returning_client=is_returning)


@router.post("/favorite", response_model=FavoriteResponse)
async def toggle_favorite(
    request: Request,
    body: FavoriteRequest,
    access: ShareAccess = Depends(get_share_access),
    db: AsyncSession = Depends(get_async_db),
):
    result = await client_ops.toggle_favorite(
        db,
        access.share,
        photo_id=body.photo_id,
        is_favorite=body.is_favorite,
        client_id=body.client_id,
        meta=_request_meta(request),
    )
    return FavoriteResponse(
        is_favorite=result.is_favorite,
        favorites_count=result.favorites_count,
        was_already_in_state=result.was_already_in_state,
    )


@router.get("/comments", response_model=CommentListResponse)
async def list_comments(
    photo_id: Optional[uuid.UUID] = None,
    access: ShareAccess = Depends(get_share_access),
    db: AsyncSession = Depends(get_async_db),
):
    comments = await client_ops.list_comments(db, access.share, photo_id=photo_id)
    return CommentListResponse(
        comments=[CommentResponse(**c) for c in comments], total=len(comments)
    )


@router.post("/comments", response_model=CommentResponse)
async def add_comment(
    request: Request,
    body: CommentCreateRequest,
    access: ShareAccess = Depends(get_share_access),
    db: AsyncSession = Depends(get_async_db),
):
    comment = await client_ops.add_comment(
        db,
        access.share,
        photo_id=body.photo_id,
        comment=body.comment,
        client_id=body.client_id,
        meta=_request_meta(request),
    )
    return CommentResponse(**comment)


@router.post("/download", response_model=DownloadResponse)
async def download_photo(
    request: Request,
    body: DownloadRequest,
    access: ShareAccess = Depends(get_share_access),
    db: AsyncSession = Depends(get_async_db),
):
    """Count a photo download and hand back its file URL."""
    photo = await client_ops.record_download(
        db,
        access.share,
        photo_id=body.photo_id,
        client_id=body.client_id,
        meta=_request_meta(request),
    )
    return DownloadResponse(
        photo_id=photo.id,
        url=photo.file_url,
        filename=photo.original_name,
        downloads=photo.downloads,
    )


@router.post("/interactions", response_model=InteractionResponse)
async def track_interaction(
    request: Request,
    body: InteractionRequest,
    access: ShareAccess = Depends(get_share_access),
    db: AsyncSession = Depends(get_async_db),
):
    """Record a visitor event (album_open, photo_view, photo_select, ...)."""
    interaction = await client_ops.track_interaction(
        db,
        access.share,
        event=body.event,
        client_id=body.client_id,
        photo_id=body.photo_id,
        comment=body.comment,
        extra=body.meta,
        meta=_request_meta(request),
    )
    return InteractionResponse(interaction_id=interaction.id)
