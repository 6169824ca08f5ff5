"""Photographer album endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user, require_roles
from libs.auth.models import AuthUser
from libs.auth.roles import UserRole
from libs.db.session import get_async_db
from services.gallery_service.models import AlbumStatus
from services.gallery_service.schemas import (
    AddPhotosRequest,
    AlbumCreate,
    AlbumListResponse,
    AlbumResponse,
    AlbumUpdate,
    AlbumWithPhotos,
    DeletePhotosRequest,
    DeletePhotosResponse,
    PhotoListResponse,
    PhotoResponse,
)
from services.gallery_service.services.album_ops import (
    add_photos,
    create_album,
    delete_album,
    delete_photos,
    get_album,
    list_albums,
    list_photos,
    list_photos_page,
    page_count,
    update_album,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/albums", tags=["albums"])

require_photographer = require_roles(UserRole.PHOTOGRAPHER, UserRole.ADMIN)


@router.post("", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
async def create_album_endpoint(
    payload: AlbumCreate,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a new album. Costs ALBUM_CREATION_COST credits."""
    return await create_album(db, user=current_user, payload=payload)


@router.get("", response_model=AlbumListResponse)
async def list_my_albums(
    status_filter: Optional[AlbumStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's albums, newest first."""
    albums, total = await list_albums(
        db,
        photographer_id=current_user.user_id,
        status=status_filter,
        page=page,
        limit=limit,
    )
    return AlbumListResponse(
        albums=[AlbumResponse.model_validate(a) for a in albums],
        total=total,
        page=page,
        limit=limit,
        pages=page_count(total, limit),
    )


@router.get("/{album_id}", response_model=AlbumWithPhotos)
async def get_album_endpoint(
    album_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Get album details with all photos (owner or admin)."""
    album = await get_album(db, album_id, current_user)
    photos = await list_photos(db, album.id)
    return AlbumWithPhotos(
        **AlbumResponse.model_validate(album).model_dump(),
        photos=[PhotoResponse.model_validate(p) for p in photos],
    )


@router.put("/{album_id}", response_model=AlbumResponse)
async def update_album_endpoint(
    album_id: uuid.UUID,
    payload: AlbumUpdate,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Edit album details, sharing defaults or status (owner only)."""
    album = await get_album(db, album_id, current_user, allow_admin=False)
    return await update_album(db, album, payload)


@router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_album_endpoint(
    album_id: uuid.UUID,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete an album with all of its photos and shares (owner only)."""
    album = await get_album(db, album_id, current_user, allow_admin=False)
    await delete_album(db, album)


@router.get("/{album_id}/photos", response_model=PhotoListResponse)
async def list_album_photos(
    album_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    album = await get_album(db, album_id, current_user, allow_admin=False)
    photos, total = await list_photos_page(db, album.id, page=page, limit=limit)
    return PhotoListResponse(
        photos=[PhotoResponse.model_validate(p) for p in photos],
        total=total,
        page=page,
        limit=limit,
        pages=page_count(total, limit),
    )


@router.post(
    "/{album_id}/photos",
    response_model=list[PhotoResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_album_photos(
    album_id: uuid.UUID,
    body: AddPhotosRequest,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Register photos already uploaded to object storage."""
    album = await get_album(db, album_id, current_user, allow_admin=False)
    return await add_photos(db, album, body.photos)


@router.delete("/{album_id}/photos", response_model=DeletePhotosResponse)
async def delete_album_photos(
    album_id: uuid.UUID,
    body: DeletePhotosRequest,
    current_user: AuthUser = Depends(require_photographer),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete photos by id; a deleted cover photo is cleared."""
    album = await get_album(db, album_id, current_user, allow_admin=False)
    deleted = await delete_photos(db, album, body.photo_ids)
    return DeletePhotosResponse(deleted_count=deleted)
