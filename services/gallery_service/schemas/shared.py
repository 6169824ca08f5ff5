"""Schemas of the public ``/shared/{token}`` routes."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.gallery_service.models.enums import InteractionEvent, ShareType
from services.gallery_service.schemas.share import SharePermissions


class SharedAlbumInfo(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    photographer_name: str
    cover_photo: Optional[str] = None
    shoot_date: Optional[datetime] = None
    location: Optional[str] = None
    total_photos: int

    model_config = ConfigDict(from_attributes=True)


class SharedPhoto(BaseModel):
    id: uuid.UUID
    filename: str
    original_name: str
    url: str
    thumbnail_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    file_size: int
    mime_type: str
    order: int
    views: int
    downloads: int
    favorites_count: int


class SharedAlbumResponse(BaseModel):
    album: SharedAlbumInfo
    photos: list[SharedPhoto]
    permissions: SharePermissions
    requires_password: bool
    share_type: ShareType
    expires_at: Optional[datetime] = None


class VerifyPasswordRequest(BaseModel):
    password: str = ""


class VerifyPasswordResponse(BaseModel):
    verified: bool
    access_token: Optional[str] = None
    expires_in: Optional[int] = None


class ClientIdentityRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    client_identifier: str = Field(..., min_length=1, max_length=200)


class ClientIdentityResponse(BaseModel):
    success: bool = True
    client_id: uuid.UUID
    message: str = "Identity saved successfully"
    is_returning_client: bool


class FavoriteRequest(BaseModel):
    client_id: Optional[uuid.UUID] = None
    photo_id: uuid.UUID
    is_favorite: bool


class FavoriteResponse(BaseModel):
    success: bool = True
    is_favorite: bool
    favorites_count: int
    was_already_in_state: bool


class CommentCreateRequest(BaseModel):
    client_id: Optional[uuid.UUID] = None
    photo_id: uuid.UUID
    comment: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: uuid.UUID
    comment: str
    photo_id: Optional[uuid.UUID] = None
    photo_name: Optional[str] = None
    client_name: str
    client_email: Optional[str] = None
    created_at: datetime


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
    total: int


class DownloadRequest(BaseModel):
    client_id: Optional[uuid.UUID] = None
    photo_id: uuid.UUID


class DownloadResponse(BaseModel):
    photo_id: uuid.UUID
    url: str
    filename: str
    downloads: int


class InteractionRequest(BaseModel):
    client_id: Optional[uuid.UUID] = None
    event: InteractionEvent
    photo_id: Optional[uuid.UUID] = None
    comment: Optional[str] = Field(None, max_length=2000)
    meta: Optional[dict[str, Any]] = None


class InteractionResponse(BaseModel):
    success: bool = True
    interaction_id: uuid.UUID


class InteractionRecord(BaseModel):
    id: uuid.UUID
    event: InteractionEvent
    client_id: Optional[uuid.UUID] = None
    client_name: Optional[str] = None
    photo_id: Optional[uuid.UUID] = None
    comment: Optional[str] = None
    meta: Optional[dict[str, Any]] = None
    created_at: datetime


class PhotoActivity(BaseModel):
    photo_id: uuid.UUID
    views: int = 0
    favorites: int = 0
    comments: int = 0
    selections: int = 0
    downloads: int = 0


class ShareAnalyticsResponse(BaseModel):
    share_id: uuid.UUID
    interactions: list[InteractionRecord]
    unique_clients: int
    event_counts: dict[str, int]
    photo_stats: list[PhotoActivity]
