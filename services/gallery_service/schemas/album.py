"""Album and photo schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.gallery_service.models.enums import AlbumStatus, PhotoStatus


class AlbumCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    client_id: Optional[str] = None
    shoot_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)
    is_private: bool = True
    allow_downloads: bool = True
    allow_favorites: bool = True


class AlbumUpdate(BaseModel):
    """Partial update; only fields present in the body change."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    shoot_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)
    cover_photo: Optional[str] = None
    is_private: Optional[bool] = None
    allow_downloads: Optional[bool] = None
    allow_favorites: Optional[bool] = None
    status: Optional[AlbumStatus] = None


class AlbumResponse(BaseModel):
    id: uuid.UUID
    photographer_id: str
    photographer_name: str
    title: str
    description: Optional[str] = None
    client_id: Optional[str] = None
    cover_photo: Optional[str] = None
    shoot_date: Optional[datetime] = None
    location: Optional[str] = None
    is_private: bool
    allow_downloads: bool
    allow_favorites: bool
    total_photos: int
    total_views: int
    total_downloads: int
    status: AlbumStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AlbumListResponse(BaseModel):
    albums: list[AlbumResponse]
    total: int
    page: int
    limit: int
    pages: int


class PhotoCreate(BaseModel):
    """An already-uploaded photo to register on an album."""

    filename: str = Field(..., min_length=1)
    original_name: str = Field(..., min_length=1)
    file_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    file_size: int = Field(0, ge=0)
    mime_type: str = "image/jpeg"


class AddPhotosRequest(BaseModel):
    photos: list[PhotoCreate] = Field(..., min_length=1)


class PhotoResponse(BaseModel):
    id: uuid.UUID
    album_id: uuid.UUID
    filename: str
    original_name: str
    file_url: str
    thumbnail_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    file_size: int
    mime_type: str
    order: int
    views: int
    downloads: int
    favorites_count: int
    status: PhotoStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AlbumWithPhotos(AlbumResponse):
    photos: list[PhotoResponse] = []


class PhotoListResponse(BaseModel):
    photos: list[PhotoResponse]
    total: int
    page: int
    limit: int
    pages: int


class DeletePhotosRequest(BaseModel):
    photo_ids: list[uuid.UUID] = Field(..., min_length=1)


class DeletePhotosResponse(BaseModel):
    deleted_count: int
