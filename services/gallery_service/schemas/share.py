"""Share management schemas (photographer side)."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.gallery_service.models.enums import ShareType


class SharePermissions(BaseModel):
    can_view: bool = True
    can_download: bool = True
    can_favorite: bool = True
    can_comment: bool = False


class SharePermissionsUpdate(BaseModel):
    can_view: Optional[bool] = None
    can_download: Optional[bool] = None
    can_favorite: Optional[bool] = None
    can_comment: Optional[bool] = None


class ShareRecipient(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=200)


class ShareCreateRequest(BaseModel):
    share_type: Literal["link", "email"]
    recipients: list[ShareRecipient] = []
    permissions: Optional[SharePermissionsUpdate] = None
    expires_at: Optional[datetime] = None
    password: Optional[str] = Field(None, min_length=1, max_length=128)
    message: Optional[str] = Field(None, max_length=1000)


class ShareUpdateRequest(BaseModel):
    """Partial update; ``expires_at``/``password`` sent as null clear them."""

    permissions: Optional[SharePermissionsUpdate] = None
    expires_at: Optional[datetime] = None
    password: Optional[str] = Field(None, max_length=128)


class ShareResponse(BaseModel):
    id: uuid.UUID
    album_id: uuid.UUID
    share_type: ShareType
    shared_with_email: Optional[str] = None
    shared_with_name: Optional[str] = None
    access_token: Optional[str] = None
    share_url: str
    permissions: SharePermissions
    expires_at: Optional[datetime] = None
    is_expired: bool
    has_password: bool
    views: int
    last_viewed_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ShareCreateResponse(BaseModel):
    message: str
    share_type: ShareType
    shares: list[ShareResponse]


class ShareListResponse(BaseModel):
    shares: list[ShareResponse]
    public_share: Optional[ShareResponse] = None
    private_shares: list[ShareResponse]
    total_shares: int


class RevokeSharesResponse(BaseModel):
    message: str
    revoked_count: int
