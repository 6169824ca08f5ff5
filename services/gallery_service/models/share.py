"""Album sharing models: share links, visiting clients and their activity."""

import uuid
from datetime import datetime
from typing import Any, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, JSONType
from services.gallery_service.models.enums import (
    InteractionEvent,
    ShareType,
    enum_values,
)
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

# Recipient marker of an album's public link share.
PUBLIC_SHARE_EMAIL = "public"


class AlbumShare(Base):
    """A grant of access to one album, addressed by ``access_token``."""

    __tablename__ = "album_shares"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    album_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    photographer_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    # Recipient
    shared_with_email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    shared_with_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    shared_with_user_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    share_type: Mapped[ShareType] = mapped_column(
        SAEnum(
            ShareType,
            name="share_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=ShareType.LINK,
        nullable=False,
    )
    access_token: Mapped[Optional[str]] = mapped_column(
        String(64), unique=True, index=True, nullable=True
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Permissions
    can_view: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    can_download: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    can_favorite: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    can_comment: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # bcrypt hash; never serialized
    password_hash: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_viewed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (
        Index("ix_album_shares_album_active", "album_id", "is_active"),
        Index("ix_album_shares_email", "shared_with_email"),
    )

    @property
    def permissions(self) -> dict[str, bool]:
        return {
            "can_view": self.can_view,
            "can_download": self.can_download,
            "can_favorite": self.can_favorite,
            "can_comment": self.can_comment,
        }

    @property
    def is_public(self) -> bool:
        return self.shared_with_email == PUBLIC_SHARE_EMAIL

    def __repr__(self) -> str:
        return f"<AlbumShare {self.id} album={self.album_id} type={self.share_type}>"


class AlbumShareClient(Base):
    """Identity a visitor entered on a share, keyed by a browser identifier."""

    __tablename__ = "album_share_clients"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    share_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("album_shares.id", ondelete="CASCADE"), nullable=False
    )
    album_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    client_identifier: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    photo_views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    favorites: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comments: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downloads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    last_accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "album_id", "client_identifier", name="uq_share_client_album_identifier"
        ),
    )

    def __repr__(self) -> str:
        return f"<AlbumShareClient {self.id} {self.name!r}>"


class AlbumShareInteraction(Base):
    """Append-only log of what visitors did on a share."""

    __tablename__ = "album_share_interactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    share_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("album_shares.id", ondelete="CASCADE"), nullable=False
    )
    album_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    photographer_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("album_share_clients.id", ondelete="SET NULL"), nullable=True
    )
    event: Mapped[InteractionEvent] = mapped_column(
        SAEnum(
            InteractionEvent,
            name="interaction_event_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    photo_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    meta: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        Index("ix_share_interactions_share_created", "share_id", "created_at"),
        Index("ix_share_interactions_client_photo", "client_id", "photo_id", "event"),
    )

    def __repr__(self) -> str:
        return f"<AlbumShareInteraction {self.event} share={self.share_id}>"
