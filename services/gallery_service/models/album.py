"""Album and Photo models."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.gallery_service.models.enums import AlbumStatus, PhotoStatus, enum_values
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship


class Album(Base):
    """A photographer's collection of photos from one shoot."""

    __tablename__ = "albums"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    photographer_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    photographer_name: Mapped[str] = mapped_column(String, nullable=False)
    photographer_email: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    cover_photo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    shoot_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    is_private: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_downloads: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_favorites: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    total_photos: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_downloads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[AlbumStatus] = mapped_column(
        SAEnum(
            AlbumStatus,
            name="album_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=AlbumStatus.DRAFT,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    photos: Mapped[list["Photo"]] = relationship(
        back_populates="album",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        Index("ix_albums_photographer_created", "photographer_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Album {self.id} {self.title!r}>"


class Photo(Base):
    """An uploaded photo. The bytes live in object storage at ``file_url``."""

    __tablename__ = "photos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    album_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    photographer_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    filename: Mapped[str] = mapped_column(String, nullable=False)
    original_name: Mapped[str] = mapped_column(String, nullable=False)
    file_url: Mapped[str] = mapped_column(String, nullable=False)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    file_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    mime_type: Mapped[str] = mapped_column(String, default="image/jpeg", nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downloads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    favorites_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[PhotoStatus] = mapped_column(
        SAEnum(
            PhotoStatus,
            name="photo_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=PhotoStatus.READY,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    album: Mapped["Album"] = relationship(back_populates="photos", lazy="raise")

    __table_args__ = (Index("ix_photos_album_order", "album_id", "order"),)

    def __repr__(self) -> str:
        return f"<Photo {self.id} album={self.album_id}>"
