"""Enums for the Gallery Service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class AlbumStatus(str, enum.Enum):
    DRAFT = "draft"
    PROCESSING = "processing"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class PhotoStatus(str, enum.Enum):
    UPLOADING = "uploading"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class ShareType(str, enum.Enum):
    LINK = "link"
    EMAIL = "email"
    DIRECT = "direct"


class InteractionEvent(str, enum.Enum):
    IDENTITY_ENTERED = "identity_entered"
    ALBUM_OPEN = "album_open"
    PHOTO_VIEW = "photo_view"
    PHOTO_SELECT = "photo_select"
    PHOTO_UNSELECT = "photo_unselect"
    PHOTO_FAVORITE = "photo_favorite"
    PHOTO_UNFAVORITE = "photo_unfavorite"
    COMMENT_ADD = "comment_add"
    SELECTION_SUBMIT = "selection_submit"
    PHOTO_DOWNLOAD = "photo_download"


class EventType(str, enum.Enum):
    WEDDING = "wedding"
    PORTRAIT = "portrait"
    CORPORATE = "corporate"
    EVENT = "event"
    OTHER = "other"


class EventStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
