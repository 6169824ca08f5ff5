"""Gallery Service models package.

IMPORTANT: Every model class AND enum must be listed here so Alembic and the
mapper registry see them on import.
"""

from services.gallery_service.models.album import Album, Photo  # noqa: F401
from services.gallery_service.models.crm import Client, Event  # noqa: F401
from services.gallery_service.models.enums import (  # noqa: F401
    AlbumStatus,
    EventStatus,
    EventType,
    InteractionEvent,
    PhotoStatus,
    ShareType,
)
from services.gallery_service.models.share import (  # noqa: F401
    PUBLIC_SHARE_EMAIL,
    AlbumShare,
    AlbumShareClient,
    AlbumShareInteraction,
)

__all__ = [
    "AlbumStatus",
    "EventStatus",
    "EventType",
    "InteractionEvent",
    "PhotoStatus",
    "ShareType",
    "Album",
    "Photo",
    "Client",
    "Event",
    "AlbumShare",
    "AlbumShareClient",
    "AlbumShareInteraction",
    "PUBLIC_SHARE_EMAIL",
]
