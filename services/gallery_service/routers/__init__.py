"""Gallery service routers package."""

from services.gallery_service.routers.albums import router as albums_router
from services.gallery_service.routers.clients import router as clients_router
from services.gallery_service.routers.events import router as events_router
from services.gallery_service.routers.shared import router as shared_router
from services.gallery_service.routers.shares import router as shares_router

__all__ = [
    "albums_router",
    "clients_router",
    "events_router",
    "shared_router",
    "shares_router",
]
