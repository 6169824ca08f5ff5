"""FastAPI application for the Gallery Service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.gallery_service.routers import (
    albums_router,
    clients_router,
    events_router,
    shared_router,
    shares_router,
)
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the Gallery Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Shutterbox Gallery Service",
        version="0.1.0",
        description="Albums, photos, album sharing and client records for Shutterbox.",
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "gallery"}

    # Photographer routes
    app.include_router(albums_router)
    app.include_router(shares_router)
    app.include_router(clients_router)
    app.include_router(events_router)

    # Public share-link routes
    app.include_router(shared_router)

    return app


app = create_app()
