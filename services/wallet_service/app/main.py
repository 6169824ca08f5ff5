"""FastAPI application for the Wallet Service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.wallet_service.routers import admin_router, internal_router, wallet_router
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the Wallet Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Shutterbox Wallet Service",
        version="0.1.0",
        description="Credit wallet and transaction ledger for Shutterbox.",
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
        return {"status": "ok", "service": "wallet"}

    # Member-facing routes
    app.include_router(wallet_router)

    # Admin routes
    app.include_router(admin_router)

    # Internal service-to-service routes
    app.include_router(internal_router)

    return app


app = create_app()
