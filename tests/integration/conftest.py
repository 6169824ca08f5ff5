"""
Per-service HTTP clients.

Each fixture points one service app at the test database session and
authenticates every request as the ``photographer`` fixture unless a test
wraps calls in ``override_auth``.
"""

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from libs.auth.dependencies import get_current_user
from libs.db.session import get_async_db


async def _service_client(app, db_session, user) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_async_db] = lambda: db_session
    if user is not None:
        app.dependency_overrides[get_current_user] = lambda: user

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def wallet_client(db_session, photographer) -> AsyncGenerator[AsyncClient, None]:
    from services.wallet_service.app.main import app

    async for client in _service_client(app, db_session, photographer):
        yield client


@pytest_asyncio.fixture
async def gallery_client(db_session, photographer) -> AsyncGenerator[AsyncClient, None]:
    from services.gallery_service.app.main import app

    async for client in _service_client(app, db_session, photographer):
        yield client


@pytest_asyncio.fixture
async def public_gallery_client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Gallery client with no signed-in user, as a share visitor sees it."""
    from services.gallery_service.app.main import app

    async for client in _service_client(app, db_session, None):
        yield client


@pytest_asyncio.fixture
async def identity_client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Identity client using real bearer tokens; auth is not overridden."""
    from services.identity_service.app.main import app

    async for client in _service_client(app, db_session, None):
        yield client
