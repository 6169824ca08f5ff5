import os
import uuid
from contextlib import contextmanager
from typing import AsyncGenerator, Optional

# Settings are read at import time; point them at throwaway values before
# anything from libs/ is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./shutterbox-test.db")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SMTP_USERNAME"] = ""
os.environ["SMTP_PASSWORD"] = ""

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Optional local overrides (never committed).
env_test_path = os.path.join(os.path.dirname(__file__), "..", ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=False)

from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.auth.roles import UserRole
from libs.auth.tokens import SERVICE_ROLE
from libs.common.config import get_settings
from libs.db.base import Base
from libs.db.config import build_engine, build_sessionmaker

# Import all models so metadata includes every table
from services.gallery_service import models as _gallery_models  # noqa: F401
from services.identity_service import models as _identity_models  # noqa: F401
from services.wallet_service import models as _wallet_models  # noqa: F401

get_settings.cache_clear()
settings = get_settings()


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """
    A fresh SQLite database file per test, with every table created.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Factory for extra sessions, e.g. to race two transactions."""
    return build_sessionmaker(test_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------


def make_user(
    role: UserRole = UserRole.PHOTOGRAPHER,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    name: Optional[str] = "Test Photographer",
) -> AuthUser:
    user_id = user_id or f"user-{uuid.uuid4().hex[:8]}"
    return AuthUser(
        user_id=user_id,
        email=email or f"{user_id}@example.com",
        name=name,
        role=role.value,
    )


def make_service_user(calling_service: str = "gallery") -> AuthUser:
    return AuthUser(user_id=f"service:{calling_service}", role=SERVICE_ROLE)


@contextmanager
def override_auth(app, user: AuthUser):
    """Temporarily make ``user`` the caller of every request to ``app``."""
    previous = app.dependency_overrides.get(get_current_user)
    app.dependency_overrides[get_current_user] = lambda: user
    try:
        yield user
    finally:
        if previous is None:
            app.dependency_overrides.pop(get_current_user, None)
        else:
            app.dependency_overrides[get_current_user] = previous


@pytest.fixture
def photographer() -> AuthUser:
    return make_user()
