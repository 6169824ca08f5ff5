"""Shared helper functions for gallery service routers."""

from typing import Optional

from fastapi import Depends, Request
from libs.common.rate_limit import get_client_ip
from libs.db.session import get_async_db
from services.gallery_service.services.client_ops import RequestMeta
from services.gallery_service.services.share_gate import (
    CAPABILITY_COOKIE,
    CAPABILITY_HEADER,
    ShareAccess,
    authorize_view,
)
from sqlalchemy.ext.asyncio import AsyncSession


def _request_meta(request: Request) -> RequestMeta:
    return RequestMeta(
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


def _share_capability(request: Request) -> Optional[str]:
    """Capability from the verify cookie, or the header for API clients."""
    return request.cookies.get(CAPABILITY_COOKIE) or request.headers.get(
        CAPABILITY_HEADER
    )


async def get_share_access(
    token: str,
    request: Request,
    db: AsyncSession = Depends(get_async_db),
) -> ShareAccess:
    """Dependency guarding every content route under ``/shared/{token}``."""
    return await authorize_view(db, token, _share_capability(request))
