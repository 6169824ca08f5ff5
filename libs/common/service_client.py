"""Reusable async HTTP client for internal service-to-service communication.

All cross-service calls should go through this helper instead of importing
models or querying tables from other services directly.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from libs.auth.dependencies import _service_role_jwt
from libs.common.config import get_settings
from libs.common.exceptions import UpstreamServiceError
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)

# Default timeout for internal calls (seconds).
_DEFAULT_TIMEOUT = 10.0


async def internal_request(
    *,
    service_url: str,
    method: str,
    path: str,
    calling_service: str,
    json: Any = None,
    params: Optional[dict] = None,
    timeout: float = _DEFAULT_TIMEOUT,
) -> httpx.Response:
    """Make an authenticated internal service-to-service HTTP call.

    Args:
        service_url: Base URL of the target service (e.g. settings.WALLET_SERVICE_URL).
        method: HTTP method (GET, POST, DELETE, …).
        path: URL path on the target service (e.g. "/internal/wallet/debit").
        calling_service: Name of the calling service for the JWT "sub" claim.
        json: Optional JSON body.
        params: Optional query parameters.
        timeout: Request timeout in seconds.

    Returns:
        The httpx.Response object.

    Raises:
        httpx.RequestError on connection failures.
    """
    url = f"{service_url}{path}"
    headers = {"Authorization": f"Bearer {_service_role_jwt(calling_service)}"}
    request_id = get_request_id()
    if request_id:
        headers["X-Request-ID"] = request_id
    headers["X-Caller-Service"] = calling_service

    async with httpx.AsyncClient(timeout=timeout) as client:
        response = await client.request(
            method,
            url,
            headers=headers,
            json=json,
            params=params,
        )
    return response


async def internal_post(
    *,
    service_url: str,
    path: str,
    calling_service: str,
    json: Any = None,
    timeout: float = _DEFAULT_TIMEOUT,
) -> httpx.Response:
    """Convenience wrapper for POST requests."""
    return await internal_request(
        service_url=service_url,
        method="POST",
        path=path,
        calling_service=calling_service,
        json=json,
        timeout=timeout,
    )


def raise_for_upstream_error(resp: httpx.Response) -> None:
    """Relay a downstream JSON error as an :class:`UpstreamServiceError`.

    The downstream status and ``code`` are kept so callers (and API clients)
    see e.g. the wallet's 402 ``INSUFFICIENT_CREDITS`` unchanged.
    """
    if resp.status_code < 400:
        return
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    detail = body.pop("detail", None)
    code = body.pop("code", None)
    if not isinstance(detail, str):
        detail = None
    logger.warning(
        "Upstream %s %s returned %d (%s)",
        resp.request.method,
        resp.request.url.path,
        resp.status_code,
        code,
    )
    raise UpstreamServiceError(resp.status_code, code=code, detail=detail, **body)


# ---------------------------------------------------------------------------
# Wallet Service helpers
# ---------------------------------------------------------------------------


async def create_wallet_for_user(
    user_id: str, *, initial_balance: int = 0, calling_service: str
) -> dict:
    """Create the wallet of a new user.

    Returns the wallet dict {id, user_id, balance, currency, is_active, ...}.
    """
    settings = get_settings()
    resp = await internal_post(
        service_url=settings.WALLET_SERVICE_URL,
        path="/internal/wallet/create",
        calling_service=calling_service,
        json={"user_id": user_id, "initial_balance": initial_balance},
    )
    raise_for_upstream_error(resp)
    return resp.json()


async def debit_credits(
    user_id: str,
    *,
    amount: int,
    category: str,
    description: str,
    calling_service: str,
    metadata: Optional[dict] = None,
) -> dict:
    """Debit credits from a user's wallet.

    Returns dict with {success, transaction_id, balance_after}.
    Raises UpstreamServiceError with the wallet's status and code on failure.
    """
    settings = get_settings()
    resp = await internal_post(
        service_url=settings.WALLET_SERVICE_URL,
        path="/internal/wallet/debit",
        calling_service=calling_service,
        json={
            "user_id": user_id,
            "amount": amount,
            "category": category,
            "description": description,
            "metadata": metadata,
        },
    )
    raise_for_upstream_error(resp)
    return resp.json()


async def credit_credits(
    user_id: str,
    *,
    amount: int,
    category: str,
    description: str,
    calling_service: str,
    metadata: Optional[dict] = None,
) -> dict:
    """Credit credits to a user's wallet (refunds, bonuses).

    Returns dict with {success, transaction_id, balance_after}.
    """
    settings = get_settings()
    resp = await internal_post(
        service_url=settings.WALLET_SERVICE_URL,
        path="/internal/wallet/credit",
        calling_service=calling_service,
        json={
            "user_id": user_id,
            "amount": amount,
            "category": category,
            "description": description,
            "metadata": metadata,
        },
    )
    raise_for_upstream_error(resp)
    return resp.json()
