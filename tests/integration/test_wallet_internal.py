"""Integration tests for the service-to-service wallet endpoints."""

import pytest
from tests.conftest import make_service_user, make_user, override_auth


def _as_service():
    from services.wallet_service.app.main import app

    return override_auth(app, make_service_user("gallery"))


@pytest.mark.asyncio
@pytest.mark.integration
async def test_internal_create_with_welcome_bonus(wallet_client):
    with _as_service():
        response = await wallet_client.post(
            "/internal/wallet/create",
            json={"user_id": "user-300", "initial_balance": 300},
        )
        balance = await wallet_client.get("/internal/wallet/balance/user-300")

    assert response.status_code == 201, response.text
    assert response.json()["balance"] == 300
    assert balance.json()["balance"] == 300
    assert balance.json()["currency"] == "CREDITS"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_internal_debit_and_credit(wallet_client):
    with _as_service():
        await wallet_client.post(
            "/internal/wallet/create",
            json={"user_id": "user-1", "initial_balance": 300},
        )
        debit = await wallet_client.post(
            "/internal/wallet/debit",
            json={
                "user_id": "user-1",
                "amount": 10,
                "category": "album_creation",
                "description": "Album creation: Smith Wedding",
                "metadata": {"album_title": "Smith Wedding"},
            },
        )
        credit = await wallet_client.post(
            "/internal/wallet/credit",
            json={
                "user_id": "user-1",
                "amount": 10,
                "description": "Refund for failed album creation",
            },
        )

    assert debit.status_code == 200, debit.text
    assert debit.json()["success"] is True
    assert debit.json()["balance_after"] == 290
    assert credit.json()["balance_after"] == 300


@pytest.mark.asyncio
@pytest.mark.integration
async def test_internal_debit_insufficient_credits(wallet_client):
    with _as_service():
        await wallet_client.post(
            "/internal/wallet/create", json={"user_id": "user-2", "initial_balance": 5}
        )
        response = await wallet_client.post(
            "/internal/wallet/debit",
            json={
                "user_id": "user-2",
                "amount": 10,
                "category": "album_creation",
                "description": "Album creation",
            },
        )

    assert response.status_code == 402
    body = response.json()
    assert body["code"] == "INSUFFICIENT_CREDITS"
    assert body["required"] == 10
    assert body["available"] == 5


@pytest.mark.asyncio
@pytest.mark.integration
async def test_internal_check_balance(wallet_client):
    with _as_service():
        missing = await wallet_client.post(
            "/internal/wallet/check-balance",
            json={"user_id": "nobody", "required_amount": 1},
        )
        await wallet_client.post(
            "/internal/wallet/create", json={"user_id": "user-3", "initial_balance": 9}
        )
        check = await wallet_client.post(
            "/internal/wallet/check-balance",
            json={"user_id": "user-3", "required_amount": 10},
        )

    assert missing.status_code == 404
    assert check.json() == {
        "sufficient": False,
        "current_balance": 9,
        "required_amount": 10,
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_internal_routes_require_service_role(wallet_client):
    from services.wallet_service.app.main import app

    with override_auth(app, make_user()):
        response = await wallet_client.post(
            "/internal/wallet/create", json={"user_id": "user-4"}
        )

    assert response.status_code == 403
