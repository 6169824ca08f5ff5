"""Integration tests for identity_service auth endpoints."""

import httpx
import pytest
from libs.common import service_client
from services.identity_service.services import otp_ops


@pytest.fixture
def wallets(monkeypatch):
    created = []

    async def _create(user_id, *, initial_balance=0, calling_service):
        created.append((user_id, initial_balance, calling_service))
        return {"user_id": user_id, "balance": initial_balance}

    monkeypatch.setattr(service_client, "create_wallet_for_user", _create)
    return created


@pytest.fixture
def outbox(monkeypatch):
    sent = []

    async def _send(to_email, code, purpose, expires_in_minutes):
        sent.append({"to": to_email, "code": code, "purpose": purpose})
        return True

    monkeypatch.setattr(otp_ops, "send_otp_email", _send)
    return sent


SIGNUP = {
    "email": "Ada@Example.com",
    "password": "correct horse",
    "first_name": "Ada",
    "last_name": "Lovelace",
}


async def _signup(client, **overrides):
    return await client.post("/auth/signup", json={**SIGNUP, **overrides})


# ---------------------------------------------------------------------------
# Signup / login
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_signup_creates_account_wallet_and_code(identity_client, wallets, outbox):
    response = await _signup(identity_client)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["redirect_to"] == "/"
    assert data["user"]["email"] == "ada@example.com"
    assert data["user"]["role"] == "photographer"
    assert data["user"]["is_verified"] is False
    assert response.cookies.get("token") == data["access_token"]

    assert wallets == [(data["user"]["id"], 300, "identity")]
    assert [(m["to"], m["purpose"]) for m in outbox] == [("ada@example.com", "signup")]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_client_signup_lands_on_my_albums(identity_client, wallets, outbox):
    response = await _signup(identity_client, email="client@example.com", role="client")

    assert response.status_code == 201
    assert response.json()["redirect_to"] == "/my-albums"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_role_cannot_be_self_assigned(identity_client, wallets, outbox):
    response = await _signup(identity_client, role="admin")

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_signup(identity_client, wallets, outbox):
    await _signup(identity_client)
    response = await _signup(identity_client, email="ada@example.com")

    assert response.status_code == 409
    assert response.json()["code"] == "USER_EXISTS"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_weak_password(identity_client, wallets, outbox):
    response = await _signup(identity_client, password="abc")

    assert response.status_code == 400
    assert response.json()["code"] == "WEAK_PASSWORD"
    assert wallets == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_signup_survives_wallet_outage(identity_client, outbox, monkeypatch):
    async def _down(user_id, **kwargs):
        raise httpx.ConnectError("wallet-service unreachable")

    monkeypatch.setattr(service_client, "create_wallet_for_user", _down)

    response = await _signup(identity_client)

    assert response.status_code == 201
    assert len(outbox) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_and_me(identity_client, wallets, outbox):
    await _signup(identity_client)
    identity_client.cookies.clear()

    bad = await identity_client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "wrong horse"}
    )
    unknown = await identity_client.post(
        "/auth/login", json={"email": "bob@example.com", "password": "correct horse"}
    )
    good = await identity_client.post(
        "/auth/login", json={"email": "ADA@example.com", "password": "correct horse"}
    )

    assert bad.status_code == 401
    assert unknown.status_code == 401
    assert bad.json() == unknown.json()
    assert good.status_code == 200

    identity_client.cookies.clear()
    me = await identity_client.get(
        "/auth/me",
        headers={"Authorization": f"Bearer {good.json()['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["email"] == "ada@example.com"
    assert me.json()["first_name"] == "Ada"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me_requires_a_session(identity_client):
    response = await identity_client.get("/auth/me")

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_logout_clears_cookie(identity_client):
    response = await identity_client.post("/auth/logout")

    assert response.status_code == 204
    assert "token=" in response.headers["set-cookie"]


# ---------------------------------------------------------------------------
# OTP
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_signup_code_verifies_account(identity_client, wallets, outbox):
    await _signup(identity_client)
    code = outbox[-1]["code"]

    verified = await identity_client.post(
        "/auth/otp/verify",
        json={"email": "ada@example.com", "code": code, "purpose": "signup"},
    )
    replay = await identity_client.post(
        "/auth/otp/verify",
        json={"email": "ada@example.com", "code": code, "purpose": "signup"},
    )
    me = await identity_client.get("/auth/me")

    assert verified.status_code == 200
    assert verified.json() == {"verified": True, "purpose": "signup"}
    assert replay.status_code == 404
    assert me.json()["is_verified"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_code_flow(identity_client, wallets, outbox):
    await _signup(identity_client)

    sent = await identity_client.post(
        "/auth/otp/send", json={"email": "ada@example.com", "purpose": "login"}
    )
    code = outbox[-1]["code"]
    wrong = "000000" if code != "000000" else "111111"
    rejected = await identity_client.post(
        "/auth/otp/verify",
        json={"email": "ada@example.com", "code": wrong, "purpose": "login"},
    )
    accepted = await identity_client.post(
        "/auth/otp/verify",
        json={"email": "ada@example.com", "code": code, "purpose": "login"},
    )

    assert sent.json() == {"sent": True, "expires_in_minutes": 10}
    assert rejected.status_code == 400
    assert rejected.json()["code"] == "INVALID_OTP"
    assert rejected.json()["remaining_attempts"] == 4
    assert accepted.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_code_for_unknown_email(identity_client, outbox):
    response = await identity_client.post(
        "/auth/otp/send", json={"email": "ghost@example.com", "purpose": "login"}
    )

    assert response.status_code == 404
    assert response.json()["code"] == "USER_NOT_FOUND"
    assert outbox == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_otp_send_is_rate_limited(identity_client, outbox):
    payload = {"email": "new@example.com", "purpose": "email_verification"}

    statuses = [
        (await identity_client.post("/auth/otp/send", json=payload)).status_code
        for _ in range(4)
    ]
    last = await identity_client.post("/auth/otp/send", json=payload)

    assert statuses == [200, 200, 200, 429]
    assert last.json()["code"] == "OTP_RATE_LIMITED"
    assert last.json()["retry_after"] >= 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_malformed_code_is_a_validation_error(identity_client):
    response = await identity_client.post(
        "/auth/otp/verify",
        json={"email": "ada@example.com", "code": "12ab56", "purpose": "signup"},
    )

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_profile(identity_client, wallets, outbox):
    await _signup(identity_client, phone="+1 555 0100")

    response = await identity_client.put(
        "/auth/me", json={"first_name": " Augusta ", "phone": None}
    )
    me = await identity_client.get("/auth/me")

    assert response.status_code == 200, response.text
    assert response.json()["first_name"] == "Augusta"
    assert me.json()["first_name"] == "Augusta"
    assert me.json()["last_name"] == "Lovelace"
    assert me.json()["phone"] is None
    assert me.json()["email"] == "ada@example.com"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_profile_requires_a_session(identity_client):
    response = await identity_client.put("/auth/me", json={"first_name": "Eve"})

    assert response.status_code == 401


# ---------------------------------------------------------------------------
# Password reset
# ---------------------------------------------------------------------------


async def _reset_code(client, outbox, email="ada@example.com") -> str:
    sent = await client.post(
        "/auth/otp/send", json={"email": email, "purpose": "password_reset"}
    )
    assert sent.status_code == 200, sent.text
    return outbox[-1]["code"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_password_reset_flow(identity_client, wallets, outbox):
    await _signup(identity_client)
    identity_client.cookies.clear()
    code = await _reset_code(identity_client, outbox)

    reset = await identity_client.post(
        "/auth/password/reset",
        json={
            "email": "ada@example.com",
            "code": code,
            "new_password": "battery staple",
        },
    )
    old = await identity_client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "correct horse"}
    )
    new = await identity_client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "battery staple"}
    )

    assert reset.status_code == 200, reset.text
    assert reset.json() == {"reset": True}
    assert outbox[-1]["purpose"] == "password_reset"
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_weak_reset_password_keeps_the_code_usable(
    identity_client, wallets, outbox
):
    await _signup(identity_client)
    code = await _reset_code(identity_client, outbox)

    weak = await identity_client.post(
        "/auth/password/reset",
        json={"email": "ada@example.com", "code": code, "new_password": "abc"},
    )
    strong = await identity_client.post(
        "/auth/password/reset",
        json={
            "email": "ada@example.com",
            "code": code,
            "new_password": "battery staple",
        },
    )

    assert weak.status_code == 400
    assert weak.json()["code"] == "WEAK_PASSWORD"
    assert strong.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_reset_with_wrong_code_keeps_old_password(
    identity_client, wallets, outbox
):
    await _signup(identity_client)
    code = await _reset_code(identity_client, outbox)
    wrong = "000000" if code != "000000" else "111111"

    rejected = await identity_client.post(
        "/auth/password/reset",
        json={
            "email": "ada@example.com",
            "code": wrong,
            "new_password": "battery staple",
        },
    )
    login = await identity_client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "correct horse"}
    )

    assert rejected.status_code == 400
    assert rejected.json()["code"] == "INVALID_OTP"
    assert login.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_signup_code_cannot_reset_a_password(identity_client, wallets, outbox):
    await _signup(identity_client)
    signup_code = outbox[-1]["code"]

    response = await identity_client.post(
        "/auth/password/reset",
        json={
            "email": "ada@example.com",
            "code": signup_code,
            "new_password": "battery staple",
        },
    )

    assert response.status_code == 404
    assert response.json()["code"] == "OTP_NOT_FOUND"
