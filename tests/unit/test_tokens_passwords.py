"""Session/service/capability tokens, bcrypt helpers and bearer decoding."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from libs.auth.dependencies import _decode_principal
from libs.auth.passwords import hash_password, verify_password
from libs.auth.tokens import (
    SERVICE_ROLE,
    TokenError,
    create_service_token,
    create_session_token,
    create_share_capability,
    decode_token,
    issue_token,
)
from libs.common.config import get_settings


@pytest.mark.unit
def test_session_token_round_trip():
    token = create_session_token("user-1", "pat@example.com", "photographer", name="Pat")

    claims = decode_token(token)

    assert claims["sub"] == "user-1"
    assert claims["email"] == "pat@example.com"
    assert claims["role"] == "photographer"
    assert claims["name"] == "Pat"
    assert claims["exp"] - claims["iat"] == 7 * 24 * 3600


@pytest.mark.unit
def test_expired_token_is_flagged():
    token = issue_token({"sub": "user-1"}, timedelta(seconds=-1))

    with pytest.raises(TokenError) as exc_info:
        decode_token(token)

    assert exc_info.value.expired is True


@pytest.mark.unit
def test_token_signed_with_other_secret_is_rejected():
    token = issue_token({"sub": "user-1"}, timedelta(minutes=5), secret="other")

    with pytest.raises(TokenError) as exc_info:
        decode_token(token)

    assert exc_info.value.expired is False


@pytest.mark.unit
def test_service_token_uses_service_secret():
    token = create_service_token("gallery")

    with pytest.raises(TokenError):
        decode_token(token)
    claims = decode_token(token, secret=get_settings().SERVICE_ROLE_SECRET)
    assert claims["role"] == SERVICE_ROLE
    assert claims["sub"] == "service:gallery"


@pytest.mark.unit
def test_decode_principal_accepts_sessions_and_services():
    user = _decode_principal(
        create_session_token("user-1", "pat@example.com", "client")
    )
    service = _decode_principal(create_service_token("identity"))

    assert user.user_id == "user-1"
    assert user.role == "client"
    assert service.role == SERVICE_ROLE


@pytest.mark.unit
def test_decode_principal_rejects_share_capabilities():
    capability = create_share_capability("a" * 64, "album-1", "share-1", "0" * 16)

    with pytest.raises(HTTPException) as exc_info:
        _decode_principal(capability)

    assert exc_info.value.status_code == 401


@pytest.mark.unit
def test_decode_principal_rejects_non_service_role_on_service_secret():
    forged = issue_token(
        {"sub": "user-1", "role": "admin"},
        timedelta(minutes=5),
        secret=get_settings().SERVICE_ROLE_SECRET,
    )

    with pytest.raises(HTTPException):
        _decode_principal(forged)


@pytest.mark.unit
def test_password_hash_and_verify():
    hashed = hash_password("abc123", rounds=4)

    assert hashed != "abc123"
    assert verify_password("abc123", hashed) is True
    assert verify_password("abc124", hashed) is False


@pytest.mark.unit
def test_verify_password_tolerates_bad_hashes():
    assert verify_password("abc123", "") is False
    assert verify_password("abc123", "not-a-bcrypt-hash") is False
