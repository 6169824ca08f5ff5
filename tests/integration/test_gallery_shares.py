"""Integration tests for album share management (photographer side)."""

import uuid
from datetime import timedelta

import pytest
from libs.auth.roles import UserRole
from libs.common.datetime_utils import utc_now
from services.gallery_service.services import share_ops
from tests.conftest import make_user, override_auth
from tests.factories import AlbumFactory


@pytest.fixture
def invitations(monkeypatch):
    sent = []

    async def _send(to_email, **kwargs):
        sent.append({"to": to_email, **kwargs})
        return True

    monkeypatch.setattr(share_ops, "send_share_invitation_email", _send)
    return sent


@pytest.fixture
async def album(db_session, photographer):
    album = AlbumFactory.create(
        photographer_id=photographer.user_id, photographer_name="Test Photographer"
    )
    db_session.add(album)
    await db_session.commit()
    return album


def _shares_path(album) -> str:
    return f"/albums/{album.id}/shares"


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_public_link_is_created_once(gallery_client, album):
    first = await gallery_client.post(_shares_path(album), json={"share_type": "link"})
    second = await gallery_client.post(
        _shares_path(album),
        json={"share_type": "link", "permissions": {"can_comment": True}},
    )

    assert first.status_code == 201, first.text
    created = first.json()
    assert created["message"] == "Public share link generated successfully"
    share = created["shares"][0]
    assert len(share["access_token"]) == 64
    assert share["share_url"].endswith(f"/shared/{share['access_token']}")
    assert share["permissions"] == {
        "can_view": True,
        "can_download": True,
        "can_favorite": True,
        "can_comment": False,
    }
    assert share["has_password"] is False
    assert share["is_expired"] is False

    reused = second.json()["shares"][0]
    assert reused["id"] == share["id"]
    assert reused["access_token"] == share["access_token"]
    assert reused["permissions"]["can_comment"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_email_shares_invite_new_recipients_only(gallery_client, album, invitations):
    payload = {
        "share_type": "email",
        "recipients": [
            {"email": "Ada@Example.com", "name": "Ada"},
            {"email": "grace@example.com"},
        ],
        "password": "hunter2",
    }

    response = await gallery_client.post(_shares_path(album), json=payload)
    again = await gallery_client.post(
        _shares_path(album),
        json={"share_type": "email", "recipients": [{"email": "ada@example.com"}]},
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["message"] == "Album shared with 2 user(s) successfully"
    assert [s["shared_with_email"] for s in body["shares"]] == [
        "ada@example.com",
        "grace@example.com",
    ]
    assert all(s["has_password"] for s in body["shares"])
    assert [i["to"] for i in invitations] == ["ada@example.com", "grace@example.com"]
    assert invitations[0]["album_title"] == "Beach Wedding"
    assert invitations[0]["has_password"] is True

    assert again.json()["shares"][0]["id"] == body["shares"][0]["id"]
    assert len(invitations) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_email_share_needs_recipients(gallery_client, album):
    response = await gallery_client.post(_shares_path(album), json={"share_type": "email"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SHARE_REQUEST"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invitation_failure_does_not_fail_share(gallery_client, album, monkeypatch):
    async def _broken(to_email, **kwargs):
        raise ConnectionError("smtp down")

    monkeypatch.setattr(share_ops, "send_share_invitation_email", _broken)

    response = await gallery_client.post(
        _shares_path(album),
        json={"share_type": "email", "recipients": [{"email": "ada@example.com"}]},
    )

    assert response.status_code == 201


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_only_the_owner_manages_shares(gallery_client, album):
    from services.gallery_service.app.main import app

    with override_auth(app, make_user()):
        stranger = await gallery_client.post(
            _shares_path(album), json={"share_type": "link"}
        )
    with override_auth(app, make_user(UserRole.ADMIN)):
        admin = await gallery_client.get(_shares_path(album))
    with override_auth(app, make_user(UserRole.CLIENT)):
        client = await gallery_client.get(_shares_path(album))

    assert stranger.status_code == 403
    assert admin.status_code == 403
    assert client.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_shares_of_unknown_album(gallery_client):
    response = await gallery_client.get(f"/albums/{uuid.uuid4()}/shares")

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# List / update / revoke
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_splits_public_and_private(gallery_client, album, invitations):
    await gallery_client.post(_shares_path(album), json={"share_type": "link"})
    await gallery_client.post(
        _shares_path(album),
        json={"share_type": "email", "recipients": [{"email": "ada@example.com"}]},
    )

    response = await gallery_client.get(_shares_path(album))

    assert response.status_code == 200
    data = response.json()
    assert data["total_shares"] == 2
    assert data["public_share"]["share_type"] == "link"
    assert [s["shared_with_email"] for s in data["private_shares"]] == [
        "ada@example.com"
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_share_sets_and_clears_fields(gallery_client, album):
    created = await gallery_client.post(
        _shares_path(album), json={"share_type": "link", "password": "s3cret"}
    )
    share_id = created.json()["shares"][0]["id"]
    expiry = (utc_now() + timedelta(days=3)).isoformat()

    updated = await gallery_client.patch(
        f"{_shares_path(album)}/{share_id}",
        json={"permissions": {"can_download": False}, "expires_at": expiry},
    )
    cleared = await gallery_client.patch(
        f"{_shares_path(album)}/{share_id}",
        json={"password": None, "expires_at": None},
    )

    assert updated.status_code == 200, updated.text
    assert updated.json()["permissions"]["can_download"] is False
    assert updated.json()["expires_at"] is not None
    assert updated.json()["has_password"] is True

    data = cleared.json()
    assert data["has_password"] is False
    assert data["expires_at"] is None
    assert data["permissions"]["can_download"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_unknown_share(gallery_client, album):
    response = await gallery_client.patch(
        f"{_shares_path(album)}/{uuid.uuid4()}", json={"password": "x"}
    )

    assert response.status_code == 404
    assert response.json()["code"] == "SHARE_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_revoke_one_share(gallery_client, album):
    created = await gallery_client.post(_shares_path(album), json={"share_type": "link"})
    share_id = created.json()["shares"][0]["id"]

    revoked = await gallery_client.delete(f"{_shares_path(album)}/{share_id}")
    listing = await gallery_client.get(_shares_path(album))
    fresh = await gallery_client.post(_shares_path(album), json={"share_type": "link"})

    assert revoked.status_code == 200
    assert revoked.json()["is_active"] is False
    assert listing.json()["total_shares"] == 0
    assert fresh.json()["shares"][0]["id"] != share_id


@pytest.mark.asyncio
@pytest.mark.integration
async def test_revoke_all_requires_flag(gallery_client, album, invitations):
    await gallery_client.post(_shares_path(album), json={"share_type": "link"})
    await gallery_client.post(
        _shares_path(album),
        json={
            "share_type": "email",
            "recipients": [{"email": "a@example.com"}, {"email": "b@example.com"}],
        },
    )

    refused = await gallery_client.delete(_shares_path(album))
    revoked = await gallery_client.delete(_shares_path(album), params={"all": "true"})

    assert refused.status_code == 400
    assert revoked.status_code == 200
    assert revoked.json() == {
        "message": "All shares revoked successfully",
        "revoked_count": 3,
    }
    assert (await gallery_client.get(_shares_path(album))).json()["total_shares"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_share_analytics_starts_empty(gallery_client, album):
    created = await gallery_client.post(_shares_path(album), json={"share_type": "link"})
    share_id = created.json()["shares"][0]["id"]

    response = await gallery_client.get(f"{_shares_path(album)}/{share_id}/analytics")

    assert response.status_code == 200
    assert response.json() == {
        "share_id": share_id,
        "interactions": [],
        "unique_clients": 0,
        "event_counts": {},
        "photo_stats": [],
    }
