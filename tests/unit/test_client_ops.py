"""Unit tests for visitor actions on a share."""

import uuid

import pytest
from services.gallery_service.exceptions import (
    InvalidShareRequestError,
    PhotoNotFoundError,
    SharePermissionError,
)
from services.gallery_service.models import (
    Album,
    AlbumShareClient,
    AlbumShareInteraction,
    InteractionEvent,
    Photo,
)
from services.gallery_service.services import client_ops
from services.gallery_service.services.client_ops import RequestMeta
from sqlalchemy import func, select
from tests.factories import AlbumFactory, AlbumShareFactory, PhotoFactory


async def _make_share_with_photo(db, **share_overrides):
    album = AlbumFactory.create(total_photos=1)
    photo = PhotoFactory.create(album_id=album.id, photographer_id=album.photographer_id)
    share = AlbumShareFactory.create(
        album_id=album.id, photographer_id=album.photographer_id, **share_overrides
    )
    db.add_all([album, photo, share])
    await db.commit()
    return album, photo, share


async def _events(db, share) -> list[InteractionEvent]:
    result = await db.execute(
        select(AlbumShareInteraction.event)
        .where(AlbumShareInteraction.share_id == share.id)
        .order_by(AlbumShareInteraction.created_at)
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# save_client_identity
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_new_client_records_identity_once(db_session):
    _, _, share = await _make_share_with_photo(db_session)
    meta = RequestMeta(ip_address="203.0.113.7", user_agent="pytest")

    client, returning = await client_ops.save_client_identity(
        db_session,
        share,
        name=" Jane Doe ",
        client_identifier="browser-1",
        email="Jane@Example.com",
        meta=meta,
    )

    assert returning is False
    assert client.name == "Jane Doe"
    assert client.email == "jane@example.com"
    assert client.ip_address == "203.0.113.7"
    assert await _events(db_session, share) == [InteractionEvent.IDENTITY_ENTERED]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_returning_client_is_updated_not_duplicated(db_session):
    _, _, share = await _make_share_with_photo(db_session)
    first, _ = await client_ops.save_client_identity(
        db_session, share, name="Jane", client_identifier="browser-1"
    )

    second, returning = await client_ops.save_client_identity(
        db_session, share, name="Jane Smith", client_identifier="browser-1"
    )

    assert returning is True
    assert second.id == first.id
    assert second.name == "Jane Smith"
    count = (
        await db_session.execute(
            select(func.count()).select_from(AlbumShareClient)
        )
    ).scalar_one()
    assert count == 1
    assert await _events(db_session, share) == [InteractionEvent.IDENTITY_ENTERED]


class _NoRow:
    def scalar_one_or_none(self):
        return None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_concurrent_registration_updates_the_other_row(
    db_session, session_factory, monkeypatch
):
    album, _, share = await _make_share_with_photo(db_session)
    album_id, share_id = album.id, share.id
    async with session_factory() as other:
        other.add(
            AlbumShareClient(
                album_id=album_id,
                share_id=share_id,
                client_identifier="browser-1",
                name="First tab",
            )
        )
        await other.commit()

    # The first lookup runs before the other tab's row exists.
    real_execute = db_session.execute
    lookups = []

    async def _execute(statement, *args, **kwargs):
        lookups.append(statement)
        if len(lookups) == 1:
            return _NoRow()
        return await real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db_session, "execute", _execute)

    client, returning = await client_ops.save_client_identity(
        db_session, share, name="Second tab", client_identifier="browser-1"
    )

    assert returning is True
    assert client.name == "Second tab"
    assert client.album_id == album_id
    total = await real_execute(
        select(func.count()).select_from(AlbumShareClient)
    )
    assert total.scalar_one() == 1


# ---------------------------------------------------------------------------
# toggle_favorite
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_favorite_then_unfavorite(db_session):
    _, photo, share = await _make_share_with_photo(db_session)
    client, _ = await client_ops.save_client_identity(
        db_session, share, name="Jane", client_identifier="browser-1"
    )

    added = await client_ops.toggle_favorite(
        db_session, share, photo_id=photo.id, is_favorite=True, client_id=client.id
    )
    repeated = await client_ops.toggle_favorite(
        db_session, share, photo_id=photo.id, is_favorite=True, client_id=client.id
    )
    removed = await client_ops.toggle_favorite(
        db_session, share, photo_id=photo.id, is_favorite=False, client_id=client.id
    )

    assert (added.favorites_count, added.was_already_in_state) == (1, False)
    assert (repeated.favorites_count, repeated.was_already_in_state) == (1, True)
    assert (removed.favorites_count, removed.was_already_in_state) == (0, False)
    assert await _events(db_session, share) == [
        InteractionEvent.IDENTITY_ENTERED,
        InteractionEvent.PHOTO_FAVORITE,
        InteractionEvent.PHOTO_UNFAVORITE,
    ]

    stored = await db_session.get(AlbumShareClient, client.id, populate_existing=True)
    assert stored.favorites == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unfavorite_never_goes_negative(db_session):
    _, photo, share = await _make_share_with_photo(db_session)

    result = await client_ops.toggle_favorite(
        db_session, share, photo_id=photo.id, is_favorite=False
    )

    assert result.was_already_in_state is True
    assert result.favorites_count == 0
    assert await _events(db_session, share) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_favorite_requires_permission(db_session):
    _, photo, share = await _make_share_with_photo(db_session, can_favorite=False)

    with pytest.raises(SharePermissionError):
        await client_ops.toggle_favorite(
            db_session, share, photo_id=photo.id, is_favorite=True
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_favorite_photo_from_another_album_is_not_found(db_session):
    _, _, share = await _make_share_with_photo(db_session)
    _, foreign_photo, _ = await _make_share_with_photo(db_session)

    with pytest.raises(PhotoNotFoundError):
        await client_ops.toggle_favorite(
            db_session, share, photo_id=foreign_photo.id, is_favorite=True
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unknown_client_id_counts_as_anonymous(db_session):
    _, photo, share = await _make_share_with_photo(db_session)

    result = await client_ops.toggle_favorite(
        db_session, share, photo_id=photo.id, is_favorite=True, client_id=uuid.uuid4()
    )

    assert result.favorites_count == 1
    client_id = (
        await db_session.execute(
            select(AlbumShareInteraction.client_id).where(
                AlbumShareInteraction.share_id == share.id
            )
        )
    ).scalar_one()
    assert client_id is None


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_comments_require_permission(db_session):
    _, photo, share = await _make_share_with_photo(db_session)

    with pytest.raises(SharePermissionError):
        await client_ops.add_comment(
            db_session, share, photo_id=photo.id, comment="Love it"
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_and_list_comments(db_session):
    _, photo, share = await _make_share_with_photo(db_session, can_comment=True)
    client, _ = await client_ops.save_client_identity(
        db_session, share, name="Jane", client_identifier="browser-1"
    )

    named = await client_ops.add_comment(
        db_session, share, photo_id=photo.id, comment=" Love it ", client_id=client.id
    )
    anonymous = await client_ops.add_comment(
        db_session, share, photo_id=photo.id, comment="Print this one"
    )

    assert named["comment"] == "Love it"
    assert named["client_name"] == "Jane"
    assert anonymous["client_name"] == client_ops.ANONYMOUS

    comments = await client_ops.list_comments(db_session, share, photo_id=photo.id)
    assert [c["comment"] for c in comments] == ["Print this one", "Love it"]
    assert comments[0]["photo_name"] == photo.original_name

    stored = await db_session.get(AlbumShareClient, client.id, populate_existing=True)
    assert stored.comments == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_blank_comment_rejected(db_session):
    _, photo, share = await _make_share_with_photo(db_session, can_comment=True)

    with pytest.raises(InvalidShareRequestError):
        await client_ops.add_comment(db_session, share, photo_id=photo.id, comment="  ")


# ---------------------------------------------------------------------------
# Downloads
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_download_counts_on_photo_album_and_client(db_session):
    album, photo, share = await _make_share_with_photo(db_session)
    client, _ = await client_ops.save_client_identity(
        db_session, share, name="Jane", client_identifier="browser-1"
    )

    downloaded = await client_ops.record_download(
        db_session, share, photo_id=photo.id, client_id=client.id
    )

    assert downloaded.id == photo.id
    assert downloaded.downloads == 1
    stored_album = await db_session.get(Album, album.id, populate_existing=True)
    stored_client = await db_session.get(
        AlbumShareClient, client.id, populate_existing=True
    )
    assert stored_album.total_downloads == 1
    assert stored_client.downloads == 1
    assert await _events(db_session, share) == [
        InteractionEvent.IDENTITY_ENTERED,
        InteractionEvent.PHOTO_DOWNLOAD,
    ]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_download_needs_share_and_album_permission(db_session):
    _, photo, no_download_share = await _make_share_with_photo(
        db_session, can_download=False
    )
    closed_album, closed_photo, open_share = await _make_share_with_photo(db_session)
    closed_album.allow_downloads = False
    await db_session.commit()

    with pytest.raises(SharePermissionError):
        await client_ops.record_download(
            db_session, no_download_share, photo_id=photo.id
        )
    with pytest.raises(SharePermissionError):
        await client_ops.record_download(
            db_session, open_share, photo_id=closed_photo.id
        )

    stored = await db_session.get(Photo, photo.id, populate_existing=True)
    assert stored.downloads == 0
    assert await _events(db_session, open_share) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_download_of_photo_from_another_album_is_not_found(db_session):
    _, _, share = await _make_share_with_photo(db_session)
    _, foreign_photo, _ = await _make_share_with_photo(db_session)

    with pytest.raises(PhotoNotFoundError):
        await client_ops.record_download(db_session, share, photo_id=foreign_photo.id)


# ---------------------------------------------------------------------------
# Tracking / analytics
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_identity_event_cannot_be_tracked_directly(db_session):
    _, _, share = await _make_share_with_photo(db_session)

    with pytest.raises(InvalidShareRequestError):
        await client_ops.track_interaction(
            db_session, share, event=InteractionEvent.IDENTITY_ENTERED
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_photo_view_bumps_client_counter(db_session):
    _, photo, share = await _make_share_with_photo(db_session)
    client, _ = await client_ops.save_client_identity(
        db_session, share, name="Jane", client_identifier="browser-1"
    )

    await client_ops.track_interaction(
        db_session,
        share,
        event=InteractionEvent.PHOTO_VIEW,
        client_id=client.id,
        photo_id=photo.id,
    )

    stored = await db_session.get(AlbumShareClient, client.id, populate_existing=True)
    assert stored.photo_views == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_downloads_cannot_be_tracked_directly(db_session):
    _, photo, share = await _make_share_with_photo(db_session)

    with pytest.raises(InvalidShareRequestError):
        await client_ops.track_interaction(
            db_session, share, event=InteractionEvent.PHOTO_DOWNLOAD, photo_id=photo.id
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_tracking_a_photo_outside_the_album_is_rejected(db_session):
    _, _, share = await _make_share_with_photo(db_session)
    _, foreign_photo, _ = await _make_share_with_photo(db_session)

    for photo_id in (foreign_photo.id, uuid.uuid4()):
        with pytest.raises(PhotoNotFoundError):
            await client_ops.track_interaction(
                db_session, share, event=InteractionEvent.PHOTO_VIEW, photo_id=photo_id
            )

    assert await _events(db_session, share) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_share_analytics_aggregates(db_session):
    _, photo, share = await _make_share_with_photo(db_session)
    client, _ = await client_ops.save_client_identity(
        db_session, share, name="Jane", client_identifier="browser-1"
    )
    for _ in range(2):
        await client_ops.track_interaction(
            db_session,
            share,
            event=InteractionEvent.PHOTO_VIEW,
            client_id=client.id,
            photo_id=photo.id,
        )
    await client_ops.toggle_favorite(
        db_session, share, photo_id=photo.id, is_favorite=True, client_id=client.id
    )

    analytics = await client_ops.share_analytics(db_session, share)

    assert analytics["unique_clients"] == 1
    assert analytics["event_counts"] == {
        "identity_entered": 1,
        "photo_view": 2,
        "photo_favorite": 1,
    }
    assert analytics["photo_stats"] == [
        {"photo_id": photo.id, "views": 2, "favorites": 1}
    ]
    assert len(analytics["interactions"]) == 4
    assert analytics["interactions"][0]["client_name"] == "Jane"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_interaction_write_does_not_raise(db_session, monkeypatch):
    _, _, share = await _make_share_with_photo(db_session)

    async def _failing_commit():
        raise RuntimeError("disk full")

    monkeypatch.setattr(db_session, "commit", _failing_commit)

    await client_ops._record_quietly(
        db_session,
        client_ops._interaction(share, InteractionEvent.ALBUM_OPEN, RequestMeta()),
    )
