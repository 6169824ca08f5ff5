"""Unit tests for album creation, edits, deletion and photos."""

import pytest
from libs.common import service_client
from libs.common.exceptions import UpstreamServiceError
from services.gallery_service.models import (
    Album,
    AlbumShare,
    AlbumShareClient,
    AlbumShareInteraction,
    AlbumStatus,
    Client,
    Event,
    InteractionEvent,
    Photo,
)
from services.gallery_service.schemas import AlbumCreate, AlbumUpdate, PhotoCreate
from services.gallery_service.services import album_ops
from sqlalchemy import func, select
from sqlalchemy.exc import InvalidRequestError
from tests.conftest import make_user
from tests.factories import AlbumShareFactory


@pytest.fixture
def wallet(monkeypatch):
    """Fake wallet endpoints recording debits and refunds."""
    ledger = {"debits": [], "credits": []}

    async def _debit(user_id, **kwargs):
        ledger["debits"].append((user_id, kwargs["amount"], kwargs["category"]))
        return {"success": True}

    async def _credit(user_id, **kwargs):
        ledger["credits"].append((user_id, kwargs["amount"], kwargs["category"]))
        return {"success": True}

    monkeypatch.setattr(service_client, "debit_credits", _debit)
    monkeypatch.setattr(service_client, "credit_credits", _credit)
    return ledger


def _photo(name: str) -> PhotoCreate:
    return PhotoCreate(
        filename=name, original_name=name, file_url=f"https://cdn.example.com/{name}"
    )


async def _album_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(Album))).scalar_one()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_album_debits_then_saves(db_session, wallet):
    user = make_user(name=None, email="jo.lens@example.com")

    album = await album_ops.create_album(
        db_session, user=user, payload=AlbumCreate(title="Harbour Engagement")
    )

    assert wallet["debits"] == [(user.user_id, 10, "album_creation")]
    assert wallet["credits"] == []
    assert album.photographer_name == "jo.lens"
    assert await _album_count(db_session) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_debit_creates_nothing(db_session, monkeypatch):
    async def _insufficient(user_id, **kwargs):
        raise UpstreamServiceError(402, "INSUFFICIENT_CREDITS", "Insufficient credits")

    monkeypatch.setattr(service_client, "debit_credits", _insufficient)

    with pytest.raises(UpstreamServiceError) as exc_info:
        await album_ops.create_album(
            db_session, user=make_user(), payload=AlbumCreate(title="Nope")
        )

    assert exc_info.value.status_code == 402
    assert await _album_count(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_save_refunds_the_debit(db_session, wallet, monkeypatch):
    user = make_user()

    async def _broken_commit():
        raise RuntimeError("database went away")

    monkeypatch.setattr(db_session, "commit", _broken_commit)

    with pytest.raises(RuntimeError):
        await album_ops.create_album(
            db_session, user=user, payload=AlbumCreate(title="Lost")
        )

    assert wallet["debits"] == [(user.user_id, 10, "album_creation")]
    assert wallet["credits"] == [(user.user_id, 10, "refund")]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_free_albums_skip_the_wallet(db_session, wallet, monkeypatch):
    monkeypatch.setattr(album_ops.get_settings(), "ALBUM_CREATION_COST", 0)

    await album_ops.create_album(
        db_session, user=make_user(), payload=AlbumCreate(title="Free")
    )

    assert wallet["debits"] == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_photos_continues_order(db_session, wallet):
    user = make_user()
    album = await album_ops.create_album(
        db_session, user=user, payload=AlbumCreate(title="Studio")
    )

    await album_ops.add_photos(db_session, album, [_photo("a.jpg")])
    second = await album_ops.add_photos(db_session, album, [_photo("b.jpg")])

    assert second[0].order == 1
    assert album.total_photos == 2
    assert album.cover_photo == "https://cdn.example.com/a.jpg"
    photos = await album_ops.list_photos(db_session, album.id)
    assert [p.filename for p in photos] == ["a.jpg", "b.jpg"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_album_photos_are_loaded_explicitly(db_session, session_factory, wallet):
    album = await album_ops.create_album(
        db_session, user=make_user(), payload=AlbumCreate(title="Studio")
    )
    await album_ops.add_photos(db_session, album, [_photo("a.jpg")])

    async with session_factory() as other:
        fresh = await other.get(Album, album.id)
        with pytest.raises(InvalidRequestError):
            _ = fresh.photos

    assert len(await album_ops.list_photos(db_session, album.id)) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_album_ignores_nulls_on_required_fields(db_session, wallet):
    album = await album_ops.create_album(
        db_session,
        user=make_user(),
        payload=AlbumCreate(title="Studio", location="Porto"),
    )

    updated = await album_ops.update_album(
        db_session,
        album,
        AlbumUpdate(title=None, location=None, status=AlbumStatus.ARCHIVED),
    )

    assert updated.title == "Studio"
    assert updated.location is None
    assert updated.status == AlbumStatus.ARCHIVED


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_album_clears_share_activity_and_unlinks_bookings(
    db_session, wallet
):
    user = make_user()
    album = await album_ops.create_album(
        db_session, user=user, payload=AlbumCreate(title="Gone")
    )
    album_id = album.id
    photo = (await album_ops.add_photos(db_session, album, [_photo("a.jpg")]))[0]
    share = AlbumShareFactory.create(album_id=album_id, photographer_id=user.user_id)
    db_session.add(share)
    await db_session.flush()
    visitor = AlbumShareClient(
        share_id=share.id, album_id=album_id, client_identifier="b-1", name="Guest"
    )
    db_session.add(visitor)
    await db_session.flush()
    db_session.add(
        AlbumShareInteraction(
            share_id=share.id,
            album_id=album_id,
            photographer_id=user.user_id,
            client_id=visitor.id,
            event=InteractionEvent.PHOTO_VIEW,
            photo_id=photo.id,
        )
    )
    customer = Client(
        photographer_id=user.user_id,
        first_name="Jo",
        last_name="Doe",
        email="jo@example.com",
    )
    db_session.add(customer)
    await db_session.flush()
    booking = Event(
        photographer_id=user.user_id,
        client_id=customer.id,
        album_id=album_id,
        title="Engagement shoot",
        start_date=album.created_at,
        end_date=album.created_at,
    )
    db_session.add(booking)
    await db_session.commit()
    booking_id = booking.id

    await album_ops.delete_album(db_session, album)

    for model in (Album, Photo, AlbumShare, AlbumShareClient, AlbumShareInteraction):
        count = (
            await db_session.execute(select(func.count()).select_from(model))
        ).scalar_one()
        assert count == 0, model.__name__
    kept = (
        await db_session.execute(
            select(Event.album_id, Event.client_id).where(Event.id == booking_id)
        )
    ).one()
    assert kept == (None, customer.id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_photos_ignores_ids_from_other_albums(db_session, wallet):
    user = make_user()
    mine = await album_ops.create_album(
        db_session, user=user, payload=AlbumCreate(title="Mine")
    )
    other = await album_ops.create_album(
        db_session, user=user, payload=AlbumCreate(title="Other")
    )
    kept, dropped = await album_ops.add_photos(
        db_session, mine, [_photo("a.jpg"), _photo("b.jpg")]
    )
    foreign = (await album_ops.add_photos(db_session, other, [_photo("c.jpg")]))[0]

    deleted = await album_ops.delete_photos(db_session, mine, [dropped.id, foreign.id])

    assert deleted == 1
    assert mine.total_photos == 1
    # The cover was the first photo, which is still there.
    assert mine.cover_photo == "https://cdn.example.com/a.jpg"
    assert [p.id for p in await album_ops.list_photos(db_session, mine.id)] == [kept.id]
    assert other.total_photos == 1
