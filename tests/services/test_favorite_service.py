import uuid
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from artify.exception.artwork.artwork_exception import ArtworkNotFoundError
from artify.exception.favorite.favorite_exception import FavoriteNotFoundError, InvalidFavoriteTargetError
from artify.services.favorite_service import FavoriteService


@pytest.fixture
def service(store):
    ticks = count()
    start = datetime(2025, 2, 1, tzinfo=timezone.utc)
    return FavoriteService(store, clock=lambda: start + timedelta(seconds=next(ticks)))


@pytest.mark.parametrize("artwork_id", [None, "", "not-a-uuid", 42])
def test_add_rejects_invalid_target(service, store, alice, artwork_id):
    with pytest.raises(InvalidFavoriteTargetError):
        service.add(artwork_id, alice)

    assert store.favorites.find_many() == []


def test_add_normalizes_artwork_id(service, store, make_artwork, alice):
    artwork_id = make_artwork()

    favorite_id = service.add(artwork_id.upper(), alice)

    assert store.favorites.find_one(favorite_id)["artwork_id"] == artwork_id


def test_add_missing_artwork(service, alice):
    with pytest.raises(ArtworkNotFoundError):
        service.add(str(uuid.uuid4()), alice)


def test_list_newest_first_with_artwork(service, make_artwork, alice):
    first = make_artwork(title="First")
    second = make_artwork(title="Second")
    service.add(first, alice)
    service.add(second, alice)

    favorites = service.list(alice)

    assert [f.artwork.title for f in favorites] == ["Second", "First"]
    assert favorites[0].addedAt > favorites[1].addedAt
    assert favorites[0].userEmail == alice.email


def test_list_other_users_excluded(service, make_artwork, alice, bob):
    service.add(make_artwork(), bob)

    assert service.list(alice) == []


def test_remove_not_owned(service, store, make_artwork, alice, bob):
    favorite_id = service.add(make_artwork(), alice)

    with pytest.raises(FavoriteNotFoundError):
        service.remove(favorite_id, bob)

    assert store.favorites.find_one(favorite_id) is not None


def test_remove_then_remove_again(service, make_artwork, alice):
    favorite_id = service.add(make_artwork(), alice)

    service.remove(favorite_id, alice)

    with pytest.raises(FavoriteNotFoundError):
        service.remove(favorite_id, alice)
