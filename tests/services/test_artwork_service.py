import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from artify.auth.principal import Principal
from artify.exception.artwork.artwork_exception import (
    ArtworkFieldMissingError,
    ArtworkNotFoundError,
    EmptyArtworkPatchError,
)
from artify.models.artwork import ArtworkCreate, ArtworkUpdate
from artify.services.artwork_service import ArtworkService
from artify.services.ownership import OwnershipPolicy

FIXED_NOW = datetime(2025, 6, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def service(store):
    return ArtworkService(store, clock=lambda: FIXED_NOW)


def test_create_sets_server_fields(service, store, alice):
    payload = ArtworkCreate(title="Blue", imageUrl="https://x/blue.png", category="Abstract", price=120.5)

    artwork_id = service.create(payload, alice)

    doc = store.artworks.find_one(artwork_id)
    assert doc["created_at"] == FIXED_NOW
    assert doc["likes"] == 0
    assert doc["visibility"] == "Public"
    assert doc["user_email"] == alice.email
    assert doc["user_name"] == "Alice Kim"
    assert doc["price"] == 120.5


def test_create_missing_fields_persists_nothing(service, store, alice):
    with pytest.raises(ArtworkFieldMissingError):
        service.create(ArtworkCreate(title="Only title"), alice)

    assert store.artworks.find_many() == []


def test_create_anonymous_display_name(service, store):
    principal = Principal(subject_id="uid-x", email="x@example.com", display_name="")
    artwork_id = service.create(ArtworkCreate(title="t", imageUrl="u", category="c"), principal)

    assert store.artworks.find_one(artwork_id)["user_name"] == "Anonymous"


def test_get_maps_columns_to_api_fields(service, make_artwork):
    artwork = service.get(make_artwork(title="Mapped"))

    assert artwork.title == "Mapped"
    assert artwork.imageUrl.startswith("https://")
    assert artwork.userEmail == "alice@example.com"


def test_get_missing(service):
    with pytest.raises(ArtworkNotFoundError):
        service.get(str(uuid.uuid4()))


def test_search_ignores_empty_parameters(service, make_artwork):
    make_artwork()
    make_artwork(visibility="Private")

    assert len(service.search(category="", title="", user_name="")) == 1


def test_update_empty_patch(service, make_artwork, alice):
    with pytest.raises(EmptyArtworkPatchError):
        service.update(make_artwork(), ArtworkUpdate(), alice)


def test_update_null_values_ignored(service, store, make_artwork, alice):
    artwork_id = make_artwork(description="keep me")

    service.update(artwork_id, ArtworkUpdate(title="New", description=None), alice)

    doc = store.artworks.find_one(artwork_id)
    assert doc["title"] == "New"
    assert doc["description"] == "keep me"


def test_update_not_owned(service, make_artwork, bob):
    with pytest.raises(ArtworkNotFoundError) as exc_info:
        service.update(make_artwork(), ArtworkUpdate(title="x"), bob)

    assert exc_info.value.message == "Artwork not found or not owned by user"


def test_delete_not_owned_keeps_document(service, store, make_artwork, bob):
    artwork_id = make_artwork()

    with pytest.raises(ArtworkNotFoundError):
        service.delete(artwork_id, bob)

    assert store.artworks.find_one(artwork_id) is not None


def test_concurrent_likes_counted_exactly(service, store, make_artwork):
    """동시 좋아요 요청이 유실 없이 모두 반영되어야 함"""
    artwork_id = make_artwork()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: service.like(artwork_id), range(200)))

    assert store.artworks.find_one(artwork_id)["likes"] == 200


def test_like_missing(service):
    with pytest.raises(ArtworkNotFoundError):
        service.like(str(uuid.uuid4()))


def test_custom_ownership_policy(store, alice):
    """소유자 컬럼을 바꾸면 생성/수정 모두 해당 컬럼 기준으로 동작"""
    ownership = OwnershipPolicy(owner_column="owner")
    service = ArtworkService(store, ownership=ownership, clock=lambda: FIXED_NOW)

    artwork_id = service.create(ArtworkCreate(title="t", imageUrl="u", category="c"), alice)
    service.update(artwork_id, ArtworkUpdate(title="t2"), alice)

    doc = store.artworks.find_one(artwork_id)
    assert doc["owner"] == alice.email
    assert doc["title"] == "t2"
