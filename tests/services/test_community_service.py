from artify.auth.principal import Principal
from artify.services.community_service import CommunityService


def test_top_artists_counts_anonymous_as_one_artist(store, make_artwork, alice):
    """표시 이름이 없는 작가들은 "Anonymous" 하나로 집계됨"""
    nameless = Principal(subject_id="uid-n", email="n@example.com", display_name="Anonymous")
    make_artwork(owner=alice)
    make_artwork(owner=nameless)
    make_artwork(owner=nameless)

    rows = CommunityService(store).top_artists()

    assert [(r.userName, r.totalArtworks) for r in rows] == [("Anonymous", 2), ("Alice Kim", 1)]


def test_top_artists_ignore_private(store, make_artwork, alice):
    make_artwork(owner=alice, visibility="Private")

    assert CommunityService(store).top_artists() == []


def test_highlights_treat_missing_likes_as_zero(store, make_artwork):
    liked = make_artwork(likes=4)
    make_artwork(likes=None)

    rows = CommunityService(store).highlights()

    assert rows[0].id == liked
    assert rows[1].likes == 0
