from artify.auth.principal import Principal


def _artist(n: int) -> Principal:
    return Principal(subject_id=f"uid-{n}", email=f"artist{n}@example.com", display_name=f"Artist {n}")


def test_top_artists_counts_public_only(client, make_artwork, alice, bob):
    """비공개 작품은 집계에서 제외되어야 한다."""
    for _ in range(3):
        make_artwork(owner=alice)
    make_artwork(owner=bob)
    for _ in range(4):
        make_artwork(owner=bob, visibility="Private")

    response = client.get("/top-artists")

    assert response.status_code == 200
    assert response.json() == [
        {"userName": "Alice Kim", "totalArtworks": 3},
        {"userName": "Bob Lee", "totalArtworks": 1},
    ]


def test_top_artists_limited_to_five(client, make_artwork):
    for n in range(1, 8):
        for _ in range(n):
            make_artwork(owner=_artist(n))

    rows = client.get("/top-artists").json()

    assert len(rows) == 5
    assert [row["totalArtworks"] for row in rows] == [7, 6, 5, 4, 3]
    assert rows[0]["userName"] == "Artist 7"


def test_top_artists_empty(client):
    assert client.get("/top-artists").json() == []


def test_community_highlights_most_liked_public(client, make_artwork):
    """좋아요 내림차순 상위 6개 공개 작품"""
    ids_by_likes = {likes: make_artwork(likes=likes) for likes in range(8)}
    make_artwork(likes=100, visibility="Private")

    response = client.get("/community-highlights")

    assert response.status_code == 200
    rows = response.json()
    assert [row["likes"] for row in rows] == [7, 6, 5, 4, 3, 2]
    assert rows[0]["id"] == ids_by_likes[7]
    assert all(row["visibility"] == "Public" for row in rows)


def test_community_highlights_reflect_likes(client, make_artwork):
    quiet = make_artwork(likes=1)
    popular = make_artwork(likes=1)
    for _ in range(3):
        client.patch(f"/artworks/{popular}/like")

    rows = client.get("/community-highlights").json()

    assert [row["id"] for row in rows] == [popular, quiet]


def test_root_and_ping(client):
    root = client.get("/")
    assert root.status_code == 200
    assert root.text == "Artify Server API OK!"

    ping = client.get("/ping")
    assert ping.status_code == 200
    assert ping.json() == {"ok": True}
