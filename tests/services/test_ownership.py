from artify.services.ownership import DEFAULT_OWNERSHIP


def test_owner_scope_combines_id_and_owner(alice):
    scope = DEFAULT_OWNERSHIP.owner_scope("a1", alice)

    assert scope.eq == {"user_email": alice.email, "id": "a1"}
    assert scope.matches({"id": "a1", "user_email": alice.email})
    assert not scope.matches({"id": "a1", "user_email": "bob@example.com"})


def test_stamp_overrides_client_owner(alice):
    doc = DEFAULT_OWNERSHIP.stamp({"title": "t", "user_email": "mallory@example.com"}, alice)

    assert doc == {"title": "t", "user_email": alice.email}
