import pytest

from artify.repositories.query import (
    Filter,
    GroupCount,
    Limit,
    Lookup,
    Match,
    OrderBy,
    Sort,
    run_pipeline,
    sort_documents,
)


class TestFilter:

    def test_empty_filter_matches_everything(self):
        assert Filter().matches({"title": "anything"})

    def test_eq_is_and(self):
        f = Filter(eq={"visibility": "Public", "category": "Abstract"})

        assert f.matches({"visibility": "Public", "category": "Abstract"})
        assert not f.matches({"visibility": "Public", "category": "Landscape"})
        assert not f.matches({"visibility": "Private", "category": "Abstract"})

    def test_contains_any_is_case_insensitive_or(self):
        f = Filter(contains_any={"title": "sun", "user_name": "kim"})

        assert f.matches({"title": "SUNRISE", "user_name": "Lee"})
        assert f.matches({"title": "Moon", "user_name": "Alice Kim"})
        assert not f.matches({"title": "Moon", "user_name": "Lee"})

    def test_contains_any_handles_missing_values(self):
        f = Filter(contains_any={"title": "sun"})

        assert not f.matches({"title": None})
        assert not f.matches({})

    def test_and_eq_returns_new_filter(self):
        base = Filter(eq={"visibility": "Public"}, contains_any={"title": "a"})

        narrowed = base.and_eq(category="Abstract")

        assert base.eq == {"visibility": "Public"}
        assert narrowed.eq == {"visibility": "Public", "category": "Abstract"}
        assert narrowed.contains_any == {"title": "a"}


class TestSortDocuments:

    def test_multi_key_sort(self):
        docs = [
            {"id": 1, "likes": 2, "title": "b"},
            {"id": 2, "likes": 5, "title": "a"},
            {"id": 3, "likes": 2, "title": "a"},
        ]

        result = sort_documents(docs, [OrderBy("likes", descending=True), OrderBy("title")])

        assert [d["id"] for d in result] == [2, 3, 1]

    def test_none_values_sort_last_when_descending(self):
        docs = [{"id": 1, "likes": None}, {"id": 2, "likes": 3}, {"id": 3}]

        desc = sort_documents(docs, [OrderBy("likes", descending=True)])
        asc = sort_documents(docs, [OrderBy("likes")])

        assert desc[0]["id"] == 2
        assert asc[-1]["id"] == 2


class TestRunPipeline:

    @pytest.fixture
    def artworks(self):
        return [
            {"id": "a1", "title": "One", "visibility": "Public", "user_name": "Kim"},
            {"id": "a2", "title": "Two", "visibility": "Public", "user_name": "Kim"},
            {"id": "a3", "title": "Three", "visibility": "Private", "user_name": "Lee"},
            {"id": "a4", "title": "Four", "visibility": "Public", "user_name": "Lee"},
        ]

    def test_group_count_sort_limit(self, artworks):
        rows = run_pipeline(
            artworks,
            [
                Match(Filter(eq={"visibility": "Public"})),
                GroupCount(by="user_name", as_field="total_artworks"),
                Sort((OrderBy("total_artworks", descending=True),)),
                Limit(1),
            ],
            resolve=lambda *args: [],
        )

        assert rows == [{"user_name": "Kim", "total_artworks": 2}]

    def test_lookup_is_inner_join(self, artworks):
        """참조 대상이 없는 문서는 결과에서 제외 (unwind)"""
        favorites = [
            {"id": "f1", "artwork_id": "a1"},
            {"id": "f2", "artwork_id": "deleted"},
            {"id": "f3", "artwork_id": "a4"},
        ]
        requested = []

        def resolve(collection, column, values):
            requested.append((collection, column, values))
            return [a for a in artworks if a[column] in values]

        rows = run_pipeline(favorites, [Lookup("artworks", "artwork_id", "id", "artwork")], resolve)

        assert [(r["id"], r["artwork"]["title"]) for r in rows] == [("f1", "One"), ("f3", "Four")]
        assert requested == [("artworks", "id", ["a1", "deleted", "a4"])]

    def test_lookup_skips_resolver_when_nothing_to_join(self):
        def resolve(*args):
            raise AssertionError("resolver should not be called")

        assert run_pipeline([], [Lookup("artworks", "artwork_id", "id", "artwork")], resolve) == []

    def test_input_documents_not_mutated(self, artworks):
        run_pipeline(artworks, [Lookup("artworks", "id", "id", "self")], lambda c, col, v: artworks)

        assert "self" not in artworks[0]

    def test_unknown_stage_rejected(self):
        with pytest.raises(TypeError):
            run_pipeline([{"id": 1}], [object()], resolve=lambda *args: [])
