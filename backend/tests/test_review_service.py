"""
ReviewShare Backend — Review Service Unit Tests
================================================

What:  Tests for ReviewService and the id counter it relies on.

What we test:
    ✅ New ids are max(existing) + 1, and 1 for an empty table
    ✅ Lookup by id, by author (with exclusion) and by text
    ✅ Cursor pagination visits every review exactly once
    ✅ Malformed cursors are rejected
    ✅ Likes and author-only deletion
"""

import base64

import pytest

from reviewshare.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from reviewshare.schemas.review import ReviewCreate
from reviewshare.services.review_service import (
    ReviewService,
    decode_cursor,
    encode_cursor,
    matches_query,
)


def _payload(title="A title", content="Some content", rate=4.0, image_url="http://img/1.png"):
    return ReviewCreate(image_url=image_url, title=title, content=content, rate=rate)


def _put_review(store, review_id, author="alice", title="t", content="c"):
    store.reviews.put_item(Item={
        "id": review_id,
        "imageUrl": "",
        "author": author,
        "title": title,
        "content": content,
        "rate": 3,
        "like": 0,
    })


class TestReviewIds:
    """Tests for id allocation on add_review."""

    def setup_method(self):
        self.service = ReviewService()

    @pytest.mark.asyncio
    async def test_first_review_gets_id_one(self, store):
        result = await self.service.add_review(store, "alice", _payload())

        assert result.success is True
        assert result.message == "Review added successfully!"
        assert result.id == 1

    @pytest.mark.asyncio
    async def test_new_id_is_max_plus_one(self, store):
        _put_review(store, 3)
        _put_review(store, 7)

        result = await self.service.add_review(store, "alice", _payload())

        assert result.id == 8

    @pytest.mark.asyncio
    async def test_consecutive_adds_get_distinct_ids(self, store):
        ids = [(await self.service.add_review(store, "alice", _payload())).id for _ in range(4)]

        assert ids == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_item_written_outside_counter_is_skipped(self, store):
        await self.service.add_review(store, "alice", _payload())
        _put_review(store, 2, author="importer")

        result = await self.service.add_review(store, "alice", _payload())

        assert result.id == 3
        assert (await self.service.get_review_by_id(store, 2)).author == "importer"

    @pytest.mark.asyncio
    async def test_added_review_starts_with_zero_likes(self, store):
        result = await self.service.add_review(store, "alice", _payload(rate=2.5))

        review = await self.service.get_review_by_id(store, result.id)
        assert review.like == 0
        assert review.rate == 2.5
        assert review.author == "alice"
        assert review.image_url == "http://img/1.png"


class TestReviewQueries:
    """Tests for lookups, search and pagination."""

    def setup_method(self):
        self.service = ReviewService()

    @pytest.mark.asyncio
    async def test_get_missing_review_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            await self.service.get_review_by_id(store, 99)

    @pytest.mark.asyncio
    async def test_get_all_reviews(self, store):
        for review_id in (1, 2, 3):
            _put_review(store, review_id)

        reviews = await self.service.get_all_reviews(store)

        assert sorted(r.id for r in reviews) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_reviews_by_author_with_exclusion(self, store):
        _put_review(store, 1, author="alice")
        _put_review(store, 2, author="bob")
        _put_review(store, 3, author="alice")

        everything = await self.service.get_reviews_by_author(store, "alice")
        excluded = await self.service.get_reviews_by_author(store, "alice", exclude_id=1)

        assert sorted(r.id for r in everything) == [1, 3]
        assert [r.id for r in excluded] == [3]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_across_fields(self, store):
        _put_review(store, 1, title="My Cat", content="purrs")
        _put_review(store, 2, title="Dog", content="the CATalog of barks")
        _put_review(store, 3, author="catherine", title="Fish", content="blub")
        _put_review(store, 4, title="Bird", content="tweet")

        results = await self.service.search_reviews(store, "cat")

        assert sorted(r.id for r in results) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_search_keeps_surrounding_spaces(self, store):
        _put_review(store, 1, title="concat strings")
        _put_review(store, 2, title="my cat")

        results = await self.service.search_reviews(store, " cat")

        assert [r.id for r in results] == [2]

    def test_matches_query_ignores_missing_fields(self):
        assert matches_query({"title": None, "content": "Cats"}, "cat") is True
        assert matches_query({}, "cat") is False

    @pytest.mark.asyncio
    async def test_pagination_visits_every_review_once(self, store):
        for review_id in range(1, 8):
            _put_review(store, review_id)

        seen = []
        cursor = None
        for _ in range(10):
            page = await self.service.fetch_reviews_with_pagination(store, 3, cursor)
            assert len(page.reviews) <= 3
            seen.extend(r.id for r in page.reviews)
            cursor = page.cursor
            if cursor is None:
                break

        assert cursor is None
        assert sorted(seen) == list(range(1, 8))

    @pytest.mark.asyncio
    async def test_pagination_of_empty_table(self, store):
        page = await self.service.fetch_reviews_with_pagination(store, 5)

        assert page.reviews == []
        assert page.cursor is None

    @pytest.mark.asyncio
    async def test_malformed_cursor_is_rejected(self, store):
        with pytest.raises(ValidationError):
            await self.service.fetch_reviews_with_pagination(store, 5, "not-a-cursor!!")


class TestCursorCodec:
    """Tests for the opaque cursor format."""

    def test_cursor_decodes_to_start_key(self):
        cursor = encode_cursor({"id": 12})

        assert "=" not in cursor
        assert decode_cursor(cursor) == {"id": 12}

    def test_no_key_means_no_cursor(self):
        assert encode_cursor(None) is None
        assert encode_cursor({}) is None
        assert decode_cursor(None) is None
        assert decode_cursor("") is None

    @pytest.mark.parametrize("payload", [
        '{"id": -1}',
        '{"id": "7"}',
        '{"id": true}',
        '{"id": 1, "extra": 2}',
        '[1, 2]',
        '{"id": 9223372036854775808}',
        '{"id": 10000000000000000000000000000000000000000}',
    ])
    def test_cursor_with_wrong_shape_is_rejected(self, payload):
        cursor = base64.urlsafe_b64encode(payload.encode()).decode().rstrip("=")

        with pytest.raises(ValidationError) as exc_info:
            decode_cursor(cursor)
        assert exc_info.value.field == "cursor"


class TestReviewMutations:
    """Tests for like_review and delete_review."""

    def setup_method(self):
        self.service = ReviewService()

    @pytest.mark.asyncio
    async def test_like_increments(self, store):
        _put_review(store, 1)

        first = await self.service.like_review(store, 1)
        second = await self.service.like_review(store, 1)

        assert (first.id, first.like) == (1, 1)
        assert second.like == 2

    @pytest.mark.asyncio
    async def test_like_missing_review_creates_nothing(self, store):
        with pytest.raises(NotFoundError):
            await self.service.like_review(store, 42)

        assert "Item" not in store.reviews.get_item(Key={"id": 42})

    @pytest.mark.asyncio
    async def test_author_can_delete(self, store):
        _put_review(store, 1, author="alice")

        result = await self.service.delete_review(store, 1, author="alice")

        assert result.message == "Review with id 1 deleted successfully"
        with pytest.raises(NotFoundError):
            await self.service.get_review_by_id(store, 1)

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, store):
        _put_review(store, 1, author="alice")

        with pytest.raises(PermissionDeniedError):
            await self.service.delete_review(store, 1, author="mallory")

        assert (await self.service.get_review_by_id(store, 1)).author == "alice"

    @pytest.mark.asyncio
    async def test_delete_missing_review_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            await self.service.delete_review(store, 5, author="alice")
