"""
ReviewShare Backend — Draft Service Unit Tests
===============================================

What:  Tests for storing drafts and publishing them as reviews.

What we test:
    ✅ Drafts are stored and listed per author
    ✅ Publishing creates exactly one review and removes the draft
    ✅ Publishing a missing draft creates nothing
    ✅ Only the author may publish
"""

import pytest

from reviewshare.exceptions import NotFoundError, PermissionDeniedError
from reviewshare.schemas.draft import DraftCreate
from reviewshare.schemas.review import ReviewCreate
from reviewshare.services.draft_service import DraftService, review_item_from_draft
from reviewshare.services.review_service import review_service


def _draft(title="Draft title", rate=3.5):
    return DraftCreate(image_url="http://img/d.png", title=title, content="Body", rate=rate)


class TestDraftStorage:

    def setup_method(self):
        self.service = DraftService()

    @pytest.mark.asyncio
    async def test_store_draft(self, store):
        result = await self.service.store_draft(store, "alice", _draft())

        assert result.success is True
        assert result.id == 1

    @pytest.mark.asyncio
    async def test_draft_without_rating(self, store):
        await self.service.store_draft(store, "alice", DraftCreate(title="Half done"))

        drafts = await self.service.get_drafts_by_author(store, "alice")

        assert len(drafts) == 1
        assert drafts[0].rate is None
        assert drafts[0].title == "Half done"

    @pytest.mark.asyncio
    async def test_drafts_listed_per_author(self, store):
        await self.service.store_draft(store, "alice", _draft("a1"))
        await self.service.store_draft(store, "bob", _draft("b1"))
        await self.service.store_draft(store, "alice", _draft("a2"))

        drafts = await self.service.get_drafts_by_author(store, "alice")

        assert sorted(d.title for d in drafts) == ["a1", "a2"]


class TestPublishDraft:

    def setup_method(self):
        self.service = DraftService()

    @pytest.mark.asyncio
    async def test_publish_creates_review_and_removes_draft(self, store):
        stored = await self.service.store_draft(store, "alice", _draft())

        result = await self.service.publish_draft(store, stored.id, author="alice")

        assert result.message == "Draft published successfully!"
        review = await review_service.get_review_by_id(store, result.id)
        assert review.title == "Draft title"
        assert review.rate == 3.5
        assert review.like == 0
        assert review.author == "alice"
        assert len(await review_service.get_all_reviews(store)) == 1
        assert await self.service.get_drafts_by_author(store, "alice") == []

    @pytest.mark.asyncio
    async def test_review_id_follows_existing_reviews(self, store):
        await review_service.add_review(store, "bob", ReviewCreate(title="Existing", content="Review", rate=1))
        stored = await self.service.store_draft(store, "alice", _draft())

        result = await self.service.publish_draft(store, stored.id)

        assert result.id == 2

    @pytest.mark.asyncio
    async def test_publish_skips_review_id_taken_outside_counter(self, store):
        await review_service.add_review(store, "bob", ReviewCreate(title="First", content="Review", rate=1))
        store.reviews.put_item(Item={"id": 2, "author": "importer", "title": "Imported", "content": "x", "like": 5})
        stored = await self.service.store_draft(store, "alice", _draft())

        result = await self.service.publish_draft(store, stored.id, author="alice")

        assert result.id == 3
        imported = await review_service.get_review_by_id(store, 2)
        assert (imported.author, imported.title, imported.like) == ("importer", "Imported", 5)
        assert (await review_service.get_review_by_id(store, 3)).title == "Draft title"
        assert await self.service.get_drafts_by_author(store, "alice") == []

    @pytest.mark.asyncio
    async def test_publish_missing_draft_creates_nothing(self, store):
        with pytest.raises(NotFoundError):
            await self.service.publish_draft(store, 12)

        assert await review_service.get_all_reviews(store) == []

    @pytest.mark.asyncio
    async def test_publish_twice_is_not_found(self, store):
        stored = await self.service.store_draft(store, "alice", _draft())
        await self.service.publish_draft(store, stored.id)

        with pytest.raises(NotFoundError):
            await self.service.publish_draft(store, stored.id)

        assert len(await review_service.get_all_reviews(store)) == 1

    @pytest.mark.asyncio
    async def test_only_author_can_publish(self, store):
        stored = await self.service.store_draft(store, "alice", _draft())

        with pytest.raises(PermissionDeniedError):
            await self.service.publish_draft(store, stored.id, author="mallory")

        assert len(await self.service.get_drafts_by_author(store, "alice")) == 1

    def test_review_item_from_draft_resets_likes(self):
        item = review_item_from_draft(
            {"id": 4, "author": "alice", "title": "t", "content": "c", "like": 9}, 11
        )

        assert item["id"] == 11
        assert item["like"] == 0
        assert item["rate"] is None
