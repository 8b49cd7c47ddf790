"""
ReviewShare Backend — Draft Service
====================================

What:  Data access for the Drafts table and the draft → review publish step.
Who:   Called by the /drafts route handlers.

Publish Flow:
    ┌──────────────┐    ┌────────────────┐    ┌──────────────────────────────┐
    │  Get draft   │───▶│ Allocate review│───▶│ TransactWriteItems           │
    │ (404 if none)│    │ id (counter)   │    │  Put    Reviews  id unused   │
    └──────────────┘    └────────────────┘    │  Delete Drafts   draft exists│
                                              └──────────────────────────────┘
    Both writes commit together or not at all, so a published draft never
    lingers next to its review. A cancelled transaction is resolved by
    checking the draft again: gone → NotFoundError (published concurrently),
    still there → the review id was taken, allocate another.
"""

import logging
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from reviewshare.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from reviewshare.schemas.common import ActionResponse
from reviewshare.schemas.draft import Draft, DraftCreate
from reviewshare.services.ids import allocate_id, insert_with_new_id
from reviewshare.store import (
    STORE_ERRORS,
    DynamoStore,
    is_transaction_cancelled,
    store_failure,
    to_dynamo,
)

logger = logging.getLogger(__name__)


def review_item_from_draft(draft: Dict[str, Any], review_id: int) -> Dict[str, Any]:
    return {
        "id": review_id,
        "imageUrl": draft.get("imageUrl", ""),
        "author": draft["author"],
        "title": draft.get("title", ""),
        "content": draft.get("content", ""),
        "rate": draft.get("rate"),
        "like": 0,
    }


class DraftService:
    """
    Responsibilities:
        - store_draft() / get_drafts_by_author()
        - publish_draft()
    """

    async def store_draft(self, store: DynamoStore, author: str, draft: DraftCreate) -> ActionResponse:
        def build(new_id: int) -> Dict[str, Any]:
            return {
                "id": new_id,
                "imageUrl": draft.image_url,
                "author": author,
                "title": draft.title,
                "content": draft.content,
                "rate": draft.rate,
            }

        try:
            new_id = await insert_with_new_id(store, store.drafts, build)
        except STORE_ERRORS as e:
            raise store_failure("Could not store draft", e, operation="store_draft") from e

        logger.info("Draft %d stored for %s", new_id, author)
        return ActionResponse(success=True, message="Draft stored successfully!", id=new_id)

    async def get_drafts_by_author(self, store: DynamoStore, author: str) -> List[Draft]:
        try:
            items = await store.scan_all(store.drafts, FilterExpression=Attr("author").eq(author))
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not fetch drafts by userId", e, operation="get_drafts_by_author"
            ) from e
        return [Draft.model_validate(item) for item in items]

    async def _get_draft_item(self, store: DynamoStore, draft_id: int) -> Optional[Dict[str, Any]]:
        try:
            return await store.get(store.drafts, {"id": draft_id}, ConsistentRead=True)
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not publish draft", e, operation="get_draft", draft_id=draft_id
            ) from e

    async def publish_draft(
        self, store: DynamoStore, draft_id: int, author: Optional[str] = None
    ) -> ActionResponse:
        """
        Turns a draft into a review (same fields, `like = 0`) and deletes it.

        Args:
            draft_id: Draft to publish
            author:   When set, only this author's draft may be published

        Returns:
            ActionResponse whose `id` is the new review's id.

        Raises:
            NotFoundError: No such draft; no review is created.
            PermissionDeniedError: The draft belongs to another author.
            ConflictError: Every allocated review id was already taken.
        """
        draft = await self._get_draft_item(store, draft_id)
        if draft is None:
            raise NotFoundError(resource="draft", resource_id=draft_id)
        if author is not None and draft.get("author") != author:
            raise PermissionDeniedError(message="Only the author can publish this draft")

        attempts = store.settings.id_allocation_attempts
        for attempt in range(1, attempts + 1):
            try:
                review_id = await allocate_id(store, store.reviews)
                await store.call(
                    store.client.transact_write_items,
                    TransactItems=[
                        {
                            "Put": {
                                "TableName": store.reviews.name,
                                "Item": to_dynamo(review_item_from_draft(draft, review_id)),
                                "ConditionExpression": "attribute_not_exists(#id)",
                                "ExpressionAttributeNames": {"#id": "id"},
                            }
                        },
                        {
                            "Delete": {
                                "TableName": store.drafts.name,
                                "Key": {"id": draft_id},
                                "ConditionExpression": "attribute_exists(#id)",
                                "ExpressionAttributeNames": {"#id": "id"},
                            }
                        },
                    ],
                )
            except ClientError as e:
                if not is_transaction_cancelled(e):
                    raise store_failure(
                        "Could not publish draft", e, operation="publish_draft", draft_id=draft_id
                    ) from e
                if await self._get_draft_item(store, draft_id) is None:
                    raise NotFoundError(resource="draft", resource_id=draft_id)
                logger.warning(
                    "Review id %d taken while publishing draft %d (attempt %d/%d)",
                    review_id, draft_id, attempt, attempts,
                )
                continue
            except STORE_ERRORS as e:
                raise store_failure(
                    "Could not publish draft", e, operation="publish_draft", draft_id=draft_id
                ) from e

            logger.info("Draft %d published as review %d", draft_id, review_id)
            return ActionResponse(success=True, message="Draft published successfully!", id=review_id)

        raise ConflictError(
            message="Could not allocate a review id for the draft. Please retry.",
            context={"draft_id": draft_id, "attempts": attempts},
        )


# ── Singleton Instance ────────────────────────────────────────────────────
draft_service = DraftService()
