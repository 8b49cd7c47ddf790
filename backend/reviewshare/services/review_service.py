"""
ReviewShare Backend — Review Service
=====================================

What:  Data access for the Reviews table: listing, cursor pagination, author
       and text search, creation, likes and deletion.
How:   Scans and point operations through the injected DynamoStore. New ids
       come from the atomic counter in services/ids.py.
Who:   Called by the /reviews route handlers.

Pagination Cursor:
    The cursor handed to clients is minted by the server: the scan's
    LastEvaluatedKey serialized as compact JSON, then URL-safe base64 without
    padding. Clients pass it back verbatim. Anything that does not decode to
    `{"id": <int in 0..MAX_ID>}` is rejected with ValidationError (400).

    Scan order is the store's order; it is stable for an unchanged table but
    carries no meaning (not by id, not by date).
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from reviewshare.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from reviewshare.schemas.common import MAX_ID, ActionResponse, LikeResponse
from reviewshare.schemas.review import Review, ReviewCreate, ReviewPage
from reviewshare.services.ids import insert_with_new_id
from reviewshare.store import (
    STORE_ERRORS,
    DynamoStore,
    from_dynamo,
    is_conditional_failure,
    store_failure,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Cursor codec
# ══════════════════════════════════════════════════════════════════════════

def encode_cursor(last_evaluated_key: Optional[Dict[str, Any]]) -> Optional[str]:
    if not last_evaluated_key:
        return None
    raw = json.dumps(from_dynamo(last_evaluated_key), separators=(",", ":"), sort_keys=True)
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(cursor: Optional[str]) -> Optional[Dict[str, int]]:
    """
    Turns a client-supplied cursor back into an ExclusiveStartKey.

    Raises:
        ValidationError: The cursor was not minted by encode_cursor().
    """
    if not cursor:
        return None
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        key = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError):
        raise ValidationError(message="Invalid pagination cursor", field="cursor")

    if (
        not isinstance(key, dict)
        or set(key) != {"id"}
        or not isinstance(key["id"], int)
        or isinstance(key["id"], bool)
        or key["id"] < 0
        or key["id"] > MAX_ID
    ):
        raise ValidationError(message="Invalid pagination cursor", field="cursor")
    return key


def matches_query(review: Dict[str, Any], lowered_query: str) -> bool:
    """Case-insensitive substring match on title, content or author."""
    return any(
        lowered_query in str(review.get(attr) or "").lower()
        for attr in ("title", "content", "author")
    )


class ReviewService:
    """
    Business logic layer for reviews.

    Responsibilities:
        - get_all_reviews() / fetch_reviews_with_pagination()
        - get_review_by_id() / get_reviews_by_author() / search_reviews()
        - add_review() / like_review() / delete_review()
    """

    async def get_all_reviews(self, store: DynamoStore) -> List[Review]:
        try:
            items = await store.scan_all(store.reviews)
        except STORE_ERRORS as e:
            raise store_failure("Could not fetch reviews", e, operation="get_all_reviews") from e
        return [Review.model_validate(item) for item in items]

    async def fetch_reviews_with_pagination(
        self, store: DynamoStore, limit: int, cursor: Optional[str] = None
    ) -> ReviewPage:
        """
        Returns up to `limit` reviews and the cursor for the next page.

        Raises:
            ValidationError: Malformed cursor.
        """
        request: Dict[str, Any] = {"Limit": limit}
        start_key = decode_cursor(cursor)
        if start_key is not None:
            request["ExclusiveStartKey"] = start_key

        try:
            page = await store.call(store.reviews.scan, **request)
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not fetch reviews with pagination", e,
                operation="fetch_reviews_with_pagination", limit=limit,
            ) from e

        items = from_dynamo(page.get("Items", []))
        return ReviewPage(
            reviews=[Review.model_validate(item) for item in items],
            cursor=encode_cursor(page.get("LastEvaluatedKey")),
        )

    async def get_review_by_id(self, store: DynamoStore, review_id: int) -> Review:
        try:
            item = await store.get(store.reviews, {"id": review_id})
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not fetch review by ID", e, operation="get_review_by_id", review_id=review_id
            ) from e
        if item is None:
            raise NotFoundError(resource="review", resource_id=review_id)
        return Review.model_validate(item)

    async def get_reviews_by_author(
        self, store: DynamoStore, author: str, exclude_id: Optional[int] = None
    ) -> List[Review]:
        """Scan filtered on `author`; `exclude_id` drops one review from the result."""
        try:
            items = await store.scan_all(store.reviews, FilterExpression=Attr("author").eq(author))
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not fetch reviews by author", e, operation="get_reviews_by_author"
            ) from e
        return [
            Review.model_validate(item)
            for item in items
            if exclude_id is None or item.get("id") != exclude_id
        ]

    async def search_reviews(self, store: DynamoStore, query: str) -> List[Review]:
        """
        Full scan, keeping reviews whose title, content or author contains
        `query` case-insensitively. Cost grows with table size.
        """
        lowered = query.lower()
        try:
            items = await store.scan_all(store.reviews)
        except STORE_ERRORS as e:
            raise store_failure("Could not search reviews", e, operation="search_reviews") from e
        return [Review.model_validate(item) for item in items if matches_query(item, lowered)]

    async def add_review(self, store: DynamoStore, author: str, review: ReviewCreate) -> ActionResponse:
        """Stores a new review with `like = 0` under id max+1."""
        def build(new_id: int) -> Dict[str, Any]:
            return {
                "id": new_id,
                "imageUrl": review.image_url,
                "author": author,
                "title": review.title,
                "content": review.content,
                "rate": review.rate,
                "like": 0,
            }

        try:
            new_id = await insert_with_new_id(store, store.reviews, build)
        except STORE_ERRORS as e:
            raise store_failure("Could not add review", e, operation="add_review") from e

        logger.info("Review %d added by %s", new_id, author)
        return ActionResponse(success=True, message="Review added successfully!", id=new_id)

    async def like_review(self, store: DynamoStore, review_id: int) -> LikeResponse:
        """Atomically increments the like counter of an existing review."""
        try:
            response = await store.call(
                store.reviews.update_item,
                Key={"id": review_id},
                UpdateExpression="ADD #like :one",
                ConditionExpression="attribute_exists(#id)",
                ExpressionAttributeNames={"#id": "id", "#like": "like"},
                ExpressionAttributeValues={":one": 1},
                ReturnValues="UPDATED_NEW",
            )
        except ClientError as e:
            if is_conditional_failure(e):
                raise NotFoundError(resource="review", resource_id=review_id)
            raise store_failure("Could not like review", e, operation="like_review") from e
        except STORE_ERRORS as e:
            raise store_failure("Could not like review", e, operation="like_review") from e

        return LikeResponse(id=review_id, like=int(response["Attributes"]["like"]))

    async def delete_review(
        self, store: DynamoStore, review_id: int, author: Optional[str] = None
    ) -> ActionResponse:
        """
        Deletes a review by key. Comments and saved-list references to it are
        left in place.

        With `author` set, the delete only applies to that author's review.

        Raises:
            NotFoundError: No review with that id.
            PermissionDeniedError: The review belongs to another author.
        """
        condition = Attr("id").exists()
        if author is not None:
            condition = condition & Attr("author").eq(author)

        try:
            await store.call(
                store.reviews.delete_item,
                Key={"id": review_id},
                ConditionExpression=condition,
            )
        except ClientError as e:
            if not is_conditional_failure(e):
                raise store_failure("Could not delete review", e, operation="delete_review") from e
            # missing or someone else's
            await self.get_review_by_id(store, review_id)
            raise PermissionDeniedError(message="Only the author can delete this review")
        except STORE_ERRORS as e:
            raise store_failure("Could not delete review", e, operation="delete_review") from e

        logger.info("Review %d deleted", review_id)
        return ActionResponse(
            success=True,
            message=f"Review with id {review_id} deleted successfully",
        )


# ── Singleton Instance ────────────────────────────────────────────────────
review_service = ReviewService()
