"""
ReviewShare Backend — Comment Service
======================================

What:  Data access for the Comments table.
How:   `reviewId` is stored as a plain attribute; nothing checks that the
       review exists, and deleting a review leaves its comments behind.
Who:   Called by the /comments route handlers.
"""

import logging
from typing import Any, Dict, List

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from reviewshare.exceptions import NotFoundError
from reviewshare.schemas.comment import Comment, CommentCreate
from reviewshare.schemas.common import ActionResponse, LikeResponse
from reviewshare.services.ids import insert_with_new_id
from reviewshare.store import STORE_ERRORS, DynamoStore, is_conditional_failure, store_failure

logger = logging.getLogger(__name__)


class CommentService:
    """
    Business logic layer for comments.

    Responsibilities:
        - get_all_comments() / get_comments_by_review_id()
        - add_comment() / like_comment()
    """

    async def get_all_comments(self, store: DynamoStore) -> List[Comment]:
        try:
            items = await store.scan_all(store.comments)
        except STORE_ERRORS as e:
            raise store_failure("Could not fetch comments", e, operation="get_all_comments") from e
        return [Comment.model_validate(item) for item in items]

    async def add_comment(self, store: DynamoStore, author: str, comment: CommentCreate) -> ActionResponse:
        def build(new_id: int) -> Dict[str, Any]:
            return {
                "id": new_id,
                "author": author,
                "content": comment.content,
                "reviewId": comment.review_id,
                "like": 0,
            }

        try:
            new_id = await insert_with_new_id(store, store.comments, build)
        except STORE_ERRORS as e:
            raise store_failure("Could not add comment", e, operation="add_comment") from e

        logger.info("Comment %d added to review %d by %s", new_id, comment.review_id, author)
        return ActionResponse(success=True, message="Comment added successfully!", id=new_id)

    async def get_comments_by_review_id(self, store: DynamoStore, review_id: int) -> List[Comment]:
        try:
            items = await store.scan_all(
                store.comments, FilterExpression=Attr("reviewId").eq(review_id)
            )
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not fetch comments by reviewId", e,
                operation="get_comments_by_review_id", review_id=review_id,
            ) from e
        return [Comment.model_validate(item) for item in items]

    async def like_comment(self, store: DynamoStore, comment_id: int) -> LikeResponse:
        try:
            response = await store.call(
                store.comments.update_item,
                Key={"id": comment_id},
                UpdateExpression="ADD #like :one",
                ConditionExpression="attribute_exists(#id)",
                ExpressionAttributeNames={"#id": "id", "#like": "like"},
                ExpressionAttributeValues={":one": 1},
                ReturnValues="UPDATED_NEW",
            )
        except ClientError as e:
            if is_conditional_failure(e):
                raise NotFoundError(resource="comment", resource_id=comment_id)
            raise store_failure("Could not like comment", e, operation="like_comment") from e
        except STORE_ERRORS as e:
            raise store_failure("Could not like comment", e, operation="like_comment") from e

        return LikeResponse(id=comment_id, like=int(response["Attributes"]["like"]))


# ── Singleton Instance ────────────────────────────────────────────────────
comment_service = CommentService()
