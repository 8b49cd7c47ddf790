"""
ReviewShare Backend — Numeric ID Allocation
============================================

What:  Allocates the next id for Reviews, Comments and Drafts and inserts the
       new item without ever overwriting an existing one.
How:   Ids are `max(existing ids) + 1` (1 for an empty table), handed out by an
       atomic counter item per table in the Counters table:

           UpdateItem  ADD value :1  (condition: counter exists)
               │
               ├── ok → new value is the id
               └── counter missing → seed it with the scanned max
                                     (conditional put, first writer wins)
                                     and ADD again

       The insert is a conditional put (`attribute_not_exists(id)`). Should an
       id already be taken (an item written outside the counter), a fresh id
       is allocated, up to `settings.id_allocation_attempts` times.
Who:   ReviewService, CommentService and DraftService.
"""

import logging
from typing import Any, Callable, Dict

from botocore.exceptions import ClientError

from reviewshare.exceptions import ConflictError
from reviewshare.store import DynamoStore, is_conditional_failure, to_dynamo

logger = logging.getLogger(__name__)


async def max_existing_id(store: DynamoStore, table: Any) -> int:
    """Full scan projecting `id`; 0 when the table is empty."""
    items = await store.scan_all(
        table,
        ProjectionExpression="#id",
        ExpressionAttributeNames={"#id": "id"},
    )
    return max((int(item["id"]) for item in items if "id" in item), default=0)


async def _increment(store: DynamoStore, counter_name: str) -> int:
    response = await store.call(
        store.counters.update_item,
        Key={"name": counter_name},
        UpdateExpression="ADD #value :one",
        ConditionExpression="attribute_exists(#name)",
        ExpressionAttributeNames={"#value": "value", "#name": "name"},
        ExpressionAttributeValues={":one": 1},
        ReturnValues="UPDATED_NEW",
    )
    return int(response["Attributes"]["value"])


async def _seed(store: DynamoStore, counter_name: str, table: Any) -> None:
    seed = await max_existing_id(store, table)
    try:
        await store.call(
            store.counters.put_item,
            Item={"name": counter_name, "value": seed},
            ConditionExpression="attribute_not_exists(#name)",
            ExpressionAttributeNames={"#name": "name"},
        )
        logger.info("Seeded id counter %s at %d", counter_name, seed)
    except ClientError as e:
        # Another writer seeded it first
        if not is_conditional_failure(e):
            raise


async def allocate_id(store: DynamoStore, table: Any) -> int:
    """
    Returns the next id for `table` from its counter.

    Raises botocore errors unchanged; callers wrap them in StoreError.
    """
    counter_name = table.name
    try:
        return await _increment(store, counter_name)
    except ClientError as e:
        if not is_conditional_failure(e):
            raise
    await _seed(store, counter_name, table)
    return await _increment(store, counter_name)


async def insert_with_new_id(
    store: DynamoStore,
    table: Any,
    build_item: Callable[[int], Dict[str, Any]],
) -> int:
    """
    Allocates an id, builds the item for it and writes it conditionally.

    Args:
        table:       Target table handle (its name doubles as the counter name)
        build_item:  Maps the allocated id to the full item

    Returns:
        The id the item was stored under.

    Raises:
        ConflictError: Every allocated id was already taken.
    """
    attempts = store.settings.id_allocation_attempts
    for attempt in range(1, attempts + 1):
        new_id = await allocate_id(store, table)
        try:
            await store.call(
                table.put_item,
                Item=to_dynamo(build_item(new_id)),
                ConditionExpression="attribute_not_exists(#id)",
                ExpressionAttributeNames={"#id": "id"},
            )
            return new_id
        except ClientError as e:
            if not is_conditional_failure(e):
                raise
            logger.warning(
                "Id %d already taken in %s (attempt %d/%d)",
                new_id, table.name, attempt, attempts,
            )
    raise ConflictError(
        message="Could not allocate a new id. Please retry.",
        context={"table": table.name, "attempts": attempts},
    )
