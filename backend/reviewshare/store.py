"""
ReviewShare Backend — DynamoDB Store Client
============================================

What:  The single client object that owns the boto3 DynamoDB resource and the
       table handles for Users, Profiles, Reviews, Comments, Drafts and
       Counters.
How:   `DynamoStore` is constructed explicitly (in the app lifespan, or by a
       test fixture) and handed to the services through FastAPI's dependency
       injection (`get_store`). Blocking boto3 calls run in Starlette's
       threadpool so request handlers stay asynchronous.
Who:   Services receive it as their first argument; routes obtain it via
       `Depends(get_store)`.

Table Layout:
    Users     UserId   (S)  — credentials and confirmation state
    Profiles  userName (S)  — ordered `saved` list of review ids
    Reviews   id       (N)
    Comments  id       (N)
    Drafts    id       (N)
    Counters  name     (S)  — last allocated id per table

Numbers:
    boto3 returns every DynamoDB number as `decimal.Decimal`. `from_dynamo`
    converts items back to plain ints/floats before they leave the store layer.
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request
from starlette.concurrency import run_in_threadpool

from reviewshare.config import Settings
from reviewshare.exceptions import StoreError

logger = logging.getLogger(__name__)

# Errors raised by boto3/botocore for a failed call
STORE_ERRORS = (BotoCoreError, ClientError)


def error_code(exc: BaseException) -> str:
    """Returns the DynamoDB error code of a ClientError ('' otherwise)."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


def is_conditional_failure(exc: BaseException) -> bool:
    return error_code(exc) == "ConditionalCheckFailedException"


def is_transaction_cancelled(exc: BaseException) -> bool:
    return error_code(exc) == "TransactionCanceledException"


def store_failure(message: str, exc: BaseException, **context: Any) -> StoreError:
    """
    Logs a failed DynamoDB call and builds the generic StoreError for it.

    The botocore detail goes to the server log and the error context only;
    the client sees `message`.
    """
    context["error_type"] = type(exc).__name__
    code = error_code(exc)
    if code:
        context["error_code"] = code
    logger.error("%s: %s | Context: %s", message, str(exc), context)
    return StoreError(message=message, context=context)


def to_dynamo(value: Any) -> Any:
    """Recursively converts floats to Decimal (boto3 rejects float)."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    """Recursively converts Decimals to int (integral) or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [from_dynamo(v) for v in value]
    if isinstance(value, set):
        return {from_dynamo(v) for v in value}
    return value


# name → (key attribute, attribute type)
TABLE_KEYS = {
    "users_table": ("UserId", "S"),
    "profiles_table": ("userName", "S"),
    "reviews_table": ("id", "N"),
    "comments_table": ("id", "N"),
    "drafts_table": ("id", "N"),
    "counters_table": ("name", "S"),
}


class DynamoStore:
    """
    DynamoDB resource plus one Table handle per logical table.

    Attributes:
        settings:  The Settings the store was built from (table names, region)
        resource:  boto3 DynamoDB service resource
        client:    The resource's low-level client; it accepts plain Python
                   values, which `transact_write_items` relies on
        users, profiles, reviews, comments, drafts, counters:  Table handles
    """

    def __init__(self, settings: Settings, resource: Optional[Any] = None):
        self.settings = settings
        if resource is None:
            resource = boto3.resource(
                "dynamodb",
                region_name=settings.aws_region,
                endpoint_url=settings.dynamodb_endpoint_url or None,
            )
        self.resource = resource
        self.client = resource.meta.client

        self.users = resource.Table(settings.users_table)
        self.profiles = resource.Table(settings.profiles_table)
        self.reviews = resource.Table(settings.reviews_table)
        self.comments = resource.Table(settings.comments_table)
        self.drafts = resource.Table(settings.drafts_table)
        self.counters = resource.Table(settings.counters_table)

    # ── Async wrappers ────────────────────────────────────────────────────

    async def call(self, fn: Callable[..., Any], **kwargs: Any) -> Any:
        """Runs one blocking boto3 call in the threadpool."""
        return await run_in_threadpool(fn, **kwargs)

    async def scan_all(self, table: Any, **kwargs: Any) -> List[Dict[str, Any]]:
        """
        Scans a whole table, following LastEvaluatedKey until exhausted.

        Extra kwargs (FilterExpression, ProjectionExpression, ...) are passed to
        every page request. Items are returned with Decimals converted.
        """
        items: List[Dict[str, Any]] = []
        request = dict(kwargs)
        while True:
            page = await self.call(table.scan, **request)
            items.extend(page.get("Items", []))
            last_key = page.get("LastEvaluatedKey")
            if not last_key:
                break
            request["ExclusiveStartKey"] = last_key
        return from_dynamo(items)

    async def get(self, table: Any, key: Dict[str, Any], **kwargs: Any) -> Optional[Dict[str, Any]]:
        """Point lookup by primary key; None when the item is absent."""
        response = await self.call(table.get_item, Key=key, **kwargs)
        item = response.get("Item")
        return from_dynamo(item) if item is not None else None

    # ── Provisioning ──────────────────────────────────────────────────────

    def create_tables(self) -> List[str]:
        """
        Creates every missing table (on-demand billing) and waits for it.

        Returns the names of the tables that were created. Used for DynamoDB
        Local, tests, and `create_tables_on_startup`.
        """
        existing = set(self.client.list_tables().get("TableNames", []))
        created = []
        for attr, (key_name, key_type) in TABLE_KEYS.items():
            name = getattr(self.settings, attr)
            if name in existing:
                continue
            self.client.create_table(
                TableName=name,
                KeySchema=[{"AttributeName": key_name, "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": key_name, "AttributeType": key_type}],
                BillingMode="PAY_PER_REQUEST",
            )
            self.client.get_waiter("table_exists").wait(TableName=name)
            logger.info("Created DynamoDB table %s", name)
            created.append(name)
        return created

    async def ping(self) -> bool:
        """Lightweight connectivity check (DescribeTable on Users)."""
        try:
            await self.call(self.client.describe_table, TableName=self.settings.users_table)
            return True
        except STORE_ERRORS as e:
            logger.warning("Store ping failed: %s", str(e))
            return False


# ── Dependency ────────────────────────────────────────────────────────────
def get_store(request: Request) -> DynamoStore:
    """
    FastAPI dependency returning the store created in the app lifespan.

    Tests replace it through `app.dependency_overrides[get_store]`.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreError(message="The data store is not initialized.")
    return store
