"""
ReviewShare Backend — User Service
===================================

What:  Data access for the Users and Profiles tables: registration with
       confirmation codes, login, and the per-profile saved-review list.
How:   Every method receives the injected DynamoStore. Store failures are
       logged and re-raised as StoreError with a fixed message; domain
       outcomes (conflict, not found, bad code) raise their own exceptions.
Who:   Called by the /users route handlers.

Conditional writes:
    register        PutItem  attribute_not_exists(UserId)
                    → a taken UserId is a ConflictError, never an overwrite
    unsave          REMOVE saved[i]  guarded by  saved[i] = :reviewId
                    → a list that changed since it was read is re-read
                      (settings.unsave_attempts), then ConflictError
"""

import logging
from datetime import datetime, timezone
from typing import List

from botocore.exceptions import ClientError
from starlette.concurrency import run_in_threadpool

from reviewshare import security
from reviewshare.config import settings
from reviewshare.exceptions import ConflictError, NotFoundError, ValidationError
from reviewshare.schemas.common import ActionResponse
from reviewshare.schemas.user import LoginResponse, UserSummary
from reviewshare.services.code_sender import ConfirmationCodeSender
from reviewshare.store import STORE_ERRORS, DynamoStore, is_conditional_failure, store_failure

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid UserId or Password"


class UserService:
    """
    Business logic layer for users and profiles.

    Responsibilities:
        - get_all_users() / check_user_exists()
        - register_user() / confirm_registration() / resend_confirmation_code()
        - login_user()
        - save_review() / unsave_review() / get_user_saved_reviews()
    """

    # ── Users ─────────────────────────────────────────────────────────────

    async def get_all_users(self, store: DynamoStore) -> List[UserSummary]:
        """Full scan of Users projecting only public attributes."""
        try:
            items = await store.scan_all(
                store.users,
                ProjectionExpression="#uid, #confirmed, #created",
                ExpressionAttributeNames={
                    "#uid": "UserId",
                    "#confirmed": "Confirmed",
                    "#created": "CreatedAt",
                },
            )
        except STORE_ERRORS as e:
            raise store_failure("Could not fetch users", e, operation="get_all_users") from e
        return [UserSummary.model_validate(item) for item in items]

    async def check_user_exists(self, store: DynamoStore, user_id: str) -> bool:
        try:
            item = await store.get(
                store.users,
                {"UserId": user_id},
                ProjectionExpression="#uid",
                ExpressionAttributeNames={"#uid": "UserId"},
            )
        except STORE_ERRORS as e:
            raise store_failure(
                "Error checking if user exists", e, operation="check_user_exists", user_id=user_id
            ) from e
        return bool(item)

    async def register_user(
        self,
        store: DynamoStore,
        user_id: str,
        password: str,
        code_sender: ConfirmationCodeSender,
    ) -> ActionResponse:
        """
        Creates the user (bcrypt hash, never plaintext) and an empty profile.

        When `settings.require_email_confirmation` is on, the account starts
        unconfirmed and a one-time code is handed to `code_sender`; only the
        code's SHA-256 hash is stored.

        Raises:
            ValidationError: The password is empty or too long for bcrypt.
            ConflictError: The UserId is already registered.
            StoreError: A DynamoDB call failed.
        """
        try:
            password_hash = await run_in_threadpool(security.hash_password, password)
        except security.AuthSecurityError as e:
            raise ValidationError(message=str(e), field="Password") from e
        require_confirmation = settings.require_email_confirmation

        item = {
            "UserId": user_id,
            "PasswordHash": password_hash,
            "Confirmed": not require_confirmation,
            "CreatedAt": datetime.now(timezone.utc).isoformat(),
        }
        code = None
        if require_confirmation:
            code = security.build_confirmation_code()
            item["ConfirmationCodeHash"] = security.hash_confirmation_code(code)
            item["ConfirmationExpiresAt"] = self._code_expiry()

        try:
            await store.call(
                store.users.put_item,
                Item=item,
                ConditionExpression="attribute_not_exists(#uid)",
                ExpressionAttributeNames={"#uid": "UserId"},
            )
        except ClientError as e:
            if is_conditional_failure(e):
                raise ConflictError(message="User already exists", context={"user_id": user_id})
            raise store_failure("Could not register user", e, operation="register_user") from e
        except STORE_ERRORS as e:
            raise store_failure("Could not register user", e, operation="register_user") from e

        await self._ensure_profile(store, user_id)
        logger.info("Registered user %s (confirmed=%s)", user_id, not require_confirmation)

        if code is not None:
            await code_sender.send_code(user_id, code)
            return ActionResponse(
                success=True,
                message="User registered successfully! Check your confirmation code.",
            )
        return ActionResponse(success=True, message="User registered successfully!")

    async def _ensure_profile(self, store: DynamoStore, user_id: str) -> None:
        try:
            await store.call(
                store.profiles.put_item,
                Item={"userName": user_id, "saved": []},
                ConditionExpression="attribute_not_exists(#name)",
                ExpressionAttributeNames={"#name": "userName"},
            )
        except ClientError as e:
            if is_conditional_failure(e):
                return  # profile left over from an earlier account, keep it
            raise store_failure("Could not register user", e, operation="create_profile") from e
        except STORE_ERRORS as e:
            raise store_failure("Could not register user", e, operation="create_profile") from e

    def _code_expiry(self) -> int:
        return security.now_epoch_s() + settings.confirmation_code_ttl_minutes * 60

    async def confirm_registration(
        self, store: DynamoStore, user_id: str, code: str
    ) -> ActionResponse:
        """
        Marks the user confirmed when `code` matches the stored, unexpired hash.

        Confirming an already confirmed user succeeds without changes.

        Raises:
            NotFoundError: Unknown UserId.
            ValidationError: Wrong or expired code.
        """
        try:
            item = await store.get(store.users, {"UserId": user_id}, ConsistentRead=True)
        except STORE_ERRORS as e:
            raise store_failure("Could not confirm user", e, operation="confirm_registration") from e

        if item is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        if item.get("Confirmed", True):
            return ActionResponse(success=True, message="User is already confirmed")

        code_hash = str(item.get("ConfirmationCodeHash") or "")
        if int(item.get("ConfirmationExpiresAt") or 0) < security.now_epoch_s():
            raise ValidationError(message="Confirmation code has expired", field="code")
        if not security.confirmation_code_matches(code, code_hash):
            raise ValidationError(message="Invalid confirmation code", field="code")

        try:
            await store.call(
                store.users.update_item,
                Key={"UserId": user_id},
                UpdateExpression="SET #confirmed = :true REMOVE #hash, #expires",
                ConditionExpression="#hash = :hash",
                ExpressionAttributeNames={
                    "#confirmed": "Confirmed",
                    "#hash": "ConfirmationCodeHash",
                    "#expires": "ConfirmationExpiresAt",
                },
                ExpressionAttributeValues={":true": True, ":hash": code_hash},
            )
        except ClientError as e:
            if is_conditional_failure(e):
                # a new code was issued in the meantime
                raise ValidationError(message="Invalid confirmation code", field="code")
            raise store_failure("Could not confirm user", e, operation="confirm_registration") from e
        except STORE_ERRORS as e:
            raise store_failure("Could not confirm user", e, operation="confirm_registration") from e

        logger.info("User %s confirmed", user_id)
        return ActionResponse(success=True, message="User confirmed successfully!")

    async def resend_confirmation_code(
        self,
        store: DynamoStore,
        user_id: str,
        code_sender: ConfirmationCodeSender,
    ) -> ActionResponse:
        """Replaces the pending code of an unconfirmed user with a fresh one."""
        try:
            item = await store.get(store.users, {"UserId": user_id}, ConsistentRead=True)
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not resend confirmation code", e, operation="resend_confirmation_code"
            ) from e

        if item is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        if item.get("Confirmed", True):
            raise ValidationError(message="User is already confirmed")

        code = security.build_confirmation_code()
        try:
            await store.call(
                store.users.update_item,
                Key={"UserId": user_id},
                UpdateExpression="SET #hash = :hash, #expires = :expires",
                ConditionExpression="attribute_exists(#uid)",
                ExpressionAttributeNames={
                    "#uid": "UserId",
                    "#hash": "ConfirmationCodeHash",
                    "#expires": "ConfirmationExpiresAt",
                },
                ExpressionAttributeValues={
                    ":hash": security.hash_confirmation_code(code),
                    ":expires": self._code_expiry(),
                },
            )
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not resend confirmation code", e, operation="resend_confirmation_code"
            ) from e

        await code_sender.send_code(user_id, code)
        return ActionResponse(success=True, message="Confirmation code sent")

    async def login_user(self, store: DynamoStore, user_id: str, password: str) -> LoginResponse:
        """
        Verifies the password against the stored bcrypt hash.

        Unknown users and wrong passwords get the same failure message.
        A successful login carries a bearer access token.
        """
        try:
            item = await store.get(store.users, {"UserId": user_id})
        except STORE_ERRORS as e:
            raise store_failure("Could not log in user", e, operation="login_user") from e

        if item is None:
            return LoginResponse(success=False, message=INVALID_CREDENTIALS)

        is_valid = await run_in_threadpool(
            security.verify_password, password, str(item.get("PasswordHash") or "")
        )
        if not is_valid:
            return LoginResponse(success=False, message=INVALID_CREDENTIALS)

        if settings.require_email_confirmation and not item.get("Confirmed", True):
            return LoginResponse(success=False, message="User is not confirmed")

        return LoginResponse(
            success=True,
            message="Login successful!",
            access_token=security.build_access_token(user_id),
            token_type="bearer",
        )

    # ── Saved list ────────────────────────────────────────────────────────

    async def save_review(self, store: DynamoStore, username: str, review_id: int) -> List[int]:
        """
        Appends `review_id` to the profile's saved list and returns the list.

        The list (and the profile) is created when absent. Saving an id twice
        stores it twice.
        """
        try:
            response = await store.call(
                store.profiles.update_item,
                Key={"userName": username},
                UpdateExpression="SET #saved = list_append(if_not_exists(#saved, :empty), :new)",
                ExpressionAttributeNames={"#saved": "saved"},
                ExpressionAttributeValues={":empty": [], ":new": [review_id]},
                ReturnValues="UPDATED_NEW",
            )
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not save the review.", e, operation="save_review", username=username
            ) from e

        logger.info("Review %d added to %s's saved list", review_id, username)
        saved = response.get("Attributes", {}).get("saved", [])
        return [int(v) for v in saved]

    async def get_user_saved_reviews(self, store: DynamoStore, username: str) -> List[int]:
        """
        Returns the saved list in append order ([] when never saved).

        Raises:
            NotFoundError: The profile does not exist.
        """
        try:
            item = await store.get(
                store.profiles,
                {"userName": username},
                ProjectionExpression="#saved",
                ExpressionAttributeNames={"#saved": "saved"},
                ConsistentRead=True,
            )
        except STORE_ERRORS as e:
            raise store_failure(
                "Could not retrieve saved reviews.", e, operation="get_user_saved_reviews"
            ) from e

        if item is None:
            raise NotFoundError(message=f"User {username} not found.", resource="profile",
                                resource_id=username)
        return [int(v) for v in item.get("saved", [])]

    async def unsave_review(self, store: DynamoStore, username: str, review_id: int) -> ActionResponse:
        """
        Removes the first occurrence of `review_id` from the saved list.

        The positional REMOVE only applies if that position still holds
        `review_id`; otherwise the list is re-read.

        Raises:
            NotFoundError: `review_id` is not in the list (list unchanged).
            ConflictError: The list kept changing for every attempt.
        """
        attempts = store.settings.unsave_attempts
        for attempt in range(1, attempts + 1):
            saved = await self.get_user_saved_reviews(store, username)
            if review_id not in saved:
                raise NotFoundError(
                    message="Review not found in the saved list.",
                    resource="saved review",
                    resource_id=review_id,
                )
            index = saved.index(review_id)

            try:
                await store.call(
                    store.profiles.update_item,
                    Key={"userName": username},
                    UpdateExpression=f"REMOVE #saved[{index}]",
                    ConditionExpression=f"#saved[{index}] = :rid",
                    ExpressionAttributeNames={"#saved": "saved"},
                    ExpressionAttributeValues={":rid": review_id},
                )
            except ClientError as e:
                if not is_conditional_failure(e):
                    raise store_failure("Could not unsave review", e, operation="unsave_review") from e
                logger.warning(
                    "Saved list of %s changed during unsave (attempt %d/%d)",
                    username, attempt, attempts,
                )
                continue
            except STORE_ERRORS as e:
                raise store_failure("Could not unsave review", e, operation="unsave_review") from e

            return ActionResponse(
                success=True,
                message=f"Review with id {review_id} unsaved successfully",
            )

        raise ConflictError(
            message="The saved list changed while unsaving. Please retry.",
            context={"username": username, "review_id": review_id},
        )


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; the store is passed to every call
user_service = UserService()
