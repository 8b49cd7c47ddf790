"""
ReviewShare Backend — Bearer Token Dependencies
================================================

What:  FastAPI dependencies guarding the protected routes.
How:   `get_current_user` reads `Authorization: Bearer <token>`, verifies the
       JWT and returns the caller's identity. Any failure raises
       AuthenticationError, which the global handler turns into a 401 with
       `WWW-Authenticate: Bearer`; the route handler never runs.

Usage:
    @router.post("/save")
    async def save(user: CurrentUser = Depends(get_current_user)):
        ...
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header

from reviewshare import security
from reviewshare.exceptions import AuthenticationError, PermissionDeniedError


@dataclass(frozen=True)
class CurrentUser:
    user_id: str


def _extract_bearer_token(authorization: Optional[str]) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise AuthenticationError("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise AuthenticationError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise AuthenticationError("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(access_token: str = Depends(get_bearer_token)) -> CurrentUser:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise AuthenticationError(str(exc)) from exc
    return CurrentUser(user_id=str(payload["sub"]))


def ensure_same_user(current_user: CurrentUser, username: str) -> None:
    """Rejects requests that name a user other than the token's subject."""
    if current_user.user_id != username:
        raise PermissionDeniedError(
            message="You can only access your own saved reviews",
            context={"token_user": current_user.user_id, "requested_user": username},
        )
