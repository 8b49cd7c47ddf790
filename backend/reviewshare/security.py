"""
ReviewShare Backend — Password and Token Helpers
=================================================

What:  bcrypt password hashing, HS256 access tokens (PyJWT) and one-time
       confirmation codes.
Who:   Used by UserService (register/login/confirm) and the auth dependency.

Token payload:
    {"sub": <UserId>, "type": "access", "iat": <epoch>, "exp": <epoch>}
"""

import hashlib
import hmac
import secrets
import time
from typing import Any, Dict

import bcrypt
import jwt

from reviewshare.config import settings


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    if len(password) > 72:
        raise AuthSecurityError("Password is longer than 72 bytes.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(user_id: str) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + settings.access_token_expire_minutes * 60

    payload = {
        "sub": user_id,
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    if str(payload.get("type") or "").lower() != "access":
        raise AuthSecurityError("Token is not an access token.")
    if not str(payload.get("sub") or "").strip():
        raise AuthSecurityError("Invalid access token subject.")
    return payload


def build_confirmation_code() -> str:
    # 6 digits, zero padded
    return f"{secrets.randbelow(1_000_000):06d}"


def hash_confirmation_code(code: str) -> str:
    raw = (code or "").strip().encode("utf-8")
    if not raw:
        raise AuthSecurityError("Confirmation code is empty.")
    return hashlib.sha256(raw).hexdigest()


def confirmation_code_matches(code: str, code_hash: str) -> bool:
    if not code or not code_hash:
        return False
    return hmac.compare_digest(hash_confirmation_code(code), code_hash)
