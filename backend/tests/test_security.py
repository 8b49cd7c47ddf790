"""
ReviewShare Backend — Password and Token Tests
===============================================

What we test:
    ✅ bcrypt hashing round trip, wrong and malformed hashes
    ✅ Access tokens carry the subject and expire
    ✅ Tampered, foreign-secret and non-access tokens are rejected
    ✅ Confirmation code format and comparison
"""

import jwt
import pytest

from reviewshare import security
from reviewshare.config import settings


class TestPasswords:

    def test_hash_verifies(self):
        hashed = security.hash_password("hunter2-hunter2")

        assert hashed != "hunter2-hunter2"
        assert security.verify_password("hunter2-hunter2", hashed) is True
        assert security.verify_password("hunter3-hunter3", hashed) is False

    def test_same_password_hashes_differently(self):
        assert security.hash_password("same-password") != security.hash_password("same-password")

    def test_empty_password_cannot_be_hashed(self):
        with pytest.raises(security.AuthSecurityError):
            security.hash_password("")

    def test_password_over_72_bytes_cannot_be_hashed(self):
        with pytest.raises(security.AuthSecurityError):
            security.hash_password("x" * 80)
        with pytest.raises(security.AuthSecurityError):
            security.hash_password("\u00e9" * 37)

    def test_malformed_hash_does_not_verify(self):
        assert security.verify_password("anything", "not-a-bcrypt-hash") is False
        assert security.verify_password("anything", "") is False


class TestAccessTokens:

    def test_token_round_trip(self):
        payload = security.decode_access_token(security.build_access_token("alice"))

        assert payload["sub"] == "alice"
        assert payload["type"] == "access"
        assert payload["exp"] - payload["iat"] == settings.access_token_expire_minutes * 60

    def test_expired_token_rejected(self, monkeypatch):
        monkeypatch.setattr(security, "now_epoch_s", lambda: 1_000)
        token = security.build_access_token("alice")
        monkeypatch.undo()

        with pytest.raises(security.AuthSecurityError, match="expired"):
            security.decode_access_token(token)

    def test_foreign_secret_rejected(self):
        token = jwt.encode(
            {"sub": "alice", "type": "access", "iat": 0, "exp": 4_102_444_800},
            "some-other-secret-entirely-0123456789",
            algorithm="HS256",
        )

        with pytest.raises(security.AuthSecurityError):
            security.decode_access_token(token)

    def test_non_access_token_rejected(self):
        token = jwt.encode(
            {"sub": "alice", "type": "refresh", "iat": 0, "exp": 4_102_444_800},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(security.AuthSecurityError, match="not an access token"):
            security.decode_access_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(security.AuthSecurityError):
            security.decode_access_token("abc.def.ghi")
        with pytest.raises(security.AuthSecurityError):
            security.decode_access_token("   ")


class TestConfirmationCodes:

    def test_code_is_six_digits(self):
        for _ in range(20):
            code = security.build_confirmation_code()
            assert len(code) == 6 and code.isdigit()

    def test_code_matches_its_hash_only(self):
        code_hash = security.hash_confirmation_code("123456")

        assert security.confirmation_code_matches("123456", code_hash) is True
        assert security.confirmation_code_matches("654321", code_hash) is False
        assert security.confirmation_code_matches("", code_hash) is False
        assert security.confirmation_code_matches("123456", "") is False
