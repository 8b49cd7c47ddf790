"""
ReviewShare Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   DynamoDB is replaced by moto's in-memory mock (`mock_aws`); every test
       gets freshly created, empty tables. Confirmation codes are captured by
       a recording sender instead of being logged.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── store: DynamoStore over moto with all six tables created
    ├── code_sender: RecordingCodeSender
    ├── test_client: HTTPX AsyncClient wired to the store and sender
    ├── register_confirmed: coroutine factory creating a confirmed account
    └── auth_headers: factory for `Authorization: Bearer` headers
"""

import os

# Override settings BEFORE any reviewshare import; `settings` is built on import
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_REGION"] = "us-east-1"
os.environ.pop("DYNAMODB_ENDPOINT_URL", None)
os.environ["JWT_SECRET"] = "test-secret-not-for-production-use-0123456789"
os.environ["REQUIRE_EMAIL_CONFIRMATION"] = "true"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Dict, List, Optional, Tuple  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from moto import mock_aws  # noqa: E402

from reviewshare import security  # noqa: E402
from reviewshare.config import Settings  # noqa: E402
from reviewshare.services.code_sender import ConfirmationCodeSender  # noqa: E402
from reviewshare.services.user_service import user_service  # noqa: E402
from reviewshare.store import DynamoStore, get_store  # noqa: E402


class RecordingCodeSender(ConfirmationCodeSender):
    """Keeps every issued code in memory so tests can confirm accounts."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, str]] = []

    async def send_code(self, user_id: str, code: str) -> None:
        self.sent.append((user_id, code))

    def last_code_for(self, user_id: str) -> Optional[str]:
        for sent_to, code in reversed(self.sent):
            if sent_to == user_id:
                return code
        return None


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def store():
    """
    Provides a DynamoStore backed by moto with empty tables.

    Usage:
        async def test_add_review(store):
            result = await review_service.add_review(store, "alice", payload)
    """
    with mock_aws():
        dynamo_store = DynamoStore(Settings())
        dynamo_store.create_tables()
        yield dynamo_store


@pytest.fixture
def code_sender():
    return RecordingCodeSender()


@pytest.fixture
def register_confirmed(store, code_sender):
    """
    Registers and confirms an account through UserService.

    Usage:
        await register_confirmed("alice")
    """
    async def _register(user_id: str, password: str = "correct-horse-1") -> str:
        await user_service.register_user(store, user_id, password, code_sender)
        await user_service.confirm_registration(store, user_id, code_sender.last_code_for(user_id))
        return user_id

    return _register


@pytest.fixture
def auth_headers():
    def _headers(user_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {security.build_access_token(user_id)}"}

    return _headers


@pytest_asyncio.fixture
async def test_client(store, code_sender):
    """
    Provides an async HTTP test client for endpoint testing.

    The app's store dependency is overridden with the moto-backed store, so
    the lifespan (which would build a real store) is not needed.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from reviewshare.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.state.code_sender = code_sender
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
        app.state.code_sender = None
