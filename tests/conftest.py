"""
Test configuration for Interprep tests.

Provides an in-memory database, fake AI providers and signed identity tokens.
"""
# Set test environment variables BEFORE any imports that might use them
import os
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("IDENTITY_JWT_SECRET", "test-identity-secret")
os.environ.setdefault("IDENTITY_JWT_ALGORITHM", "HS256")
os.environ.setdefault("DEFAULT_TIMEZONE", "Asia/Dhaka")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from typing import List, Optional, Union
from fastapi.testclient import TestClient
from jose import jwt
from app.config import get_settings
from app.services.ai.base import BaseAIProvider
from app.services.ai.gateway import AIGateway
from app.services.database_service import DatabaseService

TEST_OWNER_ID = "user_test_123"
OTHER_OWNER_ID = "user_other_456"


class FakeProvider(BaseAIProvider):
    """
    Scripted provider. Each call consumes the next item of ``responses``;
    an Exception item is raised instead of returned. The last item repeats.
    """

    def __init__(self, name: str, responses: List[Union[str, Exception]] = None, supports_streaming: bool = False):
        super().__init__({"temperature": 0.7, "max_tokens": 1024})
        self.name = name
        self.supports_streaming = supports_streaming
        self.responses = list(responses or ["ok"])
        self.calls = []

    def _next(self):
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def generate_content(
        self,
        prompt: str,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        self.calls.append({
            "prompt": prompt,
            "prefer_fast": prefer_fast,
            "temperature": temperature,
            "max_tokens": max_tokens
        })
        return self._next()

    async def generate_streaming_content(self, prompt, on_chunk, prefer_fast=False, temperature=None, max_tokens=None):
        if not self.supports_streaming:
            return await super().generate_streaming_content(prompt, on_chunk)
        self.calls.append({"prompt": prompt, "prefer_fast": prefer_fast, "stream": True})
        text = self._next()
        for word in text.split(" "):
            on_chunk(word)


def make_token(owner_id: str = TEST_OWNER_ID, email: str = "test@example.com", name: str = "Test User", **claims) -> str:
    settings = get_settings()
    payload = {"sub": owner_id, "email": email, "name": name}
    payload.update(claims)
    return jwt.encode(payload, settings.IDENTITY_JWT_SECRET, algorithm=settings.IDENTITY_JWT_ALGORITHM)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Make sure settings pick up the test environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database_service():
    """Fresh in-memory database per test."""
    service = DatabaseService(database_url="sqlite://")
    service.initialize()
    yield service
    service.dispose()


@pytest.fixture
def db_session(database_service):
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def primary_provider():
    return FakeProvider("groq", ["Great answer. What motivates you in this role?"], supports_streaming=True)


@pytest.fixture
def fallback_provider():
    return FakeProvider("gemini", ["Fallback reply"])


@pytest.fixture
def ai_gateway(primary_provider, fallback_provider):
    return AIGateway(
        {"groq": primary_provider, "gemini": fallback_provider},
        primary_provider="groq",
        fallback_provider="gemini"
    )


@pytest.fixture
def client(database_service, ai_gateway):
    """Test client for an app wired to the test database and fake providers."""
    from app.main import create_app

    app = create_app(get_settings(), database_service=database_service, ai_gateway=ai_gateway)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_OWNER_ID, email='other@example.com', name='Other User')}"}
