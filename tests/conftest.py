"""Pytest configuration and fixtures for the Tienditas test suite.

Provides:
- Mock Redis (fakeredis) holding the store collection
- Disabled rate limiting
- An async client with Redis overridden and in-process sessions reset per test
- Patched ChatOpenAI for the chat assistant and the palette assistant
"""

import copy
from collections.abc import AsyncGenerator, AsyncIterator, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import fakeredis.aioredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from langchain_core.messages import AIMessage, AIMessageChunk

from tienditas.core.deps import get_redis
from tienditas.core.rate_limit import limiter
from tienditas.main import app
from tienditas.schemas.store import StoreCollection
from tienditas.services.seed_data import DEFAULT_STORES_DATA
from tienditas.services.store_repository import StoreRepository, default_collection

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False

TEST_STORAGE_KEY = "tienditas_test_stores"

VALID_PALETTE_JSON = (
    '{"primary": "#112233", "secondary": "#445566", "background": "#FAFAFA", '
    '"text": "#101010", "cardBackground": "#FFFFFF", "buttonText": "#000000"}'
)


# ---------------------------------------------------------------------------
# Fake Redis & repository
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Provide a fresh fakeredis instance per test."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def repository(fake_redis: fakeredis.aioredis.FakeRedis) -> StoreRepository:
    return StoreRepository(fake_redis, key=TEST_STORAGE_KEY)


@pytest.fixture
def stores_data() -> dict[str, Any]:
    """A mutable copy of the built-in collection in its stored (camelCase) form."""
    return copy.deepcopy(DEFAULT_STORES_DATA)


@pytest.fixture
def collection() -> StoreCollection:
    return default_collection()


# ---------------------------------------------------------------------------
# App client (overrides Redis, resets in-process sessions)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(
    fake_redis: fakeredis.aioredis.FakeRedis,
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client backed by fakeredis."""

    async def _override_redis() -> AsyncGenerator[fakeredis.aioredis.FakeRedis, None]:
        yield fake_redis

    app.dependency_overrides[get_redis] = _override_redis
    app.state.admin_sessions.clear()
    app.state.chat_sessions.clear()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.admin_sessions.clear()
    app.state.chat_sessions.clear()


# ---------------------------------------------------------------------------
# LLM mocks
# ---------------------------------------------------------------------------


def make_stream(*chunks: str, error: Exception | None = None) -> Any:
    """Build an ``astream`` replacement yielding the given chunks, then optionally failing."""

    def _astream(_messages: Any, *args: Any, **kwargs: Any) -> AsyncIterator[AIMessageChunk]:
        async def _gen() -> AsyncIterator[AIMessageChunk]:
            for chunk in chunks:
                yield AIMessageChunk(content=chunk)
            if error is not None:
                raise error

        return _gen()

    return _astream


@pytest.fixture
def mock_chat_llm() -> Generator[MagicMock, None, None]:
    """Patch ChatOpenAI in the chat service with a streaming mock.

    Usage:
        def test_something(mock_chat_llm):
            mock_chat_llm.astream = make_stream("Hola", " amigo")
    """
    with patch("tienditas.services.chat_service.ChatOpenAI") as mock_class:
        mock_llm = MagicMock()
        mock_llm.astream = MagicMock(side_effect=make_stream("¡Hola!", " ¿En qué te ayudo?"))
        mock_class.return_value = mock_llm
        yield mock_llm


@pytest.fixture
def mock_palette_llm() -> Generator[MagicMock, None, None]:
    """Patch ChatOpenAI in the palette service to answer with a valid palette."""
    with patch("tienditas.services.palette_service.ChatOpenAI") as mock_class:
        mock_llm = MagicMock()
        mock_llm.ainvoke = AsyncMock(return_value=AIMessage(content=VALID_PALETTE_JSON))
        mock_class.return_value = mock_llm
        yield mock_llm
