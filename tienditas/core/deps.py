"""Dependency injection for FastAPI routes."""

from collections.abc import AsyncGenerator
from typing import Annotated

import redis.asyncio as aioredis
from fastapi import Depends, Header, HTTPException, Request, status

from tienditas.core.config import settings
from tienditas.core.logging_config import store_id_var
from tienditas.schemas.store import StoreCollection, StoreRecord
from tienditas.services.chat_service import ChatSessionRegistry
from tienditas.services.editor_service import AdminSession, AdminSessionRegistry
from tienditas.services.palette_service import PaletteService
from tienditas.services.store_repository import StoreRepository
from tienditas.services.storefront_service import StorefrontService

DEFAULT_ADMIN_SESSION = "default"

# Shared Redis connection pool
_redis_pool: aioredis.ConnectionPool | None = None


def _get_redis_pool() -> aioredis.ConnectionPool:
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.ConnectionPool.from_url(
            str(settings.redis_url), decode_responses=True
        )
    return _redis_pool


async def get_redis() -> AsyncGenerator[aioredis.Redis, None]:
    """Yield a Redis client from the shared connection pool."""
    pool = _get_redis_pool()
    r = aioredis.Redis(connection_pool=pool)
    try:
        yield r
    finally:
        await r.aclose()


RedisClient = Annotated[aioredis.Redis, Depends(get_redis)]


def get_repository(redis: RedisClient) -> StoreRepository:
    return StoreRepository(redis)


Repository = Annotated[StoreRepository, Depends(get_repository)]


# === Process-wide state kept on app.state ===


def get_admin_sessions(request: Request) -> AdminSessionRegistry:
    return request.app.state.admin_sessions


def get_chat_sessions(request: Request) -> ChatSessionRegistry:
    return request.app.state.chat_sessions


def get_storefront(request: Request) -> StorefrontService:
    return request.app.state.storefront


def get_palette_service() -> PaletteService:
    return PaletteService()


ChatSessions = Annotated[ChatSessionRegistry, Depends(get_chat_sessions)]
Storefront = Annotated[StorefrontService, Depends(get_storefront)]
Palette = Annotated[PaletteService, Depends(get_palette_service)]


async def get_admin_session(
    repository: Repository,
    registry: AdminSessionRegistry = Depends(get_admin_sessions),
    x_admin_session: str | None = Header(default=None),
) -> AdminSession:
    """Admin session named by the ``X-Admin-Session`` header.

    The first request of a session loads the committed collection as its
    baseline.
    """
    session_id = (x_admin_session or "").strip() or DEFAULT_ADMIN_SESSION
    return await registry.get_or_create(session_id, repository)


CurrentAdminSession = Annotated[AdminSession, Depends(get_admin_session)]


async def get_committed_collection(repository: Repository) -> StoreCollection:
    return await repository.load()


CommittedCollection = Annotated[StoreCollection, Depends(get_committed_collection)]


async def get_committed_store(store_id: str, collection: CommittedCollection) -> StoreRecord:
    """Committed store named by the ``store_id`` path parameter.

    Used by the JSON storefront endpoints (chat, order link), which answer
    unknown stores with a 404.
    """
    store = collection.get(store_id)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Store not found",
        )
    store_id_var.set(store_id)
    return store


CommittedStore = Annotated[StoreRecord, Depends(get_committed_store)]


__all__ = [
    "ChatSessions",
    "CommittedCollection",
    "CommittedStore",
    "CurrentAdminSession",
    "Palette",
    "RedisClient",
    "Repository",
    "Storefront",
    "get_admin_session",
    "get_admin_sessions",
    "get_chat_sessions",
    "get_committed_collection",
    "get_committed_store",
    "get_palette_service",
    "get_redis",
    "get_repository",
    "get_storefront",
]
