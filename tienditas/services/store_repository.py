"""Persistence of the store collection as a single JSON document in Redis."""

import copy
import json
import logging
from typing import Any

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import RedisError

from tienditas.core.config import settings
from tienditas.schemas.store import (
    StoreCollection,
    StoreRecord,
    dump_collection,
    validate_collection,
)
from tienditas.services.seed_data import DEFAULT_STORES_DATA

logger = logging.getLogger(__name__)


def default_collection() -> StoreCollection:
    """Return a fresh, independent copy of the built-in collection."""
    return validate_collection(copy.deepcopy(DEFAULT_STORES_DATA))


class StoreRepository:
    """Loads and saves the whole store collection under one storage key.

    Storage failures never propagate: reads fall back to the built-in
    collection and writes report ``False`` so the caller keeps its in-memory
    state for the rest of the session.
    """

    def __init__(self, redis: aioredis.Redis, key: str | None = None) -> None:
        self.redis = redis
        self.key = key or settings.storage_key

    async def load(self) -> StoreCollection:
        """Return the persisted collection, seeding storage on first run."""
        try:
            raw = await self.redis.get(self.key)
            if raw is None:
                return await self._seed()
            data = json.loads(raw)
        except RedisError:
            logger.exception("Failed to read store collection from %s", self.key)
            return default_collection()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.exception("Stored collection under %s is not valid JSON", self.key)
            return default_collection()

        return self._parse(data)

    async def save(self, collection: StoreCollection) -> bool:
        """Replace the persisted collection. Returns whether the write succeeded."""
        try:
            payload = json.dumps(dump_collection(collection), ensure_ascii=False)
            await self.redis.set(self.key, payload)
        except RedisError:
            logger.exception("Failed to save store collection to %s", self.key)
            return False
        except (TypeError, ValueError):
            logger.exception("Failed to serialize store collection")
            return False

        logger.info("Saved %d stores to %s", len(collection), self.key)
        return True

    async def _seed(self) -> StoreCollection:
        """Write the default collection unless another writer got there first."""
        payload = json.dumps(DEFAULT_STORES_DATA, ensure_ascii=False)
        created = await self.redis.set(self.key, payload, nx=True)
        if created:
            logger.info("Seeded %s with %d default stores", self.key, len(DEFAULT_STORES_DATA))
            return default_collection()

        raw = await self.redis.get(self.key)
        if raw is None:
            return default_collection()
        return self._parse(json.loads(raw))

    def _parse(self, data: Any) -> StoreCollection:
        """Validate a stored document record by record.

        Records that no longer validate are skipped so one broken store does
        not take the others down with it.
        """
        if not isinstance(data, dict):
            logger.warning("Stored collection under %s is not an object; using defaults", self.key)
            return default_collection()

        collection: StoreCollection = {}
        for store_id, record in data.items():
            try:
                collection[store_id] = StoreRecord.model_validate(record)
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid store %s: %d validation errors", store_id, e.error_count()
                )

        if data and not collection:
            logger.warning("No valid stores under %s; using defaults", self.key)
            return default_collection()

        return collection
