"""
Key-value persistence used for templates, provider configs, users and sessions.

The core only depends on the ``KeyValueStore`` protocol; the backend is
chosen from settings (in-process dict or Redis).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import redis.asyncio as aioredis
import structlog

from promptforge.config import Settings, StorageBackend

logger = structlog.stdlib.get_logger()


@runtime_checkable
class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def close(self) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def close(self) -> None:
        return None


class RedisKeyValueStore:
    """Redis-backed store; every key is namespaced with ``key_prefix``."""

    def __init__(self, redis_url: str, key_prefix: str = "promptforge:") -> None:
        self._redis: aioredis.Redis = aioredis.from_url(redis_url, decode_responses=True)
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        return await self._redis.get(self._key(key))

    async def set(self, key: str, value: str) -> None:
        await self._redis.set(self._key(key), value)

    async def remove(self, key: str) -> None:
        await self._redis.delete(self._key(key))

    async def close(self) -> None:
        await self._redis.aclose()


def create_store(settings: Settings) -> KeyValueStore:
    storage = settings.storage
    if storage.backend == StorageBackend.REDIS:
        logger.info("storage.backend", backend="redis", url=storage.redis_url.split("@")[-1])
        return RedisKeyValueStore(storage.redis_url, storage.key_prefix)
    logger.info("storage.backend", backend="memory")
    return InMemoryKeyValueStore()
