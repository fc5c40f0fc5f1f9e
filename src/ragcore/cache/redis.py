"""Redis-backed remote cache tier using ``redis.asyncio``."""

from __future__ import annotations

import json
import math
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ragcore.exceptions import CacheBackendError


class RedisCache:
    """Async Redis cache with JSON values and a namespaced key space.

    The client is created lazily on first use so that constructing the
    cache never opens a connection. A pre-built client may be injected.
    """

    def __init__(
        self,
        url: str = "",
        *,
        key_prefix: str = "ragcore:",
        client: Any | None = None,
    ) -> None:
        self._url = url or "redis://localhost:6379"
        self._prefix = key_prefix
        self._client: Any | None = client

    def _get_client(self) -> Any:
        """Lazy-initialize the Redis async client."""
        if self._client is None:
            self._client = aioredis.from_url(self._url, decode_responses=True)
        return self._client

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Any | None:
        """Retrieve a cached value. Returns None on miss (Redis handles TTL)."""
        client = self._get_client()
        try:
            raw = await client.get(self._full_key(key))
        except (RedisError, OSError) as e:
            raise CacheBackendError(f"Redis GET failed for {key!r}: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise CacheBackendError(f"Corrupt cache value for {key!r}: {e}") from e

    async def set(self, key: str, value: Any, *, ttl_seconds: float = 0) -> None:
        """Store a value with optional TTL (Redis-native expiry)."""
        client = self._get_client()
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheBackendError(f"Value for {key!r} is not JSON-serializable: {e}") from e
        full_key = self._full_key(key)
        try:
            if ttl_seconds > 0:
                await client.setex(full_key, math.ceil(ttl_seconds), serialized)
            else:
                await client.set(full_key, serialized)
        except (RedisError, OSError) as e:
            raise CacheBackendError(f"Redis SET failed for {key!r}: {e}") from e

    async def delete(self, *keys: str) -> int:
        """Remove specific keys."""
        if not keys:
            return 0
        client = self._get_client()
        try:
            return int(await client.delete(*(self._full_key(k) for k in keys)))
        except (RedisError, OSError) as e:
            raise CacheBackendError(f"Redis DEL failed: {e}") from e

    async def delete_pattern(self, pattern: str) -> int:
        """Remove every namespaced key matching ``pattern`` (SCAN, then DEL)."""
        client = self._get_client()
        try:
            keys = []
            async for key in client.scan_iter(match=self._full_key(pattern)):
                keys.append(key)
            if keys:
                await client.delete(*keys)
        except (RedisError, OSError) as e:
            raise CacheBackendError(f"Redis pattern delete failed for {pattern!r}: {e}") from e
        return len(keys)

    async def close(self) -> None:
        """Close the client if one was created."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
