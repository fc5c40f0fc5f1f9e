"""Cache protocols: the contract the remote tier must satisfy."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IRemoteCache(Protocol):
    """Protocol for the optional remote key-value tier.

    Implementations raise ``CacheBackendError`` on transport or decoding
    failures; the cache manager decides whether to swallow them.
    """

    async def get(self, key: str) -> Any | None:
        """Retrieve a value by key. Returns None on miss (the store handles TTL)."""
        ...

    async def set(self, key: str, value: Any, *, ttl_seconds: float = 0) -> None:
        """Store a JSON-serializable value with optional TTL.

        Args:
            key: Cache key, without the backend's namespace prefix.
            value: JSON-serializable value.
            ttl_seconds: Time-to-live in seconds. 0 = no expiry.
        """
        ...

    async def delete(self, *keys: str) -> int:
        """Remove keys. Returns the number removed."""
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern. Returns the number removed."""
        ...

    async def close(self) -> None:
        """Release the underlying connection pool."""
        ...
