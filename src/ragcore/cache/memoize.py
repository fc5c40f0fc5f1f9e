"""Explicit memoization combinator over :class:`CacheManager`."""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ragcore.cache.keys import compute_args_key
from ragcore.cache.manager import CacheManager
from ragcore.cache.models import CacheCategory

T = TypeVar("T")


def memoize(
    fn: Callable[..., Awaitable[T]],
    *,
    cache: CacheManager,
    ttl_seconds: float | None = None,
    key_fn: Callable[..., str] | None = None,
    category: CacheCategory = CacheCategory.CHAT_RESPONSES,
) -> Callable[..., Awaitable[T]]:
    """Wrap an async function so results are served through ``cache``.

    Args:
        fn: Coroutine function to wrap. Its results must be JSON-serializable
            when a remote tier is configured.
        cache: Cache manager that stores the results.
        ttl_seconds: Entry TTL. None = the category default.
        key_fn: Builds the cache key from the call arguments. Defaults to a
            hash of the JSON-encoded arguments prefixed by ``fn``'s name.
        category: Namespace the results are stored in.

    Returns:
        A coroutine function with the same signature as ``fn``.
    """
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", "fn")

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        key = key_fn(*args, **kwargs) if key_fn is not None else compute_args_key(name, args, kwargs)
        return await cache.get_or_compute(
            key,
            lambda: fn(*args, **kwargs),
            ttl_seconds,
            category,
        )

    return wrapper
