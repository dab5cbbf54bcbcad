"""In-memory TTL cache and memoization wrapper for host-side loaders.

The engine itself never caches. Callers wrap loaders or computations with
``memoize`` so identical inputs within the expiry window reuse the result.
"""

import functools
import threading
import time
from collections.abc import Callable
from typing import Any

from finexplorer.domain.constants import CACHE_EXPIRY_SECONDS

_MISSING = object()


class TTLCache:
    """Thread-safe in-memory cache with time-to-live expiry.

    Entries expire ``ttl_seconds`` after being stored. At most ``maxsize``
    entries are kept; when full, the entry expiring soonest is evicted.
    """

    def __init__(
        self,
        maxsize: int = 128,
        ttl_seconds: float = CACHE_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialise the cache.

        Args:
            maxsize: Maximum number of entries to store.
            ttl_seconds: Seconds before a cached entry expires.
            clock: Monotonic time source.
        """
        self._maxsize = maxsize
        self._ttl = ttl_seconds
        self._clock = clock
        # key -> (value, expires_at)
        self._store: dict[Any, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the cached value for ``key``, or ``default``."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return default
            value, expires_at = entry
            if self._clock() > expires_at:
                del self._store[key]
                self._misses += 1
                return default
            self._hits += 1
            return value

    def set(self, key: Any, value: Any) -> None:
        expires_at = self._clock() + self._ttl
        with self._lock:
            if key not in self._store and len(self._store) >= self._maxsize:
                oldest_key = min(self._store, key=lambda k: self._store[k][1])
                del self._store[oldest_key]
            self._store[key] = (value, expires_at)

    def delete(self, key: Any) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, int]:
        """Return hit, miss and size counters, purging expired entries."""
        with self._lock:
            now = self._clock()
            expired = [k for k, (_, exp) in self._store.items() if now > exp]
            for k in expired:
                del self._store[k]
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._store),
            }


def memoize(
    cache: TTLCache,
    key: Callable[..., Any] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate a function so its results are stored in ``cache``.

    Args:
        cache: Cache receiving the results.
        key: Builds the cache key from the call arguments. Defaults to the
            function name with positional and sorted keyword arguments,
            which must then be hashable.

    Returns:
        Decorator returning the memoized function.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = (
                key(*args, **kwargs)
                if key is not None
                else (func.__qualname__, args, tuple(sorted(kwargs.items())))
            )
            cached = cache.get(cache_key, _MISSING)
            if cached is not _MISSING:
                return cached
            result = func(*args, **kwargs)
            cache.set(cache_key, result)
            return result

        wrapper.cache = cache
        return wrapper

    return decorator


__all__ = ["TTLCache", "memoize"]
