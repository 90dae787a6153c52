"""In-process TTL caches.

Each ``NamedCache`` wraps a ``cachetools.TTLCache`` of bounded size. When
the cache is full the least recently used entry is evicted; entries older
than the TTL are treated as absent. The ``CacheProvider`` owns the clock all
of its caches share so tests can drive expiry with a fake timer.

Cache failures never reach the caller: a failed read is reported as a miss
and a failed write or removal is logged and ignored.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from cachetools import TTLCache

from kinderhub.cache.cluster import ClusterEvent
from kinderhub.observability.metrics import record_cache_hit, record_cache_miss

logger = logging.getLogger(__name__)


class NamedCache:
    """A named, size-bounded key/value cache with a default TTL."""

    def __init__(
        self,
        name: str,
        max_size: int,
        ttl_seconds: float,
        invalidation_event: ClusterEvent,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.invalidation_event = invalidation_event
        self._data: TTLCache[str, Any] = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=timer)
        self._lock = threading.Lock()

    def get(self, key: str) -> tuple[Any, bool]:
        """Return ``(value, True)`` on a hit and ``(None, False)`` on a miss."""
        try:
            with self._lock:
                value = self._data[key]
        except KeyError:
            record_cache_miss(self.name)
            return None, False
        except Exception as e:
            logger.warning(f"Cache {self.name} get failed for {key!r}: {e}")
            record_cache_miss(self.name)
            return None, False

        record_cache_hit(self.name)
        return value, True

    def set(self, key: str, value: Any) -> None:
        try:
            with self._lock:
                self._data[key] = value
        except Exception as e:
            logger.warning(f"Cache {self.name} set failed for {key!r}: {e}")

    def remove(self, key: str) -> None:
        try:
            with self._lock:
                self._data.pop(key, None)
        except Exception as e:
            logger.warning(f"Cache {self.name} remove failed for {key!r}: {e}")

    def purge(self) -> None:
        try:
            with self._lock:
                self._data.clear()
        except Exception as e:
            logger.warning(f"Cache {self.name} purge failed: {e}")

    def __len__(self) -> int:
        with self._lock:
            self._data.expire()
            return len(self._data)

    def __repr__(self) -> str:
        return f"NamedCache(name={self.name!r}, max_size={self.max_size}, ttl={self.ttl_seconds})"


class CacheProvider:
    """Factory for named caches sharing one clock."""

    def __init__(self, timer: Callable[[], float] = time.monotonic):
        self._timer = timer
        self._caches: dict[str, NamedCache] = {}

    def new_cache(
        self,
        name: str,
        max_size: int,
        ttl_seconds: float,
        invalidation_event: ClusterEvent,
    ) -> NamedCache:
        if name in self._caches:
            raise ValueError(f"Cache {name} already exists")
        cache = NamedCache(
            name=name,
            max_size=max_size,
            ttl_seconds=ttl_seconds,
            invalidation_event=invalidation_event,
            timer=self._timer,
        )
        self._caches[name] = cache
        logger.debug(f"Created cache {cache!r}")
        return cache

    @property
    def caches(self) -> list[NamedCache]:
        return list(self._caches.values())
