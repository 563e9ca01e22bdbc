"""Search result cache backends.

The cache holds serialized result sets for non-personal queries. It is
never a source of truth: any entry can vanish at any time and is rebuilt
from the catalog on the next miss.

Backends raise ``SearchCacheError`` for every failure, timeouts included.
Callers decide how to degrade (the catalog treats errors as misses and
drops failed writes).
"""

import logging
from abc import ABC, abstractmethod
from threading import Lock

import redis

from app.core.config import Settings
from app.core.time import monotonic
from app.services.query_normalizer import DEFAULT_KEY_PREFIX

logger = logging.getLogger(__name__)

# Keys deleted per DEL round trip during a purge
PURGE_BATCH_SIZE = 500


class SearchCacheError(Exception):
    """Raised when the cache backend is unavailable or errors."""


class SearchCache(ABC):
    """Key-value cache with per-entry TTL and a single purge-everything primitive."""

    def __init__(self, prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self.prefix = prefix

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the cached value if present and not expired."""

    @abstractmethod
    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value, replacing any existing entry and resetting its TTL."""

    @abstractmethod
    def invalidate_all(self) -> int:
        """Remove every entry under this cache's prefix. Returns entries removed."""

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the backend is reachable."""


class InMemorySearchCache(SearchCache):
    """Process-local cache guarded by a lock.

    Each worker process holds its own entries, so a publish handled by one
    worker cannot purge another's. Use the Redis backend when running more
    than one worker.
    """

    def __init__(self, prefix: str = DEFAULT_KEY_PREFIX) -> None:
        super().__init__(prefix)
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= monotonic():
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            now = monotonic()
            self._prune_expired(now)
            self._entries[key] = (now + ttl_seconds, value)

    def invalidate_all(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _prune_expired(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]


class RedisSearchCache(SearchCache):
    """Redis-backed cache shared by every worker and instance."""

    def __init__(self, client: redis.Redis, prefix: str = DEFAULT_KEY_PREFIX) -> None:
        super().__init__(prefix)
        self._client = client

    @classmethod
    def from_url(
        cls, redis_url: str, prefix: str = DEFAULT_KEY_PREFIX, timeout_seconds: float = 2.0
    ) -> "RedisSearchCache":
        client = redis.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        return cls(client, prefix)

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except redis.RedisError as e:
            raise SearchCacheError(f"Redis GET failed: {e}") from e

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as e:
            raise SearchCacheError(f"Redis SET failed: {e}") from e

    def invalidate_all(self) -> int:
        # SCAN instead of KEYS so a large keyspace does not block the server
        removed = 0
        batch: list[str] = []
        try:
            for key in self._client.scan_iter(match=f"{self.prefix}*", count=PURGE_BATCH_SIZE):
                batch.append(key)
                if len(batch) >= PURGE_BATCH_SIZE:
                    removed += self._client.delete(*batch)
                    batch = []
            if batch:
                removed += self._client.delete(*batch)
        except redis.RedisError as e:
            raise SearchCacheError(f"Redis purge failed after {removed} keys: {e}") from e
        return removed

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def close(self) -> None:
        self._client.close()


def build_search_cache(settings: Settings) -> SearchCache:
    """Create the cache backend selected by SEARCH_CACHE_BACKEND."""
    if settings.search_cache_backend == "redis":
        logger.info("Using Redis search cache")
        return RedisSearchCache.from_url(
            settings.redis_url,
            prefix=settings.search_cache_prefix,
            timeout_seconds=settings.cache_timeout_seconds,
        )
    return InMemorySearchCache(prefix=settings.search_cache_prefix)
