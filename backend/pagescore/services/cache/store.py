"""
Backing key-value stores for the analysis cache.

Every store supports get/put/delete. Wildcard enumeration and per-key
introspection are an optional capability (IntrospectableStore); the cache
degrades gracefully for stores without it.
"""
import fnmatch
import math
import time
from threading import Lock
from typing import Callable, Iterable, Optional

import redis
from redis.exceptions import RedisError

from pagescore.exceptions import CacheUnavailableError
from pagescore.logger import logger

# TTL sentinels (same values Redis reports)
TTL_NO_EXPIRY = -1
TTL_MISSING = -2


class KeyValueStore:
    """Minimal store contract."""

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def put(self, key: str, value: bytes, ttl_seconds: int) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def ping(self) -> bool:
        return True


class IntrospectableStore(KeyValueStore):
    """Store that can enumerate keys by glob pattern and report on them."""

    def scan(self, pattern: str) -> list[str]:
        raise NotImplementedError

    def delete_many(self, keys: Iterable[str]) -> int:
        return sum(1 for key in keys if self.delete(key))

    def ttl(self, key: str) -> int:
        raise NotImplementedError

    def memory_usage(self, key: str) -> int:
        raise NotImplementedError

    def keyspace_stats(self) -> dict[str, int]:
        return {"keyspace_hits": 0, "keyspace_misses": 0}


class RedisStore(IntrospectableStore):
    """Redis-backed store. Client errors surface as CacheUnavailableError."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        client = redis.from_url(url)
        logger.info(f"Initialized Redis client for analysis cache: {url}")
        return cls(client)

    def _call(self, operation: str, *args, **kwargs):
        try:
            return getattr(self.client, operation)(*args, **kwargs)
        except RedisError as e:
            raise CacheUnavailableError(f"Redis {operation} failed: {e}") from e

    def get(self, key: str) -> Optional[bytes]:
        return self._call("get", key)

    def put(self, key: str, value: bytes, ttl_seconds: int) -> bool:
        if ttl_seconds > 0:
            return bool(self._call("set", key, value, ex=ttl_seconds))
        return bool(self._call("set", key, value))

    def delete(self, key: str) -> bool:
        return bool(self._call("delete", key))

    def ping(self) -> bool:
        return bool(self._call("ping"))

    def scan(self, pattern: str) -> list[str]:
        try:
            keys = list(self.client.scan_iter(match=pattern))
        except RedisError as e:
            raise CacheUnavailableError(f"Redis scan failed: {e}") from e
        return [key.decode("utf-8") if isinstance(key, bytes) else key for key in keys]

    def delete_many(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys:
            return 0
        return int(self._call("delete", *keys))

    def ttl(self, key: str) -> int:
        return int(self._call("ttl", key))

    def memory_usage(self, key: str) -> int:
        return int(self._call("memory_usage", key) or 0)

    def keyspace_stats(self) -> dict[str, int]:
        info = self._call("info", "stats")
        return {
            "keyspace_hits": int(info.get("keyspace_hits", 0)),
            "keyspace_misses": int(info.get("keyspace_misses", 0)),
        }


class MemoryStore(IntrospectableStore):
    """In-process store for local runs and tests.

    Expired entries are reaped lazily on read; until then they still show up
    in scan() and report TTL_MISSING.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or time.monotonic
        self._entries: dict[str, tuple[bytes, Optional[float]]] = {}
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def _expired(self, expires_at: Optional[float]) -> bool:
        return expires_at is not None and self.clock() >= expires_at

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._expired(entry[1]):
                del self._entries[key]
                entry = None
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
            return entry[0]

    def put(self, key: str, value: bytes, ttl_seconds: int) -> bool:
        expires_at = self.clock() + ttl_seconds if ttl_seconds > 0 else None
        with self._lock:
            self._entries[key] = (bytes(value), expires_at)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def scan(self, pattern: str) -> list[str]:
        with self._lock:
            return [key for key in self._entries if fnmatch.fnmatchcase(key, pattern)]

    def ttl(self, key: str) -> int:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or self._expired(entry[1]):
            return TTL_MISSING
        if entry[1] is None:
            return TTL_NO_EXPIRY
        return math.ceil(entry[1] - self.clock())

    def memory_usage(self, key: str) -> int:
        with self._lock:
            entry = self._entries.get(key)
        return len(entry[0]) if entry else 0

    def keyspace_stats(self) -> dict[str, int]:
        return {"keyspace_hits": self.hits, "keyspace_misses": self.misses}

    def raw(self, key: str) -> Optional[bytes]:
        """Stored bytes without touching hit/miss counters or expiry."""
        with self._lock:
            entry = self._entries.get(key)
        return entry[0] if entry else None
