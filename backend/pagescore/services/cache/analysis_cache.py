"""
Analysis Cache - caching layer for scoring results.

Wraps a KeyValueStore with the key scheme, TTL policy and payload codec.
Public operations never raise cache-layer errors: an unavailable store,
corrupt entry or stale schema degrades to a miss, False or 0.
"""
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping, Optional

from pagescore.config import settings
from pagescore.exceptions import (
    CacheError,
    CacheUnavailableError,
    CorruptCacheEntryError,
    InvalidInputError,
    StaleSchemaError,
)
from pagescore.logger import logger
from pagescore.services.cache.codec import PayloadCodec
from pagescore.services.cache.keys import AnalysisKind, CacheKeyBuilder
from pagescore.services.cache.store import TTL_MISSING, TTL_NO_EXPIRY, IntrospectableStore, KeyValueStore
from pagescore.services.cache.ttl import TtlPolicy

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def version_tuple(version: Any) -> tuple[int, ...]:
    """'1.10.0' -> (1, 10, 0); non-numeric parts are ignored."""
    parts = tuple(int(part) for part in re.findall(r"\d+", str(version)))
    return parts or (0,)


def is_older_version(cached: Any, current: Any) -> bool:
    cached_parts, current_parts = version_tuple(cached), version_tuple(current)
    width = max(len(cached_parts), len(current_parts))
    cached_parts += (0,) * (width - len(cached_parts))
    current_parts += (0,) * (width - len(current_parts))
    return cached_parts < current_parts


class AnalysisCache:
    """get/put/invalidate/stat façade over a key-value store."""

    def __init__(
        self,
        backend: KeyValueStore,
        key_builder: Optional[CacheKeyBuilder] = None,
        ttl_policy: Optional[TtlPolicy] = None,
        codec: Optional[PayloadCodec] = None,
        schema_version: str = settings.CACHE_SCHEMA_VERSION,
        clock: Optional[Clock] = None,
        verify_connection: bool = True,
    ):
        self.backend = backend
        self.keys = key_builder or CacheKeyBuilder()
        self.ttl_policy = ttl_policy or TtlPolicy()
        self.codec = codec or PayloadCodec()
        self.schema_version = schema_version
        self.clock = clock or _utcnow

        if verify_connection:
            self._verify_connection()

    def _verify_connection(self) -> None:
        try:
            available = self.backend.ping()
        except CacheError as e:
            logger.error(f"Cache backing store connection failed: {e}")
            raise CacheUnavailableError("Analysis cache backing store is not available") from e
        if not available:
            raise CacheUnavailableError("Analysis cache backing store is not available")

    # ------------------------------------------------------------------
    # Keys and TTLs
    # ------------------------------------------------------------------

    def build_key(self, kind: Any, identifier: str, context: Optional[Mapping[str, Any]] = None) -> str:
        return self.keys.build(kind, identifier, context)

    def resolve_ttl(
        self,
        content_type: str,
        context: Optional[Mapping[str, Any]] = None,
        user_preferences: Optional[Mapping[str, Any]] = None,
    ) -> int:
        return self.ttl_policy.resolve(content_type, context, user_preferences)

    # ------------------------------------------------------------------
    # Store / fetch
    # ------------------------------------------------------------------

    def store(
        self,
        kind: Any,
        identifier: str,
        payload: Any,
        content_type: str = "full_analysis",
        context: Optional[Mapping[str, Any]] = None,
        user_preferences: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Cache a payload. Returns False on any serialization or store failure."""
        context = dict(context or {})
        ttl = self.resolve_ttl(content_type, context, user_preferences)
        extra = {"user_preferences": dict(user_preferences)} if user_preferences else None
        return self._store(kind, identifier, payload, content_type, context, ttl, extra)

    def _store(
        self,
        kind: Any,
        identifier: str,
        payload: Any,
        content_type: str,
        context: dict,
        ttl: int,
        extra_metadata: Optional[dict] = None,
    ) -> bool:
        try:
            key = self.build_key(kind, identifier, context)
            metadata = {
                "type": content_type,
                "subject_identifier": identifier,
                "cached_at": self.clock().isoformat(),
                "schema_version": self.schema_version,
                "context": context,
            }
            if extra_metadata:
                metadata.update(extra_metadata)
            data = self.codec.encode({"data": payload, "metadata": metadata})
            success = self.backend.put(key, data, ttl)
        except (CacheError, TypeError, ValueError) as e:
            logger.error(f"Failed to store {kind} for {identifier} in cache: {e}")
            return False

        if success:
            logger.debug(f"Cached {kind} for {identifier} (key={key}, ttl={ttl}s, size={len(data)}B)")
        else:
            logger.warning(f"Cache store rejected {key}")
        return success

    def fetch(self, kind: Any, identifier: str, context: Optional[Mapping[str, Any]] = None) -> Optional[Any]:
        """Cached payload, or None on a miss (including stale/corrupt entries)."""
        try:
            key = self.build_key(kind, identifier, context)
        except InvalidInputError as e:
            logger.error(f"Cannot fetch from cache: {e}")
            return None

        try:
            raw = self.backend.get(key)
        except CacheError as e:
            logger.error(f"Failed to retrieve {kind} for {identifier} from cache: {e}")
            return None

        if raw is None:
            logger.debug(f"Cache miss: {key}")
            return None

        try:
            entry = self.codec.decode(raw)
            self._validate_entry(entry)
        except StaleSchemaError as e:
            logger.info(f"Evicting stale cache entry {key}: {e}")
            self.invalidate_key(key)
            return None
        except CorruptCacheEntryError as e:
            logger.warning(f"Evicting corrupt cache entry {key}: {e}")
            self.invalidate_key(key)
            return None

        logger.debug(f"Cache hit: {key} (cached_at={entry['metadata'].get('cached_at', 'unknown')})")
        return entry["data"]

    def _validate_entry(self, entry: Any) -> None:
        if not isinstance(entry, dict) or "data" not in entry or not isinstance(entry.get("metadata"), dict):
            raise CorruptCacheEntryError("Cache entry is missing its data/metadata envelope")

        cached_version = entry["metadata"].get("schema_version", "0.0.0")
        if is_older_version(cached_version, self.schema_version):
            raise StaleSchemaError(str(cached_version), self.schema_version)

    # ------------------------------------------------------------------
    # Convenience wrappers per analysis kind
    # ------------------------------------------------------------------

    def store_analysis(
        self,
        url: str,
        payload: Any,
        content_type: str = "full_analysis",
        context: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        return self.store(AnalysisKind.URL, url, payload, content_type, context)

    def get_analysis(self, url: str, context: Optional[Mapping[str, Any]] = None) -> Optional[Any]:
        return self.fetch(AnalysisKind.URL, url, context)

    def store_batch(self, batch_id: str, results: list) -> bool:
        ttl = self.resolve_ttl("full_analysis")
        now = self.clock()
        payload = {
            "batch_id": batch_id,
            "results": results,
            "total_count": len(results),
            "created_at": now.isoformat(),
            "expires_at": (now + timedelta(seconds=ttl)).isoformat(),
        }
        return self._store(AnalysisKind.BATCH, batch_id, payload, "full_analysis", {}, ttl)

    def fetch_batch(self, batch_id: str) -> Optional[dict]:
        return self.fetch(AnalysisKind.BATCH, batch_id)

    def store_user_analysis(
        self,
        user_id: Any,
        url: str,
        payload: Any,
        user_preferences: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """User-scoped entry whose TTL comes from the user's cache_duration tier."""
        preferences = dict(user_preferences or {})
        ttl = self.ttl_policy.resolve_for_user(preferences)
        return self._store(
            AnalysisKind.USER, url, payload, "user_analysis",
            {"user_id": user_id}, ttl, {"user_preferences": preferences},
        )

    def fetch_user_analysis(self, user_id: Any, url: str) -> Optional[Any]:
        return self.fetch(AnalysisKind.USER, url, {"user_id": user_id})

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def invalidate_key(self, key: str) -> bool:
        try:
            return self.backend.delete(key)
        except CacheError as e:
            logger.error(f"Failed to invalidate cache key {key}: {e}")
            return False

    def invalidate_by_subject(self, identifier: str) -> int:
        """Delete every entry built for this identifier. 0 when unsupported."""
        return self._invalidate_pattern(self.keys.subject_pattern(identifier), f"subject {identifier}")

    def invalidate_by_domain(self, domain: str) -> int:
        return self._invalidate_pattern(self.keys.domain_pattern(domain), f"domain {domain}")

    def _invalidate_pattern(self, pattern: str, label: str) -> int:
        if not isinstance(self.backend, IntrospectableStore):
            logger.info(f"Cache store cannot enumerate keys; nothing invalidated for {label}")
            return 0

        try:
            keys = self.backend.scan(pattern)
            if not keys:
                return 0
            deleted = self.backend.delete_many(keys)
        except CacheError as e:
            logger.error(f"Failed to invalidate cache for {label}: {e}")
            return 0

        logger.info(f"Cache invalidated for {label}: {deleted} key(s) deleted (pattern={pattern})")
        return deleted

    # ------------------------------------------------------------------
    # Introspection and hygiene
    # ------------------------------------------------------------------

    def statistics(self) -> dict[str, Any]:
        """Best-effort statistics; zeroed when the store cannot be introspected."""
        stats = {
            "total_keys": 0,
            "total_size_bytes": 0,
            "total_size_mb": 0.0,
            "keys_by_kind": {},
            "keyspace_hits": 0,
            "keyspace_misses": 0,
            "hit_ratio": 0.0,
        }
        if not isinstance(self.backend, IntrospectableStore):
            return stats

        try:
            keys = self.backend.scan(self.keys.all_keys_pattern())
            total_size = 0
            keys_by_kind: dict[str, int] = {}
            for key in keys:
                total_size += self.backend.memory_usage(key)
                kind = self.keys.kind_of(key)
                keys_by_kind[kind] = keys_by_kind.get(kind, 0) + 1
            keyspace = self.backend.keyspace_stats()
        except CacheError as e:
            logger.error(f"Failed to get cache statistics: {e}")
            return stats

        hits = keyspace.get("keyspace_hits", 0)
        misses = keyspace.get("keyspace_misses", 0)
        stats.update({
            "total_keys": len(keys),
            "total_size_bytes": total_size,
            "total_size_mb": round(total_size / 1024 / 1024, 2),
            "keys_by_kind": keys_by_kind,
            "keyspace_hits": hits,
            "keyspace_misses": misses,
            "hit_ratio": round(hits / (hits + misses) * 100, 2) if hits + misses else 0.0,
        })
        return stats

    def cleanup_expired_entries(self) -> int:
        """Delete entries reported as expired-but-not-reaped or without a TTL."""
        if not isinstance(self.backend, IntrospectableStore):
            return 0

        cleaned = 0
        try:
            for key in self.backend.scan(self.keys.all_keys_pattern()):
                if self.backend.ttl(key) in (TTL_NO_EXPIRY, TTL_MISSING) and self.backend.delete(key):
                    cleaned += 1
        except CacheError as e:
            logger.error(f"Cache cleanup failed: {e}")
            return cleaned

        logger.info(f"Cache cleanup completed: {cleaned} entries cleaned")
        return cleaned

    def warmup(self, urls: Iterable[str], provider: Optional[Callable[[str], Any]] = None) -> dict[str, int]:
        """Pre-populate url_analysis entries for URLs that are not cached yet."""
        results = {"success": 0, "failed": 0, "skipped": 0}

        for url in urls:
            if self.get_analysis(url) is not None or provider is None:
                results["skipped"] += 1
                continue

            try:
                payload = provider(url)
            except Exception as e:
                logger.error(f"Cache warmup failed for {url}: {e}")
                results["failed"] += 1
                continue

            if payload and self.store_analysis(url, payload):
                results["success"] += 1
            else:
                results["failed"] += 1

        logger.info(f"Cache warmup completed: {results}")
        return results
