"""
Tests for the AnalysisCache façade over the in-memory store.
"""
import json
from typing import Optional

import pytest

from pagescore.exceptions import CacheUnavailableError
from pagescore.services.cache.analysis_cache import AnalysisCache, is_older_version, version_tuple
from pagescore.services.cache.codec import COMPRESSED_MARKER, PayloadCodec
from pagescore.services.cache.store import KeyValueStore

from conftest import FIXED_NOW

URL = "https://woodline.example/tables"
OTHER_URL = "https://pinecraft.example/"


class DictStore(KeyValueStore):
    """Store without key enumeration."""

    def __init__(self):
        self.data = {}

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def put(self, key: str, value: bytes, ttl_seconds: int) -> bool:
        self.data[key] = value
        return True

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class BrokenStore(KeyValueStore):
    """Store whose every operation fails after construction."""

    def __init__(self, reachable: bool = True):
        self.reachable = reachable

    def ping(self) -> bool:
        if not self.reachable:
            raise CacheUnavailableError("connection refused")
        return True

    def get(self, key):
        raise CacheUnavailableError("connection reset")

    def put(self, key, value, ttl_seconds):
        raise CacheUnavailableError("connection reset")

    def delete(self, key):
        raise CacheUnavailableError("connection reset")


def _decoded(store, key):
    return PayloadCodec().decode(store.raw(key))


class TestStoreAndFetch:
    def test_round_trip(self, analysis_cache):
        payload = {"overall_score": 87, "grade": "B"}

        assert analysis_cache.store("url_analysis", URL, payload) is True
        assert analysis_cache.fetch("url_analysis", URL) == payload

    def test_miss(self, analysis_cache):
        assert analysis_cache.fetch("url_analysis", URL) is None

    def test_large_payload_stored_compressed(self, analysis_cache, memory_store):
        payload = {"issues": ["Low text-to-HTML ratio"] * 220}
        assert len(json.dumps(payload)) > 5000

        analysis_cache.store("url_analysis", URL, payload)

        raw = memory_store.raw(analysis_cache.build_key("url_analysis", URL))
        assert raw.startswith(COMPRESSED_MARKER)
        assert analysis_cache.fetch("url_analysis", URL) == payload

    def test_entry_envelope(self, analysis_cache, memory_store):
        analysis_cache.store("url_analysis", URL, {"a": 1}, "score_only", {"type": "score_calculation"})

        entry = _decoded(memory_store, analysis_cache.build_key("url_analysis", URL, {"type": "score_calculation"}))

        assert entry["data"] == {"a": 1}
        assert entry["metadata"] == {
            "type": "score_only",
            "subject_identifier": URL,
            "cached_at": FIXED_NOW.isoformat(),
            "schema_version": "1.0.0",
            "context": {"type": "score_calculation"},
        }

    def test_context_isolates_entries(self, analysis_cache):
        analysis_cache.store("url_analysis", URL, {"v": 1}, context={"type": "a"})

        assert analysis_cache.fetch("url_analysis", URL, {"type": "b"}) is None
        assert analysis_cache.fetch("url_analysis", URL, {"type": "a"}) == {"v": 1}

    def test_ttl_applied_and_expiry(self, analysis_cache, memory_store, manual_clock):
        analysis_cache.store("url_analysis", URL, {"v": 1}, "score_only")
        key = analysis_cache.build_key("url_analysis", URL)

        assert memory_store.ttl(key) == 1800

        manual_clock.advance(1801)
        assert analysis_cache.fetch("url_analysis", URL) is None

    def test_unserializable_payload_returns_false(self, analysis_cache):
        assert analysis_cache.store("url_analysis", URL, {"handle": object()}) is False
        assert analysis_cache.fetch("url_analysis", URL) is None

    def test_unknown_kind(self, analysis_cache):
        assert analysis_cache.store("page_analysis", URL, {"v": 1}) is False
        assert analysis_cache.fetch("page_analysis", URL) is None


class TestDegradedEntries:
    def test_stale_schema_is_evicted(self, memory_store):
        old = AnalysisCache(memory_store, schema_version="0.9.0")
        current = AnalysisCache(memory_store, schema_version="1.0.0")
        old.store("url_analysis", URL, {"v": 1})
        key = current.build_key("url_analysis", URL)

        assert current.fetch("url_analysis", URL) is None
        assert memory_store.raw(key) is None

    def test_newer_schema_is_served(self, memory_store):
        AnalysisCache(memory_store, schema_version="1.10.0").store("url_analysis", URL, {"v": 1})

        assert AnalysisCache(memory_store, schema_version="1.9.0").fetch("url_analysis", URL) == {"v": 1}

    def test_corrupt_entry_is_evicted(self, analysis_cache, memory_store):
        key = analysis_cache.build_key("url_analysis", URL)
        memory_store.put(key, COMPRESSED_MARKER + b"garbage", 60)

        assert analysis_cache.fetch("url_analysis", URL) is None
        assert memory_store.raw(key) is None

    def test_entry_without_envelope_is_evicted(self, analysis_cache, memory_store):
        key = analysis_cache.build_key("url_analysis", URL)
        memory_store.put(key, b'{"overall_score": 50}', 60)

        assert analysis_cache.fetch("url_analysis", URL) is None
        assert memory_store.raw(key) is None

    @pytest.mark.parametrize("cached,current,older", [
        ("0.9.0", "1.0.0", True),
        ("1.0.0", "1.0.0", False),
        ("1.9.0", "1.10.0", True),
        ("1.0", "1.0.1", True),
        ("2.0.0", "1.0.0", False),
    ])
    def test_version_comparison(self, cached, current, older):
        assert is_older_version(cached, current) is older

    def test_version_tuple(self):
        assert version_tuple("1.10.0") == (1, 10, 0)
        assert version_tuple("garbage") == (0,)


class TestUnavailableStore:
    def test_failed_ping_raises_on_construction(self):
        with pytest.raises(CacheUnavailableError):
            AnalysisCache(BrokenStore(reachable=False))

    def test_verification_can_be_skipped(self):
        AnalysisCache(BrokenStore(reachable=False), verify_connection=False)

    def test_operations_degrade(self):
        cache = AnalysisCache(BrokenStore())

        assert cache.store("url_analysis", URL, {"v": 1}) is False
        assert cache.fetch("url_analysis", URL) is None
        assert cache.invalidate_key("seo_analysis:url:abc") is False


class TestInvalidation:
    def test_invalidate_by_subject(self, analysis_cache):
        analysis_cache.store_analysis(URL, {"v": 1})
        analysis_cache.store_analysis(URL, {"v": 2}, "score_only", {"type": "score_calculation"})
        analysis_cache.store_user_analysis("u1", URL, {"v": 3})
        analysis_cache.store_analysis(OTHER_URL, {"v": 4})

        assert analysis_cache.invalidate_by_subject(URL) == 3
        assert analysis_cache.get_analysis(URL) is None
        assert analysis_cache.get_analysis(OTHER_URL) == {"v": 4}

    def test_invalidate_by_subject_without_entries(self, analysis_cache):
        assert analysis_cache.invalidate_by_subject(URL) == 0

    def test_invalidate_by_domain(self, analysis_cache):
        analysis_cache.store("domain_analysis", URL, {"pages": 12})
        analysis_cache.store("competitor_analysis", OTHER_URL, {"v": 1}, context={"competitor": "woodline.example"})
        analysis_cache.store_analysis(OTHER_URL, {"v": 2})

        assert analysis_cache.invalidate_by_domain("woodline.example") == 2
        assert analysis_cache.get_analysis(OTHER_URL) == {"v": 2}

    def test_invalidate_single_key(self, analysis_cache):
        analysis_cache.store_analysis(URL, {"v": 1})

        assert analysis_cache.invalidate_key(analysis_cache.build_key("url_analysis", URL)) is True
        assert analysis_cache.get_analysis(URL) is None


class TestNonEnumerableStore:
    def setup_method(self):
        self.store = DictStore()
        self.cache = AnalysisCache(self.store)

    def test_round_trip_still_works(self):
        self.cache.store_analysis(URL, {"v": 1})

        assert self.cache.get_analysis(URL) == {"v": 1}

    def test_pattern_operations_report_nothing(self):
        self.cache.store_analysis(URL, {"v": 1})

        assert self.cache.invalidate_by_subject(URL) == 0
        assert self.cache.invalidate_by_domain("woodline.example") == 0
        assert self.cache.cleanup_expired_entries() == 0
        assert self.cache.get_analysis(URL) == {"v": 1}

    def test_statistics_zeroed(self):
        self.cache.store_analysis(URL, {"v": 1})

        stats = self.cache.statistics()

        assert stats["total_keys"] == 0
        assert stats["keys_by_kind"] == {}
        assert stats["hit_ratio"] == 0.0


class TestStatisticsAndCleanup:
    def test_statistics(self, analysis_cache, memory_store):
        analysis_cache.store_analysis(URL, {"v": 1})
        analysis_cache.store_user_analysis("u1", URL, {"v": 2})
        analysis_cache.get_analysis(URL)
        analysis_cache.get_analysis(OTHER_URL)

        stats = analysis_cache.statistics()

        keys = memory_store.scan("seo_analysis:*")
        assert stats["total_keys"] == 2
        assert stats["total_size_bytes"] == sum(len(memory_store.raw(key)) for key in keys)
        assert stats["keys_by_kind"] == {"url_analysis": 1, "user_analysis": 1}
        assert stats["keyspace_hits"] == 1
        assert stats["keyspace_misses"] == 1
        assert stats["hit_ratio"] == 50.0

    def test_cleanup_removes_expired_and_unbounded_entries(self, analysis_cache, memory_store, manual_clock):
        analysis_cache.store_analysis(URL, {"v": 1}, "performance_metrics")
        analysis_cache.store_analysis(OTHER_URL, {"v": 2}, "competitive_data")
        memory_store.put("seo_analysis:url:0123456789abcdef", b"{}", 0)
        memory_store.put("sessions:abc", b"{}", 0)

        manual_clock.advance(1000)

        assert analysis_cache.cleanup_expired_entries() == 2
        assert analysis_cache.get_analysis(OTHER_URL) == {"v": 2}
        assert memory_store.raw("sessions:abc") == b"{}"


class TestBatchAndUserEntries:
    def test_batch_round_trip(self, analysis_cache):
        results = [{"url": URL, "overall_score": 80}, {"url": OTHER_URL, "overall_score": 64}]

        assert analysis_cache.store_batch("batch-7", results) is True
        batch = analysis_cache.fetch_batch("batch-7")

        assert batch == {
            "batch_id": "batch-7",
            "results": results,
            "total_count": 2,
            "created_at": "2024-05-01T12:00:00+00:00",
            "expires_at": "2024-05-01T13:00:00+00:00",
        }

    def test_user_entry_uses_tier_ttl(self, analysis_cache, memory_store):
        analysis_cache.store_user_analysis("u1", URL, {"v": 1}, {"cache_duration": "extended"})
        key = analysis_cache.build_key("user_analysis", URL, {"user_id": "u1"})

        assert memory_store.ttl(key) == 21600
        assert _decoded(memory_store, key)["metadata"]["user_preferences"] == {"cache_duration": "extended"}
        assert analysis_cache.fetch_user_analysis("u1", URL) == {"v": 1}
        assert analysis_cache.fetch_user_analysis("u2", URL) is None

    def test_user_entry_default_tier(self, analysis_cache, memory_store):
        analysis_cache.store_user_analysis("u1", URL, {"v": 1})

        assert memory_store.ttl(analysis_cache.build_key("user_analysis", URL, {"user_id": "u1"})) == 3600


class TestWarmup:
    def test_warmup_counts(self, analysis_cache):
        analysis_cache.store_analysis(URL, {"v": 0})

        def provider(url):
            if url.endswith("broken/"):
                raise RuntimeError("fetch failed")
            if url.endswith("empty/"):
                return None
            return {"url": url}

        results = analysis_cache.warmup(
            [URL, OTHER_URL, "https://broken.example/broken/", "https://empty.example/empty/"],
            provider,
        )

        assert results == {"success": 1, "failed": 2, "skipped": 1}
        assert analysis_cache.get_analysis(OTHER_URL) == {"url": OTHER_URL}

    def test_warmup_without_provider_skips(self, analysis_cache):
        assert analysis_cache.warmup([URL, OTHER_URL]) == {"success": 0, "failed": 0, "skipped": 2}
