"""
TTL policy: how long a cached analysis stays fresh.
"""
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from pagescore.config import settings

# Seconds per content type
CONTENT_TYPE_TTLS = {
    "full_analysis": 3600,        # complete analysis
    "score_only": 1800,           # score calculations only
    "meta_data": 7200,
    "technical_audit": 14400,
    "performance_metrics": 900,   # changes frequently
    "crawl_data": 21600,
    "recommendations": 1800,
    "competitive_data": 86400,
}

# Seconds per user cache_duration preference
USER_TIER_TTLS = {
    "short": 900,
    "normal": 3600,
    "long": 7200,
    "extended": 21600,
}

HIGH_PRIORITY_MAX_TTL = 1800
NEWS_MAX_TTL = 900
STATIC_MIN_TTL = 7200


@dataclass(frozen=True)
class TtlPolicy:
    """Resolves freshness windows from content type, context hints and user tier."""
    content_type_ttls: Mapping[str, int] = field(default_factory=lambda: dict(CONTENT_TYPE_TTLS))
    user_tier_ttls: Mapping[str, int] = field(default_factory=lambda: dict(USER_TIER_TTLS))
    default_ttl: int = settings.CACHE_DEFAULT_TTL

    def resolve(
        self,
        content_type: str,
        context: Optional[Mapping[str, Any]] = None,
        user_preferences: Optional[Mapping[str, Any]] = None,
    ) -> int:
        """TTL in seconds.

        A declared user preference replaces the content-type TTL entirely.
        Otherwise the static floor is applied before the caps, so a cap wins
        when both apply to the same lookup.
        """
        if user_preferences and user_preferences.get("cache_duration"):
            return self.resolve_for_user(user_preferences)

        context = context or {}
        ttl = self.content_type_ttls.get(content_type, self.default_ttl)

        hinted_type = context.get("content_type")
        if hinted_type == "static":
            ttl = max(ttl, STATIC_MIN_TTL)

        if context.get("priority") == "high":
            ttl = min(ttl, HIGH_PRIORITY_MAX_TTL)
        if hinted_type == "news":
            ttl = min(ttl, NEWS_MAX_TTL)

        return ttl

    def resolve_for_user(self, user_preferences: Optional[Mapping[str, Any]] = None) -> int:
        duration = (user_preferences or {}).get("cache_duration", "normal")
        return self.user_tier_ttls.get(duration, self.user_tier_ttls.get("normal", self.default_ttl))
