"""
Cache key scheme.

<prefix><template>[:<context fingerprint>], where the template depends on
the analysis kind and the subject identifier is reduced to a 16-hex-char
fingerprint.
"""
import hashlib
import json
import re
from enum import Enum
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from pagescore.config import settings
from pagescore.exceptions import InvalidInputError


class AnalysisKind(str, Enum):
    URL = "url_analysis"
    DOMAIN = "domain_analysis"
    KEYWORD = "keyword_analysis"
    BATCH = "batch_analysis"
    USER = "user_analysis"
    COMPETITOR = "competitor_analysis"


KEY_PATTERNS = {
    AnalysisKind.URL: "url:{hash}",
    AnalysisKind.DOMAIN: "domain:{domain}",
    AnalysisKind.KEYWORD: "keywords:{hash}",
    AnalysisKind.BATCH: "batch:{batch_id}",
    AnalysisKind.USER: "user:{user_id}:url:{hash}",
    AnalysisKind.COMPETITOR: "competitor:{domain}:{competitor}",
}

# Placeholder -> regex used to recognise the kind of an existing key
_PLACEHOLDER_REGEX = {
    "{hash}": "[a-f0-9]{16}",
    "{domain}": "[^:]+",
    "{user_id}": "[^:]+",
    "{batch_id}": ".+",
    "{competitor}": "[^:]+",
}

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

SUBJECT_FINGERPRINT_LENGTH = 16
CONTEXT_FINGERPRINT_LENGTH = 8


def fingerprint(value: str, length: int = SUBJECT_FINGERPRINT_LENGTH) -> str:
    """Leading hex chars of an MD5 digest; compact, not collision-proof."""
    return hashlib.md5(value.encode("utf-8")).hexdigest()[:length]


def context_fingerprint(context: Mapping[str, Any]) -> str:
    # Sorted keys so equal contexts always map to the same fingerprint.
    serialized = json.dumps(context, sort_keys=True, default=str, separators=(",", ":"))
    return fingerprint(serialized, CONTEXT_FINGERPRINT_LENGTH)


def domain_of(identifier: str) -> str:
    return urlparse(identifier).hostname or identifier


def _pattern_regex(template: str) -> re.Pattern:
    regex = re.escape(template)
    for placeholder, replacement in _PLACEHOLDER_REGEX.items():
        regex = regex.replace(re.escape(placeholder), replacement)
    return re.compile(f"^{regex}(?::[a-f0-9]{{{CONTEXT_FINGERPRINT_LENGTH}}})?$")


class CacheKeyBuilder:
    """Deterministic (kind, identifier, context) -> storage key mapping."""

    def __init__(self, prefix: str = settings.CACHE_KEY_PREFIX):
        self.prefix = prefix
        self._kind_patterns = [(kind, _pattern_regex(template)) for kind, template in KEY_PATTERNS.items()]

    @staticmethod
    def resolve_kind(kind: Any) -> AnalysisKind:
        try:
            return AnalysisKind(kind)
        except ValueError:
            raise InvalidInputError(f"Unknown analysis kind: {kind!r}") from None

    def build(self, kind: Any, identifier: str, context: Optional[Mapping[str, Any]] = None) -> str:
        context = context or {}
        template = KEY_PATTERNS[self.resolve_kind(kind)]

        replacements = {
            "hash": fingerprint(identifier),
            "domain": domain_of(identifier),
            "user_id": str(context.get("user_id", "anonymous")),
            "batch_id": identifier,
            "competitor": str(context.get("competitor", "unknown")),
        }
        # Single pass over the template so substituted values are never re-expanded.
        key = _PLACEHOLDER_RE.sub(lambda match: replacements[match.group(1)], template)

        if context:
            key += f":{context_fingerprint(context)}"

        return self.prefix + key

    def subject_pattern(self, identifier: str) -> str:
        """Glob matching every key built for this identifier."""
        return f"{self.prefix}*{fingerprint(identifier)}*"

    def domain_pattern(self, domain: str) -> str:
        return f"{self.prefix}*{domain}*"

    def all_keys_pattern(self) -> str:
        return f"{self.prefix}*"

    def kind_of(self, key: str) -> str:
        """Analysis kind a stored key was built for, or "unknown"."""
        if not key.startswith(self.prefix):
            return "unknown"
        bare = key[len(self.prefix):]
        for kind, pattern in self._kind_patterns:
            if pattern.match(bare):
                return kind.value
        return "unknown"
