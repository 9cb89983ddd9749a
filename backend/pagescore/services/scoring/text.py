"""
Lightweight text heuristics used by the title and meta description scorers.
"""
import re

_WORD_RE = re.compile(r"[^\W\d_]+(?:['-][^\W\d_]+)*")
_BRAND_RE = re.compile(r"[|\-]\s*[A-Z][a-zA-Z]+\s*$")
_CTA_PATTERNS = (
    re.compile(
        r"\b(learn more|read more|discover|explore|find out|get started|try now|"
        r"shop now|buy now|order now|download|sign up|contact us)\b",
        re.IGNORECASE,
    ),
    re.compile(r"!$"),
)
STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
    "for", "of", "with", "by", "is", "are", "was", "were",
})


def words(text: str) -> list[str]:
    """Lower-cased alphabetic words (digits and punctuation are skipped)."""
    return _WORD_RE.findall(text.lower())


def has_varied_words(text: str) -> bool:
    tokens = words(text)
    return len(set(tokens)) >= max(3, len(tokens) * 0.7)


def has_brand_pattern(title: str) -> bool:
    # e.g. "Oak Dining Tables | Woodline"
    return bool(_BRAND_RE.search(title))


def has_duplicate_words(text: str) -> bool:
    tokens = words(text)
    return len(tokens) != len(set(tokens))


def has_call_to_action(description: str) -> bool:
    return any(pattern.search(description) for pattern in _CTA_PATTERNS)


def is_descriptive(description: str) -> bool:
    tokens = words(description)
    descriptive = [token for token in tokens if token not in STOPWORDS]
    return len(descriptive) >= len(tokens) * 0.6
