"""
Shared fixtures: representative page signals, fixed clocks and a
memory-backed analysis cache.
"""
from datetime import datetime, timezone

import pytest

from pagescore.services.cache.analysis_cache import AnalysisCache
from pagescore.services.cache.store import MemoryStore
from pagescore.services.scoring.engine import ScoringEngine

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class ManualClock:
    """Monotonic clock the tests move forward explicitly."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def perfect_page() -> dict:
    """Well-optimised page; hand-computed overall score is 96 (grade A)."""
    return {
        "meta": {
            "title": "Handmade Oak Furniture for Every Room | Woodline",
            "description": (
                "Browse solid oak tables, chairs and shelving built to last generations. "
                "Free delivery on orders over $500. Discover our collection today."
            ),
        },
        "headings": {
            "h1": ["Handmade Oak Furniture"],
            "h2": ["Solid Oak Dining Tables", "Chairs Built for Comfort"],
            "h3": ["Extendable Dining Tables"],
        },
        "images": {"total_count": 4, "without_alt_count": 0, "without_title_count": 0},
        "links": {"total_count": 10, "internal_count": 7, "external_count": 3, "empty_anchor_count": 0},
        "content": {"word_count": 1200, "text_to_html_ratio": 30, "reading_time_minutes": 6, "paragraphs": 12},
        "technical": {
            "doctype": "html",
            "lang_attribute": "en",
            "ssl_required": True,
            "schema_markup_present": True,
            "open_graph_present": True,
            "inline_styles_count": 0,
            "inline_scripts_count": 0,
        },
        "social_media": {
            "open_graph": {
                "title": "Handmade Oak Furniture",
                "description": "Solid oak furniture",
                "image": "https://woodline.example/og.jpg",
                "url": "https://woodline.example/",
            },
            "twitter_cards": {"card": "summary_large_image", "title": "Woodline", "description": "Oak furniture"},
        },
        "structured_data": {
            "json_ld": [{"@type": "Organization"}, {"@type": "Product"}],
            "microdata": [],
            "rdfa": [],
        },
    }


@pytest.fixture
def engine() -> ScoringEngine:
    return ScoringEngine(clock=lambda: FIXED_NOW)


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def memory_store(manual_clock) -> MemoryStore:
    return MemoryStore(clock=manual_clock)


@pytest.fixture
def analysis_cache(memory_store) -> AnalysisCache:
    return AnalysisCache(memory_store, clock=lambda: FIXED_NOW)
