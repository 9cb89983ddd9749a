"""
Scoring result models: per-category metrics, category results and the overall report.
"""
from dataclasses import asdict, dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Union

MAX_SCORE = 100


@dataclass(frozen=True)
class TitleMetrics:
    length: int
    has_title: bool
    optimal_length: bool


@dataclass(frozen=True)
class MetaDescriptionMetrics:
    length: int
    has_description: bool
    optimal_length: bool


@dataclass(frozen=True)
class HeadingsMetrics:
    h1_count: int
    h2_count: int
    h3_count: int
    total_headings: int
    has_h1: bool
    has_structure: bool


@dataclass(frozen=True)
class ContentMetrics:
    word_count: int
    text_to_html_ratio: float
    reading_time_minutes: float
    paragraphs: int
    sufficient_content: bool


@dataclass(frozen=True)
class ImagesMetrics:
    total_images: int
    without_alt: int
    alt_text_coverage: float


@dataclass(frozen=True)
class LinksMetrics:
    total_links: int
    internal_links: int
    external_links: int
    empty_anchor_count: int
    internal_ratio: float


@dataclass(frozen=True)
class TechnicalMetrics:
    has_doctype: bool
    has_lang_attribute: bool
    uses_https: bool
    has_schema: bool
    has_open_graph: bool
    inline_styles: int
    inline_scripts: int


@dataclass(frozen=True)
class SocialMediaMetrics:
    open_graph_tags: int
    twitter_card_tags: int
    has_og_image: bool
    has_twitter_card: bool


@dataclass(frozen=True)
class StructuredDataMetrics:
    json_ld_schemas: int
    microdata_schemas: int
    rdfa_schemas: int
    total_schemas: int
    has_structured_data: bool


CategoryMetrics = Union[
    TitleMetrics,
    MetaDescriptionMetrics,
    HeadingsMetrics,
    ContentMetrics,
    ImagesMetrics,
    LinksMetrics,
    TechnicalMetrics,
    SocialMediaMetrics,
    StructuredDataMetrics,
]


@dataclass(frozen=True)
class CategoryScoreResult:
    """Result of scoring a single category."""
    category: str
    score: float  # 0-100
    weight: int
    issues: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    metrics: CategoryMetrics | None = None
    max_score: int = MAX_SCORE

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "max_score": self.max_score,
            "weight": self.weight,
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
            "metrics": asdict(self.metrics) if self.metrics is not None else {},
        }


@dataclass(frozen=True)
class CategoryBreakdown:
    """Contribution of one category to the overall score."""
    score: float
    weight_percentage: float
    contribution_to_overall: float
    status: str  # Excellent, Good, Average, Below Average, Poor
    impact_level: str  # critical, high, medium, low
    issues_count: int = 0
    recommendations_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OverallScoreReport:
    """Complete scoring result. Consumers may cache it but never mutate it."""
    overall_score: int
    grade: str
    category_scores: Mapping[str, CategoryScoreResult]
    breakdown: Mapping[str, CategoryBreakdown]
    scoring_version: str
    calculated_at: datetime
    max_possible_score: int = MAX_SCORE

    def __post_init__(self):
        # Read-only views over the category maps.
        object.__setattr__(self, "category_scores", MappingProxyType(dict(self.category_scores)))
        object.__setattr__(self, "breakdown", MappingProxyType(dict(self.breakdown)))

    def all_issues(self) -> list[str]:
        return [issue for result in self.category_scores.values() for issue in result.issues]

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping with the field names downstream renderers expect."""
        return {
            "overall_score": self.overall_score,
            "grade": self.grade,
            "category_scores": {name: result.to_dict() for name, result in self.category_scores.items()},
            "breakdown": {name: entry.to_dict() for name, entry in self.breakdown.items()},
            "max_possible_score": self.max_possible_score,
            "scoring_version": self.scoring_version,
            "calculated_at": self.calculated_at.isoformat(),
        }
