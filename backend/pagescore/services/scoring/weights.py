"""
Scoring Weights Configuration.

Category weights are injected into the aggregator and validated once at
construction instead of being trusted implicitly.
"""

from dataclasses import dataclass, fields

from pagescore.config import settings

# Canonical category order (also the order of report maps)
CATEGORIES = (
    "title",
    "meta_description",
    "headings",
    "content",
    "images",
    "links",
    "technical",
    "social_media",
    "structured_data",
)


@dataclass(frozen=True)
class CategoryWeights:
    """Overall category weights (must sum to 100)."""
    title: int = 20             # Title tag optimization
    meta_description: int = 15  # Meta description optimization
    headings: int = 15          # Heading structure (H1-H6)
    content: int = 20           # Content quality and length
    images: int = 10            # Image optimization (alt tags, etc.)
    links: int = 8              # Internal/external link structure
    technical: int = 7          # Technical SEO aspects
    social_media: int = 3       # Social media tags (OG, Twitter)
    structured_data: int = 2    # Schema markup, JSON-LD

    def as_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def total(self) -> int:
        return sum(self.as_dict().values())

    def of(self, category: str) -> int:
        return self.as_dict().get(category, 0)

    def validate(self) -> "CategoryWeights":
        """Ensure weights are non-negative integers summing to exactly 100."""
        for name, weight in self.as_dict().items():
            if not isinstance(weight, int) or isinstance(weight, bool) or weight < 0:
                raise ValueError(f"CRITICAL: Weight for {name} must be a non-negative integer, got {weight!r}")
        total = self.total()
        if total != 100:
            raise ValueError(f"CRITICAL: Category weights sum to {total}, expected 100")
        return self


# Default weight instance
CATEGORY_WEIGHTS = CategoryWeights().validate()

# Scoring version
SCORING_VERSION = settings.SCORING_VERSION
