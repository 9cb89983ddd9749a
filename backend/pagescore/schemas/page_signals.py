"""
Pydantic schemas for parsed page signals (scoring input).

Every field is optional. Malformed values are normalised to their
worst-case/zero form instead of failing validation, so scoring stays total.
"""

import math
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from pagescore.exceptions import InvalidInputError


def _count(value: Any) -> int:
    return int(_ratio(value))


def _ratio(value: Any) -> float:
    if value is None or isinstance(value, (list, dict)):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _text(value: Any) -> str:
    if value is None or isinstance(value, (list, dict)):
        return ""
    return str(value)


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _items(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _mapping(value: Any) -> dict:
    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    return {}


def _headings(value: Any) -> list[str]:
    """Heading lists may hold plain strings or {"text": ...} objects."""
    texts = []
    for item in _items(value):
        if isinstance(item, Mapping):
            item = item.get("text", "")
        texts.append(_text(item))
    return texts


Count = Annotated[int, BeforeValidator(_count)]
Ratio = Annotated[float, BeforeValidator(_ratio)]
Text = Annotated[str, BeforeValidator(_text)]
Flag = Annotated[bool, BeforeValidator(_flag)]
Items = Annotated[list, BeforeValidator(_items)]
Tags = Annotated[dict[str, Any], BeforeValidator(_mapping)]
Headings = Annotated[list[str], BeforeValidator(_headings)]


class _Signals(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class MetaSignals(_Signals):
    """Meta tags extracted from <head>."""
    title: Text = ""
    title_length: Count = 0
    description: Text = ""
    description_length: Count = 0
    keywords: Text = ""
    canonical: Text = ""
    og_title: Text = ""
    og_description: Text = ""
    og_image: Text = ""
    og_url: Text = ""

    @model_validator(mode="before")
    @classmethod
    def derive_lengths(cls, data: Any) -> Any:
        # A length the extractor did not report is derived from the text itself.
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        for text_field, length_field in (("title", "title_length"), ("description", "description_length")):
            if data.get(length_field) is None and data.get(text_field):
                data[length_field] = len(_text(data[text_field]))
        return data


class HeadingSignals(_Signals):
    h1: Headings = Field(default_factory=list)
    h2: Headings = Field(default_factory=list)
    h3: Headings = Field(default_factory=list)
    h4: Headings = Field(default_factory=list)
    h5: Headings = Field(default_factory=list)
    h6: Headings = Field(default_factory=list)

    def levels(self) -> list[list[str]]:
        """Headings ordered h1..h6."""
        return [self.h1, self.h2, self.h3, self.h4, self.h5, self.h6]


class ImageSignals(_Signals):
    total_count: Count = 0
    without_alt_count: Count = 0
    without_title_count: Count = 0


class LinkSignals(_Signals):
    total_count: Count = 0
    internal_count: Count = 0
    external_count: Count = 0
    nofollow_count: Count = 0
    empty_anchor_count: Count = 0


class ContentSignals(_Signals):
    word_count: Count = 0
    text_to_html_ratio: Ratio = 0.0
    reading_time_minutes: Ratio = 0.0
    paragraphs: Count = 0


class TechnicalSignals(_Signals):
    doctype: Text = ""
    lang_attribute: Text = ""
    ssl_required: Flag = False
    schema_markup_present: Flag = False
    open_graph_present: Flag = False
    inline_styles_count: Count = 0
    inline_scripts_count: Count = 0


class SocialMediaSignals(_Signals):
    open_graph: Tags = Field(default_factory=dict)
    twitter_cards: Tags = Field(default_factory=dict)


class StructuredDataSignals(_Signals):
    json_ld: Items = Field(default_factory=list)
    microdata: Items = Field(default_factory=list)
    rdfa: Items = Field(default_factory=list)


class ParsedPageSignals(_Signals):
    """Normalized signals handed over by the HTML parsing collaborator."""
    meta: MetaSignals = Field(default_factory=MetaSignals)
    headings: HeadingSignals = Field(default_factory=HeadingSignals)
    images: ImageSignals = Field(default_factory=ImageSignals)
    links: LinkSignals = Field(default_factory=LinkSignals)
    content: ContentSignals = Field(default_factory=ContentSignals)
    technical: TechnicalSignals = Field(default_factory=TechnicalSignals)
    social_media: SocialMediaSignals = Field(default_factory=SocialMediaSignals)
    structured_data: StructuredDataSignals = Field(default_factory=StructuredDataSignals)

    @field_validator(
        "meta", "headings", "images", "links", "content",
        "technical", "social_media", "structured_data",
        mode="before",
    )
    @classmethod
    def default_group(cls, value: Any) -> Any:
        if isinstance(value, BaseModel) or isinstance(value, Mapping):
            return value
        return {}

    @classmethod
    def coerce(cls, value: Any) -> "ParsedPageSignals":
        """Accept a model instance or a plain mapping (e.g. decoded JSON)."""
        if value is None:
            raise InvalidInputError("Page signals are required, got None")
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise InvalidInputError(f"Page signals must be a mapping, got {type(value).__name__}")

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "meta": {
                    "title": "Handmade Oak Furniture for Every Room | Woodline",
                    "description": "Browse solid oak tables, chairs and shelving built to last generations. Free delivery on orders over $500. Discover our collection today.",
                },
                "headings": {"h1": ["Handmade Oak Furniture"], "h2": ["Tables", "Chairs"]},
                "images": {"total_count": 3, "without_alt_count": 0, "without_title_count": 0},
                "links": {"total_count": 5, "internal_count": 5, "external_count": 0, "empty_anchor_count": 0},
                "content": {"word_count": 500, "text_to_html_ratio": 28, "reading_time_minutes": 2.5, "paragraphs": 6},
                "technical": {"doctype": "html", "lang_attribute": "en", "ssl_required": True},
            }
        },
    )
