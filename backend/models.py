"""Data models and types used across the backend.

API request/response schemas are in schemas.py.
Types passed between pipeline stages live here.
"""

from typing import Literal, TypedDict

IssueType = Literal["error", "warning", "info"]
Category = Literal["SEO", "Content", "Usability", "Technical"]

# Evaluation order of the rule engine; also the tie-break order for issues.
CATEGORIES: tuple[Category, ...] = ("SEO", "Content", "Usability", "Technical")
CATEGORY_MAX_SCORES: dict[str, int] = {
    "SEO": 30,
    "Content": 25,
    "Usability": 25,
    "Technical": 20,
}
SEVERITY_RANK: dict[str, int] = {"error": 0, "warning": 1, "info": 2}


class FetchResult(TypedDict):
    """Raw page returned by the fetcher."""

    html: str
    load_time_ms: int
    final_url: str
    status_code: int


class ExtractedSignals(TypedDict):
    """Flat set of facts derived from page markup."""

    title: str
    description: str
    h1_count: int
    has_canonical: bool
    has_og_tags: bool
    has_viewport: bool
    has_favicon: bool
    has_structured_data: bool
    has_menu: bool
    has_pdf_menu: bool
    has_hours: bool
    has_address: bool
    has_phone: bool
    has_phone_text: bool
    has_tel_link: bool
    has_ordering: bool
    has_reservation: bool
    has_social: bool
    has_maps: bool
    image_count: int
    images_with_alt: int


class Issue(TypedDict):
    """Single finding attributed to a scoring category."""

    type: IssueType
    text: str
    category: Category


class CategoryScore(TypedDict):
    score: int
    max_score: int
    percentage: int


class GradeResult(TypedDict):
    """Output of the rule engine."""

    score: int
    breakdown: dict[str, CategoryScore]
    issues: list[Issue]


class AIInsights(TypedDict):
    """Narrative insights returned by the generative model."""

    summary: str
    top_priority: str
    quick_wins: list[str]
    competitor_tip: str
    estimated_impact: str


class AuditReport(TypedDict):
    """Complete result of one audit."""

    url: str
    title: str
    score: int
    breakdown: dict[str, CategoryScore]
    issues: list[Issue]
    load_time_ms: int
    ai_insights: AIInsights | None


def normalize_issue(value: object, category: str = "SEO") -> Issue:
    """
    Coerce an issue into the structured form.

    Older responses carried issues as bare strings; those become warnings in
    the given category.
    """
    if isinstance(value, str):
        return {"type": "warning", "text": value.strip(), "category": category}  # type: ignore[typeddict-item]
    if isinstance(value, dict):
        issue_type = str(value.get("type") or "warning").lower()
        if issue_type not in SEVERITY_RANK:
            issue_type = "warning"
        issue_category = str(value.get("category") or category)
        if issue_category not in CATEGORY_MAX_SCORES:
            issue_category = category
        return {
            "type": issue_type,  # type: ignore[typeddict-item]
            "text": str(value.get("text") or "").strip(),
            "category": issue_category,  # type: ignore[typeddict-item]
        }
    raise ValueError(f"Cannot interpret issue of type {type(value).__name__}")
