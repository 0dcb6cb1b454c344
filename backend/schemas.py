"""Pydantic schemas for API request/response."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models import AuditReport, normalize_issue


class CamelModel(BaseModel):
    """Serializes snake_case fields with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuditRequest(BaseModel):
    """Request body for POST /audit. The URL is validated by the pipeline."""

    url: Any = None


class IssueItem(BaseModel):
    """Single audit finding."""

    type: Literal["error", "warning", "info"]
    text: str
    category: Literal["SEO", "Content", "Usability", "Technical"]


class CategoryScoreItem(CamelModel):
    score: int
    max_score: int
    percentage: int


class Breakdown(BaseModel):
    seo: CategoryScoreItem
    content: CategoryScoreItem
    usability: CategoryScoreItem
    technical: CategoryScoreItem


class AIInsightsItem(CamelModel):
    """Narrative insights from the model."""

    summary: str
    top_priority: str
    quick_wins: list[str] = Field(min_length=3, max_length=3)
    competitor_tip: str
    estimated_impact: str


class AuditResponse(CamelModel):
    """Response for POST /audit."""

    url: str
    title: str
    score: int = Field(ge=0, le=100)
    breakdown: Breakdown
    issues: list[IssueItem]
    load_time_ms: int = Field(ge=0)
    ai_insights: AIInsightsItem | None = None

    @field_validator("issues", mode="before")
    @classmethod
    def normalize_issues(cls, value: object) -> list:
        if not isinstance(value, list):
            raise ValueError("issues must be a list")
        return [normalize_issue(item) for item in value]

    @classmethod
    def from_report(cls, report: AuditReport) -> "AuditResponse":
        return cls.model_validate(report)


class SelfTestResult(BaseModel):
    """Outcome of one self-test call."""

    model: str
    status: Literal["success", "error"]
    response: str | None = None
    message: str | None = None


class SelfTestResponse(CamelModel):
    """Response for GET /insight-selftest."""

    results: list[SelfTestResult] | None = None
    status: str | None = None
    message: str | None = None
    api_key_found: bool | None = None
