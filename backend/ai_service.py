"""
AI insights for a finished audit, generated with Claude.

The Anthropic client is created per request by build_insight_client() and
passed in explicitly. Without ANTHROPIC_API_KEY no client is built and the
audit simply carries no insights.
"""

import json
import logging
import re
from collections.abc import Sequence

from anthropic import Anthropic

from config import (
    INSIGHT_MAX_TOKENS,
    INSIGHT_MODEL_CANDIDATES,
    INSIGHT_TEMPERATURE,
    INSIGHT_TIMEOUT_SECONDS,
    get_api_key,
)
from errors import InsightError
from models import AIInsights, Issue

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = """You are a restaurant marketing expert.
Return ONLY valid raw JSON that matches the schema exactly.
Do not include markdown, code fences, or text outside JSON."""

USER_TEMPLATE = """Analyze this restaurant website audit and provide actionable insights.

Website: {title} ({url})
Score: {score}/100
Load Time: {load_time_ms}ms

Issues Found:
{issue_lines}

Provide a JSON response with ONLY these fields (no markdown, no code blocks, just raw JSON):
{{
  "summary": "A 2-sentence summary of the website's online presence",
  "topPriority": "The single most important thing to fix and why (1-2 sentences)",
  "quickWins": ["Easy fix 1", "Easy fix 2", "Easy fix 3"],
  "competitorTip": "One tip about what successful restaurants do differently",
  "estimatedImpact": "20-30%"
}}

Respond ONLY with valid JSON. No explanation, no markdown."""

SELFTEST_PROMPT = 'Say "Hello" in JSON: {"message": "Hello"}'
SELFTEST_MAX_TOKENS = 50
PREVIEW_CHARS = 100

_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")

# JSON key -> AIInsights key
_TEXT_FIELDS = {
    "summary": "summary",
    "topPriority": "top_priority",
    "competitorTip": "competitor_tip",
    "estimatedImpact": "estimated_impact",
}


def build_insight_client(api_key: str | None = None) -> Anthropic | None:
    """Return a fresh Anthropic client, or None when no key is configured."""
    key = (api_key if api_key is not None else get_api_key()).strip()
    if not key:
        return None
    return Anthropic(api_key=key, timeout=INSIGHT_TIMEOUT_SECONDS, max_retries=0)


def _format_issue(issue: Issue) -> str:
    return f"- [{issue['type'].upper()}] {issue['text']} ({issue['category']})"


def build_prompt(report: dict, issues: Sequence[Issue]) -> str:
    """Fill the insight prompt with one audit's headline data and issues."""
    issue_lines = "\n".join(_format_issue(i) for i in issues) or "- None"
    return USER_TEMPLATE.format(
        title=report.get("title", "") or "",
        url=report.get("url", ""),
        score=report.get("score", 0),
        load_time_ms=report.get("load_time_ms", 0),
        issue_lines=issue_lines,
    )


def _extract_response_text(response: object) -> str:
    content = ""
    for block in getattr(response, "content", []) or []:
        text = getattr(block, "text", None)
        if text:
            content += text
    return content.strip()


def strip_code_fence(text: str) -> str:
    """Remove a ```json ... ``` wrapper if the model added one."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned)
    cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def parse_insights(text: str) -> AIInsights:
    """
    Parse a model reply into AIInsights.
    Raises InsightError when the reply is not JSON of the expected shape.
    """
    try:
        raw = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise InsightError(f"Invalid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise InsightError("Expected a JSON object")

    parsed: dict = {}
    for json_key, key in _TEXT_FIELDS.items():
        value = raw.get(json_key)
        if not isinstance(value, str) or not value.strip():
            raise InsightError(f"Missing or empty field: {json_key}")
        parsed[key] = value.strip()

    quick_wins = raw.get("quickWins")
    if not isinstance(quick_wins, list):
        raise InsightError("quickWins must be a list")
    wins = [w.strip() for w in quick_wins if isinstance(w, str) and w.strip()]
    if len(wins) < 3:
        raise InsightError(f"quickWins needs 3 entries, got {len(wins)}")
    parsed["quick_wins"] = wins[:3]

    return AIInsights(
        summary=parsed["summary"],
        top_priority=parsed["top_priority"],
        quick_wins=parsed["quick_wins"],
        competitor_tip=parsed["competitor_tip"],
        estimated_impact=parsed["estimated_impact"],
    )


def _call_model(client: Anthropic, model: str, prompt: str, max_tokens: int, system: str | None) -> str:
    kwargs = {
        "model": model,
        "max_tokens": max_tokens,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": INSIGHT_TEMPERATURE,
    }
    if system:
        kwargs["system"] = system
    try:
        response = client.messages.create(**kwargs)
    except Exception as e:
        raise InsightError(str(e) or e.__class__.__name__) from e
    content = _extract_response_text(response)
    if not content:
        raise InsightError("Empty response content")
    return content


def generate_insights(
    report: dict,
    issues: Sequence[Issue],
    client: Anthropic | None,
    models: Sequence[str] = INSIGHT_MODEL_CANDIDATES,
) -> AIInsights | None:
    """
    Ask each model in order for insights; return the first valid answer.
    Returns None when no client is given or every model fails. Never raises.
    """
    if client is None:
        logger.info("Skipping AI insights - no API key configured")
        return None

    prompt = build_prompt(report, issues)
    for model in models:
        try:
            logger.info("Trying insight model %s", model)
            content = _call_model(client, model, prompt, INSIGHT_MAX_TOKENS, SYSTEM_MESSAGE)
            logger.debug("Raw insight response from %s: %s", model, content[:200])
            insights = parse_insights(content)
        except InsightError as e:
            logger.warning("Insight model %s failed: %s", model, str(e)[:PREVIEW_CHARS])
            continue
        except Exception:
            logger.exception("Unexpected error from insight model %s", model)
            continue
        logger.info("AI insights generated with %s", model)
        return insights

    logger.error("All insight models failed")
    return None


def run_selftest(client: Anthropic | None, models: Sequence[str] = INSIGHT_MODEL_CANDIDATES) -> dict:
    """
    Try the model chain with a trivial prompt, stopping at the first model
    that answers. Used to check the key and model availability.
    """
    if client is None:
        return {
            "status": "error",
            "message": "AI client not configured",
            "apiKeyFound": bool(get_api_key()),
        }

    results: list[dict] = []
    for model in models:
        try:
            content = _call_model(client, model, SELFTEST_PROMPT, SELFTEST_MAX_TOKENS, None)
        except InsightError as e:
            results.append({"model": model, "status": "error", "message": str(e)[:PREVIEW_CHARS]})
            continue
        results.append({"model": model, "status": "success", "response": content[:PREVIEW_CHARS]})
        break

    return {"results": results}
