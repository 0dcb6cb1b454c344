"""Audit pipeline: fetch -> extract -> grade -> insights -> report."""

import logging
import re
from urllib.parse import urlparse

from anthropic import Anthropic

from ai_service import generate_insights
from errors import FetchError, InvalidURLError
from grader import grade_website
from models import AIInsights, AuditReport, ExtractedSignals, GradeResult
from scraper import extract_signals, fetch_page

logger = logging.getLogger(__name__)

TITLE_DISPLAY_CHARS = 60
_WHITESPACE = re.compile(r"\s")
_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def normalize_url(raw_url: object) -> str:
    """
    Validate a user-supplied URL and give it a scheme.
    Bare domains are assumed to be https. Raises InvalidURLError.
    """
    if not isinstance(raw_url, str) or not raw_url.strip():
        raise InvalidURLError("URL is required")

    url = raw_url.strip()
    if not url.lower().startswith(("http://", "https://")):
        if _SCHEME.match(url):
            raise InvalidURLError("Invalid URL format")
        url = "https://" + url

    try:
        parsed = urlparse(url)
        host = parsed.hostname
        parsed.port  # raises ValueError for a non-numeric port
    except ValueError as e:
        raise InvalidURLError("Invalid URL format") from e
    if parsed.scheme.lower() not in ("http", "https") or not host or _WHITESPACE.search(parsed.netloc):
        raise InvalidURLError("Invalid URL format")
    return url


def truncate_title(title: str) -> str:
    if len(title) > TITLE_DISPLAY_CHARS:
        return title[:TITLE_DISPLAY_CHARS] + "..."
    return title


def assemble_report(
    url: str,
    signals: ExtractedSignals,
    grade: GradeResult,
    load_time_ms: int,
    ai_insights: AIInsights | None,
) -> AuditReport:
    """Merge grading and insight output into the response record."""
    return {
        "url": url,
        "title": truncate_title(signals["title"]),
        "score": grade["score"],
        "breakdown": grade["breakdown"],
        "issues": grade["issues"],
        "load_time_ms": load_time_ms,
        "ai_insights": ai_insights,
    }


def run_audit(raw_url: object, client: Anthropic | None = None) -> AuditReport:
    """
    Audit one page. Only URL validation and fetch failures propagate;
    insight failures degrade to a report without insights.
    """
    url = normalize_url(raw_url)
    logger.info("Scanning %s", url)

    try:
        page = fetch_page(url)
    except FetchError as e:
        logger.error("Fetch failed for %s: %s", url, e)
        raise

    signals = extract_signals(page["html"])
    grade = grade_website(signals, url, page["load_time_ms"])

    headline = {
        "url": url,
        "title": signals["title"][:TITLE_DISPLAY_CHARS],
        "score": grade["score"],
        "load_time_ms": page["load_time_ms"],
    }
    ai_insights = generate_insights(headline, grade["issues"], client)

    logger.info(
        "Scored %s: %d/100, %d issues (%s)",
        url,
        grade["score"],
        len(grade["issues"]),
        "with AI insights" if ai_insights else "no AI insights",
    )
    return assemble_report(url, signals, grade, page["load_time_ms"], ai_insights)
