"""Rule-based grading of a restaurant homepage.

Four independent evaluators (SEO, Content, Usability, Technical) turn the
extracted signals into points and issues. Weights and thresholds are fixed
empirical constants; the category maxima sum to 100, so the total score is
the raw point sum.
"""

from urllib.parse import urlparse

from models import (
    CATEGORIES,
    CATEGORY_MAX_SCORES,
    SEVERITY_RANK,
    CategoryScore,
    ExtractedSignals,
    GradeResult,
    Issue,
)

TITLE_MIN_CHARS = 30
TITLE_MAX_CHARS = 60
DESCRIPTION_MIN_CHARS = 120
DESCRIPTION_MAX_CHARS = 160
MIN_IMAGE_COUNT = 5
MIN_ALT_COVERAGE = 0.5
FAST_LOAD_MS = 2000
SLOW_LOAD_MS = 5000

# (issue type, text) pairs produced by a single evaluator, in check order.
Findings = list[tuple[str, str]]


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def _percentage(part: float, whole: float) -> int:
    if whole <= 0:
        return 0
    return _round_half_up(part / whole * 100)


def _evaluate_seo(signals: ExtractedSignals) -> tuple[int, Findings]:
    score = 0
    findings: Findings = []

    title_len = len(signals["title"])
    if TITLE_MIN_CHARS <= title_len <= TITLE_MAX_CHARS:
        score += 8
    elif title_len > 0:
        score += 4
        findings.append(("warning", f"Title length ({title_len} chars) should be 30-60 characters"))
    else:
        findings.append(("error", "Missing page title"))

    desc_len = len(signals["description"])
    if DESCRIPTION_MIN_CHARS <= desc_len <= DESCRIPTION_MAX_CHARS:
        score += 8
    elif desc_len > 0:
        score += 4
        findings.append(
            ("warning", f"Meta description ({desc_len} chars) should be 120-160 characters")
        )
    else:
        findings.append(("error", "Missing meta description - hurts Google rankings"))

    h1_count = signals["h1_count"]
    if h1_count == 1:
        score += 6
    elif h1_count == 0:
        findings.append(("error", "Missing H1 heading"))
    else:
        score += 3
        findings.append(("warning", f"Multiple H1 tags found ({h1_count}) - should have exactly 1"))

    if signals["has_canonical"]:
        score += 4
    else:
        findings.append(("info", "No canonical URL set"))

    if signals["has_og_tags"]:
        score += 4
    else:
        findings.append(("warning", "Missing Open Graph tags - social sharing won't look good"))

    return score, findings


def _evaluate_content(signals: ExtractedSignals) -> tuple[int, Findings]:
    score = 0
    findings: Findings = []

    if signals["has_pdf_menu"]:
        score += 2
        findings.append(("error", "PDF menu detected - hard for Google to read, bad on mobile"))
    elif signals["has_menu"]:
        score += 8
    else:
        findings.append(("warning", "No menu found on homepage"))

    if signals["has_hours"]:
        score += 5
    else:
        findings.append(("error", "Business hours not found - customers need this!"))

    if signals["has_address"]:
        score += 4
    else:
        findings.append(("warning", "Address/location not clearly visible"))

    if signals["has_phone"]:
        score += 4
    else:
        findings.append(("warning", "Phone number not found"))

    image_count = signals["image_count"]
    if image_count >= MIN_IMAGE_COUNT:
        score += 4
        coverage = signals["images_with_alt"] / image_count
        if coverage < MIN_ALT_COVERAGE:
            findings.append(
                ("warning", f"Only {_round_half_up(coverage * 100)}% of images have alt text")
            )
    else:
        findings.append(("info", "Consider adding more food photos"))

    return score, findings


def _evaluate_usability(signals: ExtractedSignals) -> tuple[int, Findings]:
    score = 0
    findings: Findings = []

    if signals["has_ordering"]:
        score += 8
    else:
        findings.append(("error", "No online ordering option found - you're losing sales!"))

    if signals["has_reservation"]:
        score += 5
    else:
        findings.append(("info", "No reservation system detected"))

    if signals["has_social"]:
        score += 4
    else:
        findings.append(("warning", "No social media links found"))

    if signals["has_tel_link"]:
        score += 4
    elif signals["has_phone_text"]:
        findings.append(("warning", "Phone number not clickable on mobile"))

    if signals["has_maps"]:
        score += 4
    else:
        findings.append(("info", "Consider embedding Google Maps"))

    return score, findings


def _evaluate_technical(
    signals: ExtractedSignals, url: str, load_time_ms: int
) -> tuple[int, Findings]:
    score = 0
    findings: Findings = []

    if signals["has_viewport"]:
        score += 6
    else:
        findings.append(("error", "Not mobile-friendly - missing viewport meta tag"))

    if urlparse(url).scheme.lower() == "https":
        score += 5
    else:
        findings.append(("error", "Site not secure (no HTTPS) - Google penalizes this"))

    if signals["has_favicon"]:
        score += 3
    else:
        findings.append(("info", "Missing favicon"))

    if signals["has_structured_data"]:
        score += 6
    else:
        findings.append(
            ("warning", "No structured data (Schema.org) - missing rich snippets in Google")
        )

    if load_time_ms < FAST_LOAD_MS:
        score += 2
    elif load_time_ms > SLOW_LOAD_MS:
        findings.append(
            ("warning", f"Slow load time ({load_time_ms / 1000:.1f}s) - aim for under 3 seconds")
        )

    return score, findings


def sort_issues(issues: list[Issue]) -> list[Issue]:
    """Errors first, then warnings, then info; stable within a severity."""
    return sorted(issues, key=lambda issue: SEVERITY_RANK[issue["type"]])


def total_score(breakdown: dict[str, CategoryScore]) -> int:
    earned = sum(c["score"] for c in breakdown.values())
    possible = sum(c["max_score"] for c in breakdown.values())
    return _percentage(earned, possible)


def grade_website(signals: ExtractedSignals, url: str, load_time_ms: int) -> GradeResult:
    """
    Score a page from its signals.

    Returns the 0-100 total, the per-category breakdown keyed by lower-case
    category name, and every issue sorted by severity.
    """
    evaluated = {
        "SEO": _evaluate_seo(signals),
        "Content": _evaluate_content(signals),
        "Usability": _evaluate_usability(signals),
        "Technical": _evaluate_technical(signals, url, load_time_ms),
    }

    breakdown: dict[str, CategoryScore] = {}
    issues: list[Issue] = []
    for category in CATEGORIES:
        raw_score, findings = evaluated[category]
        max_score = CATEGORY_MAX_SCORES[category]
        score = min(raw_score, max_score)
        breakdown[category.lower()] = {
            "score": score,
            "max_score": max_score,
            "percentage": _percentage(score, max_score),
        }
        issues.extend(
            {"type": issue_type, "text": text, "category": category}  # type: ignore[misc]
            for issue_type, text in findings
        )

    return {
        "score": total_score(breakdown),
        "breakdown": breakdown,
        "issues": sort_issues(issues),
    }
