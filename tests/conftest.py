"""
Pytest Configuration and Shared Fixtures
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from scraper import SAFE_DEFAULT


# ============================================================================
# Markup Fixtures
# ============================================================================

RESTAURANT_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>Luigi's Trattoria - Fresh Pasta in Downtown Portland</title>
  <meta name="description" content="Luigi's Trattoria serves handmade pasta, wood-fired pizza and Italian wines in downtown Portland. Order online or book a table today.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta property="og:title" content="Luigi's Trattoria">
  <link rel="canonical" href="https://luigis.example/">
  <link rel="shortcut icon" href="/favicon.ico">
  <script type="application/ld+json">{"@type": "Restaurant", "name": "Luigi's"}</script>
  <style>.hero { color: red; }</style>
</head>
<body>
  <h1>Luigi's Trattoria</h1>
  <nav><a href="/menu">Our Menu</a> <a href="https://www.doordash.com/store/luigis">Delivery</a></nav>
  <p>Hours: Tue-Sun 11am - 10pm</p>
  <p>Address: 123 Main Street, Portland</p>
  <p>Call us: <a href="tel:+15035550123">(503) 555-0123</a></p>
  <p><a href="https://www.opentable.com/luigis">Reserve</a></p>
  <p><a href="https://instagram.com/luigis">Instagram</a></p>
  <iframe src="https://www.google.com/maps/embed?pb=abc"></iframe>
  <img src="1.jpg" alt="Carbonara"><img src="2.jpg" alt="Lasagna">
  <img src="3.jpg" alt="Tiramisu"><img src="4.jpg" alt="Dining room">
  <img src="5.jpg" alt="Pizza oven">
</body>
</html>
"""

MINIMAL_HTML = "<html><body><p>Hello there</p></body></html>"


@pytest.fixture
def restaurant_html() -> str:
    return RESTAURANT_HTML


@pytest.fixture
def minimal_html() -> str:
    return MINIMAL_HTML


# ============================================================================
# Signal Fixtures
# ============================================================================

@pytest.fixture
def make_signals():
    """Factory for ExtractedSignals starting from the empty defaults."""

    def _make(**overrides):
        signals = dict(SAFE_DEFAULT)
        signals.update(overrides)
        return signals

    return _make


@pytest.fixture
def perfect_signals(make_signals):
    """Signals that earn every available point."""
    return make_signals(
        title="Luigi's Trattoria - Fresh Pasta in Portland",
        description="x" * 140,
        h1_count=1,
        has_canonical=True,
        has_og_tags=True,
        has_viewport=True,
        has_favicon=True,
        has_structured_data=True,
        has_menu=True,
        has_hours=True,
        has_address=True,
        has_phone=True,
        has_phone_text=True,
        has_tel_link=True,
        has_ordering=True,
        has_reservation=True,
        has_social=True,
        has_maps=True,
        image_count=6,
        images_with_alt=6,
    )


# ============================================================================
# AI Client Fixtures
# ============================================================================

VALID_INSIGHTS_JSON = """{
  "summary": "Solid basics. Ordering is easy to find.",
  "topPriority": "Add structured data so Google shows rich results.",
  "quickWins": ["Add a favicon", "Link the phone number", "Embed a map"],
  "competitorTip": "Top restaurants feature seasonal specials on the homepage.",
  "estimatedImpact": "10-20%"
}"""


def text_response(text: str) -> SimpleNamespace:
    """Mimic an Anthropic Messages response carrying one text block."""
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)], stop_reason="end_turn")


@pytest.fixture
def fake_client():
    """Anthropic-like client whose messages.create is a MagicMock."""
    client = MagicMock()
    client.messages.create.return_value = text_response(VALID_INSIGHTS_JSON)
    return client
