"""Business signal detection for restaurant homepages.

Each signal is declared as a tuple of predicates. A predicate receives the
parsed page and its lower-cased visible body text; a signal is present when
any of its predicates holds.
"""

import re
from typing import Callable

from bs4 import BeautifulSoup

Predicate = Callable[[BeautifulSoup, str], bool]

PHONE_PATTERN = re.compile(r"(\+?1?[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4})")


def phrase(*needles: str) -> Predicate:
    """True when any needle occurs in the body text."""
    lowered = tuple(n.lower() for n in needles)

    def check(soup: BeautifulSoup, text: str) -> bool:
        return any(n in text for n in lowered)

    return check


def pattern(regex: re.Pattern) -> Predicate:
    """True when the regex matches somewhere in the body text."""

    def check(soup: BeautifulSoup, text: str) -> bool:
        return regex.search(text) is not None

    return check


def element(selector: str) -> Predicate:
    """True when the CSS selector matches at least one element."""

    def check(soup: BeautifulSoup, text: str) -> bool:
        return soup.select_one(selector) is not None

    return check


def link_to(*fragments: str) -> tuple[Predicate, ...]:
    """One predicate per fragment: an <a href> containing it."""
    return tuple(element(f'a[href*="{f}" i]') for f in fragments)


_TEL_LINK = element('a[href^="tel:" i]')
_PHONE_TEXT = pattern(PHONE_PATTERN)

BUSINESS_SIGNALS: dict[str, tuple[Predicate, ...]] = {
    "has_menu": (
        phrase("menu"),
        element('a[href*="menu" i]'),
        element('img[alt*="menu" i]'),
    ),
    "has_pdf_menu": (element('a[href$=".pdf" i]'),),
    "has_hours": (phrase("hours", "open", "am", "pm"),),
    "has_address": (phrase("address", "location", "street"),),
    "has_phone": (_PHONE_TEXT, _TEL_LINK),
    "has_phone_text": (_PHONE_TEXT,),
    "has_tel_link": (_TEL_LINK,),
    "has_ordering": (
        phrase("order online", "order now"),
        *link_to("order", "doordash", "ubereats", "grubhub"),
    ),
    "has_reservation": (
        phrase("reserv", "book a table"),
        *link_to("opentable", "resy"),
    ),
    "has_social": link_to("facebook.com", "instagram.com", "twitter.com", "tiktok.com"),
    "has_maps": (
        element('iframe[src*="google.com/maps" i]'),
        *link_to("maps.google", "goo.gl/maps"),
    ),
}


def detect_signals(soup: BeautifulSoup, body_text: str) -> dict[str, bool]:
    """Evaluate every declared business signal against one page."""
    return {
        name: any(predicate(soup, body_text) for predicate in predicates)
        for name, predicates in BUSINESS_SIGNALS.items()
    }
