"""Contact extraction: turns page HTML into an :class:`ExtractionResult`.

Two independent passes run over the same parsed document:

* **Grouped**: every contact-bearing region yields at most one
  :class:`ContactRecord` whose fields all come from that region.
* **Legacy flattened**: page-wide lists of phones, emails and
  (name, title) pairs, kept for consumers of the older response shape.

The passes do not share results, so the two views can disagree.
"""

from __future__ import annotations

import sys
from typing import Iterable, List, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup
from bs4.element import Tag

from contact_scraper.config import settings
from contact_scraper.scraper.models import ContactRecord, ExtractionResult, Person
from contact_scraper.scraper.normalizer import (
    is_valid_phone,
    normalize_email,
    normalize_phone,
)
from contact_scraper.scraper.patterns import (
    DEFAULT_REGION_RULES,
    LEGACY_PEOPLE_SELECTORS,
    EmailDetector,
    NameDetector,
    PhoneDetector,
    RegionRules,
    TitleDetector,
    dedupe_preserving_order,
    has_contact_signals,
)

_NAMES = NameDetector()
_TITLES = TitleDetector()
_PHONES = PhoneDetector()
_EMAILS = EmailDetector()

_NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()
    return soup


def _text(element: Tag) -> str:
    return element.get_text(" ", strip=True)


def _tel_values(element: Tag) -> Iterable[str]:
    for link in element.select('a[href^="tel:"]'):
        value = str(link.get("href", ""))[len("tel:"):].strip()
        if value:
            yield value


def _mailto_values(element: Tag) -> Iterable[str]:
    for link in element.select('a[href^="mailto:"]'):
        value = str(link.get("href", ""))[len("mailto:"):]
        value = unquote(value.split("?", 1)[0]).strip()
        if value:
            yield value


def _first_link_phone(region: Tag) -> Optional[str]:
    for value in _tel_values(region):
        if is_valid_phone(value):
            return normalize_phone(value)
    return None


def _first_link_email(region: Tag) -> Optional[str]:
    for value in _mailto_values(region):
        email = normalize_email(value)
        if email:
            return email
    return None


# Region links consulted when the region text itself has no match.
_LINK_FALLBACKS = {
    _PHONES.field: _first_link_phone,
    _EMAILS.field: _first_link_email,
}


def _contact_from_region(region: Tag, text: Optional[str] = None) -> Optional[ContactRecord]:
    """Build one contact from *region*, or ``None`` when it holds no name."""
    if text is None:
        text = _text(region)
    name = _NAMES.find(text)
    if not name:
        return None
    fields = {
        detector.field: detector.find(text) or _LINK_FALLBACKS[detector.field](region)
        for detector in (_PHONES, _EMAILS)
    }
    return ContactRecord(name=name, title=_TITLES.title_for(text), **fields)


# ---------------------------------------------------------------------------
# Grouped pass
# ---------------------------------------------------------------------------

def extract_grouped_contacts(
    soup: BeautifulSoup,
    rules: RegionRules = DEFAULT_REGION_RULES,
    limit: Optional[int] = None,
) -> List[ContactRecord]:
    """Return deduplicated contacts from every contact-bearing region.

    Regions are visited selector by selector (document order within each),
    then the co-occurrence catch-all over ``rules.catch_all_tags`` and finally
    over the whole body.  The first record seen for a name wins.
    """
    if limit is None:
        limit = settings.max_contacts

    contacts: List[ContactRecord] = []
    seen: set[str] = set()

    def consider(record: Optional[ContactRecord]) -> None:
        if record is not None and record.key not in seen:
            seen.add(record.key)
            contacts.append(record)

    for selector in rules.region_selectors():
        for region in soup.select(selector):
            consider(_contact_from_region(region))

    for region in soup.find_all(list(rules.catch_all_tags)):
        text = _text(region)
        if has_contact_signals(text):
            consider(_contact_from_region(region, text))

    # Last resort: the page body as a single region.
    body = soup.body or soup
    text = _text(body)
    if has_contact_signals(text):
        consider(_contact_from_region(body, text))

    return contacts[:limit]


# ---------------------------------------------------------------------------
# Legacy flattened pass
# ---------------------------------------------------------------------------

def extract_phone_numbers(soup: BeautifulSoup) -> List[str]:
    """Every valid phone in ``tel:`` links and in the page text, normalized."""
    found = [normalize_phone(v) for v in _tel_values(soup) if is_valid_phone(v)]
    body = soup.body or soup
    found.extend(_PHONES.find_all(_text(body)))
    return dedupe_preserving_order(found)


def extract_email_addresses(soup: BeautifulSoup) -> List[str]:
    """Every valid email in ``mailto:`` links and in the page text, lower-cased."""
    found = [e for e in (normalize_email(v) for v in _mailto_values(soup)) if e]
    body = soup.body or soup
    found.extend(_EMAILS.find_all(_text(body)))
    return dedupe_preserving_order(found)


def extract_people(soup: BeautifulSoup, limit: Optional[int] = None) -> List[Person]:
    """(name, title) pairs found inside contact-style sections.

    Each name in a section is paired with the first title keyword that
    appears anywhere in that section.
    """
    if limit is None:
        limit = settings.max_people

    people: List[Person] = []
    seen: set[str] = set()
    for selector in LEGACY_PEOPLE_SELECTORS:
        for section in soup.select(selector):
            text = _text(section)
            title = _TITLES.title_for(text)
            for name in _NAMES.find_all(text):
                if not 3 < len(name) < 50 or name.lower() in seen:
                    continue
                seen.add(name.lower())
                people.append(Person(name=name, title=title))
    return people[:limit]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_contacts(html: str, rules: RegionRules = DEFAULT_REGION_RULES) -> ExtractionResult:
    """Extract grouped contacts and the legacy flattened fields from *html*."""
    soup = _parse(html)
    result = ExtractionResult(
        contacts=extract_grouped_contacts(soup, rules),
        phone_numbers=extract_phone_numbers(soup),
        email_addresses=extract_email_addresses(soup),
        people=extract_people(soup),
    )
    title = soup.title.get_text(strip=True)[:50] if soup.title else ""
    print(
        f"[EXTRACT] {len(result.contacts)} contact(s), "
        f"{len(result.phone_numbers)} phone(s), "
        f"{len(result.email_addresses)} email(s), "
        f"{len(result.people)} people  title={title!r}",
        file=sys.stderr,
    )
    return result
