"""Pure text detectors for contact fields and the contact-region rule set.

Each field type (name, title, phone, email) has one :class:`Detector`
holding an ordered table of patterns.  Earlier entries take priority:
``find`` returns the first hit of the first pattern that produces an
acceptable match.

:class:`RegionRules` describes which markup subtrees are worth scanning
for a grouped contact.  It is plain data so the selector list can be
tuned without touching the extractor.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional, Pattern, Sequence

from contact_scraper.scraper.models import UNKNOWN_TITLE
from contact_scraper.scraper.normalizer import (
    is_valid_phone,
    normalize_email,
    normalize_phone,
)

# ---------------------------------------------------------------------------
# Pattern tables
# ---------------------------------------------------------------------------

_UPPER_FI = "A-ZÄÖÅ"
_LOWER_FI = "a-zäöå"

FINNISH_NAME = re.compile(
    rf"\b[{_UPPER_FI}][{_LOWER_FI}]+ [{_UPPER_FI}][{_LOWER_FI}]+"
    rf"(?:\s[{_UPPER_FI}][{_LOWER_FI}]+)?\b"
)
INTERNATIONAL_NAME = re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+(?:\s[A-Z][a-z]+)?\b")
LOOSE_NAME = re.compile(rf"\b[{_UPPER_FI}][{_LOWER_FI}]+\s+[{_UPPER_FI}][{_LOWER_FI}]+\b")

NAME_PATTERNS: Sequence[Pattern[str]] = (FINNISH_NAME, INTERNATIONAL_NAME, LOOSE_NAME)

PHONE_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"\+358\s?[0-9]{2}\s?[0-9]{3}\s?[0-9]{4}"),  # +358 40 123 4567
    re.compile(r"0[0-9]{1,2}\s?[0-9]{3}\s?[0-9]{4}"),  # 040 123 4567, 09 123 4567
    re.compile(r"0[0-9]{1,2}-[0-9]{3}-[0-9]{4}"),  # 040-123-4567
    re.compile(r"0[0-9]{1,2}\.[0-9]{3}\.[0-9]{4}"),  # 040.123.4567
)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# Specific compound titles come before the generic words they contain.
TITLE_KEYWORDS: Sequence[str] = (
    "toimitusjohtaja", "tj", "ceo", "managing director",
    "myyntipäällikkö", "sales manager", "myynti",
    "markkinointipäällikkö", "marketing manager", "markkinointi",
    "asiakaspalvelupäällikkö", "customer service manager",
    "henkilöstöpäällikkö", "hr manager", "henkilöstö",
    "talouspäällikkö", "financial manager", "talous",
    "projektipäällikkö", "project manager", "projekti",
    "tiimipäällikkö", "team leader", "tiimi",
    "päällikkö", "manager", "johtaja", "director",
    "asiantuntija", "specialist", "konsultti", "consultant",
    "kehittäjä", "developer", "suunnittelija", "designer",
    "avustaja", "assistant", "koordinaattori", "coordinator",
)

# Shape-only probes for the co-occurrence catch-all.  Deliberately looser
# than the detectors: they decide whether a region is worth a closer look.
_HAS_NAME = re.compile(rf"\b[{_UPPER_FI}][{_LOWER_FI}]+ [{_UPPER_FI}][{_LOWER_FI}]+")
_HAS_PHONE = re.compile(r"(\+358|0)[0-9\s\-.]{8,}")


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------

class Detector(ABC):
    """Finds one kind of contact field inside a text blob."""

    @property
    @abstractmethod
    def field(self) -> str:
        """Name of the field this detector produces."""

    @abstractmethod
    def find(self, text: str) -> Optional[str]:
        """Return the highest-priority accepted match, or ``None``."""

    @abstractmethod
    def find_all(self, text: str) -> List[str]:
        """Return every accepted match, deduplicated, in discovery order."""


def dedupe_preserving_order(values: List[str]) -> List[str]:
    seen: set[str] = set()
    unique: List[str] = []
    for v in values:
        if v not in seen:
            seen.add(v)
            unique.append(v)
    return unique


class NameDetector(Detector):
    """Capitalised word pairs (optionally triples), Finnish letters included."""

    def __init__(self, patterns: Sequence[Pattern[str]] = NAME_PATTERNS) -> None:
        self._patterns = patterns

    @property
    def field(self) -> str:
        return "name"

    def find(self, text: str) -> Optional[str]:
        for pattern in self._patterns:
            match = pattern.search(text)
            if match:
                return match.group(0).strip()
        return None

    def find_all(self, text: str) -> List[str]:
        # Only the primary pattern; the fallbacks are too eager page-wide.
        matches = self._patterns[0].finditer(text)
        return dedupe_preserving_order([m.group(0).strip() for m in matches])


class TitleDetector(Detector):
    """Case-insensitive keyword search; list order is the priority."""

    def __init__(self, keywords: Sequence[str] = TITLE_KEYWORDS) -> None:
        self._keywords = keywords

    @property
    def field(self) -> str:
        return "title"

    def find(self, text: str) -> Optional[str]:
        lowered = text.lower()
        for keyword in self._keywords:
            if keyword in lowered:
                return keyword
        return None

    def find_all(self, text: str) -> List[str]:
        lowered = text.lower()
        return [k for k in self._keywords if k in lowered]

    def title_for(self, text: str) -> str:
        """Like :meth:`find` but falls back to the ``unknown`` sentinel."""
        return self.find(text) or UNKNOWN_TITLE


class PhoneDetector(Detector):
    """Finnish phone numbers; matches must validate and come back normalized."""

    def __init__(self, patterns: Sequence[Pattern[str]] = PHONE_PATTERNS) -> None:
        self._patterns = patterns

    @property
    def field(self) -> str:
        return "phone"

    def find(self, text: str) -> Optional[str]:
        for pattern in self._patterns:
            match = pattern.search(text)
            if match and is_valid_phone(match.group(0)):
                return normalize_phone(match.group(0))
        return None

    def find_all(self, text: str) -> List[str]:
        found: List[str] = []
        for pattern in self._patterns:
            for match in pattern.finditer(text):
                phone = match.group(0).strip()
                if is_valid_phone(phone):
                    found.append(normalize_phone(phone))
        return dedupe_preserving_order(found)


class EmailDetector(Detector):
    """``local@domain.tld`` addresses, lower-cased and re-validated."""

    def __init__(self, pattern: Pattern[str] = EMAIL_PATTERN) -> None:
        self._pattern = pattern

    @property
    def field(self) -> str:
        return "email"

    def find(self, text: str) -> Optional[str]:
        for match in self._pattern.finditer(text):
            email = normalize_email(match.group(0))
            if email:
                return email
        return None

    def find_all(self, text: str) -> List[str]:
        found: List[str] = []
        for match in self._pattern.finditer(text):
            email = normalize_email(match.group(0))
            if email:
                found.append(email)
        return dedupe_preserving_order(found)


def has_contact_signals(text: str) -> bool:
    """Return ``True`` if *text* holds a name shape plus a phone or email shape."""
    if not _HAS_NAME.search(text):
        return False
    return bool(_HAS_PHONE.search(text) or EMAIL_PATTERN.search(text))


# ---------------------------------------------------------------------------
# Contact-bearing region rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RegionRules:
    """CSS selector rule set for regions likely to hold a person's details.

    ``class_tokens`` are matched as substrings of the ``class`` attribute of
    each tag in ``token_tags``.  ``selectors`` and ``landmarks`` are used
    verbatim, then ``card_selectors``.  ``catch_all_tags`` are the tags the
    extractor probes with :func:`has_contact_signals` once every rule above
    has been applied.
    """

    class_tokens: Sequence[str]
    token_tags: Sequence[str]
    selectors: Sequence[str]
    landmarks: Sequence[str]
    card_selectors: Sequence[str]
    catch_all_tags: Sequence[str]

    def region_selectors(self) -> Iterator[str]:
        """Yield selectors in scan order (earlier selectors win on dedup)."""
        for tag in self.token_tags:
            for token in self.class_tokens:
                yield f'{tag}[class*="{token}"]'
        yield from self.selectors
        yield from self.landmarks
        yield from self.card_selectors


DEFAULT_REGION_RULES = RegionRules(
    class_tokens=(
        "contact", "team", "henkilöstö", "staff", "employee", "person",
        "yhteystiedot", "henkilökunta",
    ),
    token_tags=("section", "div"),
    selectors=(
        ".contact-info", ".contact-details",
        ".team-member", ".staff-member", ".employee-card", ".person-card",
        ".contact-card", ".contact-item", ".team-item", ".staff-item", ".person-item",
        "#contact", "#team",
        '[id="henkilöstö"]', '[id="henkilökunta"]', '[id="yhteystiedot"]',
        "[data-contact]", "[data-team-member]", "[data-staff-member]",
        ".footer-contact", ".contact-section", ".team-section", ".staff-section",
    ),
    landmarks=("footer", "address"),
    card_selectors=(
        ".contact-item", ".team-item", ".person", ".staff", ".member",
        ".employee", ".worker",
    ),
    catch_all_tags=("div", "section", "article"),
)

# Narrower set used for the legacy (name, title) pass.
LEGACY_PEOPLE_SELECTORS: Sequence[str] = (
    'section[class*="contact"]',
    'section[class*="team"]',
    'section[class*="henkilöstö"]',
    'div[class*="contact"]',
    'div[class*="team"]',
    'div[class*="henkilöstö"]',
    ".contact-info",
    ".team-member",
    ".staff-member",
    "#contact",
    "#team",
    '[id="henkilöstö"]',
)
