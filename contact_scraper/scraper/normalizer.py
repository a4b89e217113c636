"""Validation and canonical forms for phone numbers and email addresses."""

from __future__ import annotations

import re
from typing import Optional

_NON_PHONE_CHARS = re.compile(r"[^\d+]")
_CLEAN_PHONE = re.compile(r"^(\+358|0)\d{8,9}$")
_SPACED_PHONE = re.compile(r"^(\+358|0)\d{2}\s?\d{3}\s?\d{4}$")
_EMAIL = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

FINNISH_PREFIX = "+358"


def _clean_phone(phone: str) -> str:
    return _NON_PHONE_CHARS.sub("", phone)


def is_valid_phone(phone: str) -> bool:
    """Return ``True`` if *phone* is a Finnish national or ``+358`` number."""
    return bool(_CLEAN_PHONE.match(_clean_phone(phone)) or _SPACED_PHONE.match(phone))


def normalize_phone(phone: str) -> str:
    """Return *phone* in ``+358…`` form.

    Numbers already carrying the country code pass through (minus
    separators); ``0``-prefixed national numbers get the country code in
    place of the leading zero.  Anything else is returned as given.
    """
    clean = _clean_phone(phone)
    if clean.startswith(FINNISH_PREFIX):
        return clean
    if clean.startswith("0"):
        return FINNISH_PREFIX + clean[1:]
    return phone


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL.match(email))


def normalize_email(email: str) -> Optional[str]:
    """Return the lower-cased *email*, or ``None`` when it is not valid."""
    candidate = email.strip()
    if not is_valid_email(candidate):
        return None
    return candidate.lower()
