"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

UNKNOWN_TITLE = "unknown"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Page:
    """A successfully fetched page, ready for extraction."""

    url: str
    html: str
    final_url: str
    status_code: int


@dataclass(frozen=True)
class Person:
    """A (name, title) pair from the legacy flattened view."""

    name: str
    title: str = UNKNOWN_TITLE

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "title": self.title}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Person":
        return cls(name=data["name"], title=data.get("title") or UNKNOWN_TITLE)


@dataclass(frozen=True)
class ContactRecord:
    """One person's details, all drawn from the same page region."""

    name: str
    title: str = UNKNOWN_TITLE
    phone: Optional[str] = None
    email: Optional[str] = None

    @property
    def key(self) -> str:
        """Deduplication key: the case-folded name."""
        return self.name.lower()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "title": self.title}
        if self.phone:
            data["phone"] = self.phone
        if self.email:
            data["email"] = self.email
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContactRecord":
        return cls(
            name=data["name"],
            title=data.get("title") or UNKNOWN_TITLE,
            phone=data.get("phone") or None,
            email=data.get("email") or None,
        )


@dataclass(frozen=True)
class ExtractionResult:
    """Everything extracted from one page.

    ``contacts`` is the grouped view.  ``phone_numbers``, ``email_addresses``
    and ``people`` form the legacy flattened view; they come from separate
    whole-page passes and are not derived from ``contacts``.
    """

    contacts: List[ContactRecord] = field(default_factory=list)
    phone_numbers: List[str] = field(default_factory=list)
    email_addresses: List[str] = field(default_factory=list)
    people: List[Person] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "contacts": [c.to_dict() for c in self.contacts],
            "phoneNumbers": list(self.phone_numbers),
            "emailAddresses": list(self.email_addresses),
            "people": [p.to_dict() for p in self.people],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractionResult":
        return cls(
            contacts=[ContactRecord.from_dict(c) for c in data.get("contacts", [])],
            phone_numbers=list(data.get("phoneNumbers", [])),
            email_addresses=list(data.get("emailAddresses", [])),
            people=[Person.from_dict(p) for p in data.get("people", [])],
        )


@dataclass(frozen=True)
class ScrapeResult:
    """The terminal outcome for one requested URL."""

    url: str
    success: bool
    data: Optional[ExtractionResult] = None
    error: Optional[str] = None
    timestamp: str = field(default_factory=_utc_now)

    @classmethod
    def ok(cls, url: str, data: ExtractionResult) -> "ScrapeResult":
        return cls(url=url, success=True, data=data)

    @classmethod
    def failed(cls, url: str, error: str) -> "ScrapeResult":
        return cls(url=url, success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON shape used on the wire."""
        out: dict[str, Any] = {"url": self.url, "success": self.success}
        if self.data is not None:
            out["data"] = self.data.to_dict()
        if self.error is not None:
            out["error"] = self.error
        out["timestamp"] = self.timestamp
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScrapeResult":
        payload = data.get("data")
        return cls(
            url=data["url"],
            success=bool(data.get("success")),
            data=ExtractionResult.from_dict(payload) if payload else None,
            error=data.get("error"),
            timestamp=data.get("timestamp") or _utc_now(),
        )
