"""Plain-text rendering of scrape results for the CLI."""

from __future__ import annotations

from typing import List

from contact_scraper.scraper.models import ScrapeResult


def render_result(result: ScrapeResult) -> str:
    """Render one result as an indented block.

    Grouped contacts are listed first, followed by the flattened phone,
    email and people fields.
    """
    lines: List[str] = []
    if not result.success or result.data is None:
        lines.append(f"✗ {result.url}")
        lines.append(f"    error: {result.error or 'Unknown error'}")
        return "\n".join(lines)

    data = result.data
    lines.append(f"✓ {result.url}")

    if data.contacts:
        lines.append(f"    contacts ({len(data.contacts)}):")
        for contact in data.contacts:
            parts = [contact.name, contact.title]
            if contact.phone:
                parts.append(contact.phone)
            if contact.email:
                parts.append(contact.email)
            lines.append("      - " + " | ".join(parts))
    else:
        lines.append("    contacts: (none)")

    lines.append(f"    phones : {', '.join(data.phone_numbers) or '(none)'}")
    lines.append(f"    emails : {', '.join(data.email_addresses) or '(none)'}")
    people = ", ".join(f"{p.name} ({p.title})" for p in data.people)
    lines.append(f"    people : {people or '(none)'}")
    return "\n".join(lines)


def render_summary(results: List[ScrapeResult]) -> str:
    """One-line tally of a batch run."""
    ok = sum(1 for r in results if r.success)
    contacts = sum(len(r.data.contacts) for r in results if r.data is not None)
    return f"{ok}/{len(results)} URL(s) scraped, {contacts} contact(s) found"
