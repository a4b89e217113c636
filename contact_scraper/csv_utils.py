"""CSV helpers: URL lists in, scrape results out."""

from __future__ import annotations

import csv
import io
from typing import Iterable, List

from contact_scraper.scraper.fetcher import is_valid_url
from contact_scraper.scraper.models import ScrapeResult
from contact_scraper.scraper.patterns import dedupe_preserving_order

CSV_HEADERS = ["URL", "Name", "Title", "Phone", "Email", "Error"]
LIST_SEPARATOR = "; "


def parse_csv_urls(content: str) -> List[str]:
    """Return the valid URLs found in the first column of *content*.

    Cells are stripped; anything that is not a well-formed ``http(s)`` URL
    is skipped, which also drops a header row such as ``URL``.  Repeated
    URLs (an exported results file has one row per contact) are kept once.
    """
    if content.startswith("\ufeff"):
        content = content[1:]

    urls: List[str] = []
    reader = csv.reader(io.StringIO(content))
    for row in reader:
        if not row:
            continue
        value = row[0].strip()
        if is_valid_url(value):
            urls.append(value)
    return dedupe_preserving_order(urls)


def _rows_for(result: ScrapeResult) -> List[List[str]]:
    if not result.success or result.data is None:
        return [[result.url, "", "", "", "", result.error or "Unknown error"]]

    data = result.data
    if data.contacts:
        return [
            [result.url, c.name, c.title, c.phone or "", c.email or "", ""]
            for c in data.contacts
        ]

    # No grouped contacts: fall back to the flattened fields on one row.
    return [[
        result.url,
        LIST_SEPARATOR.join(p.name for p in data.people),
        LIST_SEPARATOR.join(p.title for p in data.people),
        LIST_SEPARATOR.join(data.phone_numbers),
        LIST_SEPARATOR.join(data.email_addresses),
        "",
    ]]


def results_to_csv(results: Iterable[ScrapeResult]) -> str:
    """Render *results* as CSV text with a fixed header row.

    Values containing a comma, quote or newline are quoted, with inner
    quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADERS)
    for result in results:
        writer.writerows(_rows_for(result))
    return buffer.getvalue()
