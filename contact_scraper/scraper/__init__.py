"""Scraper package: page fetch, contact extraction and batch orchestration."""

from contact_scraper.scraper.extractor import extract_contacts
from contact_scraper.scraper.fetcher import Fetcher, fetch_page
from contact_scraper.scraper.models import (
    ContactRecord,
    ExtractionResult,
    Page,
    Person,
    ScrapeResult,
)
from contact_scraper.scraper.orchestrator import scrape_batch, scrape_url

__all__ = [
    "Fetcher",
    "fetch_page",
    "extract_contacts",
    "scrape_url",
    "scrape_batch",
    "Page",
    "ContactRecord",
    "Person",
    "ExtractionResult",
    "ScrapeResult",
]
