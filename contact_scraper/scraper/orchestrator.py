"""Fetch + extract pipeline and the bounded-concurrency batch runner.

``scrape_url`` runs the pipeline for one URL; ``scrape_batch`` runs it for
up to ``settings.max_batch_size`` URLs, ``settings.max_concurrency`` at a
time.  Batches are processed in fixed chunks: a chunk must finish
completely before the next one starts.

Neither function raises for a per-URL failure.  Every error, classified or
not, is turned into a failed :class:`ScrapeResult` so one bad URL never
affects its siblings.
"""

from __future__ import annotations

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from contact_scraper.config import settings
from contact_scraper.scraper.errors import BatchTooLargeError, ParseFailureError
from contact_scraper.scraper.extractor import extract_contacts
from contact_scraper.scraper.fetcher import Fetcher
from contact_scraper.scraper.models import ExtractionResult, ScrapeResult

# Caps pipelines across every batch and single scrape running in this process.
_pipeline_slots = threading.BoundedSemaphore(settings.max_concurrency)


def _fetch_and_extract(url: str, fetcher: Fetcher) -> ExtractionResult:
    page = fetcher.fetch(url)
    try:
        return extract_contacts(page.html)
    except Exception as exc:
        raise ParseFailureError(f"Failed to extract contacts from {url}: {exc}") from exc


def _run_pipeline(url: str, fetcher: Fetcher) -> ScrapeResult:
    with _pipeline_slots:
        try:
            data = _fetch_and_extract(url, fetcher)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            print(f"[BATCH] ✗ {url!r}: {message}", file=sys.stderr)
            return ScrapeResult.failed(url, message)
    print(f"[BATCH] ✓ {url!r}: {len(data.contacts)} contact(s)", file=sys.stderr)
    return ScrapeResult.ok(url, data)


def chunked(urls: Sequence[str], size: int) -> List[Sequence[str]]:
    """Split *urls* into consecutive chunks of at most *size* items."""
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    return [urls[i:i + size] for i in range(0, len(urls), size)]


def scrape_url(url: str, fetcher: Optional[Fetcher] = None) -> ScrapeResult:
    """Scrape a single URL; never raises for scrape failures."""
    return _run_pipeline(url, fetcher or Fetcher())


def scrape_batch(
    urls: Sequence[str],
    fetcher: Optional[Fetcher] = None,
    concurrency: Optional[int] = None,
) -> List[ScrapeResult]:
    """Scrape *urls* in chunks and return one result per URL, in input order.

    Raises:
        BatchTooLargeError: More than ``settings.max_batch_size`` URLs were
            given.  Raised before any request is made.
    """
    if len(urls) > settings.max_batch_size:
        raise BatchTooLargeError(len(urls), settings.max_batch_size)

    fetcher = fetcher or Fetcher()
    size = concurrency or settings.max_concurrency
    results: List[Optional[ScrapeResult]] = [None] * len(urls)

    chunks = chunked(list(urls), size)
    for index, chunk in enumerate(chunks):
        offset = index * size
        print(
            f"[BATCH] chunk {index + 1}/{len(chunks)}: {len(chunk)} URL(s)",
            file=sys.stderr,
        )
        with ThreadPoolExecutor(max_workers=len(chunk)) as pool:
            futures = [pool.submit(_run_pipeline, url, fetcher) for url in chunk]
            # Leaving the ``with`` block waits for the whole chunk.
        for position, future in enumerate(futures):
            results[offset + position] = future.result()

    return [r for r in results if r is not None]
