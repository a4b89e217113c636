"""Scrape endpoints: single URL and batch.

Routes
------
POST /scrape          Body: {"url": "https://..."}        → ScrapeResult
POST /scrape/batch    Body: {"urls": ["https://...", ...]} → {"results": [...]}
"""

from __future__ import annotations

import sys
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from contact_scraper.config import settings
from contact_scraper.scraper.errors import BatchTooLargeError
from contact_scraper.scraper.fetcher import is_valid_url
from contact_scraper.scraper.orchestrator import scrape_batch, scrape_url

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeRequest(BaseModel):
    url: Optional[str] = None


class BatchScrapeRequest(BaseModel):
    urls: Optional[list[Any]] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("")
def scrape_endpoint(body: ScrapeRequest) -> Any:
    """Scrape one URL.

    Returns the :class:`ScrapeResult` with status 200 on success, or the
    failed result with status 500 when the scrape could not complete.
    """
    if not body.url:
        raise HTTPException(status_code=400, detail="URL is required")
    if not is_valid_url(body.url):
        raise HTTPException(status_code=400, detail="Invalid URL format")

    result = scrape_url(body.url)
    if not result.success:
        print(f"[API] scrape failed for {body.url!r}: {result.error}", file=sys.stderr)
        return JSONResponse(status_code=500, content=result.to_dict())
    return result.to_dict()


@router.post("/batch")
def scrape_batch_endpoint(body: BatchScrapeRequest) -> dict[str, Any]:
    """Scrape up to ``settings.max_batch_size`` URLs.

    Malformed entries do not fail the request; each one comes back as a
    failed result in its original position.
    """
    if body.urls is None:
        raise HTTPException(status_code=400, detail="URLs array is required")
    if len(body.urls) > settings.max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_batch_size} URLs allowed per batch",
        )

    urls = [u if isinstance(u, str) else str(u) for u in body.urls]
    try:
        results = scrape_batch(urls)
    except BatchTooLargeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"results": [r.to_dict() for r in results]}
