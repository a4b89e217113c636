"""CSV endpoints: URL list upload and results export.

Routes
------
POST /upload/csv    Multipart file upload        → {"success", "urls", "count"}
POST /export/csv    Body: {"results": [...]}     → text/csv attachment
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from contact_scraper.config import settings
from contact_scraper.csv_utils import parse_csv_urls, results_to_csv
from contact_scraper.scraper.models import ScrapeResult

upload_router = APIRouter()
export_router = APIRouter()

EXPORT_FILENAME = "scraping-results.csv"


class ExportRequest(BaseModel):
    results: list[dict[str, Any]]


@upload_router.post("/csv")
async def upload_csv_endpoint(file: Optional[UploadFile] = File(None)) -> dict[str, Any]:
    """Read a CSV of URLs (first column) and return the valid ones.

    The file must end in ``.csv``, be no larger than
    ``settings.csv_max_bytes`` and contain between 1 and
    ``settings.max_batch_size`` valid URLs.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")

    content = await file.read()
    if len(content) > settings.csv_max_bytes:
        limit_mb = settings.csv_max_bytes // (1024 * 1024)
        raise HTTPException(
            status_code=400, detail=f"File size must be less than {limit_mb}MB"
        )

    urls = parse_csv_urls(content.decode("utf-8", errors="replace"))
    if not urls:
        raise HTTPException(status_code=400, detail="No valid URLs found in CSV file")
    if len(urls) > settings.max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_batch_size} URLs allowed per CSV file",
        )

    return {"success": True, "urls": urls, "count": len(urls)}


@export_router.post("/csv")
def export_csv_endpoint(body: ExportRequest) -> Response:
    """Render previously returned scrape results as a downloadable CSV."""
    try:
        results = [ScrapeResult.from_dict(item) for item in body.results]
    except (KeyError, TypeError, AttributeError) as exc:
        raise HTTPException(status_code=400, detail=f"Malformed result: {exc}") from exc

    return Response(
        content=results_to_csv(results),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
