"""FastAPI application factory.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /scrape    single-URL and batch contact scraping
    /upload    CSV upload of URL lists
    /export    CSV export of scrape results

Request bodies that fail schema validation are answered with 400, the same
status used for every other malformed request.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contact_scraper.api.routers import csv_files as csv_router
from contact_scraper.api.routers import scrape as scrape_router


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    detail = f"{location}: {message}" if location else message
    return JSONResponse(status_code=400, content={"detail": detail})


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Contact Scraper API",
        description=(
            "Extracts names, titles, phone numbers and email addresses from "
            "company websites, one URL at a time or in batches of up to 50."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.include_router(scrape_router.router, prefix="/scrape", tags=["scrape"])
    app.include_router(csv_router.upload_router, prefix="/upload", tags=["csv"])
    app.include_router(csv_router.export_router, prefix="/export", tags=["csv"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn contact_scraper.api.app:app --reload
app = create_app()
