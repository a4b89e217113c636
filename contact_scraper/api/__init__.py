"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from contact_scraper.api import app

    uvicorn contact_scraper.api:app --reload
"""

from contact_scraper.api.app import app

__all__ = ["app"]
