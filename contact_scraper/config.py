"""Centralised settings for the contact scraper.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Batch orchestration
    # ------------------------------------------------------------------
    max_batch_size: int = field(
        default_factory=lambda: int(os.environ.get("SCRAPER_MAX_BATCH_SIZE", "50"))
    )
    max_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("SCRAPER_MAX_CONCURRENCY", "5"))
    )

    # ------------------------------------------------------------------
    # Fetcher retry policy
    # ------------------------------------------------------------------
    max_attempts: int = field(
        default_factory=lambda: int(os.environ.get("SCRAPER_MAX_ATTEMPTS", "3"))
    )
    retry_base_delay: float = field(
        default_factory=lambda: float(os.environ.get("SCRAPER_RETRY_BASE_DELAY", "1.0"))
    )
    jitter_min: float = field(
        default_factory=lambda: float(os.environ.get("SCRAPER_JITTER_MIN", "0.5"))
    )
    jitter_max: float = field(
        default_factory=lambda: float(os.environ.get("SCRAPER_JITTER_MAX", "1.5"))
    )

    # ------------------------------------------------------------------
    # Extraction limits
    # ------------------------------------------------------------------
    max_contacts: int = field(
        default_factory=lambda: int(os.environ.get("SCRAPER_MAX_CONTACTS", "10"))
    )
    max_people: int = field(
        default_factory=lambda: int(os.environ.get("SCRAPER_MAX_PEOPLE", "10"))
    )

    # ------------------------------------------------------------------
    # CSV upload
    # ------------------------------------------------------------------
    csv_max_bytes: int = field(
        default_factory=lambda: int(os.environ.get("SCRAPER_CSV_MAX_BYTES", str(5 * 1024 * 1024)))
    )

    # ------------------------------------------------------------------
    # API server
    # ------------------------------------------------------------------
    api_host: str = field(
        default_factory=lambda: os.environ.get("SCRAPER_API_HOST", "127.0.0.1")
    )
    api_port: int = field(
        default_factory=lambda: int(os.environ.get("SCRAPER_API_PORT", "8000"))
    )

    def retry_delay(self, attempt: int) -> float:
        """Progressive delay (seconds) slept before *attempt* (1-based).

        The first attempt is never delayed; later attempts wait
        ``retry_base_delay * attempt`` seconds.
        """
        if attempt <= 1:
            return 0.0
        return self.retry_base_delay * attempt


# Module-level singleton; import this everywhere:
#   from contact_scraper.config import settings
settings = Settings()
