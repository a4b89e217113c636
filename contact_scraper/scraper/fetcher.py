"""HTTP fetcher with an escalating-realism retry policy.

Each attempt uses a different :class:`RequestProfile`, from a full
browser-like header set down to a bare request, with longer timeouts and
more redirects allowed as the profiles get plainer.  Failures are
classified (see :mod:`contact_scraper.scraper.errors`); non-retryable ones
stop the loop immediately.
"""

from __future__ import annotations

import random
import sys
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence
from urllib.parse import urlsplit

import httpx

from contact_scraper.config import settings
from contact_scraper.scraper.errors import (
    ClientError,
    ExhaustedRetriesError,
    HostUnreachableError,
    InvalidInputError,
    ScrapeError,
    TransientNetworkError,
    failure_message,
)
from contact_scraper.scraper.models import Page

USER_AGENTS: Sequence[str] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

# Substrings of ``httpx.ConnectError`` messages that will not improve on retry.
_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname provided",
    "getaddrinfo failed",
    "no address associated with hostname",
    "name does not resolve",
)
_REFUSED_MARKERS = (
    "connection refused",
    "actively refused",
)


# ---------------------------------------------------------------------------
# Request profiles
# ---------------------------------------------------------------------------

def _full_headers(user_agent: str) -> Dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "fi-FI,fi;q=0.9,en-US;q=0.8,en;q=0.7",
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "DNT": "1",
        "Referer": "https://www.google.com/",
    }


def _minimal_headers(user_agent: str) -> Dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "fi-FI,fi;q=0.9,en;q=0.8",
        "Connection": "keep-alive",
    }


@dataclass(frozen=True)
class RequestProfile:
    """How one attempt presents itself to the server."""

    name: str
    timeout: float
    max_redirects: int
    headers: Optional[Callable[[str], Dict[str, str]]] = None

    def build_headers(self, user_agent: str) -> Optional[Dict[str, str]]:
        if self.headers is None:
            return None
        return self.headers(user_agent)


PROFILES: Sequence[RequestProfile] = (
    RequestProfile("full", timeout=20.0, max_redirects=10, headers=_full_headers),
    RequestProfile("minimal", timeout=25.0, max_redirects=15, headers=_minimal_headers),
    RequestProfile("simple", timeout=30.0, max_redirects=20),
)


# ---------------------------------------------------------------------------
# Classification helpers
# ---------------------------------------------------------------------------

def is_valid_url(url: str) -> bool:
    """Return ``True`` if *url* is an absolute ``http(s)`` URL with a host."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parts = urlsplit(url.strip())
        # Accessing .port validates it (raises ValueError when out of range).
        parts.port
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)


def classify_transport_error(exc: httpx.HTTPError) -> ScrapeError:
    """Map an ``httpx`` transport exception onto the failure taxonomy."""
    message = str(exc) or exc.__class__.__name__
    if isinstance(exc, httpx.TimeoutException):
        return TransientNetworkError(f"Timeout: {message}")
    if isinstance(exc, httpx.ConnectError):
        lowered = message.lower()
        if any(marker in lowered for marker in _DNS_FAILURE_MARKERS):
            return HostUnreachableError(f"DNS resolution failed: {message}")
        if any(marker in lowered for marker in _REFUSED_MARKERS):
            return HostUnreachableError(f"Connection refused: {message}")
    if isinstance(exc, httpx.UnsupportedProtocol):
        return InvalidInputError(f"Invalid URL provided: {message}")
    return TransientNetworkError(message)


def classify_response(response: httpx.Response) -> Optional[ScrapeError]:
    """Return the failure a response represents, or ``None`` if it is usable."""
    status = response.status_code
    if status >= 500:
        return TransientNetworkError(f"HTTP {status}: {response.reason_phrase}")
    if status >= 400:
        return ClientError(f"HTTP {status}: {response.reason_phrase}", status_code=status)
    return None


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------

class Fetcher:
    """Fetch pages with up to ``settings.max_attempts`` escalating attempts.

    Args:
        rng: Source of randomness for user-agent choice and jitter.
        sleep: Callable used for every delay; tests pass a recorder.
        profiles: Request profiles in attempt order.  Attempts beyond the
            last profile reuse it.
        max_attempts: Overrides ``settings.max_attempts``.
    """

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
        profiles: Sequence[RequestProfile] = PROFILES,
        user_agents: Sequence[str] = USER_AGENTS,
        max_attempts: Optional[int] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._profiles = profiles
        self._user_agents = user_agents
        self._max_attempts = max_attempts

    @property
    def max_attempts(self) -> int:
        return self._max_attempts or settings.max_attempts

    def _profile_for(self, attempt: int) -> RequestProfile:
        return self._profiles[min(attempt, len(self._profiles)) - 1]

    def _pause(self, attempt: int) -> None:
        jitter = self._rng.uniform(settings.jitter_min, settings.jitter_max)
        self._sleep(settings.retry_delay(attempt) + jitter)

    def _attempt(self, url: str, profile: RequestProfile) -> Page:
        user_agent = self._rng.choice(self._user_agents)
        try:
            with httpx.Client(
                headers=profile.build_headers(user_agent),
                timeout=profile.timeout,
                follow_redirects=True,
                max_redirects=profile.max_redirects,
            ) as client:
                response = client.get(url)
        except httpx.HTTPError as exc:
            raise classify_transport_error(exc) from exc
        except httpx.InvalidURL as exc:
            raise InvalidInputError(f"Invalid URL provided: {exc}") from exc

        error = classify_response(response)
        if error is not None:
            raise error

        return Page(
            url=url,
            html=response.text,
            final_url=str(response.url),
            status_code=response.status_code,
        )

    def fetch(self, url: str) -> Page:
        """Fetch *url* and return a :class:`Page`.

        Raises:
            InvalidInputError: *url* is malformed (no request is made).
            ClientError: A 400/401/403/404 response.
            HostUnreachableError: DNS lookup failed or the connection was refused.
            ExhaustedRetriesError: Every attempt failed with a retryable error.
        """
        if not is_valid_url(url):
            raise InvalidInputError(f"Invalid URL provided: {url!r}")

        max_attempts = self.max_attempts
        last_error: Optional[ScrapeError] = None

        for attempt in range(1, max_attempts + 1):
            self._pause(attempt)
            profile = self._profile_for(attempt)
            try:
                page = self._attempt(url, profile)
            except ScrapeError as exc:
                last_error = exc
                print(
                    f"[FETCH] attempt {attempt}/{max_attempts} ({profile.name}) "
                    f"failed for {url}: {exc.message} [{exc.kind.value}]",
                    file=sys.stderr,
                )
                if not exc.retryable:
                    print(
                        f"[FETCH] not retrying {url}: non-retryable {exc.kind.value}.",
                        file=sys.stderr,
                    )
                    raise exc.finalise(url, attempt)
                continue

            print(
                f"[FETCH] attempt {attempt}/{max_attempts} ({profile.name}) "
                f"{url} → HTTP {page.status_code}",
                file=sys.stderr,
            )
            return page

        reason = last_error.message if last_error else "Unknown error"
        raise ExhaustedRetriesError(
            failure_message(url, max_attempts, reason),
            attempts=max_attempts,
            last_error=last_error,
        )


def fetch_page(url: str) -> Page:
    """Fetch *url* with a default :class:`Fetcher`."""
    return Fetcher().fetch(url)
