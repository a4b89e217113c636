"""Failure taxonomy for the fetch + extract pipeline.

Every failure a scrape can end in is a :class:`ScrapeError` subclass.  The
fetcher uses ``retryable`` to decide whether to try the next request
profile; the orchestrator only needs ``str(exc)`` to build a failed
:class:`~contact_scraper.scraper.models.ScrapeResult`.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

# HTTP statuses that will not change on retry.
NON_RETRYABLE_STATUSES = frozenset({400, 401, 403, 404})


class ErrorKind(str, Enum):
    INVALID_INPUT = "InvalidInput"
    CLIENT_ERROR = "ClientError"
    HOST_UNREACHABLE = "HostUnreachable"
    TRANSIENT_NETWORK = "TransientNetwork"
    EXHAUSTED_RETRIES = "ExhaustedRetries"
    PARSE_FAILURE = "ParseFailure"


class ScrapeError(Exception):
    """Base class for all classified scrape failures.

    Attributes:
        kind: The :class:`ErrorKind` of the failure.
        retryable: Whether a later attempt with another profile may succeed.
        attempts: Number of fetch attempts made when the error was raised.
    """

    kind: ErrorKind = ErrorKind.TRANSIENT_NETWORK
    retryable: bool = False

    def __init__(self, message: str, *, attempts: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.attempts = attempts

    def finalise(self, url: str, attempts: int) -> "ScrapeError":
        """Stamp the terminal message and attempt count onto this error."""
        self.attempts = attempts
        self.message = failure_message(url, attempts, self.message)
        self.args = (self.message,)
        return self


def failure_message(url: str, attempts: int, reason: str) -> str:
    """Format the message surfaced for a scrape that gave up."""
    noun = "attempt" if attempts == 1 else "attempts"
    return f"Failed to scrape {url} after {attempts} {noun}: {reason}"


class InvalidInputError(ScrapeError):
    """The URL is malformed; no network request was made."""

    kind = ErrorKind.INVALID_INPUT


class ClientError(ScrapeError):
    """The server answered with a 4xx status."""

    kind = ErrorKind.CLIENT_ERROR

    def __init__(self, message: str, *, status_code: int, attempts: int = 0) -> None:
        super().__init__(message, attempts=attempts)
        self.status_code = status_code
        # 408 / 429 and friends may clear up with a slower, plainer request.
        self.retryable = status_code not in NON_RETRYABLE_STATUSES


class HostUnreachableError(ScrapeError):
    """DNS lookup failed for good, or the host refused the connection."""

    kind = ErrorKind.HOST_UNREACHABLE


class TransientNetworkError(ScrapeError):
    """Timeouts, 5xx responses and other transport hiccups."""

    kind = ErrorKind.TRANSIENT_NETWORK
    retryable = True


class ExhaustedRetriesError(ScrapeError):
    """Every attempt failed with a retryable error."""

    kind = ErrorKind.EXHAUSTED_RETRIES

    def __init__(
        self,
        message: str,
        *,
        attempts: int = 0,
        last_error: Optional[ScrapeError] = None,
    ) -> None:
        super().__init__(message, attempts=attempts)
        self.last_error = last_error


class ParseFailureError(ScrapeError):
    """The page was fetched but extraction raised."""

    kind = ErrorKind.PARSE_FAILURE


class BatchTooLargeError(ScrapeError):
    """A batch request exceeded the configured URL limit."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Maximum {limit} URLs allowed per batch (got {size})")
        self.size = size
        self.limit = limit
