# ABOUTME: Runtime configuration for metadata lookups.
# ABOUTME: LookupConfig holds provider URLs, the Open Library courtesy delay, and the Google Books key.

import os
from collections.abc import Mapping
from dataclasses import dataclass

OPENLIBRARY_URL = "https://openlibrary.org"
GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1"
DEFAULT_REQUEST_DELAY_MS = 1000
DEFAULT_TIMEOUT = 30.0

ENV_DELAY_MS = "BOOKSCAN_OPENLIBRARY_DELAY_MS"
ENV_GOOGLE_BOOKS_API_KEY = "BOOKSCAN_GOOGLE_BOOKS_API_KEY"
ENV_OPENLIBRARY_URL = "BOOKSCAN_OPENLIBRARY_URL"
ENV_GOOGLE_BOOKS_URL = "BOOKSCAN_GOOGLE_BOOKS_URL"
ENV_TIMEOUT = "BOOKSCAN_TIMEOUT"


@dataclass(frozen=True)
class LookupConfig:
    """Settings consumed by build_coordinator().

    request_delay_ms is the minimum gap between Open Library requests;
    Google Books is not throttled.
    """

    request_delay_ms: int = DEFAULT_REQUEST_DELAY_MS
    google_books_api_key: str | None = None
    openlibrary_base_url: str = OPENLIBRARY_URL
    google_books_base_url: str = GOOGLE_BOOKS_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if self.request_delay_ms < 0:
            msg = f"request_delay_ms must be non-negative, got {self.request_delay_ms}"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be positive, got {self.timeout}"
            raise ValueError(msg)

    @property
    def request_delay(self) -> float:
        """The Open Library delay in seconds."""
        return self.request_delay_ms / 1000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LookupConfig":
        """Build a config from BOOKSCAN_* environment variables, defaulting anything unset.

        Raises:
            ValueError: If a numeric variable does not parse or is out of range.
        """
        env = os.environ if environ is None else environ

        delay_raw = env.get(ENV_DELAY_MS, "").strip()
        timeout_raw = env.get(ENV_TIMEOUT, "").strip()
        try:
            delay_ms = int(delay_raw) if delay_raw else DEFAULT_REQUEST_DELAY_MS
        except ValueError as exc:
            raise ValueError(f"{ENV_DELAY_MS} must be an integer, got {delay_raw!r}") from exc
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise ValueError(f"{ENV_TIMEOUT} must be a number, got {timeout_raw!r}") from exc

        return cls(
            request_delay_ms=delay_ms,
            google_books_api_key=env.get(ENV_GOOGLE_BOOKS_API_KEY) or None,
            openlibrary_base_url=env.get(ENV_OPENLIBRARY_URL) or OPENLIBRARY_URL,
            google_books_base_url=env.get(ENV_GOOGLE_BOOKS_URL) or GOOGLE_BOOKS_URL,
            timeout=timeout,
        )
