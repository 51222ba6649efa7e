# ABOUTME: HTTP client abstraction for metadata provider API calls.
# ABOUTME: Provides a lock-guarded rate limiter and an httpx client with injectable transport for testing.

import logging
import threading
import time
from collections.abc import Callable
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


def _user_agent() -> str:
    try:
        return f"bookscan/{version('bookscan')}"
    except PackageNotFoundError:
        return "bookscan/0.1.0"


class MetadataFetchError(Exception):
    """Raised when an HTTP request to a metadata provider fails.

    status_code is set when the server answered with a non-success status,
    and is None for transport or decoding failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def log_fetch_failure(
    log: logging.Logger, provider: str, what: str, exc: MetadataFetchError
) -> None:
    """Log a failed provider call: debug for plain HTTP misses, error otherwise."""
    if exc.status_code is not None:
        log.debug("%s %s failed: %s", provider, what, exc)
    else:
        log.error("%s %s failed: %s", provider, what, exc)


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP GET operations against metadata APIs."""

    def get(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]: ...


class RateLimiter:
    """Enforces a minimum interval between consecutive requests.

    The elapsed-time check, the sleep, and the timestamp update all happen
    while holding one lock, so concurrent callers queue up behind each other
    and each delay is measured from the previous caller's actual request.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError(f"min_interval must be non-negative, got {min_interval}")
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_request_time: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    def wait(self) -> None:
        """Block until the next request may be sent, then record it."""
        with self._lock:
            if self._last_request_time is not None:
                elapsed = self._clock() - self._last_request_time
                if elapsed < self._min_interval:
                    delay = self._min_interval - elapsed
                    logger.debug("Rate limiting: sleeping %.3fs", delay)
                    self._sleep(delay)
            self._last_request_time = self._clock()


class BookscanHttpClient:
    """HTTP client for metadata API calls.

    Wraps httpx.Client with an optional shared RateLimiter consulted before
    every request. Non-200 responses, transport errors and undecodable bodies
    all surface as MetadataFetchError.
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": _user_agent()},
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._rate_limiter = rate_limiter

    def get(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """Send a GET request, waiting on the rate limiter first if one is set.

        Args:
            url: The URL to request.
            params: Optional query parameters.

        Returns:
            Parsed JSON response body.

        Raises:
            MetadataFetchError: On transport errors, non-200 responses, or invalid JSON.
        """
        if self._rate_limiter is not None:
            self._rate_limiter.wait()

        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise MetadataFetchError(f"Request failed: {url}: {exc}") from exc

        if response.status_code != 200:
            raise MetadataFetchError(
                f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise MetadataFetchError(f"Invalid JSON from {url}: {exc}") from exc
        if not isinstance(data, dict):
            raise MetadataFetchError(f"Unexpected JSON payload from {url}: {type(data).__name__}")
        return data

    def close(self) -> None:
        self._client.close()
