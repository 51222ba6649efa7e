# ABOUTME: Multi-source book lookup: Open Library first, Google Books as fallback.
# ABOUTME: Normalizes ISBNs, contains provider failures, and batches ISBN lookups with cancellation.

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TypeVar

import httpx

from bookscan.config import LookupConfig
from bookscan.isbn import normalize_to_isbn13
from bookscan.metadata.googlebooks import GoogleBooksProvider
from bookscan.metadata.http import BookscanHttpClient, RateLimiter
from bookscan.metadata.openlibrary import OpenLibraryProvider
from bookscan.metadata.provider import MetadataProvider
from bookscan.metadata.types import BookPreview

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class BookLookupCoordinator:
    """Resolves book metadata against a primary and a secondary provider.

    Provider failures never escape: an exception from either provider is
    logged and treated as a miss, so callers only ever see found/not found.
    A coordinator is meant to be built once per process (see build_coordinator)
    so that every caller shares the primary provider's rate limiter.
    """

    def __init__(
        self,
        primary: MetadataProvider,
        secondary: MetadataProvider,
        *,
        rate_limiter: RateLimiter | None = None,
        http_clients: Iterable[BookscanHttpClient] = (),
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.rate_limiter = rate_limiter
        self._http_clients = list(http_clients)

    def _call(self, provider: MetadataProvider, what: str, call: Callable[[], _T]) -> _T | None:
        try:
            return call()
        except Exception:
            logger.exception("%s %s raised; treating as a miss", provider.name, what)
            return None

    def lookup_by_isbn(self, isbn: str) -> BookPreview | None:
        """Look up one book by ISBN-10 or ISBN-13 in any formatting.

        Returns None for malformed ISBNs (without contacting any provider)
        and when neither provider knows the book.
        """
        normalized = normalize_to_isbn13(isbn)
        if normalized is None:
            logger.warning("Invalid ISBN provided: %s", isbn)
            return None

        for provider in (self.primary, self.secondary):
            result = self._call(
                provider, f"lookup of {normalized}", lambda p=provider: p.lookup_by_isbn(normalized)
            )
            if result is not None:
                logger.debug("Found %s via %s", normalized, provider.name)
                return result

        logger.info("No provider found ISBN %s", normalized)
        return None

    def search(
        self, title: str, author: str | None = None, max_results: int = 5
    ) -> list[BookPreview]:
        """Search by title and optional author across both providers.

        Primary results come first; the secondary provider is asked only for
        the shortfall. The combined list never exceeds max_results.
        """
        if max_results <= 0:
            return []

        results: list[BookPreview] = list(
            self._call(
                self.primary,
                f"search for {title!r}",
                lambda: self.primary.search(title, author, max_results),
            )
            or []
        )
        if len(results) < max_results:
            remaining = max_results - len(results)
            results.extend(
                self._call(
                    self.secondary,
                    f"search for {title!r}",
                    lambda: self.secondary.search(title, author, remaining),
                )
                or []
            )
        return results[:max_results]

    def lookup_multiple_isbns(
        self, isbns: Iterable[str], cancel: threading.Event | None = None
    ) -> list[BookPreview]:
        """Look up several ISBNs one after another.

        Duplicates (compared after normalization) are looked up once. Lookups
        run sequentially so the primary provider's rate limit holds. Setting
        cancel stops the batch before the next lookup; hits gathered so far are
        still returned.
        """
        seen: set[str] = set()
        results: list[BookPreview] = []
        for isbn in isbns:
            key = normalize_to_isbn13(isbn) or isbn
            if key in seen:
                continue
            seen.add(key)

            if cancel is not None and cancel.is_set():
                logger.info("ISBN batch cancelled after %d result(s)", len(results))
                break

            result = self.lookup_by_isbn(isbn)
            if result is not None:
                results.append(result)
        return results

    def close(self) -> None:
        """Close HTTP clients created by build_coordinator()."""
        for client in self._http_clients:
            client.close()

    def __enter__(self) -> "BookLookupCoordinator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def build_coordinator(
    config: LookupConfig | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> BookLookupCoordinator:
    """Wire up the default Open Library + Google Books coordinator.

    Only the Open Library client gets the rate limiter. transport is passed
    to both httpx clients, which lets tests run without network access.
    """
    config = config or LookupConfig()
    rate_limiter = RateLimiter(config.request_delay)
    openlibrary_http = BookscanHttpClient(
        rate_limiter=rate_limiter, timeout=config.timeout, transport=transport
    )
    googlebooks_http = BookscanHttpClient(timeout=config.timeout, transport=transport)
    return BookLookupCoordinator(
        primary=OpenLibraryProvider(openlibrary_http, base_url=config.openlibrary_base_url),
        secondary=GoogleBooksProvider(
            googlebooks_http,
            api_key=config.google_books_api_key,
            base_url=config.google_books_base_url,
        ),
        rate_limiter=rate_limiter,
        http_clients=[openlibrary_http, googlebooks_http],
    )
