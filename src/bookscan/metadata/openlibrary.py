# ABOUTME: Open Library metadata provider implementation (the primary source).
# ABOUTME: Looks up editions by ISBN, enriches them from work/author endpoints, and runs title searches.

import logging

from bookscan.metadata.http import HttpClient, MetadataFetchError, log_fetch_failure
from bookscan.metadata.openlibrary_parser import (
    edition_author_keys,
    edition_work_key,
    parse_author_name,
    parse_edition,
    parse_search_results,
    parse_work_description,
)
from bookscan.metadata.types import BookPreview

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openlibrary.org"
_MAX_AUTHOR_LOOKUPS = 3


class OpenLibraryProvider:
    """Metadata provider backed by the Open Library API.

    Every call goes through the injected HttpClient; when that client carries
    a RateLimiter, the edition, work, and each author request are throttled
    individually.
    """

    def __init__(self, http_client: HttpClient, base_url: str = DEFAULT_BASE_URL) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "openlibrary"

    def lookup_by_isbn(self, isbn: str) -> BookPreview | None:
        """Look up an edition by normalized ISBN-13.

        Follows up with at most one work request (description) and up to three
        author requests (display names). Returns None when the edition is missing.
        """
        try:
            edition = self._http.get(f"{self._base_url}/isbn/{isbn}.json")
        except MetadataFetchError as exc:
            log_fetch_failure(logger, "Open Library", f"ISBN lookup for {isbn}", exc)
            return None

        description = self._fetch_description(edition_work_key(edition))
        author = self._fetch_authors(edition_author_keys(edition, limit=_MAX_AUTHOR_LOOKUPS))
        return parse_edition(edition, isbn, author=author, description=description)

    def search(
        self, title: str, author: str | None = None, max_results: int = 5
    ) -> list[BookPreview]:
        """Search Open Library by free text, optionally narrowed by author."""
        if max_results <= 0:
            return []
        query = f"{title} author:{author}" if author else title
        params = {"q": query, "limit": str(max_results)}
        try:
            data = self._http.get(f"{self._base_url}/search.json", params=params)
        except MetadataFetchError as exc:
            log_fetch_failure(logger, "Open Library", f"search for {title!r}", exc)
            return []
        return parse_search_results(data, max_results)

    def _fetch_description(self, work_key: str | None) -> str | None:
        if not work_key:
            return None
        try:
            work = self._http.get(f"{self._base_url}{work_key}.json")
        except MetadataFetchError as exc:
            log_fetch_failure(logger, "Open Library", f"work lookup for {work_key}", exc)
            return None
        return parse_work_description(work)

    def _fetch_authors(self, author_keys: list[str]) -> str | None:
        names: list[str] = []
        for author_key in author_keys:
            try:
                data = self._http.get(f"{self._base_url}{author_key}.json")
            except MetadataFetchError as exc:
                log_fetch_failure(logger, "Open Library", f"author lookup for {author_key}", exc)
                continue
            name = parse_author_name(data)
            if name:
                names.append(name)
        return ", ".join(names) if names else None
