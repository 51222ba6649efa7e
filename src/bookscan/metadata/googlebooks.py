# ABOUTME: Google Books metadata provider implementation (the fallback source).
# ABOUTME: Both ISBN lookups and free-text searches go through the volumes endpoint.

import logging

from bookscan.metadata.googlebooks_parser import parse_isbn_volume, parse_volumes
from bookscan.metadata.http import HttpClient, MetadataFetchError, log_fetch_failure
from bookscan.metadata.types import BookPreview

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.googleapis.com/books/v1"


class GoogleBooksProvider:
    """Metadata provider backed by the Google Books volumes API.

    The API key is optional; without one requests are anonymous and subject
    to Google's lower quota.
    """

    def __init__(
        self,
        http_client: HttpClient,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self._http = http_client
        self._api_key = api_key or None
        self._base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "googlebooks"

    def _params(self, **params: str) -> dict[str, str]:
        if self._api_key:
            params["key"] = self._api_key
        return params

    def lookup_by_isbn(self, isbn: str) -> BookPreview | None:
        """Look up a volume with an isbn: query; the first item wins."""
        try:
            data = self._http.get(f"{self._base_url}/volumes", params=self._params(q=f"isbn:{isbn}"))
        except MetadataFetchError as exc:
            log_fetch_failure(logger, "Google Books", f"ISBN lookup for {isbn}", exc)
            return None
        return parse_isbn_volume(data, isbn)

    def search(
        self, title: str, author: str | None = None, max_results: int = 5
    ) -> list[BookPreview]:
        """Search volumes by title, optionally restricted with an inauthor: clause."""
        if max_results <= 0:
            return []
        query = f"{title} inauthor:{author}" if author else title
        params = self._params(q=query, maxResults=str(max_results))
        try:
            data = self._http.get(f"{self._base_url}/volumes", params=params)
        except MetadataFetchError as exc:
            log_fetch_failure(logger, "Google Books", f"search for {title!r}", exc)
            return []
        return parse_volumes(data, max_results)
