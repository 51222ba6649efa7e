# ABOUTME: Turns OCR extraction results into book previews the user can confirm.
# ABOUTME: Prefers the local catalog, then ISBN lookups, then title searches, then raw OCR text.

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from bookscan.metadata.types import BookPreview, BookSource, OcrExtractionResult

if TYPE_CHECKING:
    from bookscan.metadata.lookup import BookLookupCoordinator

logger = logging.getLogger(__name__)

# Title matches are fuzzier than ISBN matches, so they keep less of the OCR confidence.
SINGLE_TITLE_FACTOR = 0.8
SHELF_TITLE_FACTOR = 0.7
OCR_TEXT_FACTOR = 0.5

_MAX_SHELF_TITLE_SEARCHES = 10


@runtime_checkable
class LocalCatalog(Protocol):
    """Books the user already owns; consulted before any external lookup."""

    def find_by_isbn(self, isbn: str) -> BookPreview | None: ...


class ScanResolver:
    """Resolves what an OCR pass saw into BookPreview values.

    Previews from the local catalog are re-sourced as LOCAL; every other
    preview has its confidence rescaled by the OCR confidence.
    """

    def __init__(
        self, coordinator: BookLookupCoordinator, catalog: LocalCatalog | None = None
    ) -> None:
        self._coordinator = coordinator
        self._catalog = catalog

    def _find_local(self, isbn: str, confidence: float) -> BookPreview | None:
        if self._catalog is None:
            return None
        try:
            local = self._catalog.find_by_isbn(isbn)
        except Exception:
            logger.exception("Local catalog lookup for %s raised; treating as a miss", isbn)
            return None
        if local is None:
            return None
        return replace(local, source=BookSource.LOCAL, confidence=confidence)

    def _resolve_isbn(self, isbn: str, confidence: float) -> BookPreview | None:
        local = self._find_local(isbn, confidence)
        if local is not None:
            return local
        external = self._coordinator.lookup_by_isbn(isbn)
        return external.with_confidence(confidence) if external is not None else None

    def _top_search_hit(self, title: str) -> BookPreview | None:
        results = self._coordinator.search(title, max_results=1)
        return results[0] if results else None

    def resolve_single(self, result: OcrExtractionResult) -> BookPreview | None:
        """Resolve a single-book scan to its best preview, or None if nothing was read."""
        confidence = result.confidence

        if result.detected_isbns:
            isbn = result.detected_isbns[0]
            logger.info("Found ISBN %s, looking up book details", isbn)
            preview = self._resolve_isbn(isbn, confidence)
            if preview is not None:
                return preview

        if not result.detected_titles:
            return None

        title = result.detected_titles[0]
        logger.info("No ISBN match, searching by title: %r", title)
        hit = self._top_search_hit(title)
        if hit is not None:
            return hit.with_confidence(confidence * SINGLE_TITLE_FACTOR)

        return BookPreview(
            title=title,
            source=BookSource.OCR_TEXT,
            confidence=confidence * OCR_TEXT_FACTOR,
        )

    def resolve_bookshelf(
        self, result: OcrExtractionResult, cancel: threading.Event | None = None
    ) -> list[BookPreview]:
        """Resolve a bookshelf scan into one preview per recognized book.

        ISBNs are resolved first. Then up to ten titles not already covered
        are searched, skipping hits whose ISBN is already present. Setting
        cancel stops further lookups and returns what was found so far.
        """
        confidence = result.confidence
        previews: list[BookPreview] = []

        def cancelled() -> bool:
            return cancel is not None and cancel.is_set()

        for isbn in result.detected_isbns:
            if cancelled():
                logger.info("Bookshelf scan cancelled during ISBN lookups")
                return previews
            preview = self._resolve_isbn(isbn, confidence)
            if preview is not None:
                previews.append(preview)

        known_titles = {preview.title.casefold() for preview in previews}
        titles = [t for t in result.detected_titles if t.casefold() not in known_titles]
        titles = titles[:_MAX_SHELF_TITLE_SEARCHES]
        logger.info("Searching for %d additional titles", len(titles))

        for title in titles:
            if cancelled():
                logger.info("Bookshelf scan cancelled during title searches")
                break
            hit = self._top_search_hit(title)
            if hit is None:
                continue
            if hit.isbn is not None and any(p.isbn == hit.isbn for p in previews):
                continue
            previews.append(hit.with_confidence(confidence * SHELF_TITLE_FACTOR))

        logger.info("Bookshelf scan complete. Found %d books.", len(previews))
        return previews
