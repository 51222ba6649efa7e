# ABOUTME: MetadataProvider protocol defining the contract for external metadata sources.
# ABOUTME: Open Library and Google Books each implement it; the lookup coordinator depends only on this.

from typing import Protocol, runtime_checkable

from bookscan.metadata.types import BookPreview


@runtime_checkable
class MetadataProvider(Protocol):
    """Protocol for book metadata lookup services.

    lookup_by_isbn receives an already-normalized ISBN-13 and returns None on
    a miss. search returns at most max_results previews in the provider's own
    relevance order.
    """

    @property
    def name(self) -> str: ...

    def lookup_by_isbn(self, isbn: str) -> BookPreview | None: ...

    def search(
        self, title: str, author: str | None = None, max_results: int = 5
    ) -> list[BookPreview]: ...
