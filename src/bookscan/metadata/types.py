# ABOUTME: Core data structures for book identification results.
# ABOUTME: BookPreview is the interchange format between lookup, OCR scanning, and confirmation.

from dataclasses import dataclass, replace
from enum import Enum


class BookSource(Enum):
    """Where a BookPreview came from. Values match the mobile client's enum."""

    LOCAL = 0
    OPEN_LIBRARY = 1
    GOOGLE_BOOKS = 2
    OCR_TEXT = 3


def _check_confidence(confidence: float) -> None:
    if not 0.0 <= confidence <= 1.0:
        msg = f"confidence must be between 0.0 and 1.0, got {confidence}"
        raise ValueError(msg)


@dataclass(frozen=True)
class BookPreview:
    """An unsaved candidate book description awaiting user confirmation.

    Built by a metadata provider, the local catalog, or straight from OCR text.
    Only the title is required; isbn, when present, is always normalized ISBN-13.
    """

    title: str
    source: BookSource
    confidence: float
    author: str | None = None
    isbn: str | None = None
    publisher: str | None = None
    published_year: int | None = None
    description: str | None = None
    cover_image_url: str | None = None
    genre: str | None = None
    page_count: int | None = None
    external_id: str | None = None
    existing_book_id: int | None = None

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)

    def with_confidence(self, confidence: float) -> "BookPreview":
        """Return a copy carrying a different confidence score."""
        return replace(self, confidence=confidence)


@dataclass(frozen=True)
class OcrExtractionResult:
    """Book identifiers mined from one OCR pass over an image."""

    detected_isbns: tuple[str, ...] = ()
    detected_titles: tuple[str, ...] = ()
    raw_text: str = ""
    confidence: float = 0.0

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)

    @classmethod
    def empty(cls) -> "OcrExtractionResult":
        """The result of an extraction that failed outright."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.detected_isbns and not self.detected_titles
