# ABOUTME: OcrService wraps an external OCR engine and turns its output into extraction results.
# ABOUTME: Engine failures and a missing engine degrade to an empty result instead of raising.

import logging
from typing import Protocol, runtime_checkable

from bookscan.metadata.types import OcrExtractionResult
from bookscan.ocr.text import RecognizedLine, build_extraction_result

logger = logging.getLogger(__name__)


class OcrEngineError(Exception):
    """Raised by OCR engine adapters when the image-analysis request fails."""


@runtime_checkable
class OcrEngine(Protocol):
    """Protocol for image-to-text services (cloud vision APIs, tesseract, ...)."""

    def recognize(self, image: bytes) -> list[RecognizedLine]: ...


class OcrService:
    """Extracts ISBNs and title candidates from photos of books.

    Built with engine=None when no OCR backend is configured; every
    extraction then returns an empty result.
    """

    def __init__(self, engine: OcrEngine | None = None) -> None:
        self._engine = engine

    @property
    def is_configured(self) -> bool:
        return self._engine is not None

    def extract_single_book(self, image: bytes, file_name: str) -> OcrExtractionResult:
        """Extract identifiers from a single cover or barcode photo."""
        return self._extract(image, file_name, single_book=True)

    def extract_bookshelf(self, image: bytes, file_name: str) -> OcrExtractionResult:
        """Extract identifiers from a photo of many book spines."""
        return self._extract(image, file_name, single_book=False)

    def _extract(self, image: bytes, file_name: str, *, single_book: bool) -> OcrExtractionResult:
        if self._engine is None:
            logger.warning("No OCR engine is configured. Returning empty result.")
            return OcrExtractionResult.empty()

        try:
            lines = self._engine.recognize(image)
        except OcrEngineError as exc:
            logger.error("OCR request failed for %s: %s", file_name, exc)
            return OcrExtractionResult.empty()
        except Exception:
            logger.exception("Error processing image %s", file_name)
            return OcrExtractionResult.empty()

        result = build_extraction_result(lines, single_book)
        logger.info(
            "%s scan extracted %d ISBNs, %d potential titles from %s",
            "Single book" if single_book else "Bookshelf",
            len(result.detected_isbns),
            len(result.detected_titles),
            file_name,
        )
        return result
