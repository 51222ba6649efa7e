# ABOUTME: OCR package: text mining for ISBNs/titles and the OCR engine service wrapper.
# ABOUTME: The image-analysis call itself is supplied by an OcrEngine implementation.

from bookscan.ocr.service import OcrEngine, OcrEngineError, OcrService
from bookscan.ocr.text import (
    RecognizedLine,
    build_extraction_result,
    extract_isbns,
    extract_title_candidates,
    lines_from_text,
    score_title_candidate,
)

__all__ = [
    "OcrEngine",
    "OcrEngineError",
    "OcrService",
    "RecognizedLine",
    "build_extraction_result",
    "extract_isbns",
    "extract_title_candidates",
    "lines_from_text",
    "score_title_candidate",
]
