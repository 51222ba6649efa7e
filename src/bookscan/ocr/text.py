# ABOUTME: Mines ISBNs and likely book titles out of OCR-recognized text.
# ABOUTME: Title candidates are filtered with a denylist and ranked by a small case/length heuristic.

import re
from collections.abc import Iterable
from dataclasses import dataclass

from bookscan.isbn import extract_isbns_from_text, normalize_to_isbn13
from bookscan.metadata.types import OcrExtractionResult

# Explicit "ISBN: ..." labels, or a bare ISBN-shaped token (the label is optional).
_LABELED_ISBN_RE = re.compile(r"(?:ISBN[:\-\s]*)?(\d[\d\-\s]{8,16}[\dXx])", re.IGNORECASE)

# Prices, page numbers and other lines made only of digits and currency punctuation.
_NUMERIC_LINE_RE = re.compile(r"^[\d.$€£,\s]+$")

# Lowercase substrings that mark front/back-matter text rather than a title.
NON_TITLE_MARKERS: frozenset[str] = frozenset(
    {
        "isbn",
        "barcode",
        "price",
        "copyright",
        "published",
        "printed",
        "all rights reserved",
        "edition",
        "www.",
        "http",
        ".com",
        ".org",
        "chapter",
        "page",
        "index",
        "contents",
        "acknowledgments",
    }
)

_MIN_LINE_LENGTH = 3
_MAX_LINE_LENGTH = 200
_SHORT_CODE_LENGTH = 5

_SINGLE_BOOK_CANDIDATES = 3
_BOOKSHELF_MIN_SCORE = 0.3
_BOOKSHELF_MAX_CANDIDATES = 50


@dataclass(frozen=True)
class RecognizedLine:
    """One line of text from an OCR engine, with a confidence per recognized word."""

    text: str
    word_confidences: tuple[float, ...] = ()


def _unique(values: Iterable[str]) -> list[str]:
    """Drop repeats, keeping the first occurrence of each value."""
    return list(dict.fromkeys(values))


def extract_isbns(text: str) -> list[str]:
    """Find every ISBN in text, normalized to ISBN-13.

    Labeled matches are collected first, then any further hits from the
    generic token scan; repeats are dropped.
    """
    labeled = (normalize_to_isbn13(match.group(1)) for match in _LABELED_ISBN_RE.finditer(text))
    found = [isbn for isbn in labeled if isbn is not None]
    found.extend(extract_isbns_from_text(text))
    return _unique(found)


def is_likely_non_title(line: str) -> bool:
    """True for lines that look like publishing boilerplate, prices, or short codes."""
    lower = line.lower()
    if any(marker in lower for marker in NON_TITLE_MARKERS):
        return True
    if _NUMERIC_LINE_RE.match(line):
        return True
    # Short all-caps codes such as "ABC" or "HC-2".
    return (
        len(line) <= _SHORT_CODE_LENGTH
        and line == line.upper()
        and not any(ch.islower() for ch in line)
    )


def score_title_candidate(line: str) -> float:
    """Heuristic likelihood in [0, 1] that a line of cover/spine text is a title."""
    if not line:
        return 0.0
    score = 0.5
    if 10 <= len(line) <= 100:
        score += 0.2
    if line[0].isupper() and any(ch.islower() for ch in line):
        score += 0.1
    if any(ch.isalpha() for ch in line):
        score += 0.1
    # Long all-caps lines are usually headers or publisher banners.
    if line == line.upper() and len(line) > 10:
        score -= 0.1
    digit_ratio = sum(ch.isdigit() for ch in line) / len(line)
    if digit_ratio > 0.3:
        score -= 0.2
    return max(0.0, min(1.0, score))


def _candidate_lines(text: str) -> list[str]:
    lines = (line.strip() for line in text.splitlines())
    return [
        line
        for line in lines
        if _MIN_LINE_LENGTH <= len(line) <= _MAX_LINE_LENGTH and not is_likely_non_title(line)
    ]


def extract_title_candidates(text: str, single_book: bool) -> list[str]:
    """Pick lines of OCR text that could be book titles.

    Single-book mode returns the three best-scoring lines, best first.
    Bookshelf mode keeps every line scoring above 0.3 in reading order,
    capped at 50.
    """
    lines = _unique(_candidate_lines(text))
    if single_book:
        ranked = sorted(lines, key=score_title_candidate, reverse=True)
        return ranked[:_SINGLE_BOOK_CANDIDATES]
    kept = [line for line in lines if score_title_candidate(line) > _BOOKSHELF_MIN_SCORE]
    return kept[:_BOOKSHELF_MAX_CANDIDATES]


def average_confidence(lines: Iterable[RecognizedLine]) -> float:
    """Mean of all word-level confidences, or 0.0 when no words were recognized."""
    confidences = [conf for line in lines for conf in line.word_confidences]
    if not confidences:
        return 0.0
    return max(0.0, min(1.0, sum(confidences) / len(confidences)))


def build_extraction_result(
    lines: Iterable[RecognizedLine], single_book: bool
) -> OcrExtractionResult:
    """Assemble an OcrExtractionResult from the lines an OCR engine recognized."""
    lines = list(lines)
    raw_text = "\n".join(line.text for line in lines)
    return OcrExtractionResult(
        detected_isbns=tuple(extract_isbns(raw_text)),
        detected_titles=tuple(extract_title_candidates(raw_text, single_book)),
        raw_text=raw_text,
        confidence=average_confidence(lines),
    )


def lines_from_text(text: str, confidence: float = 1.0) -> list[RecognizedLine]:
    """Wrap plain text as recognized lines, giving every word the same confidence.

    Used when the OCR output is only available as text, e.g. a saved transcript.
    """
    return [
        RecognizedLine(text=line, word_confidences=(confidence,) * len(line.split()))
        for line in text.splitlines()
    ]
