# ABOUTME: ISBN cleaning, checksum validation, and ISBN-10 to ISBN-13 normalization.
# ABOUTME: Also mines ISBN-shaped tokens out of free text such as OCR output.

import re
from collections.abc import Iterator

_WHITESPACE_DASH_RE = re.compile(r"[\s\-]")
_ISBN10_RE = re.compile(r"^\d{9}[\dXx]$")
_ISBN13_RE = re.compile(r"^\d{13}$")

# 10-18 raw characters: a digit, 8-16 digits/dashes/spaces, a digit, optional X.
_ISBN_TOKEN_RE = re.compile(r"\b\d[\d\-\s]{8,16}\d[Xx]?\b")

_ISBN13_PREFIX = "978"


def clean(raw: str | None) -> str:
    """Strip surrounding whitespace and remove all inner spaces and hyphens.

    Returns an empty string for None or blank input.
    """
    if raw is None or not raw.strip():
        return ""
    return _WHITESPACE_DASH_RE.sub("", raw.strip())


def _isbn10_check_char(first_nine: str) -> str:
    total = sum((10 - i) * int(digit) for i, digit in enumerate(first_nine))
    check = (11 - (total % 11)) % 11
    return "X" if check == 10 else str(check)


def _isbn13_check_digit(first_twelve: str) -> str:
    total = sum(int(digit) * (3 if i % 2 else 1) for i, digit in enumerate(first_twelve))
    return str((10 - (total % 10)) % 10)


def _all_zeros(cleaned: str) -> bool:
    # An all-zero string passes both checksums but is never a real ISBN.
    return not cleaned.strip("0")


def is_valid_isbn10(raw: str | None) -> bool:
    """Check an ISBN-10, accepting a lowercase 'x' check character."""
    cleaned = clean(raw)
    if not _ISBN10_RE.match(cleaned) or _all_zeros(cleaned):
        return False
    return _isbn10_check_char(cleaned[:9]) == cleaned[9].upper()


def is_valid_isbn13(raw: str | None) -> bool:
    """Check an ISBN-13 against its trailing check digit."""
    cleaned = clean(raw)
    if not _ISBN13_RE.match(cleaned) or _all_zeros(cleaned):
        return False
    return _isbn13_check_digit(cleaned[:12]) == cleaned[12]


def is_valid(raw: str | None) -> bool:
    """True for any valid ISBN-10 or ISBN-13."""
    return is_valid_isbn10(raw) or is_valid_isbn13(raw)


def normalize_to_isbn13(raw: str | None) -> str | None:
    """Normalize any valid ISBN to its 13-digit form.

    Returns None when the input is neither a valid ISBN-13 nor a valid ISBN-10.
    """
    cleaned = clean(raw)
    if is_valid_isbn13(cleaned):
        return cleaned
    if is_valid_isbn10(cleaned):
        return convert_isbn10_to_isbn13(cleaned)
    return None


def convert_isbn10_to_isbn13(isbn10: str) -> str:
    """Convert an ISBN-10 to ISBN-13 by prefixing 978 and recomputing the check digit.

    The input is expected to be pre-validated with is_valid_isbn10.

    Raises:
        ValueError: If the cleaned input is not exactly 10 characters long.
    """
    cleaned = clean(isbn10)
    if len(cleaned) != 10:
        raise ValueError(f"ISBN-10 must be exactly 10 characters, got {len(cleaned)}: {isbn10!r}")
    base = _ISBN13_PREFIX + cleaned[:9]
    return base + _isbn13_check_digit(base)


def extract_isbns_from_text(text: str | None) -> Iterator[str]:
    """Yield every ISBN-shaped token in text that normalizes to a valid ISBN-13.

    Values are yielded lazily in order of occurrence; duplicates are not removed.
    """
    if text is None or not text.strip():
        return
    for match in _ISBN_TOKEN_RE.finditer(text):
        normalized = normalize_to_isbn13(match.group(0))
        if normalized is not None:
            yield normalized
