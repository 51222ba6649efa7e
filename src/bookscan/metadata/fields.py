# ABOUTME: Field-level helpers shared by the provider response parsers.
# ABOUTME: Year parsing, author joining, list heads, and thumbnail URL upgrading.

from typing import Any

_MIN_YEAR = 1000
_MAX_YEAR = 9999


def parse_year(value: Any) -> int | None:
    """Extract a publication year from the leading four characters of a date-like value.

    "1925-04-10", "2008" and 1983 all parse; "April 1925", "c1999" and "" do not.
    Anything outside 1000..9999 is treated as unknown.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value)
    if len(text) < 4:
        return None
    head = text[:4]
    if not head.isdigit():
        return None
    year = int(head)
    if _MIN_YEAR <= year <= _MAX_YEAR:
        return year
    return None


def first(values: Any) -> Any:
    """First element of a JSON list, or None for missing/empty/non-list values."""
    if isinstance(values, list) and values:
        return values[0]
    return None


def join_authors(names: Any) -> str | None:
    """Join author display names with ", ", or None when there are none."""
    if not isinstance(names, list):
        return None
    cleaned = [name for name in names if isinstance(name, str) and name]
    return ", ".join(cleaned) if cleaned else None


def as_int(value: Any) -> int | None:
    """Return value if it is a real integer (not a bool), else None."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def secure_url(url: Any) -> str | None:
    """Rewrite plaintext http:// URLs to https://."""
    if not isinstance(url, str) or not url:
        return None
    return url.replace("http://", "https://")
