# ABOUTME: Parsing functions for Google Books volumes API JSON responses.
# ABOUTME: Converts volume items into BookPreview values with re-normalized ISBNs.

from typing import Any

from bookscan.isbn import normalize_to_isbn13
from bookscan.metadata.fields import as_int, first, join_authors, parse_year, secure_url
from bookscan.metadata.types import BookPreview, BookSource

_UNKNOWN_TITLE = "Unknown Title"
_ISBN_13_TYPE = "ISBN_13"

ISBN_CONFIDENCE = 1.0
SEARCH_CONFIDENCE = 0.9


def select_identifier(volume_info: dict[str, Any]) -> str | None:
    """Pick a volume's ISBN-13 identifier, falling back to the first identifier listed."""
    identifiers = volume_info.get("industryIdentifiers")
    if not isinstance(identifiers, list):
        return None
    entries = [entry for entry in identifiers if isinstance(entry, dict)]
    for entry in entries:
        if entry.get("type") == _ISBN_13_TYPE and isinstance(entry.get("identifier"), str):
            return entry["identifier"]
    head = first(entries)
    if head is not None and isinstance(head.get("identifier"), str):
        return head["identifier"]
    return None


def parse_volume(
    item: dict[str, Any], *, confidence: float, isbn: str | None = None
) -> BookPreview | None:
    """Build a BookPreview from one entry of a volumes response.

    When isbn is given (a direct ISBN query) it is used as-is; otherwise the
    volume's own identifier is re-normalized, and dropped if malformed.
    Returns None for items without volumeInfo.
    """
    volume_info = item.get("volumeInfo")
    if not isinstance(volume_info, dict):
        return None

    if isbn is None:
        identifier = select_identifier(volume_info)
        isbn = normalize_to_isbn13(identifier) if identifier else None

    title = volume_info.get("title")
    publisher = volume_info.get("publisher")
    description = volume_info.get("description")
    image_links = volume_info.get("imageLinks")
    thumbnail = image_links.get("thumbnail") if isinstance(image_links, dict) else None
    genre = first(volume_info.get("categories"))

    return BookPreview(
        title=title if isinstance(title, str) and title else _UNKNOWN_TITLE,
        author=join_authors(volume_info.get("authors")),
        isbn=isbn,
        publisher=publisher if isinstance(publisher, str) else None,
        published_year=parse_year(volume_info.get("publishedDate")),
        description=description if isinstance(description, str) else None,
        cover_image_url=secure_url(thumbnail),
        genre=genre if isinstance(genre, str) else None,
        page_count=as_int(volume_info.get("pageCount")),
        source=BookSource.GOOGLE_BOOKS,
        confidence=confidence,
        external_id=item.get("id"),
    )


def parse_volumes(data: dict[str, Any], max_results: int) -> list[BookPreview]:
    """Parse a free-text volumes response into at most max_results search previews."""
    items = data.get("items")
    if not isinstance(items, list):
        return []
    results: list[BookPreview] = []
    for item in items[:max_results]:
        if not isinstance(item, dict):
            continue
        preview = parse_volume(item, confidence=SEARCH_CONFIDENCE)
        if preview is not None:
            results.append(preview)
    return results


def parse_isbn_volume(data: dict[str, Any], isbn: str) -> BookPreview | None:
    """Parse the first item of an isbn: query, or None when nothing matched."""
    item = first(data.get("items"))
    if not isinstance(item, dict):
        return None
    return parse_volume(item, confidence=ISBN_CONFIDENCE, isbn=isbn)
