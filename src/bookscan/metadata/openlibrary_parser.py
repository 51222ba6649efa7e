# ABOUTME: Parsing functions for Open Library API JSON responses.
# ABOUTME: Converts edition, work, author, and search payloads into BookPreview values.

from typing import Any

from bookscan.isbn import normalize_to_isbn13
from bookscan.metadata.fields import as_int, first, parse_year
from bookscan.metadata.types import BookPreview, BookSource

_COVERS_BASE_URL = "https://covers.openlibrary.org/b/id"
_UNKNOWN_TITLE = "Unknown Title"

ISBN_CONFIDENCE = 1.0
SEARCH_CONFIDENCE = 0.9


def build_cover_url(cover_id: int, size: str = "L") -> str:
    """Build an Open Library cover image URL from a numeric cover id.

    Args:
        cover_id: The cover identifier from an edition's covers list or a doc's cover_i.
        size: Image size: "S" (small), "M" (medium), or "L" (large).
    """
    return f"{_COVERS_BASE_URL}/{cover_id}-{size}.jpg"


def _cover_url(cover_id: Any) -> str | None:
    cover = as_int(cover_id)
    return build_cover_url(cover) if cover is not None else None


def _ref_key(ref: Any) -> str | None:
    if isinstance(ref, dict):
        key = ref.get("key")
        if isinstance(key, str) and key:
            return key
    return None


def edition_work_key(data: dict[str, Any]) -> str | None:
    """Key of the first work an edition belongs to, e.g. "/works/OL456W"."""
    return _ref_key(first(data.get("works")))


def edition_author_keys(data: dict[str, Any], limit: int = 3) -> list[str]:
    """Author keys referenced by an edition, capped at limit."""
    refs = data.get("authors")
    if not isinstance(refs, list):
        return []
    keys = [key for key in (_ref_key(ref) for ref in refs[:limit]) if key]
    return keys


def parse_work_description(data: dict[str, Any]) -> str | None:
    """Extract the description from an Open Library work response.

    Handles the OL quirk where description can be either a plain string
    or a dict with {"type": ..., "value": "actual text"}.
    """
    desc = data.get("description")
    if isinstance(desc, str):
        return desc
    if isinstance(desc, dict):
        value = desc.get("value")
        return value if isinstance(value, str) else None
    return None


def parse_author_name(data: dict[str, Any]) -> str | None:
    """Extract the display name from an Open Library author response."""
    name = data.get("name")
    return name if isinstance(name, str) and name else None


def parse_edition(
    data: dict[str, Any],
    isbn: str,
    *,
    author: str | None = None,
    description: str | None = None,
) -> BookPreview:
    """Build a BookPreview from an ISBN endpoint (edition) response.

    Author names and the work description live on other endpoints; the
    provider resolves them and passes them in.
    """
    title = data.get("title")
    publisher = first(data.get("publishers"))
    key = data.get("key")
    return BookPreview(
        title=title if isinstance(title, str) and title else _UNKNOWN_TITLE,
        author=author,
        isbn=isbn,
        publisher=publisher if isinstance(publisher, str) else None,
        published_year=parse_year(data.get("publish_date")),
        description=description,
        cover_image_url=_cover_url(first(data.get("covers"))),
        page_count=as_int(data.get("number_of_pages")),
        source=BookSource.OPEN_LIBRARY,
        confidence=ISBN_CONFIDENCE,
        external_id=key if isinstance(key, str) else None,
    )


def _first_valid_isbn(values: Any) -> str | None:
    if not isinstance(values, list):
        return None
    for value in values:
        if isinstance(value, str):
            normalized = normalize_to_isbn13(value)
            if normalized:
                return normalized
    return None


def parse_search_results(data: dict[str, Any], max_results: int) -> list[BookPreview]:
    """Parse an Open Library search response into at most max_results previews.

    Each doc contributes its first author, the first of its ISBNs that
    normalizes cleanly, its first publish year, and its cover id.
    """
    docs = data.get("docs")
    if not isinstance(docs, list):
        return []

    results: list[BookPreview] = []
    for doc in docs[:max_results]:
        if not isinstance(doc, dict):
            continue
        title = doc.get("title")
        author = first(doc.get("author_name"))
        key = doc.get("key")
        results.append(
            BookPreview(
                title=title if isinstance(title, str) and title else _UNKNOWN_TITLE,
                author=author if isinstance(author, str) else None,
                isbn=_first_valid_isbn(doc.get("isbn")),
                published_year=parse_year(doc.get("first_publish_year")),
                cover_image_url=_cover_url(doc.get("cover_i")),
                source=BookSource.OPEN_LIBRARY,
                confidence=SEARCH_CONFIDENCE,
                external_id=key if isinstance(key, str) else None,
            )
        )
    return results
