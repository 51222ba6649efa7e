# ABOUTME: Shared pytest fixtures for bookscan tests.
# ABOUTME: Provides OCR text transcripts (single cover, bookshelf, unreadable) written to tmp files.

from pathlib import Path

import pytest

COVER_TRANSCRIPT = """The Great Gatsby
F. Scott Fitzgerald
ISBN 978-0-7432-7356-5
Scribner
$15.00
"""

TITLE_ONLY_TRANSCRIPT = """Dune Messiah
Frank Herbert
"""

SHELF_TRANSCRIPT = """Dune
The Name of the Rose
ISBN 9780743273565
Nineteen Eighty-Four
"""


@pytest.fixture
def cover_text(tmp_path: Path) -> Path:
    """OCR transcript of a single book cover carrying a printed ISBN."""
    filepath = tmp_path / "gatsby_cover.txt"
    filepath.write_text(COVER_TRANSCRIPT, encoding="utf-8")
    return filepath


@pytest.fixture
def title_only_text(tmp_path: Path) -> Path:
    """OCR transcript of a cover with no ISBN visible."""
    filepath = tmp_path / "dune_cover.txt"
    filepath.write_text(TITLE_ONLY_TRANSCRIPT, encoding="utf-8")
    return filepath


@pytest.fixture
def shelf_text(tmp_path: Path) -> Path:
    """OCR transcript of a bookshelf photo: several spines, one ISBN sticker."""
    filepath = tmp_path / "shelf.txt"
    filepath.write_text(SHELF_TRANSCRIPT, encoding="utf-8")
    return filepath


@pytest.fixture
def unreadable_text(tmp_path: Path) -> Path:
    """OCR transcript with nothing usable in it."""
    filepath = tmp_path / "blurry.txt"
    filepath.write_text("$4.99\n12\nISBN\n", encoding="utf-8")
    return filepath
