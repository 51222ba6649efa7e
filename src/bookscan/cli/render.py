# ABOUTME: Rich rendering helpers shared by the bookscan CLI commands.
# ABOUTME: Formats BookPreview lists as tables and single previews as field listings.

from rich.console import Console
from rich.table import Table

from bookscan.metadata.types import BookPreview, BookSource

SOURCE_LABELS: dict[BookSource, str] = {
    BookSource.LOCAL: "Local",
    BookSource.OPEN_LIBRARY: "Open Library",
    BookSource.GOOGLE_BOOKS: "Google Books",
    BookSource.OCR_TEXT: "OCR text",
}


def preview_table(previews: list[BookPreview]) -> Table:
    """Summary table with one row per preview."""
    table = Table()
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("ISBN")
    table.add_column("Year", width=5)
    table.add_column("Source")
    table.add_column("Conf.", justify="right")

    for preview in previews:
        table.add_row(
            preview.title,
            preview.author or "[dim]unknown[/dim]",
            preview.isbn or "[dim]-[/dim]",
            str(preview.published_year) if preview.published_year else "?",
            SOURCE_LABELS[preview.source],
            f"{preview.confidence:.2f}",
        )
    return table


def print_preview(console: Console, preview: BookPreview) -> None:
    """Print every populated field of one preview."""
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("Title", preview.title)
    table.add_row("Author", preview.author or "unknown")
    if preview.isbn:
        table.add_row("ISBN", preview.isbn)
    if preview.publisher:
        table.add_row("Publisher", preview.publisher)
    if preview.published_year:
        table.add_row("Year", str(preview.published_year))
    if preview.page_count:
        table.add_row("Pages", str(preview.page_count))
    if preview.genre:
        table.add_row("Genre", preview.genre)
    if preview.description:
        table.add_row("Description", preview.description)
    if preview.cover_image_url:
        table.add_row("Cover", preview.cover_image_url)
    table.add_row("Source", SOURCE_LABELS[preview.source])
    table.add_row("Confidence", f"{preview.confidence:.2f}")

    console.print(table)
