# ABOUTME: The `bookscan scan` command: OCR text in, confirmable book previews out.
# ABOUTME: Mines the text for ISBNs/titles, then resolves them through the lookup coordinator.

from pathlib import Path

import click
from rich.console import Console

from bookscan.cli import options
from bookscan.cli.render import preview_table, print_preview
from bookscan.core.scan import ScanResolver
from bookscan.ocr import build_extraction_result, lines_from_text


@click.command("scan")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@options.bookshelf_option
@options.confidence_option
@options.lookup_options
def scan(
    path: Path,
    bookshelf: bool,
    confidence: float,
    delay_ms: int | None,
    google_api_key: str | None,
) -> None:
    """Identify the book(s) described by the OCR text file PATH."""
    console = Console()

    text = path.read_text(encoding="utf-8")
    result = build_extraction_result(lines_from_text(text, confidence), single_book=not bookshelf)
    if result.is_empty:
        console.print("[yellow]Could not extract book information from the text.[/yellow]")
        raise SystemExit(1)

    with options.create_coordinator(delay_ms, google_api_key) as coordinator:
        resolver = ScanResolver(coordinator)
        if bookshelf:
            previews = resolver.resolve_bookshelf(result)
        else:
            single = resolver.resolve_single(result)
            previews = [single] if single is not None else []

    if not previews:
        console.print("[yellow]No books found.[/yellow]")
        raise SystemExit(1)

    if bookshelf:
        console.print(preview_table(previews))
        console.print(f"\n[dim]{len(previews)} book(s) found[/dim]")
    else:
        print_preview(console, previews[0])
