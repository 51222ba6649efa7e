# ABOUTME: The `bookscan extract` command for mining ISBNs and titles from OCR text.
# ABOUTME: Works offline on a text transcript with one recognized line per line.

from pathlib import Path

import click
from rich.console import Console

from bookscan.cli import options
from bookscan.ocr import build_extraction_result, lines_from_text


@click.command("extract")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@options.bookshelf_option
@options.confidence_option
def extract(path: Path, bookshelf: bool, confidence: float) -> None:
    """Show the ISBNs and title candidates found in the OCR text file PATH."""
    console = Console()

    text = path.read_text(encoding="utf-8")
    result = build_extraction_result(lines_from_text(text, confidence), single_book=not bookshelf)

    if result.is_empty:
        console.print("[yellow]No ISBNs or titles detected.[/yellow]")
        raise SystemExit(1)

    if result.detected_isbns:
        console.print("[bold]ISBNs:[/bold]")
        for isbn in result.detected_isbns:
            console.print(f"  {isbn}")
    if result.detected_titles:
        console.print("[bold]Title candidates:[/bold]")
        for title in result.detected_titles:
            console.print(f"  {title}", markup=False, highlight=False)
    console.print(f"\n[dim]OCR confidence {result.confidence:.2f}[/dim]")
