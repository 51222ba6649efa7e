# ABOUTME: The `bookscan isbn` command for checking and normalizing ISBNs offline.
# ABOUTME: Shows the cleaned form, which checksum passed, and the ISBN-13 for each input.

import click
from rich.console import Console
from rich.table import Table

from bookscan.isbn import clean, is_valid_isbn10, is_valid_isbn13, normalize_to_isbn13


def _kind(raw: str) -> str:
    if is_valid_isbn13(raw):
        return "ISBN-13"
    if is_valid_isbn10(raw):
        return "ISBN-10"
    return "[red]invalid[/red]"


@click.command("isbn")
@click.argument("values", nargs=-1, required=True)
def isbn(values: tuple[str, ...]) -> None:
    """Validate ISBN-10/ISBN-13 VALUES and print their ISBN-13 form."""
    console = Console()

    table = Table()
    table.add_column("Input")
    table.add_column("Cleaned", style="dim")
    table.add_column("Kind")
    table.add_column("ISBN-13", style="bold")

    invalid = 0
    for raw in values:
        normalized = normalize_to_isbn13(raw)
        if normalized is None:
            invalid += 1
        table.add_row(raw, clean(raw), _kind(raw), normalized or "-")

    console.print(table)
    if invalid:
        console.print(f"\n[red]{invalid} invalid ISBN{'s' if invalid != 1 else ''}.[/red]")
        raise SystemExit(1)
