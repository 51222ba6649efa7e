# ABOUTME: The `bookscan lookup` command for resolving ISBNs against external providers.
# ABOUTME: Queries Open Library first and Google Books as fallback, one ISBN at a time.

import click
from rich.console import Console

from bookscan.cli import options
from bookscan.cli.render import preview_table, print_preview


@click.command("lookup")
@click.argument("isbns", nargs=-1, required=True)
@options.lookup_options
def lookup(isbns: tuple[str, ...], delay_ms: int | None, google_api_key: str | None) -> None:
    """Look up book details for one or more ISBNS."""
    console = Console()

    with options.create_coordinator(delay_ms, google_api_key) as coordinator:
        previews = coordinator.lookup_multiple_isbns(isbns)

    if not previews:
        console.print("[yellow]No books found.[/yellow]")
        raise SystemExit(1)

    if len(previews) == 1:
        print_preview(console, previews[0])
    else:
        console.print(preview_table(previews))
    console.print(f"\n[dim]{len(previews)} of {len(set(isbns))} ISBN(s) found[/dim]")
