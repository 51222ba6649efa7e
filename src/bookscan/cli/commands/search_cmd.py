# ABOUTME: The `bookscan search` command for title/author searches across providers.
# ABOUTME: Shows Open Library matches first, topped up from Google Books.

import click
from rich.console import Console

from bookscan.cli import options
from bookscan.cli.render import preview_table


@click.command("search")
@click.argument("title")
@click.option("-a", "--author", default=None, help="Narrow the search to this author.")
@click.option(
    "-n",
    "--max-results",
    type=click.IntRange(1, 40),
    default=5,
    show_default=True,
    help="Maximum number of results.",
)
@options.lookup_options
def search(
    title: str,
    author: str | None,
    max_results: int,
    delay_ms: int | None,
    google_api_key: str | None,
) -> None:
    """Search external providers for books matching TITLE."""
    console = Console()

    with options.create_coordinator(delay_ms, google_api_key) as coordinator:
        results = coordinator.search(title, author, max_results)

    if not results:
        console.print("[yellow]No results found.[/yellow]")
        raise SystemExit(1)

    console.print(preview_table(results))
    console.print(f"\n[dim]{len(results)} result(s)[/dim]")
