# ABOUTME: CLI package for bookscan, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from bookscan.cli.commands import extract_cmd, isbn_cmd, lookup_cmd, scan_cmd, search_cmd


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(package_name="bookscan")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """bookscan - identify books from ISBNs, titles, and OCR text."""
    _configure_logging(verbose)


cli.add_command(isbn_cmd.isbn)
cli.add_command(lookup_cmd.lookup)
cli.add_command(search_cmd.search)
cli.add_command(extract_cmd.extract)
cli.add_command(scan_cmd.scan)
