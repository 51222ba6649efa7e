# ABOUTME: Shared Click options and factories for bookscan CLI commands.
# ABOUTME: Provides the lookup flags (Open Library delay, Google Books key) and OCR input flags.

from collections.abc import Callable
from dataclasses import replace
from typing import Any

import click

from bookscan.config import ENV_DELAY_MS, ENV_GOOGLE_BOOKS_API_KEY, LookupConfig
from bookscan.metadata.lookup import BookLookupCoordinator, build_coordinator

delay_option = click.option(
    "--delay-ms",
    type=click.IntRange(min=0),
    default=None,
    envvar=ENV_DELAY_MS,
    help="Minimum delay between Open Library requests in ms (default: 1000).",
)

google_api_key_option = click.option(
    "--google-api-key",
    default=None,
    envvar=ENV_GOOGLE_BOOKS_API_KEY,
    help="Google Books API key (optional).",
)

bookshelf_option = click.option(
    "--bookshelf",
    is_flag=True,
    default=False,
    help="Treat the text as a bookshelf photo (many spines) instead of one cover.",
)

confidence_option = click.option(
    "--confidence",
    type=click.FloatRange(0.0, 1.0),
    default=1.0,
    show_default=True,
    help="Word confidence to assume for plain-text OCR input.",
)


def lookup_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Apply --delay-ms and --google-api-key to a command."""
    return delay_option(google_api_key_option(func))


def create_coordinator(
    delay_ms: int | None, google_api_key: str | None
) -> BookLookupCoordinator:
    """Build the coordinator from BOOKSCAN_* settings overridden by CLI flags."""
    try:
        config = LookupConfig.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    if delay_ms is not None:
        config = replace(config, request_delay_ms=delay_ms)
    if google_api_key:
        config = replace(config, google_books_api_key=google_api_key)
    return build_coordinator(config)
