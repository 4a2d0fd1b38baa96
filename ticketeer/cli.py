"""Typer application and main entry point for the CLI.

Scans a single page with every registered tracker adapter and prints the
tickets found.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import httpx
import typer

from ticketeer.config.fetch_config import ConfigValidationError, FetchPerformanceConfig
from ticketeer.integrations.adapters import AdapterRegistry, PageScanResult
from ticketeer.utils.console import (
    console,
    print_error,
    print_info,
    print_tickets,
    print_warning,
    show_version,
)
from ticketeer.utils.errors import ExitCode, PageLoadError, TicketeerError
from ticketeer.utils.logging import log_message, setup_logging

app = typer.Typer(
    name="ticketeer",
    help="TICKETEER - Detect issue tracker tickets referenced by a web page",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Detect issue tracker tickets referenced by a web page."""
    setup_logging()


def _load_page(url: str, html_file: Path | None, timeout_seconds: float) -> str:
    """Read the page HTML from a file, or fetch it from ``url``.

    Raises:
        PageLoadError: If the file cannot be read or the page cannot be fetched
    """
    if html_file is not None:
        try:
            return html_file.read_text(encoding="utf-8")
        except OSError as e:
            raise PageLoadError(f"Cannot read page from {html_file}: {e}") from e

    try:
        response = httpx.get(url, timeout=timeout_seconds, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise PageLoadError(f"Cannot fetch page {url}: {e}") from e
    return response.text


@app.command()
def scan(
    url: Annotated[
        str,
        typer.Argument(
            help=(
                "Page URL. Examples: https://acme.youtrack.cloud/issue/TT-1, "
                "https://acme.youtrack.cloud/agiles/1-2/current?issue=TT-1"
            ),
        ),
    ],
    html: Annotated[
        Path | None,
        typer.Option(
            "--html",
            help="Read the page HTML from this file instead of fetching the URL",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print tickets as JSON",
        ),
    ] = False,
) -> None:
    """Scan a page for tickets."""
    try:
        config = FetchPerformanceConfig.from_env()
        AdapterRegistry.set_config({"timeout_seconds": config.timeout_seconds})
        page = _load_page(url, html, config.timeout_seconds)
        result: PageScanResult = asyncio.run(AdapterRegistry.scan_page(url, page))
    except ConfigValidationError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.CONFIG_ERROR) from e
    except TicketeerError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e
    finally:
        AdapterRegistry.reset_instances()

    log_message(f"Scanned {url}: {len(result.tickets)} ticket(s), {len(result.errors)} error(s)")

    if as_json:
        console.print_json(json.dumps(result.tickets))
    elif result.tickets:
        print_tickets(result.tickets)
    else:
        print_info("No tickets found on this page")

    # Partial results: failures are reported as warnings next to the tickets
    report = print_warning if result.tickets else print_error
    for tracker, error in result.errors:
        report(f"{tracker.name}: {error}")

    if result.errors:
        raise typer.Exit(ExitCode.TRACKER_ERROR)


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
