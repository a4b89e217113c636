"""Contact scraper CLI: entry-point for scraping and serving the API.

Usage:
    python cli/main.py --help

Commands:
    scrape    → scrape one URL and print its contacts
    batch     → scrape every URL in a CSV file and export the results as CSV
    serve     → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from contact_scraper.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Optional

import typer

from cli.rendering import render_result, render_summary
from contact_scraper.config import settings
from contact_scraper.csv_utils import parse_csv_urls, results_to_csv
from contact_scraper.scraper.errors import BatchTooLargeError
from contact_scraper.scraper.orchestrator import scrape_batch, scrape_url

app = typer.Typer(
    name="contact-scraper",
    help="Extract contact details from company websites.",
    no_args_is_help=True,
)


@app.command("scrape")
def scrape(
    url: str = typer.Option(..., help="URL to scrape."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result."),
) -> None:
    """Scrape a single URL and print the contacts found."""
    typer.echo(f"[scrape] Fetching {url!r} …", err=True)
    result = scrape_url(url)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        typer.echo(render_result(result))

    if not result.success:
        raise typer.Exit(1)


@app.command("batch")
def batch(
    file: Path = typer.Option(..., "--file", help="CSV file with URLs in the first column."),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the results CSV here."),
) -> None:
    """Scrape every URL listed in a CSV file and export the results as CSV."""
    if not file.exists():
        typer.echo(f"[batch] File not found: {file}", err=True)
        raise typer.Exit(1)

    urls = parse_csv_urls(file.read_text(encoding="utf-8", errors="replace"))
    if not urls:
        typer.echo(f"[batch] No valid URLs found in {file}", err=True)
        raise typer.Exit(1)

    typer.echo(f"[batch] Scraping {len(urls)} URL(s) …", err=True)
    try:
        results = scrape_batch(urls)
    except BatchTooLargeError as exc:
        typer.echo(f"[batch] {exc}", err=True)
        raise typer.Exit(1)

    content = results_to_csv(results)
    if out is None:
        typer.echo(content, nl=False)
    else:
        out.write_text(content, encoding="utf-8")
        typer.echo(f"[batch] Results written to {out}", err=True)
    typer.echo(f"[batch] {render_summary(results)}", err=True)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: SCRAPER_API_HOST)."),
    port: Optional[int] = typer.Option(None, help="Port (default: SCRAPER_API_PORT)."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "contact_scraper.api.app:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
