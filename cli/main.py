"""Deep Scrape CLI — run a deep-scrape from the terminal.

Usage:
    deepscrape scrape "current stock price of AAPL"
    deepscrape scrape "..." --json
    deepscrape scrape "..." --debug --no-crawl
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Optional

import typer

from deepscrape.config import settings
from deepscrape.errors import InternalScrapeError, InvalidQueryError
from deepscrape.orchestrator import run_deep_scrape
from deepscrape.scraper.models import ScrapeOutcome

app = typer.Typer(
    name="deepscrape",
    help="Deep Scrape CLI.",
    no_args_is_help=True,
)


def _render(outcome: ScrapeOutcome, show_debug: bool) -> None:
    if outcome.found:
        typer.echo(f"✅ Found relevant content  [score={outcome.score:.2f}]")
        typer.echo(f"  Source : {outcome.source}")
        if outcome.answer:
            typer.echo(f"\n{outcome.answer}\n")
        else:
            snippet = outcome.snippet
            preview = snippet[:500] + ("..." if len(snippet) > 500 else "")
            typer.echo(f"\n(no AI answer)  {preview}\n")
    else:
        typer.echo("⚠️  No relevant content found.")

    if show_debug:
        typer.echo("--- Search results ---")
        for url in outcome.debug.search_results:
            typer.echo(f"  {url}")
        typer.echo("--- Trace ---")
        for i, step in enumerate(outcome.debug.steps, start=1):
            typer.echo(f"  {i:>3}. {step}")


@app.callback()
def main() -> None:
    """Answer questions from live web pages."""


@app.command("scrape")
def scrape(
    query: str = typer.Argument(..., help="Natural-language question."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw outcome as JSON."),
    debug: bool = typer.Option(False, "--debug", help="Print the full debug trace."),
    no_crawl: bool = typer.Option(False, "--no-crawl", help="Skip same-domain link crawling."),
    max_results: Optional[int] = typer.Option(
        None, "--max-results", min=1, help="Override the number of search results tried."
    ),
) -> None:
    """Search, fetch and analyse pages until one answers QUERY."""
    overrides: dict = {}
    if no_crawl:
        overrides["crawl_depth"] = 0
    if max_results is not None:
        overrides["max_search_results"] = max_results
    run_settings = dataclasses.replace(settings, **overrides) if overrides else settings

    try:
        outcome = asyncio.run(run_deep_scrape(query, settings=run_settings))
    except InvalidQueryError as exc:
        typer.echo(f"[scrape] {exc}", err=True)
        raise typer.Exit(2)
    except InternalScrapeError as exc:
        typer.echo(f"[scrape] {exc}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(outcome.to_json())
        return
    _render(outcome, show_debug=debug)


if __name__ == "__main__":
    app()
